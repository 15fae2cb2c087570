from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .errors import DegenerateQuantumError, InvalidInputError
from .models import Process, arrival_key


def validate_quantum(quantum: int) -> int:
    if quantum <= 0:
        raise DegenerateQuantumError(f"quantum must be positive, got {quantum}")
    return quantum


def prepare_workload(processes: Iterable[Process], require_priority: bool = False) -> List[Process]:
    """
    Validate a workload and return private copies sorted by arrival time,
    then pid.

    Nothing is simulated if any process is rejected.
    """
    seen: set[int] = set()
    prepared: List[Process] = []

    for p in processes:
        _check_int(p.pid, "pid", p.pid)
        if p.pid in seen:
            raise InvalidInputError(f"duplicate process id {p.pid}")
        seen.add(p.pid)

        _check_int(p.pid, "arrival time", p.arrival_time)
        _check_int(p.pid, "burst time", p.burst_time)
        if p.arrival_time < 0:
            raise InvalidInputError(f"process {p.pid}: arrival time must be >= 0, got {p.arrival_time}")
        if p.burst_time < 1:
            raise InvalidInputError(f"process {p.pid}: burst time must be >= 1, got {p.burst_time}")
        if require_priority:
            _check_priority(p.pid, p.priority)

        prepared.append(p.fresh_copy())

    prepared.sort(key=arrival_key)
    return prepared


def _check_int(pid: Any, label: str, value: Any) -> None:
    # bool is an int subclass but never a valid time or id.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"process {pid!r}: {label} must be an integer, got {value!r}")


def _check_priority(pid: int, priority: Optional[int]) -> None:
    if priority is None:
        raise InvalidInputError(f"process {pid}: priority is required for priority scheduling")
    _check_int(pid, "priority", priority)
    if priority < 0:
        raise InvalidInputError(f"process {pid}: priority must be >= 0, got {priority}")
