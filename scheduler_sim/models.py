from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .errors import SchedulingInvariantError


@dataclass(frozen=True)
class TraceEvent:
    """
    One dispatch decision in the Gantt chart: ``pid`` held the CPU from
    ``time`` for ``length`` units.
    """

    pid: int
    time: int
    length: int

    @property
    def end_time(self) -> int:
        return self.time + self.length


@dataclass
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None
    remaining_time: int = field(default=-1, compare=False)
    start_time: Optional[int] = field(default=None, compare=False)
    finish_time: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.remaining_time < 0:
            self.remaining_time = self.burst_time

    @property
    def finished(self) -> bool:
        return self.finish_time is not None

    @property
    def turnaround_time(self) -> int:
        return self._require_finish() - self.arrival_time

    @property
    def waiting_time(self) -> int:
        return self.turnaround_time - self.burst_time

    @property
    def response_time(self) -> int:
        self._require_finish()
        return self.start_time - self.arrival_time

    def _require_finish(self) -> int:
        if self.finish_time is None:
            raise SchedulingInvariantError(f"process {self.pid} has not finished yet")
        return self.finish_time

    def fresh_copy(self) -> "Process":
        """
        Copy of the static attributes with all runtime bookkeeping reset, so a
        run never touches the caller's records.
        """
        return replace(
            self,
            remaining_time=self.burst_time,
            start_time=None,
            finish_time=None,
        )

    def dispatch(self, now: int, amount: int) -> TraceEvent:
        """
        Give this process ``amount`` units of CPU starting at ``now``.

        Records the first start time, and the finish time once the remaining
        work reaches zero.
        """
        if now < self.arrival_time:
            raise SchedulingInvariantError(
                f"process {self.pid} dispatched at t={now} before its arrival at t={self.arrival_time}"
            )
        if amount <= 0 or amount > self.remaining_time:
            raise SchedulingInvariantError(
                f"process {self.pid} granted {amount} units with {self.remaining_time} remaining"
            )

        if self.start_time is None:
            self.start_time = now
        self.remaining_time -= amount
        if self.remaining_time == 0:
            self.finish_time = now + amount

        return TraceEvent(pid=self.pid, time=now, length=amount)


def arrival_key(process: Process) -> Tuple[int, int]:
    """Shared admission order: arrival time, then pid."""
    return (process.arrival_time, process.pid)


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: int
    finish_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: Optional[int] = None


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    """
    Output of one engine run: finished processes in completion order and
    the dispatch trace.
    """

    algorithm: str
    quantum: Optional[int]
    processes: List[Process] = field(default_factory=list)
    trace: List[TraceEvent] = field(default_factory=list)
    system: Optional[SystemMetrics] = None
