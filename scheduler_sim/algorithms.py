from __future__ import annotations

import enum
import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Protocol, Union

from .errors import InvalidInputError
from .metrics import compute_system_metrics
from .models import Process, ScheduleResult, TraceEvent
from .ready import AdmissionQueue, KeyedHeap, PriorityBuckets, by_burst, by_priority, by_remaining
from .validation import prepare_workload, validate_quantum

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 1


class ReadmitPolicy(enum.Enum):
    """
    Where a preempted process goes relative to processes that arrived while
    it was running. Only observable when they share a priority level in the
    bucketed engine.
    """

    ARRIVALS_FIRST = "arrivals-first"
    PREEMPTED_FIRST = "preempted-first"


class Scheduler(Protocol):
    name: str

    def run(self, processes: Iterable[Process]) -> ScheduleResult:
        ...


def _result(
    name: str,
    quantum: Optional[int],
    finished: List[Process],
    trace: List[TraceEvent],
) -> ScheduleResult:
    result = ScheduleResult(algorithm=name, quantum=quantum, processes=finished, trace=trace)
    compute_system_metrics(result)
    logger.info(
        "%s finished %d processes in %d dispatches",
        name,
        len(finished),
        len(trace),
    )
    return result


def _log_dispatch(event: TraceEvent, process: Process) -> None:
    logger.debug(
        "t=%d pid=%d runs %d unit(s), %d remaining",
        event.time,
        event.pid,
        event.length,
        process.remaining_time,
    )
    if process.finished:
        logger.debug("t=%d pid=%d finished", process.finish_time, process.pid)


class FCFSScheduler:
    """
    First-Come First-Serve (non-preemptive).
    """

    name = "FCFS"

    def run(self, processes: Iterable[Process]) -> ScheduleResult:
        ordered = prepare_workload(processes)

        time = 0
        trace: List[TraceEvent] = []

        for p in ordered:
            if time < p.arrival_time:
                time = p.arrival_time

            event = p.dispatch(time, p.burst_time)
            trace.append(event)
            _log_dispatch(event, p)
            time = event.end_time

        return _result(self.name, None, ordered, trace)


class SJFScheduler:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived, run the one
    with the smallest burst time to completion. Equal bursts go to the
    lower pid.
    """

    name = "SJF (non-preemptive)"

    def run(self, processes: Iterable[Process]) -> ScheduleResult:
        admission = AdmissionQueue(prepare_workload(processes))
        ready = KeyedHeap(by_burst)

        time = 0
        trace: List[TraceEvent] = []
        finished: List[Process] = []

        while ready or admission:
            # Nothing ready: take the next arrival so the clock can move on.
            if not ready:
                head = admission.pop()
                ready.push(head)
                if time < head.arrival_time:
                    time = head.arrival_time

            for p in admission.drain_until(time):
                ready.push(p)

            current = ready.pop()
            event = current.dispatch(time, current.remaining_time)
            trace.append(event)
            _log_dispatch(event, current)
            time = event.end_time
            finished.append(current)

        return _result(self.name, None, finished, trace)


class SRTFScheduler:
    """
    Shortest Remaining Time First (preemptive SJF), one time unit per tick.

    Arrivals are admitted exactly at their arrival tick; a newcomer with less
    remaining work than the running process takes over on that tick. Equal
    remaining time goes to the lower pid.
    """

    name = "SRTF"

    def run(self, processes: Iterable[Process]) -> ScheduleResult:
        admission = AdmissionQueue(prepare_workload(processes))
        ready = KeyedHeap(by_remaining)

        time = 0
        trace: List[TraceEvent] = []
        finished: List[Process] = []

        while ready or admission:
            # Idle ticks emit nothing, skip straight to the next arrival.
            if not ready and admission.head.arrival_time > time:
                time = admission.head.arrival_time

            for p in admission.drain_at(time):
                ready.push(p)

            current = ready.pop()
            event = current.dispatch(time, 1)
            trace.append(event)
            _log_dispatch(event, current)

            if current.finished:
                finished.append(current)
            else:
                ready.push(current)

            time += 1

        return _result(self.name, None, finished, trace)


class RoundRobinScheduler:
    """
    Round Robin with a fixed time quantum.

    Processes that arrive during a slice are admitted after the preempted
    process has gone to the back of the queue.
    """

    name = "Round Robin"

    def __init__(self, quantum: int = DEFAULT_QUANTUM) -> None:
        self.quantum = validate_quantum(quantum)

    def run(self, processes: Iterable[Process]) -> ScheduleResult:
        admission = AdmissionQueue(prepare_workload(processes))
        ready: Deque[Process] = deque()

        time = 0
        trace: List[TraceEvent] = []
        finished: List[Process] = []

        while ready or admission:
            for p in admission.drain_until(time):
                ready.append(p)

            if not ready:
                time += self.quantum
                continue

            current = ready.popleft()
            event = current.dispatch(time, min(self.quantum, current.remaining_time))
            trace.append(event)
            _log_dispatch(event, current)
            time = event.end_time

            if current.finished:
                finished.append(current)
            else:
                # Back of the queue, behind everything already waiting.
                ready.append(current)

        return _result(self.name, self.quantum, finished, trace)


class PriorityScheduler:
    """
    Preemptive priority scheduling, re-evaluated every quantum.

    Lower numeric priority value means higher priority. The plain variant
    keeps ready processes in a heap ordered by (priority, pid). The
    bucketed variant keeps one FIFO queue per priority level, so processes
    sharing a level take turns round-robin style instead of the lowest pid
    always winning.
    """

    def __init__(
        self,
        quantum: int = DEFAULT_QUANTUM,
        bucketed: bool = False,
        readmit: ReadmitPolicy = ReadmitPolicy.ARRIVALS_FIRST,
    ) -> None:
        self.quantum = validate_quantum(quantum)
        self.bucketed = bucketed
        self.readmit = ReadmitPolicy(readmit)

    @property
    def name(self) -> str:
        return "Priority (preemptive, round robin)" if self.bucketed else "Priority (preemptive)"

    def _ready_structure(self) -> Union[PriorityBuckets, KeyedHeap]:
        if self.bucketed:
            return PriorityBuckets()
        return KeyedHeap(by_priority)

    def run(self, processes: Iterable[Process]) -> ScheduleResult:
        admission = AdmissionQueue(prepare_workload(processes, require_priority=True))
        ready = self._ready_structure()

        time = 0
        trace: List[TraceEvent] = []
        finished: List[Process] = []

        while ready or admission:
            for p in admission.drain_until(time):
                ready.push(p)

            if not ready:
                time += self.quantum
                continue

            current = ready.pop()
            event = current.dispatch(time, min(self.quantum, current.remaining_time))
            trace.append(event)
            _log_dispatch(event, current)
            time = event.end_time

            if current.finished:
                finished.append(current)
                continue

            if self.readmit is ReadmitPolicy.ARRIVALS_FIRST:
                for p in admission.drain_until(time):
                    ready.push(p)
            ready.push(current)

        return _result(self.name, self.quantum, finished, trace)


def schedule_fcfs(processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).
    """
    return FCFSScheduler().run(processes)


def schedule_sjf(processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive); equal bursts go to the lower pid.
    """
    return SJFScheduler().run(processes)


def schedule_srtf(processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time First, preempting on one-unit ticks.
    """
    return SRTFScheduler().run(processes)


def schedule_rr(processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum (default 1).
    """
    q = DEFAULT_QUANTUM if quantum is None else quantum
    return RoundRobinScheduler(quantum=q).run(processes)


def schedule_priority(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    readmit: ReadmitPolicy = ReadmitPolicy.ARRIVALS_FIRST,
) -> ScheduleResult:
    """
    Preemptive priority scheduling; ties at the same level go to the lower pid.
    """
    q = DEFAULT_QUANTUM if quantum is None else quantum
    return PriorityScheduler(quantum=q, bucketed=False, readmit=readmit).run(processes)


def schedule_priority_rr(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    readmit: ReadmitPolicy = ReadmitPolicy.ARRIVALS_FIRST,
) -> ScheduleResult:
    """
    Preemptive priority scheduling with round robin inside each priority level.
    """
    q = DEFAULT_QUANTUM if quantum is None else quantum
    return PriorityScheduler(quantum=q, bucketed=True, readmit=readmit).run(processes)


ALGORITHMS: Dict[str, Callable[..., ScheduleResult]] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "srtf": schedule_srtf,
    "rr": schedule_rr,
    "priority": schedule_priority,
    "priority-rr": schedule_priority_rr,
}

QUANTUM_ALGORITHMS = {"rr", "priority", "priority-rr"}
PRIORITY_ALGORITHMS = {"priority", "priority-rr"}


def run_algorithm(
    name: str,
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    readmit: Union[ReadmitPolicy, str] = ReadmitPolicy.ARRIVALS_FIRST,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by the
    round-robin and priority engines, readmit only by the priority engines.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise InvalidInputError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    if name in PRIORITY_ALGORITHMS:
        return func(processes, quantum=quantum, readmit=ReadmitPolicy(readmit))
    return func(processes, quantum=quantum)
