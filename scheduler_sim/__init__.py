"""
Scheduler simulator package.

Simulates classical CPU scheduling policies (FCFS, SJF, SRTF, Round Robin,
preemptive Priority) over a fixed set of processes and reports per-process
timing metrics and the dispatch trace.
"""

from .algorithms import (
    ALGORITHMS,
    FCFSScheduler,
    PriorityScheduler,
    ReadmitPolicy,
    RoundRobinScheduler,
    Scheduler,
    SJFScheduler,
    SRTFScheduler,
    run_algorithm,
)
from .errors import DegenerateQuantumError, InvalidInputError, SchedulerError, SchedulingInvariantError
from .models import Process, ScheduleResult, TraceEvent

__all__ = [
    "ALGORITHMS",
    "DegenerateQuantumError",
    "FCFSScheduler",
    "InvalidInputError",
    "PriorityScheduler",
    "Process",
    "ReadmitPolicy",
    "RoundRobinScheduler",
    "SJFScheduler",
    "SRTFScheduler",
    "ScheduleResult",
    "Scheduler",
    "SchedulerError",
    "SchedulingInvariantError",
    "TraceEvent",
    "run_algorithm",
]
