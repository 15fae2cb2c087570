"""
Admission and ready structures shared by the scheduling engines.

The admission queue holds processes that have not been let into the ready
structure yet, in arrival order. Each engine picks the ready structure that
matches its selection rule.
"""

from __future__ import annotations

import heapq
from bisect import insort
from collections import deque
from itertools import count
from typing import Callable, Deque, Dict, Iterator, List, Sequence, Tuple

from .errors import SchedulingInvariantError
from .models import Process


class AdmissionQueue:
    def __init__(self, processes: Sequence[Process]) -> None:
        # Caller hands over processes already sorted by arrival_key.
        self._queue: Deque[Process] = deque(processes)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    @property
    def head(self) -> Process:
        return self._queue[0]

    def pop(self) -> Process:
        return self._queue.popleft()

    def drain_until(self, now: int) -> Iterator[Process]:
        """Yield every queued process with ``arrival_time <= now``."""
        while self._queue and self._queue[0].arrival_time <= now:
            yield self._queue.popleft()

    def drain_at(self, now: int) -> Iterator[Process]:
        """
        Yield every queued process with ``arrival_time == now``.

        Used by tick-driven engines, which must never let the queue fall
        behind the clock.
        """
        if self._queue and self._queue[0].arrival_time < now:
            raise SchedulingInvariantError(
                f"process {self._queue[0].pid} arrived at t={self._queue[0].arrival_time} "
                f"but was not admitted before t={now}"
            )
        while self._queue and self._queue[0].arrival_time == now:
            yield self._queue.popleft()


class KeyedHeap:
    """
    Min-heap of processes ordered by ``key(process)``.

    Keys are expected to end with the pid so that the order is total and
    never depends on insertion order.
    """

    def __init__(self, key: Callable[[Process], Tuple[int, ...]]) -> None:
        self._key = key
        self._heap: List[Tuple[Tuple[int, ...], int, Process]] = []
        self._counter = count()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def push(self, process: Process) -> None:
        # Keys are snapshotted on push; re-push after mutating remaining_time.
        heapq.heappush(self._heap, (self._key(process), next(self._counter), process))

    def pop(self) -> Process:
        return heapq.heappop(self._heap)[-1]


class PriorityBuckets:
    """
    One FIFO queue per priority level, lowest level number served first.

    Levels are allocated the first time a process with that priority is
    pushed and are kept sorted. The live count is tracked explicitly instead
    of being recomputed from the buckets.
    """

    def __init__(self) -> None:
        self._buckets: Dict[int, Deque[Process]] = {}
        self._levels: List[int] = []
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    @property
    def levels(self) -> List[int]:
        return list(self._levels)

    def push(self, process: Process) -> None:
        level = process.priority
        if level is None or level < 0:
            raise SchedulingInvariantError(f"process {process.pid} has invalid priority {level!r}")

        bucket = self._buckets.get(level)
        if bucket is None:
            bucket = self._buckets[level] = deque()
            insort(self._levels, level)

        bucket.append(process)
        self._size += 1

    def pop(self) -> Process:
        for level in self._levels:
            bucket = self._buckets[level]
            if bucket:
                self._size -= 1
                return bucket.popleft()

        raise SchedulingInvariantError(f"pop from empty priority buckets (size={self._size})")


def by_burst(process: Process) -> Tuple[int, int]:
    return (process.burst_time, process.pid)


def by_remaining(process: Process) -> Tuple[int, int]:
    return (process.remaining_time, process.pid)


def by_priority(process: Process) -> Tuple[int, int]:
    return (process.priority, process.pid)
