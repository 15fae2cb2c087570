import pytest

from scheduler_sim.errors import SchedulingInvariantError
from scheduler_sim.models import Process, TraceEvent
from scheduler_sim.ready import (
    AdmissionQueue,
    KeyedHeap,
    PriorityBuckets,
    by_burst,
    by_remaining,
)


def test_admission_drain_until_takes_everything_arrived():
    queue = AdmissionQueue([Process(1, 0, 1), Process(2, 2, 1), Process(3, 5, 1)])
    assert [p.pid for p in queue.drain_until(3)] == [1, 2]
    assert len(queue) == 1
    assert queue.head.pid == 3


def test_admission_drain_at_is_exact():
    queue = AdmissionQueue([Process(1, 0, 1), Process(2, 0, 1), Process(3, 1, 1)])
    assert [p.pid for p in queue.drain_at(0)] == [1, 2]
    assert list(queue.drain_at(1))[0].pid == 3
    assert not queue


def test_admission_drain_at_refuses_to_fall_behind():
    queue = AdmissionQueue([Process(1, 2, 1)])
    with pytest.raises(SchedulingInvariantError):
        list(queue.drain_at(3))


def test_keyed_heap_orders_by_key_then_pid():
    heap = KeyedHeap(by_burst)
    for p in [Process(4, 0, 3), Process(2, 0, 3), Process(9, 0, 1)]:
        heap.push(p)
    assert [heap.pop().pid for _ in range(3)] == [9, 2, 4]
    assert not heap


def test_keyed_heap_uses_key_at_push_time():
    heap = KeyedHeap(by_remaining)
    a = Process(1, 0, 4)
    b = Process(2, 0, 3)
    heap.push(a)
    heap.push(b)
    first = heap.pop()
    first.dispatch(0, 2)
    heap.push(first)
    assert heap.pop().pid == 2


def test_priority_buckets_fifo_within_level():
    buckets = PriorityBuckets()
    buckets.push(Process(5, 0, 1, priority=2))
    buckets.push(Process(1, 0, 1, priority=2))
    buckets.push(Process(3, 0, 1, priority=0))
    assert len(buckets) == 3
    assert [buckets.pop().pid for _ in range(3)] == [3, 5, 1]
    assert len(buckets) == 0
    assert not buckets


def test_priority_buckets_only_allocate_levels_in_use():
    buckets = PriorityBuckets()
    buckets.push(Process(1, 0, 1, priority=1_000_000))
    buckets.push(Process(2, 0, 1, priority=3))
    assert buckets.levels == [3, 1_000_000]
    assert buckets.pop().pid == 2


def test_priority_buckets_stay_empty_after_draining():
    buckets = PriorityBuckets()
    buckets.push(Process(1, 0, 1, priority=4))
    buckets.pop()
    assert not buckets
    with pytest.raises(SchedulingInvariantError):
        buckets.pop()


def test_priority_buckets_reject_unset_priority():
    with pytest.raises(SchedulingInvariantError):
        PriorityBuckets().push(Process(1, 0, 1))


def test_process_dispatch_records_start_and_finish():
    p = Process(7, arrival_time=2, burst_time=3)
    assert p.remaining_time == 3

    assert p.dispatch(4, 1) == TraceEvent(pid=7, time=4, length=1)
    assert p.start_time == 4
    assert not p.finished

    p.dispatch(6, 2)
    assert p.start_time == 4
    assert p.finish_time == 8
    assert p.turnaround_time == 6
    assert p.waiting_time == 3
    assert p.response_time == 2


def test_process_dispatch_guards_bookkeeping():
    p = Process(1, arrival_time=5, burst_time=2)
    with pytest.raises(SchedulingInvariantError):
        p.dispatch(4, 1)
    with pytest.raises(SchedulingInvariantError):
        p.dispatch(5, 3)
    with pytest.raises(SchedulingInvariantError):
        p.dispatch(5, 0)


def test_unfinished_process_has_no_waiting_time():
    with pytest.raises(SchedulingInvariantError):
        Process(1, 0, 2).waiting_time


def test_fresh_copy_resets_runtime_fields():
    p = Process(1, 0, 2, priority=0)
    p.dispatch(0, 2)
    copy = p.fresh_copy()
    assert copy == p
    assert copy.remaining_time == 2
    assert copy.start_time is None and copy.finish_time is None
