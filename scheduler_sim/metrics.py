from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .models import Process, ProcessMetrics, ScheduleResult, SystemMetrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given the finished processes and
    the dispatch trace.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.finish_time for p in result.processes)
    cpu_busy_time = sum(event.length for event in result.trace)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    result.system = system
    return system


def process_metrics(processes: Sequence[Process]) -> List[ProcessMetrics]:
    """
    One reporting row per finished process, in the order given.
    """
    return [
        ProcessMetrics(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            start_time=p.start_time,
            finish_time=p.finish_time,
            waiting_time=p.waiting_time,
            turnaround_time=p.turnaround_time,
            response_time=p.response_time,
            priority=p.priority,
        )
        for p in processes
    ]


def summarize_process_metrics(processes: Sequence[Process]) -> Dict[str, Optional[float]]:
    """
    Return averages of the key per-process metrics for quick comparison.

    With no processes the averages are None; there is nothing to average.
    """
    n = len(processes)
    if not n:
        return {"count": 0, "avg_waiting": None, "avg_turnaround": None, "avg_response": None}

    return {
        "count": n,
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }


def format_average(value: Optional[float]) -> str:
    return "no processes" if value is None else f"{value:.2f}"
