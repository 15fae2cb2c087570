from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TraceEvent


def gantt_rows(trace: Sequence[TraceEvent]) -> Tuple[List[int], List[int]]:
    """
    Split the trace into two parallel rows: pid and dispatch time.

    Adjacent slices of the same process are kept apart so each engine's
    slice granularity stays visible.
    """
    return [event.pid for event in trace], [event.time for event in trace]


def render_gantt(trace: Sequence[TraceEvent]) -> str:
    """
    Plain-text two-row Gantt chart.
    """
    if not trace:
        return "(no execution)"

    pids, times = gantt_rows(trace)
    return "\n".join(
        [
            "Process: " + "\t".join(str(pid) for pid in pids),
            "Time   : " + "\t".join(str(t) for t in times),
        ]
    )


def build_rich_gantt(trace: Sequence[TraceEvent]) -> Panel:
    """
    Build a Rich Panel with the pid row coloured per process above the
    dispatch-time row.
    """
    if not trace:
        return Panel("No execution", title="Gantt Chart")

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    table = Table.grid(padding=(0, 1))
    table.add_column(style="bold")
    for _ in trace:
        table.add_column(justify="right")

    pids, times = gantt_rows(trace)
    table.add_row("Process", *[Text(str(pid), style=f"bold on {pid_color(pid)}") for pid in pids])
    table.add_row("Time", *[str(t) for t in times])

    return Panel.fit(table, title="Gantt Chart")
