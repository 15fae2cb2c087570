from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, PRIORITY_ALGORITHMS, QUANTUM_ALGORITHMS, ReadmitPolicy, run_algorithm
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .metrics import format_average, process_metrics, summarize_process_metrics
from .models import ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, RR, preemptive Priority).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log scheduling decisions (-v for a run summary, -vv for every dispatch).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin / priority (default: 1, ignored by FCFS, SJF, SRTF).",
    )
    _add_readmit_option(run_parser)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: all).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for RR/priority when included (default: 2).",
    )
    _add_readmit_option(compare_parser)

    return parser


def _add_readmit_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--readmit",
        choices=[policy.value for policy in ReadmitPolicy],
        default=ReadmitPolicy.ARRIVALS_FIRST.value,
        help="Priority engines: admit new arrivals before or after re-queueing the preempted process.",
    )


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()
    console.print(build_rich_gantt(result.trace))
    console.print()

    if not result.processes:
        console.print("[yellow]no processes[/yellow]")
        return

    show_priority = any(p.priority is not None for p in result.processes)
    headers = ["PID", "Arrive", "Burst"]
    if show_priority:
        headers.append("Priority")
    headers += ["Start", "Finish", "Wait", "Turnaround"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for row in process_metrics(result.processes):
        cells = [str(row.pid), str(row.arrival_time), str(row.burst_time)]
        if show_priority:
            cells.append("" if row.priority is None else str(row.priority))
        cells += [
            str(row.start_time),
            str(row.finish_time),
            str(row.waiting_time),
            str(row.turnaround_time),
        ]
        proc_table.add_row(*cells)

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    sys_table = Table(title="Summary", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Average waiting time", format_average(summary["avg_waiting"]))
    sys_table.add_row("Average turnaround time", format_average(summary["avg_turnaround"]))
    sys_table.add_row("Average response time", format_average(summary["avg_response"]))
    if result.system:
        sys = result.system
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_compare(results: List[ScheduleResult], title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for result in results:
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            format_average(summary["avg_waiting"]),
            format_average(summary["avg_turnaround"]),
            format_average(summary["avg_response"]),
        )

    console.print(summary_table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    console = Console()

    try:
        if args.command == "run":
            processes = load_workload(Path(args.workload))
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum, readmit=args.readmit)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            workload_path = Path(args.workload)
            processes = load_workload(workload_path)
            results = []
            has_priorities = all(p.priority is not None for p in processes)
            for alg in args.algorithms:
                if alg in PRIORITY_ALGORITHMS and not has_priorities:
                    logger.warning("skipping %s: not every process in the workload has a priority", alg)
                    continue
                q = args.quantum if alg in QUANTUM_ALGORITHMS else None
                results.append(run_algorithm(alg, processes, quantum=q, readmit=args.readmit))
            _print_compare(results, f"Algorithm comparison: {escape(str(workload_path))}", console)
            return 0
    except (SchedulerError, OSError) as exc:
        logger.debug("run aborted", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
