"""Command-line front end: analyze a task system given in (C,T,D) notation.

Example::

    rmsa "(1,5,5),(1,7,7),(1,12,12),(1,14,14),(2,25,25)" --schedule
"""

import argparse
import logging
import sys
from typing import List, Optional

from rmsa import __version__
from rmsa.analysis import UNSCHEDULABLE
from rmsa.config import PROPORTION_MODES, SEED_MODES, AnalysisConfig, load_config
from rmsa.errors import RmsaError
from rmsa.system import TaskSystem

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rmsa",
        description="Rate-monotonic schedulability analysis",
    )
    parser.add_argument("system", help='task system, e.g. "(1,5,5),(2,7,7)"')
    parser.add_argument("--config", "-c", help="YAML file with analysis settings")
    parser.add_argument("--horizon", type=int,
                        help="simulation length in time units (default: hyperperiod)")
    parser.add_argument("--seed", choices=SEED_MODES, dest="seed_mode",
                        help="response-time iteration seed")
    parser.add_argument("--proportion", choices=PROPORTION_MODES,
                        help="release counting used by the slack calculation")
    parser.add_argument("--max-iterations", type=int,
                        help="response-time iteration cap")
    parser.add_argument("--schedule", action="store_true",
                        help="print the simulated RM schedule")
    parser.add_argument("--slack-table", action="store_true",
                        help="print the slack of every instance in the horizon")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="be more talkative")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def _format_response(value: float) -> str:
    return "unbounded" if value == UNSCHEDULABLE else f"{value:g}"


def print_report(system: TaskSystem, show_schedule: bool = False, show_slack_table: bool = False) -> None:
    print(f"Tasks: {system.n}")
    if not system.n:
        return

    print(f"{'id':>4} {'C':>8} {'T':>8} {'D':>8} {'U':>8} {'R':>10} {'slack':>8}")
    for task, r, s in zip(system.tasks, system.response_times, system.slacks):
        print(f"{task.id:>4} {task.C:>8g} {task.T:>8g} {task.D:>8g} "
              f"{task.utilization:>8g} {_format_response(r):>10} {s:>8g}")

    print()
    print(f"Total utilization: {system.total_utilization:g}")
    print(f"Hyperperiod:       {system.hyperperiod}")
    print(f"Liu & Layland:     {system.liu_bound:.4f} -> schedulable: {_yes_no(system.is_schedulable_by_liu)}")
    print(f"Hyperbolic bound:  {system.bini_bound:g} -> schedulable: {_yes_no(system.is_schedulable_by_bini)}")
    print(f"Response times:    schedulable: {_yes_no(system.is_schedulable_by_rta)}")
    try:
        print(f"First free slot:   {system.first_free_slot}")
    except RmsaError as e:
        print(f"First free slot:   none ({e})")

    if show_schedule:
        schedule = system.rm_schedule
        print()
        print(f"RM schedule over {schedule.horizon} time unit(s):")
        for task, row in zip(system.tasks, schedule.occupancy):
            print(f"{task.id:>4} " + "".join("#" if busy else "." for busy in row))
        print("Order: " + " ".join("-" if t is None else str(t) for t in schedule.order))
        for miss in schedule.deadline_misses:
            print(f"Deadline miss: task {miss.task_id} released at {miss.release} (deadline {miss.deadline:g})")

    if show_slack_table:
        print()
        print("Slack per instance:")
        for task, row in zip(system.tasks, system.slack_table):
            print(f"{task.id:>4} " + " ".join(f"{s:g}" for s in row))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else AnalysisConfig()
        config = config.replace(
            horizon=args.horizon,
            seed_mode=args.seed_mode,
            proportion=args.proportion,
            max_iterations=args.max_iterations,
        )
        system = TaskSystem(args.system, config)
        logger.info("Analyzing %r", system)
        print_report(system, args.schedule, args.slack_table)
    except RmsaError as e:
        print(f"rmsa: error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
