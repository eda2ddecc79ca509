"""
Run Fast Downward on a problem file and print the resulting plan.

Examples:
  # Plan with defaults, planner checkout given explicitly
  fd-wrapper benchmarks/gripper/prob01.pddl --planner-dir ~/fast-downward --timeout 5

  # Settings from YAML, overriding the search
  fd-wrapper prob01.pddl --config config/planner_config.yaml --search "lazy_greedy([ff()])"
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .planner_config import PlannerConfig, parse_signal
from .planning import PlanSession
from .planning.utils.term_types import format_state
from .utils.logging_utils import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fd-wrapper",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("problem", type=Path, help="Problem PDDL file")
    parser.add_argument("--config", type=Path, help="YAML planner configuration")
    parser.add_argument("--planner-dir", type=Path, help="Fast Downward directory")
    parser.add_argument("--launcher", dest="launcher_script", help="Launcher script inside the planner directory")
    parser.add_argument("--python", dest="python_executable", help="Interpreter used to run the launcher")
    parser.add_argument("--search", dest="search_strategy", help="Search configuration, e.g. 'astar(lmcut())'")
    parser.add_argument("--timeout", type=float, help="Seconds before the planner is terminated")
    parser.add_argument("--kill-signal", type=parse_signal, help="Signal sent on timeout (name or number)")
    parser.add_argument("--log-file", type=Path, help="Also append log output to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _load_config(args: argparse.Namespace) -> PlannerConfig:
    if args.config is not None:
        config = PlannerConfig.from_yaml(args.config)
    elif args.planner_dir is not None:
        config = PlannerConfig(planner_dir=args.planner_dir)
    else:
        config = PlannerConfig.from_env()

    return config.copy(
        planner_dir=args.planner_dir,
        launcher_script=args.launcher_script,
        python_executable=args.python_executable,
        search_strategy=args.search_strategy,
        timeout=args.timeout,
        kill_signal=args.kill_signal,
    )


def _print_plan(session: PlanSession) -> None:
    states = session.get_plan_states()
    actions = session.get_plan()
    for i, state in enumerate(states):
        print(f"state: {format_state(state)}")
        if i < len(actions):
            print(f"action: {actions[i]}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose else "INFO", log_file=args.log_file)

    try:
        config = _load_config(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    session = PlanSession.from_config(config)
    result = session.plan(args.problem)
    if not result:
        print(result, file=sys.stderr)
        return 1

    _print_plan(session)
    return 0


def run(argv: Optional[List[str]] = None) -> None:
    sys.exit(main(argv))


if __name__ == "__main__":
    run()
