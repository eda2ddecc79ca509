"""
Plan Session Demo

Plans a gripper problem with Fast Downward and walks through the result,
printing each action with the facts it adds and removes.

Usage:
  python examples/plan_session_demo.py ~/fast-downward \
      ~/fast-downward/benchmarks/gripper/prob01.pddl --timeout 5
"""

import argparse
import sys
from pathlib import Path

# Add src directory to path
project_root = Path(__file__).parent.parent
if str(project_root / "src") not in sys.path:
    sys.path.insert(0, str(project_root / "src"))

from fd_wrapper import PlanSession  # noqa: E402
from fd_wrapper.planning.utils.term_types import format_state  # noqa: E402
from fd_wrapper.utils import configure_logging  # noqa: E402


def walk_plan(session: PlanSession) -> None:
    print("=" * 70)
    print("PLAN")
    print("=" * 70)
    print(f"Initial state: {format_state(session.get_plan_initial_state())}")
    print()

    session.reset_plan()
    before = session.get_plan_initial_state()
    step = 1
    while not session.is_end_of_plan():
        action = session.get_plan_action()
        after = session.get_plan_state()
        delta = session.get_state_difference(before, after)

        print(f"{step:2d}. {action}")
        if delta.add_list:
            print(f"      + {format_state(delta.add_list)}")
        if delta.del_list:
            print(f"      - {format_state(delta.del_list)}")

        before = after
        session.advance_plan()
        step += 1


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("planner_dir", type=Path, help="Fast Downward checkout")
    parser.add_argument("problem", type=Path, help="Problem PDDL file")
    parser.add_argument("--python", default=sys.executable, help="Interpreter for fast-downward.py")
    parser.add_argument("--timeout", type=float, default=10.0)
    args = parser.parse_args()

    configure_logging(level="INFO")

    session = PlanSession(args.planner_dir, python_executable=args.python)
    result = session.plan(args.problem, timeout=args.timeout)
    print(result)
    if not result:
        return 1

    walk_plan(session)
    return 0


if __name__ == "__main__":
    sys.exit(main())
