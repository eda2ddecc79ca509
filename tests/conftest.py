"""
Shared test configuration and fixtures.
"""

import logging
import sys
import textwrap
from pathlib import Path

import pytest

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fd_wrapper.planner_config import PlannerConfig  # noqa: E402

# Stand-in for fast-downward.py. The first line of the problem file selects
# the behaviour:
#   ANSWER        -> write the remaining lines to sas_plan_em
#   SLEEP <secs>  -> hang (to trigger the timeout)
#   EXIT <code>   -> exit without writing an answer
FAKE_LAUNCHER = textwrap.dedent(
    """
    import json
    import os
    import sys
    import time

    args = sys.argv[1:]
    with open("argv.json", "w") as f:
        json.dump(args, f)

    with open(args[0]) as f:
        command, _, rest = f.read().partition("\\n")

    if command == "ANSWER":
        with open("sas_plan_em", "w") as f:
            f.write(rest)
    elif command.startswith("SLEEP"):
        with open("worker.pid", "w") as f:
            f.write(str(os.getpid()))
        time.sleep(float(command.split()[1]))
    elif command.startswith("EXIT"):
        sys.exit(int(command.split()[1]))
    """
)


@pytest.fixture
def planner_dir(tmp_path):
    """Directory holding the fake launcher; the answer file appears here."""
    directory = tmp_path / "fast-downward"
    directory.mkdir()
    (directory / "fake-downward.py").write_text(FAKE_LAUNCHER)
    return directory


@pytest.fixture
def planner_config(planner_dir):
    return PlannerConfig(
        planner_dir=planner_dir,
        launcher_script="fake-downward.py",
        python_executable=sys.executable,
        timeout=10.0,
    )


@pytest.fixture
def write_problem(tmp_path):
    """Write a problem file whose first line drives the fake launcher."""

    def _write(command: str, body: str = "", name: str = "problem.pddl") -> Path:
        path = tmp_path / name
        path.write_text(command + "\n" + body)
        return path

    return _write


@pytest.fixture
def clean_root_logger():
    """Restore root logger handlers and level after a test that configures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
