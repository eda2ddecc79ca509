"""Fast Downward wrapper: supervised planner runs and plan navigation"""

from pathlib import Path

from dotenv import load_dotenv

__version__ = "0.1.0"

# Load environment variables from .env file in project root
project_root = Path(__file__).resolve().parent.parent.parent
dotenv_path = project_root / ".env"
if dotenv_path.exists():
    load_dotenv(dotenv_path)

from .planner_config import PlannerConfig  # noqa: E402
from .planning import (  # noqa: E402
    PlanResult,
    PlanSession,
    PlanStatus,
    StateDelta,
    Term,
    parse_action,
    parse_state,
    state_difference,
)

__all__ = [
    "PlannerConfig",
    "PlanSession",
    "PlanResult",
    "PlanStatus",
    "StateDelta",
    "Term",
    "parse_action",
    "parse_state",
    "state_difference",
]
