"""Planner supervision, answer-file parsing and plan navigation"""

# Import utility types
from .utils.term_types import (
    EMPTY_STATE,
    END_OF_PLAN,
    State,
    Term,
    format_state,
    make_state,
    render_state,
)

# Import main classes
from .term_parser import MalformedLineError, Token, TokenKind, parse_action, parse_state, tokenize
from .state_delta import StateDelta, state_difference
from .process_supervisor import ProcessSupervisor, RunOutcome, RunStatus
from .domain_description import DomainDescription
from .action_model import ActionModel, UncheckedActionModel
from .plan_session import (
    MalformedArtifactError,
    PlanResult,
    PlanSession,
    PlanStatus,
    read_plan_file,
)

__all__ = [
    # Terms and states
    "Term",
    "State",
    "EMPTY_STATE",
    "END_OF_PLAN",
    "make_state",
    "render_state",
    "format_state",

    # Parsing
    "tokenize",
    "Token",
    "TokenKind",
    "parse_state",
    "parse_action",
    "MalformedLineError",

    # State differences
    "StateDelta",
    "state_difference",

    # Process supervision
    "ProcessSupervisor",
    "RunOutcome",
    "RunStatus",

    # Collaborators
    "DomainDescription",
    "ActionModel",
    "UncheckedActionModel",

    # Plan session
    "PlanSession",
    "PlanResult",
    "PlanStatus",
    "MalformedArtifactError",
    "read_plan_file",
]
