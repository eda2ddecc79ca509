"""Shared planning data types."""

from .term_types import (
    EMPTY_STATE,
    END_OF_PLAN,
    State,
    Term,
    format_state,
    make_state,
    render_state,
)

__all__ = [
    "EMPTY_STATE",
    "END_OF_PLAN",
    "State",
    "Term",
    "format_state",
    "make_state",
    "render_state",
]
