"""
Action semantics consulted by the plan cursor.

The wrapper does not know the domain theory behind a plan, so checking an
action's preconditions and computing its effects is delegated to an
``ActionModel`` supplied by the caller.
"""

from typing import AbstractSet, Protocol

from .state_delta import StateDelta
from .utils.term_types import Term


class ActionModel(Protocol):
    """Domain semantics for plan actions."""

    def check_preconditions(self, action: Term, state: AbstractSet[Term]) -> bool:
        ...

    def effects(self, action: Term, state: AbstractSet[Term]) -> StateDelta:
        ...


class UncheckedActionModel:
    """Accepts every action and reports no effects."""

    def check_preconditions(self, action: Term, state: AbstractSet[Term]) -> bool:
        return True

    def effects(self, action: Term, state: AbstractSet[Term]) -> StateDelta:
        return StateDelta()
