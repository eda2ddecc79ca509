"""
Term Type Definitions

Data structures for the facts and actions read from planner output.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Tuple


@dataclass(frozen=True, order=True)
class Term:
    """
    A fact or action: a functor plus an ordered argument tuple.

    Ordering compares the functor first, then the arguments element-wise,
    so sets of terms always sort the same way.
    """
    functor: str
    args: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept lists from callers while keeping the instance hashable
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    @property
    def arity(self) -> int:
        return len(self.args)

    def arg(self, i: int) -> str:
        return self.args[i]

    def to_pddl(self) -> str:
        """Convert to PDDL literal / action-line format: (functor a1 a2)"""
        return "(" + " ".join((self.functor,) + self.args) + ")"

    def __str__(self):
        if self.args:
            return f"{self.functor}({','.join(self.args)})"
        return self.functor


State = FrozenSet[Term]

EMPTY_STATE: State = frozenset()

# Returned by the plan cursor once every action has been consumed
END_OF_PLAN = Term("EOP")


def make_state(terms: Iterable[Term]) -> State:
    """Build an immutable state from any iterable of terms."""
    return frozenset(terms)


def render_state(state: Iterable[Term]) -> str:
    """Render a state in answer-file syntax, facts in sorted order."""
    return "(" + " ".join(str(term) for term in sorted(state)) + ")"


def format_state(state: Iterable[Term]) -> str:
    """Human readable, comma separated listing of a state."""
    return ", ".join(str(term) for term in sorted(state))
