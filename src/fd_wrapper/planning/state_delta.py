"""
State differences between two planner states.
"""

from dataclasses import dataclass, field
from typing import AbstractSet

from .utils.term_types import EMPTY_STATE, State


@dataclass(frozen=True)
class StateDelta:
    """Facts added and removed when moving from one state to another."""
    add_list: State = field(default=EMPTY_STATE)
    del_list: State = field(default=EMPTY_STATE)

    def __post_init__(self):
        object.__setattr__(self, "add_list", frozenset(self.add_list))
        object.__setattr__(self, "del_list", frozenset(self.del_list))

    def swapped(self) -> "StateDelta":
        return StateDelta(add_list=self.del_list, del_list=self.add_list)

    def apply(self, state: AbstractSet) -> State:
        """Return ``state`` with the deletions removed and the additions added."""
        return (frozenset(state) - self.del_list) | self.add_list

    def is_empty(self) -> bool:
        return not self.add_list and not self.del_list


def state_difference(left: AbstractSet, right: AbstractSet) -> StateDelta:
    """
    Compute the delta that turns ``left`` into ``right``.

    Facts only in ``left`` go to ``del_list``, facts only in ``right`` go to
    ``add_list``; facts in both are left out.
    """
    left = frozenset(left)
    right = frozenset(right)
    return StateDelta(add_list=right - left, del_list=left - right)
