"""
Solution (phenotype) data model.

A solution is the decoded form of a chromosome: the selected variable indices
together with the cost reported by the objective function and the capacity
those variables consume.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class Solution:
    """
    Decoded candidate solution.

    Attributes:
        selected: Indices of the variables set to one, in increasing order
        cost: Objective cost under the sign of the objective that produced it
        used_capacity: Sum of the weights of the selected variables
    """
    selected: Tuple[int, ...] = field(default_factory=tuple)
    cost: float = 0.0
    used_capacity: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'selected', tuple(int(i) for i in self.selected))

    def __len__(self) -> int:
        return len(self.selected)

    def __contains__(self, index: int) -> bool:
        return index in self.selected

    def is_feasible(self, capacity: float) -> bool:
        return self.used_capacity <= capacity

    def is_better_than(self, other: Optional['Solution']) -> bool:
        """
        Minimizing comparison: lower cost wins, equal costs prefer lower used capacity.

        Any solution is better than ``None``.
        """
        if other is None:
            return True
        if self.cost != other.cost:
            return self.cost < other.cost
        return self.used_capacity < other.used_capacity

    def with_sign(self, sign: float) -> 'Solution':
        """Copy of this solution with its cost multiplied by ``sign``."""
        # Adding 0.0 normalizes -0.0 for empty selections
        return replace(self, cost=sign * self.cost + 0.0)

    def to_dict(self) -> dict:
        return {
            'selected': list(self.selected),
            'cost': self.cost,
            'used_capacity': self.used_capacity,
            'size': len(self.selected),
        }

    def __str__(self) -> str:
        return (f"Solution: cost=[{self.cost:g}], size=[{len(self.selected)}], "
                f"used_capacity=[{self.used_capacity:g}], elements={list(self.selected)}")
