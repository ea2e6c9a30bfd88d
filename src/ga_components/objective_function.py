"""
Objective Function Module

Quadratic Binary Function (QBF) with a single knapsack capacity constraint.

The objective of a selection S of variable indices is

    f(S) = sum_{i in S} c[i][i] + 2 * sum_{i<j, i,j in S} c[i][j]

which is x^T C x for the symmetric coefficient matrix C and the binary
indicator vector x of S. Every cost returned by the objective is multiplied by
its sign, so a minimizing search can be handed ``objective.negated()``
instead of a dedicated subclass.

Features:
- Full evaluation of cost and used capacity
- O(n) delta evaluation of insertion, removal and exchange moves against a
  working solution (consumed by local-search collaborators)
- Immutable coefficient and weight data
"""

from typing import Iterable, Sequence

import numpy as np

from ga_exceptions import InstanceError


class KnapsackQBF:
    """
    Quadratic binary objective with a knapsack constraint.

    Args:
        coefficients: Symmetric n x n matrix of quadratic coefficients
        weights: Per-variable capacity consumption (length n)
        capacity: Knapsack capacity
        sign: +1.0 to report the QBF value, -1.0 to report its negation
    """

    def __init__(self, coefficients, weights, capacity: float, sign: float = 1.0):
        coefficients = np.array(coefficients, dtype=float)
        weights = np.array(weights, dtype=float)

        if coefficients.ndim != 2 or coefficients.shape[0] != coefficients.shape[1]:
            raise InstanceError(f"Coefficient matrix must be square, got shape {coefficients.shape}")
        size = coefficients.shape[0]
        if size < 1:
            raise InstanceError("Problem size must be positive")
        if weights.shape != (size,):
            raise InstanceError(f"Weight vector must have length {size}, got shape {weights.shape}")
        if not np.all(np.isfinite(coefficients)) or not np.all(np.isfinite(weights)):
            raise InstanceError("Coefficients and weights must be finite numbers")
        if not np.allclose(coefficients, coefficients.T):
            raise InstanceError("Coefficient matrix must be symmetric")
        if not np.isfinite(capacity):
            raise InstanceError(f"Capacity must be a finite number, got {capacity}")
        if sign not in (1.0, -1.0):
            raise ValueError(f"sign must be +1.0 or -1.0, got {sign}")

        coefficients.setflags(write=False)
        weights.setflags(write=False)

        self._coefficients = coefficients
        self._weights = weights
        self._capacity = float(capacity)
        self._sign = float(sign)

        # Working solution for delta evaluations
        self._variables = np.zeros(size, dtype=float)

    @property
    def size(self) -> int:
        return self._coefficients.shape[0]

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def capacity(self) -> float:
        return self._capacity

    @property
    def sign(self) -> float:
        return self._sign

    def get_capacity(self) -> float:
        return self._capacity

    def negated(self) -> 'KnapsackQBF':
        """Return an objective over the same data reporting negated costs."""
        return KnapsackQBF(self._coefficients, self._weights, self._capacity, sign=-self._sign)

    def _indices(self, selected: Iterable[int]) -> np.ndarray:
        indices = np.fromiter(selected, dtype=np.intp)
        if indices.size and (indices.min() < 0 or indices.max() >= self.size):
            raise IndexError(f"Variable index out of range for problem size {self.size}")
        return indices

    def evaluate(self, selected: Iterable[int]) -> float:
        """
        Evaluate the (signed) quadratic cost of a selection.

        Args:
            selected: Indices of the variables set to one

        Returns:
            sign * x^T C x
        """
        indices = self._indices(selected)
        if indices.size == 0:
            return 0.0
        value = float(self._coefficients[np.ix_(indices, indices)].sum())
        return self._sign * value

    def used_capacity(self, selected: Iterable[int]) -> float:
        """Sum of the weights of the selected variables."""
        indices = self._indices(selected)
        if indices.size == 0:
            return 0.0
        return float(self._weights[indices].sum())

    def is_feasible(self, selected: Iterable[int]) -> bool:
        """A selection is feasible when its used capacity does not exceed the capacity."""
        return self.used_capacity(selected) <= self._capacity

    # Delta evaluations against the working solution

    def set_variables(self, selected: Iterable[int]) -> None:
        """Load a selection as the working solution for delta evaluations."""
        indices = self._indices(selected)
        self._variables = np.zeros(self.size, dtype=float)
        self._variables[indices] = 1.0

    @property
    def variables(self) -> np.ndarray:
        """Copy of the working solution indicator vector."""
        return self._variables.copy()

    def _contribution(self, i: int) -> float:
        # Interaction of i with the working solution (excluding itself) plus its own term
        row = self._coefficients[i]
        return float(row[i] + 2.0 * (row @ self._variables - row[i] * self._variables[i]))

    def evaluate_insertion(self, i: int) -> float:
        """Cost change of adding variable i to the working solution."""
        if self._variables[i] == 1:
            return 0.0
        return self._sign * self._contribution(i)

    def evaluate_removal(self, i: int) -> float:
        """Cost change of removing variable i from the working solution."""
        if self._variables[i] == 0:
            return 0.0
        return -self._sign * self._contribution(i)

    def evaluate_exchange(self, elem_in: int, elem_out: int) -> float:
        """Cost change of replacing ``elem_out`` by ``elem_in`` in the working solution."""
        if elem_in == elem_out:
            return 0.0
        if self._variables[elem_in] == 1:
            return self.evaluate_removal(elem_out)
        if self._variables[elem_out] == 0:
            return self.evaluate_insertion(elem_in)

        delta = (self._contribution(elem_in) - self._contribution(elem_out)
                 - 2.0 * self._coefficients[elem_in, elem_out])
        return self._sign * float(delta)

    def evaluate_insertion_capacity(self, i: int) -> float:
        """Used-capacity change of adding variable i to the working solution."""
        if self._variables[i] == 1:
            return 0.0
        return float(self._weights[i])

    def evaluate_removal_capacity(self, i: int) -> float:
        """Used-capacity change of removing variable i from the working solution."""
        if self._variables[i] == 0:
            return 0.0
        return -float(self._weights[i])

    def evaluate_exchange_capacity(self, elem_in: int, elem_out: int) -> float:
        """Used-capacity change of replacing ``elem_out`` by ``elem_in``."""
        if elem_in == elem_out:
            return 0.0
        if self._variables[elem_in] == 1:
            return self.evaluate_removal_capacity(elem_out)
        if self._variables[elem_out] == 0:
            return self.evaluate_insertion_capacity(elem_in)
        return float(self._weights[elem_in] - self._weights[elem_out])

    @classmethod
    def from_upper_triangle(cls, upper: Sequence[Sequence[float]], weights, capacity: float,
                            sign: float = 1.0) -> 'KnapsackQBF':
        """
        Build the objective from an upper-triangular coefficient block.

        ``upper[i]`` holds q[i][i], q[i][i+1], ..., q[i][n-1] of the function
        sum_{i<=j} q[i][j] x_i x_j. Off-diagonal terms are split evenly over
        the two symmetric entries so that ``evaluate`` reproduces that sum.
        """
        size = len(upper)
        matrix = np.zeros((size, size), dtype=float)
        for i, row in enumerate(upper):
            if len(row) != size - i:
                raise InstanceError(f"Row {i} of the upper triangle must have {size - i} values, got {len(row)}")
            matrix[i, i] = row[0]
            for offset, value in enumerate(row[1:], start=1):
                j = i + offset
                matrix[i, j] = matrix[j, i] = value / 2.0
        return cls(matrix, weights, capacity, sign=sign)

    def __repr__(self) -> str:
        return f"KnapsackQBF(size={self.size}, capacity={self._capacity:g}, sign={self._sign:+g})"
