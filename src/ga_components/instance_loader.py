"""
Instance Loader Module

Reads knapsack QBF instances from text files.

File layout (whitespace separated, line breaks are not significant):

    n
    capacity
    w_0 w_1 ... w_{n-1}
    q_00 q_01 ... q_0(n-1)
         q_11 ... q_1(n-1)
              ...
                  q_(n-1)(n-1)

The coefficient block is the upper triangle of the function
sum_{i<=j} q_ij x_i x_j, row by row.
"""

import os
from typing import List

from ga_components.objective_function import KnapsackQBF
from ga_exceptions import InstanceError


class _TokenReader:
    """Sequential numeric reader over the tokens of an instance."""

    def __init__(self, text: str, source: str):
        self.tokens = text.split()
        self.position = 0
        self.source = source

    def next_number(self, what: str) -> float:
        if self.position >= len(self.tokens):
            raise InstanceError(f"Unexpected end of instance while reading {what}",
                                source=self.source, token_index=self.position)
        token = self.tokens[self.position]
        try:
            value = float(token)
        except ValueError:
            raise InstanceError(f"Invalid number {token!r} for {what}",
                                source=self.source, token_index=self.position) from None
        self.position += 1
        return value

    def next_int(self, what: str) -> int:
        value = self.next_number(what)
        if not value.is_integer():
            raise InstanceError(f"{what} must be an integer, got {value}",
                                source=self.source, token_index=self.position - 1)
        return int(value)

    @property
    def remaining(self) -> int:
        return len(self.tokens) - self.position


def parse_instance(text: str, source: str = "<string>") -> KnapsackQBF:
    """
    Parse instance text into an objective function.

    Args:
        text: Instance contents
        source: Name used in error messages

    Returns:
        KnapsackQBF reporting the (non-negated) QBF value

    Raises:
        InstanceError: If the text is malformed
    """
    reader = _TokenReader(text, source)

    size = reader.next_int("problem size")
    if size < 1:
        raise InstanceError(f"Problem size must be positive, got {size}", source=source)

    capacity = reader.next_number("capacity")
    weights = [reader.next_number(f"weight {i}") for i in range(size)]

    upper: List[List[float]] = []
    for i in range(size):
        upper.append([reader.next_number(f"coefficient ({i}, {j})") for j in range(i, size)])

    if reader.remaining:
        raise InstanceError(f"{reader.remaining} unexpected trailing values",
                            source=source, token_index=reader.position)

    return KnapsackQBF.from_upper_triangle(upper, weights, capacity)


def load_instance(file_path: str) -> KnapsackQBF:
    """
    Load a kQBF instance file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        InstanceError: If the file is malformed
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Instance file '{file_path}' not found.")

    with open(file_path, 'r') as file:
        return parse_instance(file.read(), source=file_path)
