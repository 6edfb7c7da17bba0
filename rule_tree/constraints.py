"""
Leaf constraints and their evaluation against a single raw fact value.

A constraint only ever answers ``MET`` or ``NOT_MET``. Absence of a fact is
handled by the leaf rule that owns the constraint, never here.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from .status import Status

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class StringEquals:
    """Fact must equal ``expected`` exactly."""
    expected: str


@dataclass(frozen=True)
class IntEquals:
    """Fact must parse as an integer equal to ``expected``."""
    expected: int


@dataclass(frozen=True)
class IntRange:
    """Fact must parse as an integer in ``[low, high]``."""
    low: int
    high: int


@dataclass(frozen=True)
class Boolean:
    """Fact is ``true`` iff it reads "true" in any case."""
    expected: bool


Constraint = Union[StringEquals, IntEquals, IntRange, Boolean]


def parse_int(raw_value: str) -> Optional[int]:
    """Parse a base-10 signed integer, returning None when malformed."""
    if _INT_PATTERN.fullmatch(raw_value) is None:
        return None
    return int(raw_value)


def parse_bool(raw_value: str) -> bool:
    return raw_value.lower() == "true"


def _status(condition: bool) -> Status:
    return Status.MET if condition else Status.NOT_MET


def evaluate(constraint: Constraint, raw_value: str) -> Status:
    """Evaluate a constraint against one raw fact value."""
    if isinstance(constraint, StringEquals):
        return _status(raw_value == constraint.expected)

    elif isinstance(constraint, IntEquals):
        parsed = parse_int(raw_value)
        return _status(parsed is not None and parsed == constraint.expected)

    elif isinstance(constraint, IntRange):
        parsed = parse_int(raw_value)
        return _status(parsed is not None and constraint.low <= parsed <= constraint.high)

    elif isinstance(constraint, Boolean):
        return _status(parse_bool(raw_value) == constraint.expected)

    raise TypeError(f"Unknown constraint type: {type(constraint).__name__}")
