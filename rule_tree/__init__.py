"""
Rule tree engine.

Evaluates a tree of requirements against a mapping of facts and reports a
three-valued status (met / not met / unknown) for every node, together
with a result tree that explains how the root status was reached.

Modules of interest:
- status: Three-valued ``Status`` with AND/OR operators.
- constraints: Leaf predicates over a single raw fact value.
- models: Rule tree nodes and the ``RuleResult`` tree.
- engine: The ``check`` evaluation algorithm.
- builders: Convenience constructors and structural validation.
- serialization: Optional pydantic transport form of results.
- render: Plain-text explanation of a result tree.

Evaluation is pure: the same tree may be checked concurrently from several
threads against any number of fact mappings.
"""

import logging

from .builders import (
    RuleBuilder, and_, or_, n_of, string_equals, int_equals, int_range, boolean, validate_tree
)
from .constraints import Boolean, Constraint, IntEquals, IntRange, StringEquals, evaluate
from .engine import check
from .models import And, Facts, Leaf, NumberOf, Or, Rule, RuleResult
from .render import format_result
from .status import Status

__all__ = [
    "Status",
    "Constraint", "StringEquals", "IntEquals", "IntRange", "Boolean", "evaluate",
    "Rule", "Leaf", "And", "Or", "NumberOf", "RuleResult", "Facts",
    "check",
    "and_", "or_", "n_of", "string_equals", "int_equals", "int_range", "boolean",
    "validate_tree", "RuleBuilder",
    "format_result",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
