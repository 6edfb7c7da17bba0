"""
Convenience constructors for rule trees.

Example::

    tree = and_([
        string_equals("Name is John Doe", "name", "John Doe"),
        or_([
            int_equals("Favorite number is 5", "fav_number", 5),
            int_range("Thinking of a number between 5 and 10", "thinking_of", 5, 10),
        ]),
    ])
    result = tree.check({"name": "John Doe", "fav_number": "5"})
    assert result.status == Status.MET
"""

from typing import Iterable, List, Optional, Set

from shared.config import EngineConfig, get_config
from shared.errors import ValidationError
from shared.logging import get_logger

from .constraints import Boolean, IntEquals, IntRange, StringEquals
from .models import And, Leaf, NumberOf, Or, Rule

logger = get_logger("rule_tree.builders")


def and_(rules: Iterable[Rule]) -> Rule:
    """Creates a rule where all child rules must be met.

    * If any are ``NOT_MET``, the result is ``NOT_MET``
    * If the results contain only ``MET`` and ``UNKNOWN``, the result is ``UNKNOWN``
    * Only ``MET`` if all children are ``MET``
    """
    return And(tuple(rules))


def or_(rules: Iterable[Rule]) -> Rule:
    """Creates a rule where any child rule must be met.

    * If any are ``MET``, the result is ``MET``
    * If the results contain only ``NOT_MET`` and ``UNKNOWN``, the result is ``UNKNOWN``
    * Only ``NOT_MET`` if all children are ``NOT_MET``
    """
    return Or(tuple(rules))


def n_of(n: int, rules: Iterable[Rule], strict: bool = True) -> Rule:
    """Creates a rule where ``n`` child rules must be met.

    * If ``>= n`` are ``MET``, the result is ``MET``
    * If ``>= len(children) - n + 1`` are ``NOT_MET``, the result is ``NOT_MET``
    * Otherwise ``UNKNOWN``

    With ``strict``, ``n`` outside ``[0, len(children)]`` raises ``ValidationError``.
    """
    children = tuple(rules)
    if strict:
        _check_threshold(n, len(children))
    return NumberOf(n, children)


def string_equals(description: str, field: str, value: str) -> Rule:
    """Creates a rule for string comparison."""
    return Leaf(description, field, StringEquals(value))


def int_equals(description: str, field: str, value: int) -> Rule:
    """Creates a rule for int comparison.

    If the checked value is not convertible to an integer, the result is ``NOT_MET``.
    """
    return Leaf(description, field, IntEquals(value))


def int_range(description: str, field: str, start: int, end: int) -> Rule:
    """Creates a rule for int range comparison with the interval ``[start, end]``.

    If the checked value is not convertible to an integer, the result is ``NOT_MET``.
    """
    return Leaf(description, field, IntRange(start, end))


def boolean(description: str, field: str, value: bool) -> Rule:
    """Creates a rule for boolean comparison.

    Only ``"true"`` (case-insensitive) is considered true, everything else is false.
    """
    return Leaf(description, field, Boolean(value))


def validate_tree(root: Rule) -> None:
    """Validate the structure of a rule tree.

    Raises ``ValidationError`` for a quorum threshold outside
    ``[0, len(children)]``, an empty integer range, or a node that appears
    more than once in the tree.
    """
    seen: Set[int] = set()
    pending: List[Rule] = [root]

    while pending:
        node = pending.pop()
        if id(node) in seen:
            _fail("Rule node appears more than once in the tree", node=type(node).__name__)
        seen.add(id(node))

        if isinstance(node, Leaf):
            constraint = node.constraint
            if isinstance(constraint, IntRange) and constraint.low > constraint.high:
                _fail(
                    "Integer range is empty",
                    rule=node.description,
                    low=constraint.low,
                    high=constraint.high
                )
            continue

        if isinstance(node, NumberOf):
            _check_threshold(node.threshold, len(node.children))

        if not isinstance(node, (And, Or, NumberOf)):
            _fail("Unknown rule type", node=type(node).__name__)

        pending.extend(node.children)


def _check_threshold(threshold: int, child_count: int) -> None:
    if not 0 <= threshold <= child_count:
        _fail(
            "Threshold must be between 0 and the number of children",
            threshold=threshold,
            children=child_count
        )


def _fail(message: str, **details) -> None:
    logger.warning("Invalid rule tree", reason=message, **details)
    raise ValidationError(message, details)


class RuleBuilder:
    """Builds rule trees under one engine configuration.

    The configuration is resolved once, so building a large tree reads the
    environment a single time.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()

    def and_(self, rules: Iterable[Rule]) -> Rule:
        return and_(rules)

    def or_(self, rules: Iterable[Rule]) -> Rule:
        return or_(rules)

    def n_of(self, n: int, rules: Iterable[Rule]) -> Rule:
        """Quorum rule, validated when ``strict_thresholds`` is on."""
        return n_of(n, rules, strict=self.config.strict_thresholds)

    def string_equals(self, description: str, field: str, value: str) -> Rule:
        return string_equals(description, field, value)

    def int_equals(self, description: str, field: str, value: int) -> Rule:
        return int_equals(description, field, value)

    def int_range(self, description: str, field: str, start: int, end: int) -> Rule:
        return int_range(description, field, start, end)

    def boolean(self, description: str, field: str, value: bool) -> Rule:
        return boolean(description, field, value)

    def validate(self, root: Rule) -> None:
        validate_tree(root)
