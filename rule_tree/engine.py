"""
Rule tree evaluation engine.

``check`` walks a rule tree depth-first against a facts mapping and builds
a result tree of the same shape. Every node is evaluated; nothing is
short-circuited, so the result always explains every leaf.

The walk uses an explicit work stack instead of Python recursion, so tree
depth is bounded by memory rather than the interpreter recursion limit.
"""

import operator
from functools import reduce
from typing import List, Sequence, Tuple

from shared.logging import get_logger

from .constraints import evaluate
from .models import And, Facts, Leaf, NumberOf, Or, Rule, RuleResult
from .status import Status

logger = get_logger("rule_tree.engine")


def check(root: Rule, facts: Facts) -> RuleResult:
    """Check ``root`` against ``facts`` and return the full result tree."""
    results: List[RuleResult] = []
    # (node, children already pushed)
    stack: List[Tuple[Rule, bool]] = [(root, False)]
    nodes = 0

    while stack:
        node, expanded = stack.pop()

        if isinstance(node, Leaf):
            nodes += 1
            results.append(check_leaf(node, facts))
            continue

        if not isinstance(node, (And, Or, NumberOf)):
            raise TypeError(f"Unknown rule type: {type(node).__name__}")

        if not expanded:
            nodes += 1
            stack.append((node, True))
            for child in reversed(node.children):
                stack.append((child, False))
            continue

        # Each finished child subtree left exactly one result on the stack
        split = len(results) - len(node.children)
        children = tuple(results[split:])
        del results[split:]
        results.append(combine(node, children))

    result = results[0]
    logger.debug(
        "Rule tree checked",
        rule=result.name,
        status=result.status.value,
        nodes=nodes
    )
    return result


def check_leaf(leaf: Leaf, facts: Facts) -> RuleResult:
    """Check a single leaf; a missing field is ``UNKNOWN``."""
    if leaf.field in facts:
        status = evaluate(leaf.constraint, facts[leaf.field])
    else:
        status = Status.UNKNOWN
    return RuleResult(name=leaf.description, status=status)


def combine(node: Rule, children: Sequence[RuleResult]) -> RuleResult:
    """Aggregate already evaluated child results for a combinator node."""
    statuses = [child.status for child in children]

    if isinstance(node, And):
        return RuleResult("And", reduce(operator.and_, statuses, Status.MET), children)

    elif isinstance(node, Or):
        return RuleResult("Or", reduce(operator.or_, statuses, Status.NOT_MET), children)

    elif isinstance(node, NumberOf):
        return RuleResult(
            f"At least {node.threshold} of",
            number_of_status(node.threshold, statuses),
            children
        )

    raise TypeError(f"Unknown rule type: {type(node).__name__}")


def number_of_status(threshold: int, statuses: Sequence[Status]) -> Status:
    """Quorum status for ``threshold`` of ``statuses``.

    ``NOT_MET`` once so many children failed that the remaining ones can no
    longer reach the threshold, even if every ``UNKNOWN`` became ``MET``.
    """
    met_count = sum(1 for status in statuses if status is Status.MET)
    failed_count = sum(1 for status in statuses if status is Status.NOT_MET)

    if met_count >= threshold:
        return Status.MET
    if failed_count >= len(statuses) - threshold + 1:
        return Status.NOT_MET
    return Status.UNKNOWN
