"""
Plain-text explanation of a result tree.
"""

from typing import List

from .models import RuleResult

_STATUS_LABELS = {
    "met": "MET",
    "not_met": "NOT MET",
    "unknown": "UNKNOWN",
}


def format_result(result: RuleResult, indent: str = "  ") -> str:
    """Render one line per node, children indented below their parent.

    Example::

        And: MET
          Name is John Doe: MET
          Or: MET
            Favorite number is 5: MET
            Thinking of a number between 5 and 10: UNKNOWN
    """
    lines: List[str] = []
    pending = [(result, 0)]
    while pending:
        node, depth = pending.pop()
        lines.append(f"{indent * depth}{node.name}: {_STATUS_LABELS[node.status.value]}")
        pending.extend((child, depth + 1) for child in reversed(node.children))
    return "\n".join(lines)
