"""
Rule tree and result tree data models.
"""

from dataclasses import dataclass, field
from typing import Mapping, Tuple

from .constraints import Constraint
from .status import Status

# Read-only field name -> raw value lookup supplied by the caller
Facts = Mapping[str, str]


class Rule:
    """Base class of every rule tree node.

    Concrete nodes are ``Leaf``, ``And``, ``Or`` and ``NumberOf``; the
    engine rejects any other subclass.
    """

    __slots__ = ()

    def check(self, facts: Facts) -> "RuleResult":
        """Check this node and all of its descendants against ``facts``."""
        from .engine import check
        return check(self, facts)


def _freeze_children(node: "Rule") -> None:
    # Children are always held as a tuple so the tree cannot be mutated
    object.__setattr__(node, "children", tuple(node.children))


@dataclass(frozen=True)
class Leaf(Rule):
    """Single constraint applied to one field of the facts."""
    description: str
    field: str
    constraint: Constraint


@dataclass(frozen=True)
class And(Rule):
    """All children must be met."""
    children: Tuple[Rule, ...] = ()

    def __post_init__(self):
        _freeze_children(self)


@dataclass(frozen=True)
class Or(Rule):
    """Any child must be met."""
    children: Tuple[Rule, ...] = ()

    def __post_init__(self):
        _freeze_children(self)


@dataclass(frozen=True)
class NumberOf(Rule):
    """At least ``threshold`` children must be met."""
    threshold: int
    children: Tuple[Rule, ...] = ()

    def __post_init__(self):
        _freeze_children(self)


@dataclass(frozen=True)
class RuleResult:
    """Result of checking a rule tree, mirroring its shape."""
    # Human-friendly description of the rule
    name: str
    status: Status
    # Results of any sub-rules, in rule order
    children: Tuple["RuleResult", ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))
