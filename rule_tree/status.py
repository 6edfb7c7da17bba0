"""
Three-valued status of a rule check.
"""

from enum import Enum


class Status(str, Enum):
    """Outcome of checking a rule.

    AND: ``NOT_MET`` dominates, ``UNKNOWN`` propagates otherwise.
    OR: ``MET`` dominates, ``UNKNOWN`` propagates otherwise.
    """
    MET = "met"
    NOT_MET = "not_met"
    UNKNOWN = "unknown"

    def __and__(self, other: "Status") -> "Status":
        if not isinstance(other, Status):
            return NotImplemented
        if self is Status.MET and other is Status.MET:
            return Status.MET
        if self is Status.NOT_MET or other is Status.NOT_MET:
            return Status.NOT_MET
        return Status.UNKNOWN

    def __or__(self, other: "Status") -> "Status":
        if not isinstance(other, Status):
            return NotImplemented
        if self is Status.NOT_MET and other is Status.NOT_MET:
            return Status.NOT_MET
        if self is Status.MET or other is Status.MET:
            return Status.MET
        return Status.UNKNOWN
