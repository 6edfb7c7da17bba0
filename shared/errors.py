"""
Shared error handling for the rule-tree engine.

Evaluation itself never raises: missing or malformed facts are reported
through ``Status``. The exceptions below belong to the layers around the
evaluator (tree construction and serialization).
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class RuleTreeException(Exception):
    """Base exception for the rule-tree packages."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(RuleTreeException):
    """Rule tree construction errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class SerializationDisabledError(RuleTreeException):
    """Raised when result serialization is requested but not enabled."""

    def __init__(self, message: str = "Result serialization is disabled", details: Optional[Dict[str, Any]] = None):
        super().__init__("SERIALIZATION_DISABLED", message, details)
