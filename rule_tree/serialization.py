"""
Transport form of rule results.

Serialization is off unless ``enable_serialization`` is set in the engine
configuration (``RULE_TREE_ENABLE_SERIALIZATION=true``).
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from shared.config import EngineConfig, get_config
from shared.errors import SerializationDisabledError, ValidationError
from shared.logging import get_logger

from .models import RuleResult
from .status import Status


class RuleResultModel(BaseModel):
    """Serializable rule result node."""
    name: str = Field(..., description="Human-friendly description of the rule")
    status: Status = Field(..., description="Status of this node")
    children: List["RuleResultModel"] = Field(default_factory=list, description="Results of any sub-rules")

    @classmethod
    def from_result(cls, result: RuleResult) -> "RuleResultModel":
        return cls(
            name=result.name,
            status=result.status,
            children=[cls.from_result(child) for child in result.children]
        )

    def to_result(self) -> RuleResult:
        return RuleResult(
            name=self.name,
            status=self.status,
            children=tuple(child.to_result() for child in self.children)
        )


class ResultSerializer:
    """Converts result trees to plain data when enabled by configuration."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()
        self.logger = get_logger("rule_tree.serialization")

    @property
    def enabled(self) -> bool:
        return self.config.enable_serialization

    def _require_enabled(self, operation: str) -> None:
        if not self.enabled:
            self.logger.warning("Serialization requested while disabled", operation=operation)
            raise SerializationDisabledError()

    def to_model(self, result: RuleResult) -> RuleResultModel:
        self._require_enabled("serialize")
        return RuleResultModel.from_result(result)

    def to_dict(self, result: RuleResult) -> Dict[str, Any]:
        """Serialize a result tree to a JSON-compatible dict."""
        return self.to_model(result).model_dump(mode="json")

    def to_json(self, result: RuleResult) -> str:
        """Serialize a result tree to a JSON string."""
        return self.to_model(result).model_dump_json()

    def from_json(self, payload: str) -> RuleResult:
        """Rebuild a result tree from its JSON form."""
        self._require_enabled("deserialize")
        try:
            model = RuleResultModel.model_validate_json(payload)
        except PydanticValidationError as e:
            self.logger.warning("Invalid result payload", errors=e.error_count())
            raise ValidationError("Invalid result payload", {"errors": e.error_count()}) from e
        return model.to_result()
