"""
Shared logging configuration for the rule-tree engine.

Library loggers wrap stdlib loggers, so nothing is written anywhere until
the embedding application configures logging (``configure_logging`` or its
own stdlib handlers). ``rule_tree`` installs a ``NullHandler`` on its logger
namespace.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Callable, Dict, Optional
from contextvars import ContextVar

from .config import EngineConfig, get_config

# Correlates the events of one evaluation
evaluation_id_var: ContextVar[Optional[str]] = ContextVar('evaluation_id', default=None)

Processor = Callable[[Any, str, Dict[str, Any]], Dict[str, Any]]


def configure_logging(config: Optional[EngineConfig] = None, service_name: str = "rule_tree") -> None:
    """Configure JSON structured logging at ``config.log_level``."""
    config = config or get_config()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            environment_processor(config.env),
            add_correlation_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.log_level.upper()),
    )
    get_logger(f"{service_name}.logging").debug("Logging configured", level=config.log_level)


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    # Logger names look like "<service>.<component>"
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["service"] = logger_name.split(".")[0]

    return event_dict


def environment_processor(env: str) -> Processor:
    """Build a processor stamping the deployment environment on events."""
    def add_environment(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("env", env)
        return event_dict

    return add_environment


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation context to log events."""
    evaluation_id = evaluation_id_var.get()
    if evaluation_id:
        event_dict["evaluation_id"] = evaluation_id

    return event_dict


def set_evaluation_id(evaluation_id: Optional[str] = None) -> str:
    """Set evaluation ID in context."""
    if evaluation_id is None:
        evaluation_id = str(uuid.uuid4())
    evaluation_id_var.set(evaluation_id)
    return evaluation_id


def clear_context():
    """Clear all context variables."""
    evaluation_id_var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger backed by the stdlib logger ``name``."""
    return structlog.wrap_logger(logging.getLogger(name))
