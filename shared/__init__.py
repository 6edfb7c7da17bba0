"""
Shared utilities for the rule-tree engine.

This package aggregates the ambient building blocks used by ``rule_tree``:

- config: Engine configuration via pydantic-settings
- logging: Structured logging with evaluation correlation
- errors: Canonical error types and responses

Do not import from ``rule_tree`` into shared/.
"""
