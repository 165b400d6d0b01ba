"""
Validation package for the content graph.

This package provides validation utilities and rules for ensuring data
integrity and type safety throughout the system. Schema-based request
validation lives in ``schema`` and model integrity checks in ``integrity``;
both import the models and are therefore not re-exported here.
"""

from .base import (
    DataclassRule,
    RangeRule,
    RegexRule,
    RequiredRule,
    ValidationResult,
    ValidationRule,
    validate_dataclass,
)

__all__ = [
    "ValidationResult",
    "ValidationRule",
    "RequiredRule",
    "RangeRule",
    "RegexRule",
    "DataclassRule",
    "validate_dataclass",
]
