"""
Base validation components for the content graph.

This module provides the building blocks used by the models, the integrity
checks and the engine's own re-validation of caller input:
- ValidationResult for reporting outcomes with errors and warnings
- A small hierarchy of ValidationRule classes (required, range, regex)
- DataclassRule and the validate_dataclass decorator, which add runtime
  type checking to the model dataclasses
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Type,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)


@dataclass
class ValidationResult:
    """
    Container for validation outcomes.

    Attributes:
        is_valid (bool): Whether the validation passed
        errors (List[str]): Validation error messages
        warnings (List[str]): Validation warning messages
        context (Optional[Dict[str, Any]]): Additional context about the validation
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    context: Optional[Dict[str, Any]] = None

    @classmethod
    def from_errors(
        cls, errors: List[str], context: Optional[Dict[str, Any]] = None
    ) -> "ValidationResult":
        """Build a result that is valid exactly when ``errors`` is empty."""
        return cls(is_valid=not errors, errors=list(errors), context=context)


class ValidationRule:
    """
    Base class for validation rules.

    Subclasses override validate() to implement specific checks.

    Attributes:
        error_message (str): Message to report when validation fails
    """

    def __init__(self, error_message: str):
        self.error_message = error_message

    def validate(self, value: Any) -> bool:
        """
        Validate a value against the rule.

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Validation rules must implement validate()")

    def check(self, value: Any) -> Optional[str]:
        """Return the error message when ``value`` fails the rule, None otherwise."""
        return None if self.validate(value) else self.error_message


class RequiredRule(ValidationRule):
    """Value must be present; strings must be non-blank."""

    def validate(self, value: Any) -> bool:
        if isinstance(value, str):
            return bool(value.strip())
        return value is not None


class RangeRule(ValidationRule):
    """
    Rule for validating numeric ranges.

    Either bound may be None for an open-ended range. With ``integer=True``
    only ints are accepted (bools are rejected even though they subclass int).

    Attributes:
        min_value (Optional[float]): Minimum allowed value
        max_value (Optional[float]): Maximum allowed value
        integer (bool): Whether the value must be an integer
    """

    def __init__(
        self,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        error_message: str = "",
        integer: bool = False,
    ):
        super().__init__(error_message)
        self.min_value = min_value
        self.max_value = max_value
        self.integer = integer

    def validate(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        allowed = (int,) if self.integer else (int, float)
        if not isinstance(value, allowed):
            return False
        if self.min_value is not None and value < self.min_value:
            return False
        if self.max_value is not None and value > self.max_value:
            return False
        return True


class RegexRule(ValidationRule):
    """
    Rule for regex pattern matching.

    The whole value must match the pattern.

    Attributes:
        pattern: Compiled regular expression pattern
    """

    def __init__(self, pattern: str, error_message: str):
        super().__init__(error_message)
        self.pattern = re.compile(pattern)

    def validate(self, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.fullmatch(value) is not None


class DataclassRule(ValidationRule):
    """
    Rule checking that each field of a dataclass instance matches its type hint.

    Supports plain classes, Enum subclasses, Optional[...], List[...] and
    Dict[...] hints, which covers every model in the package.
    """

    def __init__(self, dataclass_type: Type, error_message: str = ""):
        super().__init__(error_message or f"Invalid value for {dataclass_type.__name__}")
        self.dataclass_type = dataclass_type
        self.type_hints = get_type_hints(dataclass_type)

    def _validate_type(self, value: Any, expected_type: Any) -> bool:
        if expected_type is Any:
            return True

        origin = get_origin(expected_type)
        if origin is Union:
            args = get_args(expected_type)
            if value is None:
                return type(None) in args
            return any(
                self._validate_type(value, arg) for arg in args if arg is not type(None)
            )

        if value is None:
            return False

        if expected_type is datetime:
            return isinstance(value, datetime)
        if expected_type is int:
            return isinstance(value, int) and not isinstance(value, bool)

        if origin is list:
            if not isinstance(value, list):
                return False
            args = get_args(expected_type)
            return not args or all(self._validate_type(item, args[0]) for item in value)
        if origin is dict:
            if not isinstance(value, dict):
                return False
            args = get_args(expected_type)
            if len(args) != 2:
                return True
            key_type, val_type = args
            return all(
                self._validate_type(k, key_type) and self._validate_type(v, val_type)
                for k, v in value.items()
            )
        if origin is not None:
            return isinstance(value, origin)

        if isinstance(expected_type, type) and issubclass(expected_type, Enum):
            return isinstance(value, expected_type)
        try:
            return isinstance(value, expected_type)
        except TypeError:
            return True

    def invalid_fields(self, value: Any) -> List[str]:
        """Return the names of fields whose values don't match their hints."""
        return [
            name
            for name, hint in self.type_hints.items()
            if not self._validate_type(getattr(value, name), hint)
        ]

    def validate(self, value: Any) -> bool:
        if not isinstance(value, self.dataclass_type):
            return False
        return not self.invalid_fields(value)


def validate_dataclass(cls: Type[Any]) -> Type[Any]:
    """
    Decorator that adds runtime type checking to dataclass fields.

    The class's own __post_init__ runs first, so value checks (ranges,
    patterns) report before type checks do.

    Example:
        >>> @validate_dataclass
        ... @dataclass
        ... class Example:
        ...     name: str
        ...     count: int
    """
    original_post_init = getattr(cls, "__post_init__", None)

    def validated_post_init(self):
        if original_post_init:
            original_post_init(self)

        rule = DataclassRule(cls)
        bad_fields = rule.invalid_fields(self)
        if bad_fields:
            raise TypeError(f"Invalid field types in {cls.__name__}: {', '.join(bad_fields)}")

    cls.__post_init__ = validated_post_init
    return cls
