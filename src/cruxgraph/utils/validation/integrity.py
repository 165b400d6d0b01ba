"""
Data integrity validation for dimensions and tags.

The model dataclasses reject structurally broken values at construction
time. The checks here run in the repositories before anything is written and
cover the rules a constructed model can still violate once its fields are
mutated, such as a weight changed by an update.
"""

from datetime import datetime
from typing import Any, List

from ...core.enums import DimensionType, ResourceType
from ...core.models import Dimension, Tag
from ...core.models.tag import LABEL_RULE
from .base import RangeRule, RequiredRule, ValidationResult

WEIGHT_RULE = RangeRule(min_value=0, integer=True, error_message="weight must be an integer >= 0")
REQUIRED_RULE = RequiredRule("value is required")


class DataIntegrityValidator:
    """Static integrity checks for dimensions and tags."""

    @staticmethod
    def _validate_timestamps(item: Any) -> List[str]:
        errors = []
        for name in ("created", "updated"):
            if not isinstance(getattr(item, name), datetime):
                errors.append(f"{name} must be a datetime")
        if not errors and item.updated < item.created:
            errors.append("updated cannot be before created")
        deleted = getattr(item, "deleted", None)
        if deleted is not None and not isinstance(deleted, datetime):
            errors.append("deleted must be a datetime or None")
        return errors

    @staticmethod
    def _validate_required(item: Any, names: List[str]) -> List[str]:
        return [
            f"{name} is required"
            for name in names
            if REQUIRED_RULE.check(getattr(item, name, None))
        ]

    @staticmethod
    def validate_dimension_integrity(dimension: Dimension) -> ValidationResult:
        """
        Validate a dimension before it is persisted.

        Args:
            dimension: Dimension to check

        Returns:
            ValidationResult listing every violated rule
        """
        if not isinstance(dimension, Dimension):
            return ValidationResult.from_errors(["Invalid dimension type"])

        errors = DataIntegrityValidator._validate_required(
            dimension, ["id", "key", "source_id", "target_id", "author_id", "home_id"]
        )
        if not isinstance(dimension.dimension_type, DimensionType):
            errors.append("type must be one of: gate, garden, growth, graft")
        if dimension.weight is not None and WEIGHT_RULE.check(dimension.weight):
            errors.append(WEIGHT_RULE.error_message)
        if dimension.note is not None and not isinstance(dimension.note, str):
            errors.append("note must be a string")
        errors.extend(DataIntegrityValidator._validate_timestamps(dimension))

        return ValidationResult.from_errors(errors, context={"dimension": dimension.key})

    @staticmethod
    def validate_tag_integrity(tag: Tag) -> ValidationResult:
        """
        Validate a tag before it is persisted.

        Args:
            tag: Tag to check

        Returns:
            ValidationResult listing every violated rule
        """
        if not isinstance(tag, Tag):
            return ValidationResult.from_errors(["Invalid tag type"])

        errors = DataIntegrityValidator._validate_required(
            tag, ["id", "key", "resource_id", "author_id", "home_id"]
        )
        if not isinstance(tag.resource_type, ResourceType):
            errors.append("resource_type must be a ResourceType")
        label_error = LABEL_RULE.check(tag.label)
        if label_error:
            errors.append(label_error)
        errors.extend(DataIntegrityValidator._validate_timestamps(tag))

        return ValidationResult.from_errors(errors, context={"tag": tag.key})
