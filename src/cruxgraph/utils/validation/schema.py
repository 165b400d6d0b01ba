"""
Schema validation for request bodies.

This module provides JSON schema-based validation of the bodies accepted by
the graph and tag endpoints. The request boundary validates bodies here
before they reach the engine:
- Creating a dimension: ``{targetId, type, weight?, note?}``
- Updating a dimension: ``{type?, weight?, note?}``
- Synchronizing tags: ``{labels: [...]}``
- Relabelling a tag: ``{label}``
"""

from typing import Any, Dict

from jsonschema import Draft7Validator

from ...core.enums import DimensionType
from ...core.exceptions import ValidationError
from ...core.models.tag import LABEL_PATTERN
from .base import ValidationResult

_LABEL = {"type": "string", "pattern": f"^{LABEL_PATTERN}$", "minLength": 1, "maxLength": 50}
_TYPE = {"type": "string", "enum": [member.value for member in DimensionType]}
_WEIGHT = {"type": "integer", "minimum": 0}
_NOTE = {"type": "string"}

CREATE_DIMENSION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "targetId": {"type": "string", "minLength": 1},
        "type": _TYPE,
        "weight": _WEIGHT,
        "note": _NOTE,
    },
    "required": ["targetId", "type"],
    "additionalProperties": False,
}

UPDATE_DIMENSION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {"type": _TYPE, "weight": _WEIGHT, "note": _NOTE},
    "additionalProperties": False,
}

SYNC_TAGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {"labels": {"type": "array", "items": _LABEL}},
    "required": ["labels"],
    "additionalProperties": False,
}

UPDATE_TAG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {"label": _LABEL},
    "required": ["label"],
    "additionalProperties": False,
}


class RequestValidator:
    """
    JSON Schema-based validator for request bodies.

    Schemas are registered under a name; the four built-in schemas are
    registered on construction.

    Attributes:
        schemas (Dict[str, Dict[str, Any]]): Registered schemas by name
    """

    def __init__(self):
        self.schemas: Dict[str, Dict[str, Any]] = {}
        self.register_schema("create_dimension", CREATE_DIMENSION_SCHEMA)
        self.register_schema("update_dimension", UPDATE_DIMENSION_SCHEMA)
        self.register_schema("sync_tags", SYNC_TAGS_SCHEMA)
        self.register_schema("update_tag", UPDATE_TAG_SCHEMA)

    def register_schema(self, name: str, schema: Dict[str, Any]) -> None:
        """
        Register a JSON schema under ``name``.

        Raises:
            jsonschema.SchemaError: If the schema itself is malformed
        """
        Draft7Validator.check_schema(schema)
        self.schemas[name] = schema

    def validate(self, name: str, body: Any) -> ValidationResult:
        """
        Validate a request body against a registered schema.

        Args:
            name: Registered schema name
            body: Decoded JSON body

        Returns:
            ValidationResult with one error per violation, ordered by location
        """
        schema = self.schemas.get(name)
        if schema is None:
            return ValidationResult(
                is_valid=True,
                warnings=[f"No schema registered for request: {name}"],
                context={"request": name},
            )

        validator = Draft7Validator(schema)
        errors = []
        for error in sorted(validator.iter_errors(body), key=lambda e: [str(p) for p in e.absolute_path]):
            location = ".".join(str(part) for part in error.absolute_path) or "body"
            errors.append(f"{location}: {error.message}")

        return ValidationResult.from_errors(errors, context={"request": name})

    def require_valid(self, name: str, body: Any) -> Dict[str, Any]:
        """
        Validate a body and return it unchanged.

        Raises:
            ValidationError: If the body violates the schema
        """
        result = self.validate(name, body)
        if not result.is_valid:
            raise ValidationError("; ".join(result.errors))
        return body
