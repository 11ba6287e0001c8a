"""Conditional validation engine for rulegate schemas.

This module walks a compiled schema over a data object and collects failure
messages into an error map whose shape mirrors the schema:

- Leaf fields evaluate their rule groups in order. Each group is gated by
  ``when`` / ``when_not``, then its ``validate`` rules run until the first
  failure, whose message is rendered under the group's ``path`` or the field
  name. A later group overwrites an earlier one at the same key.
- Nested fields are traversed recursively with the field's value as the new
  scope. Their error map is attached only when non-empty.
- A failing ``$beforeAllWhen`` pre-condition stops the rest of its scope.

Cross-references always resolve against the top-level data (``full_data``),
however deep the traversal is.

Usage:
    >>> from rulegate.catalog import Validate
    >>> schema = {"age": [{"validate": [Validate.NUMBER.min_value(18)]}]}
    >>> validate(schema, {"age": 16})
    {'age': 'age must be at least 18, but got 16'}
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from rulegate.errors import FieldError, ValidationFailedError
from rulegate.gates import admits, evaluate_gate
from rulegate.rules import resolve_path
from rulegate.schema import Leaf, Nested, PreCondition, Schema, compile_schema
from rulegate.types import FIELD_KEY_PLACEHOLDER, PATH_SEPARATOR, VALUE_PLACEHOLDER, GateKind


logger = logging.getLogger(__name__)

ErrorMap = Dict[str, Any]
SchemaLike = Union[Schema, Mapping]
SchemaSource = Union[SchemaLike, Callable[[Any], SchemaLike]]


def render_message(template: str, key: str, value: Any) -> str:
    """Fill the first ``{field_key}`` and the first ``{value}`` placeholder.

    Examples:
        >>> render_message("{field_key} must be between {value} and {value}", "start", 3)
        'start must be between 3 and {value}'
    """
    return template.replace(FIELD_KEY_PLACEHOLDER, key, 1).replace(VALUE_PLACEHOLDER, str(value), 1)


def _validate_field(key: str, leaf: Leaf, data: Any, full_data: Any, errors: ErrorMap) -> None:
    current_value = resolve_path(data, key, strict=False)

    for entry in leaf.entries:
        if isinstance(entry, PreCondition):
            gate = evaluate_gate(entry.rules, current_value, full_data, True, GateKind.BEFORE_ALL_WHEN)
            if gate.is_fail:
                logger.debug("Pre-condition failed for %r, skipping remaining groups", key)
                break
            continue

        if not admits(entry, current_value, full_data):
            logger.debug("Rule group for %r does not apply", key)
            continue

        result = evaluate_gate(entry.validate, current_value, full_data, True, GateKind.VALIDATE)
        if result.is_fail:
            error_key = entry.path or key
            errors[error_key] = render_message(result.message, key, current_value)
            logger.debug("Recorded error for %r under %r", key, error_key)


def traverse(schema: Schema, data: Any, full_data: Any) -> ErrorMap:
    """Validate ``data`` against a compiled schema.

    Args:
        schema: Compiled schema for the current scope
        data: Data object of the current scope
        full_data: Top-level data object, used by cross-references

    Returns:
        Error map for this scope (empty if everything passed)
    """
    errors: ErrorMap = {}

    for key, node in schema.entries:
        if isinstance(node, PreCondition):
            gate = evaluate_gate(node.rules, data, full_data, True, GateKind.BEFORE_ALL_WHEN)
            if gate.is_fail:
                logger.debug("Pre-condition failed, skipping the rest of this scope")
                break
        elif isinstance(node, Leaf):
            _validate_field(key, node, data, full_data, errors)
        elif isinstance(node, Nested):
            nested_errors = traverse(node.schema, resolve_path(data, key, strict=False), full_data)
            if nested_errors:
                errors[key] = nested_errors

    return errors


def validate(schema: SchemaSource, data: Any, full_data: Any = None) -> ErrorMap:
    """Validate ``data`` and return the error map.

    Args:
        schema: A Schema, a plain dict schema, or a callable that receives
            ``data`` and returns either
        data: The data object to validate
        full_data: Data that cross-references resolve against; defaults to ``data``

    Returns:
        Mapping of field name (or override path) to a rendered message, or to
        a nested mapping for sub-objects. Empty when validation passed.
    """
    if callable(schema):
        schema = schema(data)
    if full_data is None:
        full_data = data
    return traverse(compile_schema(schema), data, full_data)


def _flatten(errors: Mapping, prefix: str = "") -> Iterator[FieldError]:
    for key, value in errors.items():
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else key
        if isinstance(value, Mapping):
            yield from _flatten(value, path)
        else:
            yield FieldError(path=path, message=value)


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating data with a ValidationEngine.

    Attributes:
        is_valid: Whether the data passed all applicable rule groups
        errors: The nested error map (empty if valid)
        data: The validated data

    Examples:
        >>> from rulegate.catalog import Validate
        >>> engine = ValidationEngine({"name": [{"validate": [Validate.STRING.is_required]}]})
        >>> result = engine.validate({"name": ""})
        >>> result.is_valid
        False
        >>> result.field_errors[0].message
        'name is required'
    """
    is_valid: bool
    errors: ErrorMap
    data: Optional[Any] = None

    @property
    def field_errors(self) -> List[FieldError]:
        """Failures flattened to dot-joined paths, in error map order."""
        return list(_flatten(self.errors))

    def raise_for_errors(self) -> None:
        """Raise ValidationFailedError if the data was invalid."""
        if not self.is_valid:
            raise ValidationFailedError(self.errors, self.field_errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "errors": self.errors,
            "fieldErrors": [e.to_dict() for e in self.field_errors],
        }
        if self.data is not None:
            result["data"] = self.data
        return result


class ValidationEngine:
    """Reusable validator bound to one schema.

    Static schemas are compiled once at construction. Schema factories
    (callables) are invoked on every ``validate`` call, since their structure
    may depend on the data. The engine keeps no per-call state, so a single
    instance can be shared between threads.

    Attributes:
        schema: The compiled Schema, or the schema factory
    """

    def __init__(self, schema: SchemaSource) -> None:
        """Initialize the engine.

        Raises:
            SchemaDefinitionError: If a static schema cannot be compiled
        """
        self.schema = schema if callable(schema) else compile_schema(schema)

    def validate(self, data: Any, full_data: Any = None) -> ValidationResult:
        """Validate ``data`` and wrap the error map in a ValidationResult."""
        errors = validate(self.schema, data, full_data)
        if errors:
            logger.debug("Validation failed for %d field(s)", len(errors))
        return ValidationResult(is_valid=not errors, errors=errors, data=data)


__all__ = [
    "ErrorMap",
    "render_message",
    "traverse",
    "validate",
    "ValidationResult",
    "ValidationEngine",
]
