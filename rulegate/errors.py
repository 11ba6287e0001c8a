"""Exceptions and structured error types for rulegate.

Validation failures are not exceptions: they are returned as an error map
from ``validate()``. The exceptions here signal caller defects (a schema or
path the engine cannot interpret), plus an opt-in exception channel for hosts
that prefer raising on invalid data.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class RulegateError(Exception):
    """Base class for all errors raised by rulegate."""


class SchemaDefinitionError(RulegateError):
    """Raised when a schema entry cannot be interpreted.

    Attributes:
        key: Schema key whose definition is malformed
    """

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Invalid schema definition for '{key}': {message}")


class PathResolutionError(RulegateError):
    """Raised when a dotted path walks into a value that has no members.

    Attributes:
        path: The full dotted path being resolved
        segment: The segment that could not be looked up
    """

    def __init__(self, path: str, segment: str, container: Any):
        self.path = path
        self.segment = segment
        super().__init__(
            f"Cannot resolve '{segment}' of path '{path}': "
            f"{type(container).__name__} value has no members"
        )


@dataclass(frozen=True)
class FieldError:
    """A single rendered failure, located by its path in the error map.

    Attributes:
        path: Dot-notation location (e.g., "assets.carTax", "idNumber")
        message: Rendered failure message

    Examples:
        >>> err = FieldError(path="age", message="age must be at least 18, but got 16")
        >>> err.path
        'age'
    """
    path: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"path": self.path, "message": self.message}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        return cls(path=data["path"], message=data["message"])


class ValidationFailedError(RulegateError):
    """Raised by ``ValidationResult.raise_for_errors()`` on invalid data.

    Attributes:
        errors: The nested error map returned by the traversal
        field_errors: The same failures flattened to dotted paths
    """

    def __init__(self, errors: Dict[str, Any], field_errors: Optional[List[FieldError]] = None):
        self.errors = errors
        self.field_errors = field_errors or []
        paths = ", ".join(e.path for e in self.field_errors) or ", ".join(errors)
        super().__init__(f"Validation failed for: {paths}")


__all__ = [
    "RulegateError",
    "SchemaDefinitionError",
    "PathResolutionError",
    "FieldError",
    "ValidationFailedError",
]
