"""rulegate: declarative, conditional data validation.

rulegate validates a data object against a schema of per-field rule groups
and returns a structured map of failure messages:
- Rule groups gated by ``when`` / ``whenNot`` conditions
- Cross-field references resolved against the top-level data
- ``$beforeAllWhen`` pre-conditions that switch off a whole scope
- ``$refine`` groups that report under any error key

Basic usage:
    >>> from rulegate import Validate, validate
    >>> schema = {
    ...     "age": [{"validate": [Validate.NUMBER.is_required, Validate.NUMBER.min_value(18)]}],
    ... }
    >>> validate(schema, {"age": 16})
    {'age': 'age must be at least 18, but got 16'}
"""

__version__ = "0.1.0"
__author__ = "rulegate Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from rulegate.catalog import Validate
from rulegate.rules import Rule, all_of, any_of, custom, other
from rulegate.schema import RuleGroup, Schema
from rulegate.types import RuleContext
from rulegate.validation import ValidationEngine, ValidationResult, validate

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Validate",
    "Rule",
    "RuleContext",
    "RuleGroup",
    "Schema",
    "all_of",
    "any_of",
    "custom",
    "other",
    "validate",
    "ValidationEngine",
    "ValidationResult",
]
