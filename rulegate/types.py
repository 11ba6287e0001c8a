"""Core type definitions for the rulegate validation engine.

This module defines the fundamental types shared across the package:
- RuleContext: The value a predicate sees (field value plus the whole data)
- GateStatus: Three-valued outcome of a gate evaluation
- GateKind: Which consumer a gate evaluation belongs to
- RuleGroupSpec: The plain-dict form of a rule group

It also holds the reserved schema keys and message placeholders. These
constants are the engine's only configuration surface.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Sequence, Union

from typing_extensions import NotRequired, TypedDict


# Reserved schema keys
BEFORE_ALL_WHEN_KEY = "$beforeAllWhen"
REFINE_KEY = "$refine"

# Separator for cross-reference paths and collapsed error paths
PATH_SEPARATOR = "."

# Joins sub-rule messages in AGGREGATE.all / AGGREGATE.any
AGGREGATE_MESSAGE_DELIMITER = ", "

# Message template placeholders
FIELD_KEY_PLACEHOLDER = "{field_key}"
VALUE_PLACEHOLDER = "{value}"


@dataclass(frozen=True)
class RuleContext:
    """Arguments passed to every rule predicate.

    Attributes:
        current_value: Value of the field under test (None when absent)
        whole_data: The top-level data object of the validation call

    Examples:
        >>> ctx = RuleContext(current_value=16, whole_data={"age": 16})
        >>> ctx.current_value
        16
    """
    current_value: Any
    whole_data: Any = None


class GateStatus(str, Enum):
    """Outcome of evaluating a list of rules as a gate.

    ABSENT means no rules were given, so the caller's default applies.
    """
    ABSENT = "absent"
    PASS = "pass"
    FAIL = "fail"


class GateKind(str, Enum):
    """Consumers of the gate evaluator, used to label log records."""
    WHEN = "when"
    WHEN_NOT = "when_not"
    VALIDATE = "validate"
    BEFORE_ALL_WHEN = "before_all_when"


class RuleGroupSpec(TypedDict):
    """Dict form of a rule group as written in a plain schema.

    Both ``whenNot`` and ``when_not`` are accepted for the negative gate.
    """
    validate: NotRequired[Sequence[Any]]
    when: NotRequired[Sequence[Any]]
    whenNot: NotRequired[Sequence[Any]]
    when_not: NotRequired[Sequence[Any]]
    path: NotRequired[Union[str, List[str]]]


__all__ = [
    "BEFORE_ALL_WHEN_KEY",
    "REFINE_KEY",
    "PATH_SEPARATOR",
    "AGGREGATE_MESSAGE_DELIMITER",
    "FIELD_KEY_PLACEHOLDER",
    "VALUE_PLACEHOLDER",
    "RuleContext",
    "GateStatus",
    "GateKind",
    "RuleGroupSpec",
]
