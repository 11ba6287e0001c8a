"""Built-in rule catalog.

Rules are grouped by the kind of value they check. Plain attributes are
ready-made Rules; methods are factories taking the rule's parameters.

Bound parameters are written into the message when the rule is built, while
``{field_key}`` and ``{value}`` are left for the engine to fill in.

Usage:
    >>> from rulegate.catalog import Validate
    >>> schema = {
    ...     "age": [{"validate": [Validate.NUMBER.is_required, Validate.NUMBER.min_value(18)]}],
    ...     "idNumber": [
    ...         {
    ...             "validate": [Validate.STRING.is_pattern(r"^[0-9]{10}$")],
    ...             "when": [Validate.OTHER("age", Validate.NUMBER.min_value(18))],
    ...         },
    ...     ],
    ... }
"""

import numbers
import operator
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Callable, Iterable, Union

from dateutil import parser as date_parser
from dateutil import tz
from jsonschema import Draft7Validator

from rulegate.rules import Rule, all_of, any_of, custom, other


ALPHA_NUMERIC_RE = re.compile(r"[a-zA-Z0-9]*")
NUMERIC_RE = re.compile(r"[0-9]*")
ALPHA_RE = re.compile(r"[a-zA-Z]*")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
URL_RE = re.compile(r"(http|https)://[^ \"]+")

DateBound = Union[date, datetime, str]


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_present(value: Any) -> bool:
    return value is not None


def _fullmatch(regex: re.Pattern, value: Any) -> bool:
    return isinstance(value, str) and regex.fullmatch(value) is not None


def _compare_numbers(op: Callable[[Any, Any], bool], bound: Any) -> Callable[[Any], bool]:
    # Non-numeric values and bounds never satisfy an ordering check
    return lambda value: _is_number(value) and _is_number(bound) and op(value, bound)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _all_unique(items: Iterable[Any]) -> bool:
    seen = []
    for item in items:
        if item in seen:
            return False
        seen.append(item)
    return True


def _to_date(bound: DateBound) -> Union[date, datetime]:
    """Parse an ISO-8601 bound. Date-only strings give a date, so they compare with date values."""
    if not isinstance(bound, str):
        return bound
    try:
        return date_parser.isoparser().parse_isodate(bound)
    except ValueError:
        # Has a time part
        return date_parser.isoparse(bound)


def _strict_end_anchors(source: str) -> str:
    """Rewrite ``$`` as ``\\Z`` so it cannot match before a trailing newline."""
    out = []
    escaped = in_class = False
    for index, char in enumerate(source):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif in_class:
            # A "]" right after "[" or "[^" is a literal
            in_class = char != "]" or source[index - 1] == "[" or source[index - 2:index] == "[^"
        elif char == "[":
            in_class = True
        elif char == "$":
            out.append(r"\Z")
            continue
        out.append(char)
    return "".join(out)


def _loosely_equal(value: Any, expected: Any) -> bool:
    # Strings and numbers compare by numeric value, nothing else is coerced
    if value == expected:
        return True
    if _is_number(value) and isinstance(expected, str):
        value, expected = expected, value
    if isinstance(value, str) and _is_number(expected):
        try:
            return float(value.strip() or 0) == expected
        except ValueError:
            return False
    return False


def _strictly_equal(value: Any, expected: Any) -> bool:
    if _is_number(value) and _is_number(expected):
        return value == expected
    return type(value) is type(expected) and value == expected


def _compare_dates(op: Callable[[Any, Any], bool], value: Any, bound: Any) -> bool:
    if not isinstance(value, date):
        return False
    try:
        return op(value, bound)
    except TypeError:
        # date vs datetime, or naive vs aware
        return False


def _now_for(value: Any) -> Union[date, datetime]:
    if isinstance(value, datetime):
        return datetime.now(tz.tzutc()) if value.tzinfo is not None else datetime.now()
    return date.today()


class STRING:
    """Checks for string values."""
    type = Rule(lambda ctx: isinstance(ctx.current_value, str), "{field_key} must be a string")
    is_alpha_numeric = Rule(
        lambda ctx: _fullmatch(ALPHA_NUMERIC_RE, ctx.current_value),
        "{field_key} must be alphanumeric",
    )
    is_numeric = Rule(lambda ctx: _fullmatch(NUMERIC_RE, ctx.current_value), "{field_key} must be numeric")
    is_alpha = Rule(lambda ctx: _fullmatch(ALPHA_RE, ctx.current_value), "{field_key} must be alphabetic")
    is_required = Rule(
        lambda ctx: ctx.current_value is not None and ctx.current_value != "",
        "{field_key} is required",
    )
    is_empty = Rule(lambda ctx: ctx.current_value == "", "{field_key} must be empty")
    is_email = Rule(lambda ctx: _fullmatch(EMAIL_RE, ctx.current_value), "{field_key} must be an email")
    is_url = Rule(lambda ctx: _fullmatch(URL_RE, ctx.current_value), "{field_key} must be a URL")

    @staticmethod
    def is_contain(substring: str) -> Rule:
        return Rule(
            lambda ctx: isinstance(ctx.current_value, str) and substring in ctx.current_value,
            "{field_key} must contain {value}",
        )

    @staticmethod
    def min_length(length: int) -> Rule:
        return Rule(
            lambda ctx: isinstance(ctx.current_value, str) and len(ctx.current_value) >= length,
            "{field_key} must be at least {value} characters",
        )

    @staticmethod
    def max_length(length: int) -> Rule:
        return Rule(
            lambda ctx: isinstance(ctx.current_value, str) and len(ctx.current_value) <= length,
            "{field_key} must be at most {value} characters",
        )

    @staticmethod
    def is_pattern(pattern: Union[str, re.Pattern]) -> Rule:
        """Match anywhere in the string; anchor the pattern to match all of it.

        Unless the pattern is MULTILINE, ``$`` only matches at the very end,
        so ``^[0-9]{3}$`` rejects ``"123\\n"``.
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        if isinstance(regex.pattern, str) and not regex.flags & re.MULTILINE:
            regex = re.compile(_strict_end_anchors(regex.pattern), regex.flags)
        return Rule(
            lambda ctx: isinstance(ctx.current_value, str) and regex.search(ctx.current_value) is not None,
            "{field_key} must match the pattern",
        )


class NUMBER:
    """Checks for numeric values. Booleans are not numbers here."""
    type = Rule(lambda ctx: _is_number(ctx.current_value), "{field_key} must be a number")
    is_required = Rule(lambda ctx: _is_present(ctx.current_value), "{field_key} is required")
    is_integer = Rule(
        lambda ctx: _is_number(ctx.current_value) and (
            isinstance(ctx.current_value, numbers.Integral)
            or (isinstance(ctx.current_value, float) and ctx.current_value.is_integer())
        ),
        "{field_key} must be an integer",
    )
    is_positive = Rule(lambda ctx: _is_number(ctx.current_value) and ctx.current_value > 0, "{field_key} must be positive")
    is_negative = Rule(lambda ctx: _is_number(ctx.current_value) and ctx.current_value < 0, "{field_key} must be negative")

    @staticmethod
    def min_value(bound: float) -> Rule:
        check = _compare_numbers(operator.ge, bound)
        return Rule(lambda ctx: check(ctx.current_value), f"{{field_key}} must be at least {bound}, but got {{value}}")

    @staticmethod
    def max_value(bound: float) -> Rule:
        check = _compare_numbers(operator.le, bound)
        return Rule(lambda ctx: check(ctx.current_value), f"{{field_key}} must be at most {bound}, but got {{value}}")

    @staticmethod
    def between(low: float, high: float) -> Rule:
        above = _compare_numbers(operator.ge, low)
        below = _compare_numbers(operator.le, high)
        return Rule(
            lambda ctx: above(ctx.current_value) and below(ctx.current_value),
            f"{{field_key}} must be between {low} and {high}, but got {{value}}",
        )

    @staticmethod
    def lt(bound: float) -> Rule:
        check = _compare_numbers(operator.lt, bound)
        return Rule(lambda ctx: check(ctx.current_value), f"{{field_key}} must be less than {bound}")

    @staticmethod
    def gt(bound: float) -> Rule:
        check = _compare_numbers(operator.gt, bound)
        return Rule(lambda ctx: check(ctx.current_value), f"{{field_key}} must be greater than {bound}")

    @staticmethod
    def lte(bound: float) -> Rule:
        check = _compare_numbers(operator.le, bound)
        return Rule(lambda ctx: check(ctx.current_value), f"{{field_key}} must be less than or equal to {bound}")

    @staticmethod
    def gte(bound: float) -> Rule:
        check = _compare_numbers(operator.ge, bound)
        return Rule(lambda ctx: check(ctx.current_value), f"{{field_key}} must be greater than or equal to {bound}")


class OBJECT:
    """Checks for mapping values."""
    type = Rule(lambda ctx: isinstance(ctx.current_value, Mapping), "{field_key} must be an object")
    is_required = Rule(lambda ctx: _is_present(ctx.current_value), "{field_key} is required")
    is_empty = Rule(
        lambda ctx: isinstance(ctx.current_value, Mapping) and len(ctx.current_value) == 0,
        "{field_key} must be empty",
    )

    @staticmethod
    def matches_schema(json_schema: Mapping) -> Rule:
        """Check the value against a JSON Schema (Draft 7).

        Raises:
            jsonschema.SchemaError: If the provided schema is invalid
        """
        Draft7Validator.check_schema(json_schema)
        validator = Draft7Validator(json_schema)
        return Rule(
            lambda ctx: validator.is_valid(ctx.current_value),
            "{field_key} must match the expected structure",
        )


class ARRAY:
    """Checks for list and tuple values."""
    type = Rule(lambda ctx: _is_sequence(ctx.current_value), "{field_key} must be an array")
    is_required = Rule(lambda ctx: _is_present(ctx.current_value), "{field_key} is required")
    is_empty = Rule(
        lambda ctx: _is_sequence(ctx.current_value) and len(ctx.current_value) == 0,
        "{field_key} must be empty",
    )
    is_unique = Rule(
        lambda ctx: _is_sequence(ctx.current_value) and _all_unique(ctx.current_value),
        "{field_key} must have unique items",
    )

    @staticmethod
    def min_length(length: int) -> Rule:
        return Rule(
            lambda ctx: _is_sequence(ctx.current_value) and len(ctx.current_value) >= length,
            "{field_key} must have at least {value} items",
        )

    @staticmethod
    def max_length(length: int) -> Rule:
        return Rule(
            lambda ctx: _is_sequence(ctx.current_value) and len(ctx.current_value) <= length,
            "{field_key} must have at most {value} items",
        )

    @staticmethod
    def is_contain(item: Any) -> Rule:
        return Rule(
            lambda ctx: _is_sequence(ctx.current_value) and item in ctx.current_value,
            "{field_key} must contain {value}",
        )


class ENUM:
    @staticmethod
    def one_of(values: Iterable[Any]) -> Rule:
        """Allow only ``values``. For a list, every item must be allowed."""
        allowed = tuple(values)

        def predicate(ctx):
            if _is_sequence(ctx.current_value):
                return all(item in allowed for item in ctx.current_value)
            return ctx.current_value in allowed

        return Rule(predicate, f"{{field_key}} must be one of {', '.join(str(v) for v in allowed)}")


class BOOLEAN:
    type = Rule(lambda ctx: isinstance(ctx.current_value, bool), "{field_key} must be a boolean")
    is_required = Rule(lambda ctx: _is_present(ctx.current_value), "{field_key} is required")
    is_true = Rule(lambda ctx: ctx.current_value is True, "{field_key} must be true")
    is_false = Rule(lambda ctx: ctx.current_value is False, "{field_key} must be false")
    is_truthy = Rule(lambda ctx: bool(ctx.current_value), "{field_key} must be truthy")
    is_falsy = Rule(lambda ctx: not ctx.current_value, "{field_key} must be falsy")

    @staticmethod
    def is_not(unwanted: Any) -> Rule:
        return Rule(lambda ctx: ctx.current_value != unwanted, "{field_key} must not be {value}")


class DATE:
    """Checks for date and datetime values.

    Bounds may be given as ISO-8601 strings. Values of a different kind than
    the bound (date vs datetime, naive vs aware) never satisfy the check.
    """
    type = Rule(lambda ctx: isinstance(ctx.current_value, date), "{field_key} must be a date")
    is_required = Rule(lambda ctx: _is_present(ctx.current_value), "{field_key} is required")
    is_past = Rule(
        lambda ctx: _compare_dates(operator.lt, ctx.current_value, _now_for(ctx.current_value)),
        "{field_key} must be in the past",
    )
    is_future = Rule(
        lambda ctx: _compare_dates(operator.gt, ctx.current_value, _now_for(ctx.current_value)),
        "{field_key} must be in the future",
    )

    @staticmethod
    def is_before(bound: DateBound) -> Rule:
        limit = _to_date(bound)
        return Rule(lambda ctx: _compare_dates(operator.lt, ctx.current_value, limit), "{field_key} must be before {value}")

    @staticmethod
    def is_after(bound: DateBound) -> Rule:
        limit = _to_date(bound)
        return Rule(lambda ctx: _compare_dates(operator.gt, ctx.current_value, limit), "{field_key} must be after {value}")

    @staticmethod
    def is_between(start: DateBound, end: DateBound) -> Rule:
        low, high = _to_date(start), _to_date(end)
        return Rule(
            lambda ctx: (
                _compare_dates(operator.gt, ctx.current_value, low)
                and _compare_dates(operator.lt, ctx.current_value, high)
            ),
            "{field_key} must be between {value} and {value}",
        )


class COMMON:
    is_empty = Rule(lambda ctx: ctx.current_value in ("", None), "{field_key} must be empty")
    is_null = Rule(lambda ctx: ctx.current_value is None, "{field_key} must be null")

    @staticmethod
    def strict_equal(expected: Any) -> Rule:
        return Rule(
            lambda ctx: _strictly_equal(ctx.current_value, expected),
            f"{{field_key}} must be equal to {expected}",
        )

    @staticmethod
    def coerce_equal(expected: Any) -> Rule:
        return Rule(
            lambda ctx: _loosely_equal(ctx.current_value, expected),
            f"{{field_key}} must be equal to {expected}",
        )


class AGGREGATE:
    all = staticmethod(all_of)
    any = staticmethod(any_of)


class Validate:
    """Single entry point to the whole catalog."""
    STRING = STRING
    NUMBER = NUMBER
    OBJECT = OBJECT
    ARRAY = ARRAY
    ENUM = ENUM
    BOOLEAN = BOOLEAN
    DATE = DATE
    COMMON = COMMON
    AGGREGATE = AGGREGATE
    CUSTOM = staticmethod(custom)
    OTHER = staticmethod(other)


__all__ = [
    "STRING",
    "NUMBER",
    "OBJECT",
    "ARRAY",
    "ENUM",
    "BOOLEAN",
    "DATE",
    "COMMON",
    "AGGREGATE",
    "Validate",
]
