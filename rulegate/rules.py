"""Rules: predicates paired with message templates.

A Rule is an immutable value. Rules are usually built once, when a schema is
defined, and then reused across many validations and threads, so deriving a
variant (``with_message``, ``negated``) always returns a new Rule.

Usage:
    >>> adult = Rule(lambda ctx: ctx.current_value >= 18, "{field_key} must be an adult")
    >>> adult.validate(RuleContext(current_value=21))
    True
    >>> adult.negated().validate(RuleContext(current_value=21))
    False
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable

from rulegate.errors import PathResolutionError
from rulegate.types import AGGREGATE_MESSAGE_DELIMITER, PATH_SEPARATOR, RuleContext


Predicate = Callable[[RuleContext], bool]


@dataclass(frozen=True)
class Rule:
    """A predicate over a RuleContext with a message template.

    The message may contain ``{field_key}`` and ``{value}`` placeholders,
    which the traversal engine fills in when the rule fails.

    Attributes:
        predicate: Callable taking a RuleContext and returning a bool
        message: Message template reported when the predicate is false
    """
    predicate: Predicate
    message: str

    def validate(self, ctx: RuleContext) -> bool:
        """Run the predicate. Exceptions raised by it propagate."""
        return bool(self.predicate(ctx))

    def with_message(self, message: str) -> "Rule":
        """Return a copy of this rule reporting ``message`` instead."""
        return replace(self, message=message)

    def negated(self) -> "Rule":
        """Return a rule with the opposite outcome.

        The message is kept as is, so a negated rule reports its original
        wording. Use ``with_message`` to reword it.
        """
        predicate = self.predicate
        return replace(self, predicate=lambda ctx: not predicate(ctx))


def custom(predicate: Predicate, message: str) -> Rule:
    """Build a rule from an arbitrary predicate."""
    return Rule(predicate=predicate, message=message)


def resolve_path(data: Any, path: str, strict: bool = True) -> Any:
    """Look up a dotted path in nested mappings and sequences.

    Missing keys, out-of-range indexes and ``None`` intermediates resolve to
    ``None``. Walking into a scalar raises PathResolutionError when
    ``strict``, and resolves to ``None`` otherwise.

    Examples:
        >>> resolve_path({"assets": {"cars": ["ford"]}}, "assets.cars.0")
        'ford'
        >>> resolve_path({"assets": {}}, "assets.cars.0") is None
        True
    """
    value = data
    for segment in path.split(PATH_SEPARATOR):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(segment)
        elif isinstance(value, (list, tuple)) and segment.isdigit():
            index = int(segment)
            value = value[index] if index < len(value) else None
        elif strict:
            raise PathResolutionError(path, segment, value)
        else:
            return None
    return value


def all_of(rules: Iterable[Rule]) -> Rule:
    """Combine rules into one that holds when every rule holds.

    The message lists every sub-rule message, whichever one failed.
    """
    rules = tuple(rules)
    return Rule(
        predicate=lambda ctx: all(rule.validate(ctx) for rule in rules),
        message=AGGREGATE_MESSAGE_DELIMITER.join(rule.message for rule in rules),
    )


def any_of(rules: Iterable[Rule]) -> Rule:
    """Combine rules into one that holds when at least one rule holds."""
    rules = tuple(rules)
    return Rule(
        predicate=lambda ctx: any(rule.validate(ctx) for rule in rules),
        message=AGGREGATE_MESSAGE_DELIMITER.join(rule.message for rule in rules),
    )


def other(path: str, *rules: Rule) -> Rule:
    """Evaluate rules against another field of the whole data.

    The returned rule ignores the value of the field it is attached to and
    checks the value found at ``path`` in the top-level data instead. Several
    rules are folded with ``all_of``. The message is the inner message
    unchanged, so ``{field_key}`` still names the field the rule is attached
    to when it is rendered.

    Examples:
        >>> adult = Rule(lambda ctx: ctx.current_value >= 18, "{field_key} must be an adult")
        >>> rule = other("owner.age", adult)
        >>> rule.validate(RuleContext(current_value="x", whole_data={"owner": {"age": 30}}))
        True
    """
    if not rules:
        raise ValueError(f"other('{path}') requires at least one rule")
    inner = rules[0] if len(rules) == 1 else all_of(rules)

    def predicate(ctx: RuleContext) -> bool:
        value = resolve_path(ctx.whole_data, path)
        return inner.validate(RuleContext(current_value=value, whole_data=ctx.whole_data))

    return Rule(predicate=predicate, message=inner.message)


__all__ = [
    "Predicate",
    "Rule",
    "custom",
    "resolve_path",
    "all_of",
    "any_of",
    "other",
]
