"""Compiled schema nodes.

A plain schema is a dict mapping field names to either a list of rule groups
(a leaf field) or another dict (a nested object). ``Schema.from_dict`` turns
it into tagged nodes once, so the traversal never has to guess what a value
means:

- Leaf: ordered RuleGroup / PreCondition entries for one field
- Nested: a sub-schema validated against the field's value
- PreCondition: a ``$beforeAllWhen`` gate that can stop the rest of its scope

Keys whose value is neither a list nor a mapping carry metadata only and are
dropped.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from rulegate.errors import SchemaDefinitionError
from rulegate.rules import Rule
from rulegate.types import BEFORE_ALL_WHEN_KEY, PATH_SEPARATOR, RuleGroupSpec


logger = logging.getLogger(__name__)

Rules = Tuple[Rule, ...]


def _as_rules(key: str, value: Any) -> Optional[Rules]:
    """Normalize a rule list. A single Rule is accepted as a list of one."""
    if value is None:
        return None
    if isinstance(value, Rule):
        return (value,)
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise SchemaDefinitionError(key, f"expected a Rule or a list of Rules, got {type(value).__name__}")
    return tuple(value)


@dataclass(frozen=True)
class RuleGroup:
    """One gated unit of validation for a field.

    Attributes:
        validate: Rules that must all hold; None means the group always passes
        when: Rules that must all hold for the group to apply
        when_not: Rules that, when all hold, make the group not apply
        path: Error map key to report under instead of the field name
    """
    validate: Optional[Rules] = None
    when: Optional[Rules] = None
    when_not: Optional[Rules] = None
    path: Optional[str] = None

    @classmethod
    def from_dict(cls, key: str, data: RuleGroupSpec) -> "RuleGroup":
        """Create a RuleGroup from its dict form.

        A list ``path`` collapses to a single key joined with ``PATH_SEPARATOR``;
        it does not address a nested location in the error map.
        """
        when_not = data.get("whenNot", data.get("when_not"))
        path = data.get("path")
        if isinstance(path, (list, tuple)):
            path = PATH_SEPARATOR.join(str(segment) for segment in path)
        return cls(
            validate=_as_rules(key, data.get("validate")),
            when=_as_rules(key, data.get("when")),
            when_not=_as_rules(key, when_not),
            path=path,
        )


@dataclass(frozen=True)
class PreCondition:
    """A ``$beforeAllWhen`` gate. When it fails, the rest of its scope is skipped."""
    rules: Rules


@dataclass(frozen=True)
class Leaf:
    """A field validated by an ordered list of rule groups."""
    entries: Tuple[Union[RuleGroup, PreCondition], ...]

    @classmethod
    def from_list(cls, key: str, items: Iterable[Any]) -> "Leaf":
        entries = []
        for item in items:
            if isinstance(item, (RuleGroup, PreCondition)):
                entries.append(item)
            elif isinstance(item, Mapping) and BEFORE_ALL_WHEN_KEY in item:
                entries.append(PreCondition(_as_rules(key, item[BEFORE_ALL_WHEN_KEY]) or ()))
            elif isinstance(item, Mapping):
                entries.append(RuleGroup.from_dict(key, item))
            else:
                raise SchemaDefinitionError(key, f"rule group must be a mapping, got {type(item).__name__}")
        return cls(entries=tuple(entries))


@dataclass(frozen=True)
class Nested:
    """A field holding an object validated by its own schema."""
    schema: "Schema"


Node = Union[Leaf, Nested, PreCondition]


@dataclass(frozen=True)
class Schema:
    """An ordered sequence of ``(key, node)`` entries.

    Entry order is the evaluation order. A PreCondition entry (stored under
    ``BEFORE_ALL_WHEN_KEY``) only guards the entries that follow it.

    Examples:
        >>> schema = Schema.from_dict({"age": [{"validate": []}], "meta": "ignored"})
        >>> [key for key, _ in schema.entries]
        ['age']
    """
    entries: Tuple[Tuple[str, Node], ...]

    @classmethod
    def from_dict(cls, data: Mapping) -> "Schema":
        entries = []
        for key, value in data.items():
            if key == BEFORE_ALL_WHEN_KEY:
                node = value if isinstance(value, PreCondition) else PreCondition(_as_rules(key, value) or ())
            elif isinstance(value, (Leaf, Nested)):
                node = value
            elif isinstance(value, Schema):
                node = Nested(value)
            elif isinstance(value, (list, tuple)):
                node = Leaf.from_list(key, value)
            elif isinstance(value, Mapping):
                node = Nested(cls.from_dict(value))
            else:
                logger.debug("Ignoring metadata key %r in schema", key)
                continue
            entries.append((key, node))
        return cls(entries=tuple(entries))


def compile_schema(schema: Union[Schema, Mapping]) -> Schema:
    """Return ``schema`` as a compiled Schema."""
    if isinstance(schema, Schema):
        return schema
    if isinstance(schema, Mapping):
        return Schema.from_dict(schema)
    raise SchemaDefinitionError("<root>", f"expected a mapping or Schema, got {type(schema).__name__}")


__all__ = [
    "RuleGroup",
    "PreCondition",
    "Leaf",
    "Nested",
    "Schema",
    "compile_schema",
]
