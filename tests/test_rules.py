"""Unit tests for Rule values, cross-references and combinators.

Tests cover:
- Rule derivation (with_message, negated) without mutating the source
- Dotted path resolution
- Cross-reference rules reading other fields of the whole data
- AGGREGATE all/any semantics and messages
"""

import pytest

from rulegate.errors import PathResolutionError
from rulegate.rules import Rule, all_of, any_of, custom, other, resolve_path
from rulegate.types import RuleContext


def ctx(value, whole=None):
    return RuleContext(current_value=value, whole_data=whole)


is_even = Rule(lambda c: c.current_value % 2 == 0, "{field_key} must be even")
is_small = Rule(lambda c: c.current_value < 10, "{field_key} must be small")


class TestRuleDerivation:
    """Test that derived rules leave the source rule untouched."""

    def test_validate_runs_predicate(self):
        """Should return the predicate's outcome as a bool."""
        assert is_even.validate(ctx(4)) is True
        assert is_even.validate(ctx(3)) is False

    def test_with_message_returns_new_rule(self):
        """Should keep the predicate and replace only the message."""
        derived = is_even.with_message("pick an even number")

        assert derived is not is_even
        assert derived.message == "pick an even number"
        assert derived.validate(ctx(2)) is True
        assert is_even.message == "{field_key} must be even"

    def test_negated_inverts_outcome(self):
        """Should invert pass/fail for every input."""
        negated = is_even.negated()

        for value in range(-3, 6):
            assert negated.validate(ctx(value)) is (not is_even.validate(ctx(value)))

    def test_negated_keeps_message(self):
        """Should not reword the message of a negated rule."""
        assert is_even.negated().message == is_even.message

    def test_double_negation(self):
        """Should restore the original outcome when negated twice."""
        twice = is_even.negated().negated()
        assert twice.validate(ctx(4)) is True
        assert twice.validate(ctx(5)) is False

    def test_rule_is_immutable(self):
        """Should refuse attribute assignment on a Rule."""
        with pytest.raises(AttributeError):
            is_even.message = "changed"

    def test_predicate_errors_propagate(self):
        """Should not swallow exceptions raised by a predicate."""
        with pytest.raises(TypeError):
            is_even.validate(ctx("text"))

    def test_custom_builds_rule(self):
        """Should wrap an arbitrary predicate."""
        rule = custom(lambda c: c.current_value == "ok", "{field_key} must be ok")
        assert rule.validate(ctx("ok")) is True
        assert rule.message == "{field_key} must be ok"


class TestResolvePath:
    """Test dotted path lookups."""

    def test_top_level_key(self):
        assert resolve_path({"age": 16}, "age") == 16

    def test_nested_key(self):
        assert resolve_path({"assets": {"min": 3}}, "assets.min") == 3

    def test_list_index(self):
        assert resolve_path({"cars": ["ford", "honda"]}, "cars.1") == "honda"

    def test_missing_key_is_none(self):
        """Should resolve missing keys to None."""
        assert resolve_path({"assets": {}}, "assets.max") is None

    def test_missing_intermediate_is_none(self):
        """Should resolve through a missing intermediate object to None."""
        assert resolve_path({}, "assets.max") is None

    def test_index_out_of_range_is_none(self):
        assert resolve_path({"cars": []}, "cars.0") is None

    def test_scalar_intermediate_raises(self):
        """Should raise when a segment walks into a scalar."""
        with pytest.raises(PathResolutionError) as exc_info:
            resolve_path({"age": 16}, "age.years")

        assert exc_info.value.path == "age.years"
        assert exc_info.value.segment == "years"

    def test_scalar_intermediate_lenient(self):
        """Should resolve to None for a scalar intermediate when not strict."""
        assert resolve_path({"age": 16}, "age.years", strict=False) is None


class TestCrossReference:
    """Test rules that read another field of the whole data."""

    def test_reads_referenced_field(self):
        """Should ignore current_value and check the referenced value."""
        rule = other("limits.max", is_small)

        assert rule.validate(ctx(999, {"limits": {"max": 5}})) is True
        assert rule.validate(ctx(1, {"limits": {"max": 50}})) is False

    def test_keeps_inner_message(self):
        """Should report the inner rule's message unchanged."""
        assert other("age", is_small).message == "{field_key} must be small"

    def test_missing_target_reaches_predicate_as_none(self):
        """Should pass None to the inner rule instead of failing implicitly."""
        seen = []
        probe = Rule(lambda c: seen.append(c.current_value) or True, "probe")

        assert other("assets.max", probe).validate(ctx(1, {})) is True
        assert seen == [None]

    def test_inner_rule_receives_whole_data(self):
        """Should hand the whole data object to the inner rule."""
        whole = {"a": 1, "b": 1}
        same_as_b = Rule(lambda c: c.current_value == c.whole_data["b"], "{field_key} must match b")

        assert other("a", same_as_b).validate(ctx(None, whole)) is True

    def test_several_rules_must_all_hold(self):
        """Should fold several inner rules so that all must hold."""
        rule = other("n", is_even, is_small)

        assert rule.validate(ctx(None, {"n": 4})) is True
        assert rule.validate(ctx(None, {"n": 12})) is False
        assert rule.validate(ctx(None, {"n": 3})) is False
        assert rule.message == "{field_key} must be even, {field_key} must be small"

    def test_requires_a_rule(self):
        with pytest.raises(ValueError):
            other("age")


class TestAggregate:
    """Test AGGREGATE all/any combinators."""

    def test_all_fails_if_any_fails(self):
        rule = all_of([is_even, is_small])

        assert rule.validate(ctx(4)) is True
        assert rule.validate(ctx(12)) is False
        assert rule.validate(ctx(3)) is False
        assert rule.validate(ctx(13)) is False

    def test_any_fails_only_if_all_fail(self):
        rule = any_of([is_even, is_small])

        assert rule.validate(ctx(4)) is True
        assert rule.validate(ctx(12)) is True
        assert rule.validate(ctx(3)) is True
        assert rule.validate(ctx(13)) is False

    def test_messages_list_every_sub_rule(self):
        """Should join all sub-rule messages regardless of which one failed."""
        expected = "{field_key} must be even, {field_key} must be small"

        assert all_of([is_even, is_small]).message == expected
        assert any_of([is_even, is_small]).message == expected

    def test_all_short_circuits(self):
        """Should not evaluate later sub-rules once one fails."""
        calls = []
        never = Rule(lambda c: calls.append("never") or False, "never")
        tracked = Rule(lambda c: calls.append("tracked") or True, "tracked")

        assert all_of([never, tracked]).validate(ctx(1)) is False
        assert calls == ["never"]

    def test_sub_rules_share_context(self):
        """Should hand every sub-rule the same context."""
        seen = []
        probe = Rule(lambda c: seen.append(c) or True, "probe")
        context = ctx(7, {"x": 1})

        all_of([probe, probe]).validate(context)
        assert seen == [context, context]

    def test_accepts_generators(self):
        """Should materialize iterables so the rule can be reused."""
        rule = all_of(r for r in [is_even, is_small])

        assert rule.validate(ctx(2)) is True
        assert rule.validate(ctx(2)) is True
