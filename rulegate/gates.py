"""Gate evaluation shared by ``when``, ``when_not``, ``validate`` and pre-conditions.

A gate is a list of rules evaluated in order against one value. The first
rule that does not hold stops the evaluation and its message is returned.
When no rules are given the caller's default applies, and callers must be
able to tell that default apart from a real pass, so the outcome has three
states (see GateStatus).

How each consumer reads the outcome:

    ==========  ==============  ===============  ===================
    consumer    absent          pass             fail
    ==========  ==============  ===============  ===================
    when        default True    group applies    group skipped
    when_not    default False   group skipped    group applies
    validate    group passes    group passes     error recorded
    pre-cond.   (never absent)  scope continues  rest of scope skipped
    ==========  ==============  ===============  ===================
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from rulegate.rules import Rule
from rulegate.schema import RuleGroup
from rulegate.types import GateKind, GateStatus, RuleContext


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateResult:
    """Outcome of a gate evaluation.

    Attributes:
        status: ABSENT, PASS or FAIL
        message: Message template of the first failing rule (FAIL only)
        default: The caller's default (ABSENT only)
    """
    status: GateStatus
    message: Optional[str] = None
    default: Optional[bool] = None

    @classmethod
    def absent(cls, default: bool) -> "GateResult":
        return cls(status=GateStatus.ABSENT, default=default)

    @classmethod
    def passed(cls) -> "GateResult":
        return cls(status=GateStatus.PASS)

    @classmethod
    def failed(cls, message: str) -> "GateResult":
        return cls(status=GateStatus.FAIL, message=message)

    @property
    def is_fail(self) -> bool:
        return self.status == GateStatus.FAIL

    @property
    def is_true(self) -> bool:
        """True for a pass, or for an absent gate whose default is True."""
        if self.status == GateStatus.ABSENT:
            return bool(self.default)
        return self.status == GateStatus.PASS


def evaluate_gate(
    rules: Optional[Sequence[Rule]],
    current_value: Any,
    whole_data: Any,
    default_when_absent: bool = True,
    kind: GateKind = GateKind.VALIDATE,
) -> GateResult:
    """Evaluate ``rules`` in order, stopping at the first one that does not hold.

    Args:
        rules: Rules to evaluate, or None when the gate is not defined
        current_value: Value passed to each rule as ``current_value``
        whole_data: Top-level data passed to each rule as ``whole_data``
        default_when_absent: Default reported when ``rules`` is None
        kind: Which consumer is evaluating, for log records

    Returns:
        GateResult: absent, passed, or failed with the rule's message

    Examples:
        >>> never = Rule(lambda ctx: False, "{field_key} never holds")
        >>> evaluate_gate([never], 1, {}).message
        '{field_key} never holds'
        >>> evaluate_gate(None, 1, {}, default_when_absent=False).is_true
        False
    """
    if rules is None:
        return GateResult.absent(default_when_absent)

    ctx = RuleContext(current_value=current_value, whole_data=whole_data)
    for index, rule in enumerate(rules):
        if not rule.validate(ctx):
            logger.debug("%s gate failed at rule %d: %s", kind.value, index, rule.message)
            return GateResult.failed(rule.message)

    return GateResult.passed()


def admits(group: RuleGroup, current_value: Any, whole_data: Any) -> bool:
    """Decide whether a RuleGroup applies to the current data.

    The group applies unless its ``when`` gate fails or its ``when_not`` gate
    holds. A ``when_not`` gate whose rules do not hold lets the group apply.
    Both gates are always evaluated.
    """
    when = evaluate_gate(group.when, current_value, whole_data, True, GateKind.WHEN)
    when_not = evaluate_gate(group.when_not, current_value, whole_data, False, GateKind.WHEN_NOT)
    return not when.is_fail and not when_not.is_true


__all__ = [
    "GateResult",
    "evaluate_gate",
    "admits",
]
