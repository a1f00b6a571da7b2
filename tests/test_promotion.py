"""
Tests for the L1 -> L2 promotion rule.
"""

from decimal import Decimal

from src.models import AgentLevel
from src.services.promotion import (
    DEFAULT_PROMOTION_THRESHOLD,
    evaluate_level,
    remaining_to_promotion,
    should_promote,
)


class TestShouldPromote:
    def test_default_threshold(self):
        assert DEFAULT_PROMOTION_THRESHOLD == Decimal("500000")

    def test_below_threshold(self):
        assert not should_promote(AgentLevel.L1, Decimal("499999.99"))

    def test_exactly_at_threshold(self):
        assert should_promote(AgentLevel.L1, Decimal("500000"))

    def test_above_threshold(self):
        assert should_promote(AgentLevel.L1, Decimal("750000"))

    def test_l2_is_never_promoted_again(self):
        assert not should_promote(AgentLevel.L2, Decimal("1000000"))

    def test_custom_threshold(self):
        assert should_promote(AgentLevel.L1, Decimal("1000"), threshold=Decimal("1000"))


class TestEvaluateLevel:
    def test_promotes_l1(self):
        assert evaluate_level(AgentLevel.L1, Decimal("500000")) == AgentLevel.L2

    def test_keeps_l1_below_threshold(self):
        assert evaluate_level(AgentLevel.L1, Decimal("10")) == AgentLevel.L1

    def test_never_demotes(self):
        assert evaluate_level(AgentLevel.L2, Decimal("0")) == AgentLevel.L2

    def test_idempotent(self):
        level = evaluate_level(AgentLevel.L1, Decimal("600000"))
        assert evaluate_level(level, Decimal("600000")) == level


class TestRemainingToPromotion:
    def test_remaining(self):
        assert remaining_to_promotion(Decimal("120000")) == Decimal("380000")

    def test_never_negative(self):
        assert remaining_to_promotion(Decimal("900000")) == Decimal("0")
