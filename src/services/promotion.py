"""
Agent tier promotion.

An agent moves from L1 to L2 once their cumulative sales reach the
threshold. There is no way back: lowering the total later never demotes.
"""

from decimal import Decimal

from src.models.agent import AgentLevel

DEFAULT_PROMOTION_THRESHOLD = Decimal("500000")


def should_promote(
    level: AgentLevel,
    total_sales: Decimal,
    threshold: Decimal = DEFAULT_PROMOTION_THRESHOLD,
) -> bool:
    """True if an L1 agent has reached the threshold."""
    return level == AgentLevel.L1 and total_sales >= threshold


def evaluate_level(
    level: AgentLevel,
    total_sales: Decimal,
    threshold: Decimal = DEFAULT_PROMOTION_THRESHOLD,
) -> AgentLevel:
    """Level the agent should hold given their current total.

    Idempotent: an L2 agent stays L2 whatever the total.
    """
    if should_promote(level, total_sales, threshold):
        return AgentLevel.L2
    return level


def remaining_to_promotion(
    total_sales: Decimal,
    threshold: Decimal = DEFAULT_PROMOTION_THRESHOLD,
) -> Decimal:
    """Sales still needed to reach the threshold (never negative)."""
    return max(Decimal("0"), threshold - total_sales)
