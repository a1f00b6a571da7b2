"""
Commission split between an agent and the organization.

Rules:
- The two percentages must add up to exactly 100
- Amounts are Decimal, rounded half-up to the cent
- The agent share is rounded; the organization gets the remainder,
  so agent_amount + org_amount == amount with no rounding drift
- A zero (or negative) amount yields a zero split
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Union

from src.services.exceptions import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


class CommissionSplit(NamedTuple):
    agent_amount: Decimal
    org_amount: Decimal


def to_decimal(value: Number) -> Decimal:
    """Convert a JSON number to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value: Number) -> Decimal:
    """Round a value to the cent, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def validate_split(agent_pct: Number, org_pct: Number) -> None:
    """
    Check that a commission split is usable.

    Raises:
        ValidationError: if a percentage is outside 0-100, has more than
            two decimal places, or the two do not sum to exactly 100
    """
    agent_pct = to_decimal(agent_pct)
    org_pct = to_decimal(org_pct)

    for label, pct in (("Agent", agent_pct), ("Organization", org_pct)):
        if pct < 0 or pct > HUNDRED:
            raise ValidationError(
                f"{label} commission percentage must be between 0 and 100, got {pct}"
            )
        # Stored as NUMERIC(5, 2); finer values would be rounded off the split
        if pct != pct.quantize(CENT):
            raise ValidationError(
                f"{label} commission percentage allows at most two decimal places, got {pct}"
            )

    if agent_pct + org_pct != HUNDRED:
        raise ValidationError(
            "Agent and organization commission percentages must sum to 100 "
            f"(got {agent_pct} + {org_pct} = {agent_pct + org_pct})"
        )


def compute_commissions(amount: Number, agent_pct: Number, org_pct: Number) -> CommissionSplit:
    """Split a sale amount into agent and organization commissions.

    Callers validate the split beforehand; this function never raises for
    a valid split and a non-negative amount.

    Args:
        amount: Sale amount
        agent_pct: Agent percentage (0-100)
        org_pct: Organization percentage (0-100), agent_pct + org_pct == 100

    Returns:
        CommissionSplit with both amounts rounded to the cent
    """
    amount = to_money(amount)
    if amount <= 0:
        return CommissionSplit(ZERO, ZERO)

    agent_amount = to_money(amount * to_decimal(agent_pct) / HUNDRED)
    # The remainder keeps the pair reconciled with the amount; it is within
    # one cent of amount * org_pct / 100.
    org_amount = amount - agent_amount
    return CommissionSplit(agent_amount, org_amount)
