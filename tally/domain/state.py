"""Application state snapshot and savings goal validation."""

from dataclasses import dataclass, field
from typing import Any

from tally.domain.models import BASE_CURRENCY, DEFAULT_PERIOD, CurrencyCode
from tally.domain.transactions import Transaction, parse_amount


@dataclass(frozen=True)
class SavingsGoal:
    """Immutable savings goal. A target of 0 means no goal is set."""

    target_amount: float = 0.0
    period: str = DEFAULT_PERIOD

    @property
    def is_set(self) -> bool:
        return self.target_amount > 0


@dataclass(frozen=True)
class TrackerState:
    """Read-only snapshot of everything the views are derived from."""

    transactions: tuple[Transaction, ...] = ()
    savings_goal: SavingsGoal = field(default_factory=SavingsGoal)
    selected_currency: CurrencyCode = BASE_CURRENCY


def parse_goal_amount(raw: Any) -> tuple[float | None, str | None]:
    """Validate a savings goal amount entered by the user.

    Unlike transaction amounts, an invalid goal is rejected rather than
    coerced to zero.

    Args:
        raw: Number or numeric string.

    Returns:
        Tuple of (amount, error_message). Exactly one of them is None.
    """
    if isinstance(raw, str) and raw.strip() == "":
        return None, "Please enter a valid savings goal amount"

    amount = parse_amount(raw)
    if amount == 0 and not _is_zero(raw):
        return None, "Please enter a valid savings goal amount"
    if amount < 0:
        return None, "Please enter a valid savings goal amount"

    return float(amount), None


def _is_zero(raw: Any) -> bool:
    if isinstance(raw, bool):
        return False
    if isinstance(raw, (int, float)):
        return raw == 0
    if isinstance(raw, str):
        try:
            return float(raw.strip()) == 0
        except ValueError:
            return False
    return False
