"""Pure functions for currency conversion and display formatting.

Rates are expressed relative to the base currency (USD), so a rate table
always maps USD to 1.
"""

import math
import re
from typing import Any

from tally.domain.models import BASE_CURRENCY

RateTable = dict[str, float]

FALLBACK_RATES: RateTable = {
    "USD": 1.0,
    "EUR": 0.85,
    "GBP": 0.73,
    "JPY": 110.0,
    "RWF": 1100.0,
}

# (prefix, fraction digits) as rendered by an en-US currency formatter
CURRENCY_FORMATS: dict[str, tuple[str, int]] = {
    "USD": ("$", 2),
    "EUR": ("€", 2),
    "GBP": ("£", 2),
    "JPY": ("¥", 0),
    "CNY": ("CN¥", 2),
    "INR": ("₹", 2),
    "CAD": ("CA$", 2),
    "AUD": ("A$", 2),
    "NZD": ("NZ$", 2),
    "MXN": ("MX$", 2),
    "BRL": ("R$", 2),
    "KRW": ("₩", 0),
    "ILS": ("₪", 2),
    "VND": ("₫", 0),
    "RWF": ("RWF ", 0),
    "UGX": ("UGX ", 0),
    "CLP": ("CLP ", 0),
    "ISK": ("ISK ", 0),
}

_CURRENCY_CODE = re.compile(r"^[A-Za-z]{3}$")


def fallback_rates() -> RateTable:
    """Return a fresh copy of the static fallback table."""
    return dict(FALLBACK_RATES)


def _as_finite(amount: Any) -> float | None:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return None
    if not math.isfinite(amount):
        return None
    return float(amount)


def convert(amount: Any, from_currency: str, to_currency: str, rates: RateTable) -> float:
    """Convert an amount between two currencies via the base currency.

    Falls back to returning the amount unchanged when either code is missing
    from the table: no conversion is safer than a wrong one.

    Args:
        amount: Amount in from_currency.
        from_currency: Source currency code.
        to_currency: Target currency code.
        rates: Rate table relative to USD.

    Returns:
        Converted amount, or 0 if amount is not a finite number.
    """
    value = _as_finite(amount)
    if value is None:
        return 0.0

    if from_currency == to_currency:
        return value

    if not rates.get(from_currency) or not rates.get(to_currency):
        return value

    usd_amount = value if from_currency == BASE_CURRENCY else value / rates[from_currency]
    return usd_amount if to_currency == BASE_CURRENCY else usd_amount * rates[to_currency]


def format_currency(amount: Any, currency: str) -> str:
    """Format an amount for display (e.g., "$1,234.56", "-€8.50", "¥1,235").

    Args:
        amount: Amount to format. Non-finite input is treated as 0.
        currency: Currency code.

    Returns:
        Formatted string. Codes that cannot be rendered fall back to
        "<CODE> <amount to 2 decimals>".
    """
    value = _as_finite(amount)
    if value is None:
        value = 0.0

    if not isinstance(currency, str) or not _CURRENCY_CODE.match(currency):
        return f"{currency} {value:.2f}"

    code = currency.upper()
    prefix, digits = CURRENCY_FORMATS.get(code, (f"{code} ", 2))

    formatted = f"{prefix}{abs(value):,.{digits}f}"
    # -0.00 should not carry a sign
    if value < 0 and round(abs(value), digits) != 0:
        return f"-{formatted}"
    return formatted
