"""Date utilities for tally.

Functions for normalizing user-entered dates.
"""

from datetime import date

import pandas as pd


def normalize_date(raw_date: str) -> str:
    """Normalize a user-entered date to ISO format (YYYY-MM-DD).

    Uses pandas.to_datetime so ISO, European and other common formats are
    accepted. Ambiguous dates are read day first.

    Args:
        raw_date: Raw date string.

    Returns:
        Normalized date in YYYY-MM-DD format.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    try:
        parsed_date = pd.to_datetime(raw_date, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e

    if pd.isna(parsed_date):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed_date.strftime("%Y-%m-%d")


def today() -> str:
    """Today's date in YYYY-MM-DD format."""
    return date.today().isoformat()

