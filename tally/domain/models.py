"""Domain type definitions for tally.

These NewTypes provide semantic clarity and help with type checking:
- Amount: Signed amount in base currency units (positive income, negative expense)
- Month: Month in YYYY-MM format
- CategoryName: Name of a spending category
- Description: Transaction description text
- CurrencyCode: ISO 4217 style currency code (e.g., "USD")
"""

from typing import NewType

# Amounts are kept as floats in the base currency, pre-signed by transaction type
Amount = NewType("Amount", float)

# Month is the first seven characters of a date (e.g., "2025-01")
Month = NewType("Month", str)

# Category name for grouping expenses
CategoryName = NewType("CategoryName", str)

# Transaction description text
Description = NewType("Description", str)

# Currency code used for conversion and formatting
CurrencyCode = NewType("CurrencyCode", str)

BASE_CURRENCY = CurrencyCode("USD")
DEFAULT_PERIOD = "one-time"
