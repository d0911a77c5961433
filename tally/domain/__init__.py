"""Domain models and types for tally.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from tally.domain.models import BASE_CURRENCY, Amount, CategoryName, CurrencyCode, Description, Month

__all__ = ["Amount", "Month", "CategoryName", "Description", "CurrencyCode", "BASE_CURRENCY"]
