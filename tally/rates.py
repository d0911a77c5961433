"""Exchange rate API interactions."""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from tally.domain.currency import RateTable, fallback_rates
from tally.domain.models import BASE_CURRENCY

logger = logging.getLogger(__name__)

API_URL = f"https://api.exchangerate-api.com/v4/latest/{BASE_CURRENCY}"


@dataclass(frozen=True)
class RateLoad:
    """Outcome of loading the rate table.

    rates is always usable: on failure it holds the fallback table and
    error says why the live table was not used.
    """

    rates: RateTable
    live: bool
    error: str | None = None


def parse_rates(payload: Any) -> RateTable:
    """Extract the rate table from an API response body.

    Args:
        payload: Decoded JSON response.

    Returns:
        Rate table with USD pinned to 1.0.

    Raises:
        ValueError: If the response has no usable "rates" mapping.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("rates"), dict):
        raise ValueError("Invalid currency API response")

    rates: RateTable = {}
    for code, rate in payload["rates"].items():
        if isinstance(rate, (int, float)) and not isinstance(rate, bool):
            rates[str(code)] = float(rate)

    if not rates:
        raise ValueError("Invalid currency API response")

    rates[BASE_CURRENCY] = 1.0
    return rates


def fetch_rates(url: str = API_URL, timeout: float | None = None) -> RateTable:
    """Fetch live exchange rates relative to USD.

    Args:
        url: Rate endpoint returning {"rates": {code: rate}}.
        timeout: Request timeout in seconds. None waits indefinitely.

    Returns:
        Rate table.

    Raises:
        requests.RequestException: If API request fails.
        ValueError: If the response is not usable.
    """
    headers = {"Accept": "application/json"}
    response = requests.get(url, headers=headers, timeout=timeout)
    response.raise_for_status()
    return parse_rates(response.json())


def load_rates(url: str = API_URL, timeout: float | None = None, offline: bool = False) -> RateLoad:
    """Load the rate table, falling back to static rates on any failure.

    Never raises. Failures are logged and the fallback table is used for the
    rest of the session.

    Args:
        url: Rate endpoint.
        timeout: Request timeout in seconds.
        offline: Skip the request and use the fallback table.

    Returns:
        RateLoad.
    """
    if offline:
        logger.debug("Offline mode, using fallback currency rates")
        return RateLoad(rates=fallback_rates(), live=False, error="offline")

    try:
        rates = fetch_rates(url, timeout)
    except (requests.RequestException, ValueError) as e:
        logger.warning("Error loading currency rates: %s", e)
        return RateLoad(rates=fallback_rates(), live=False, error=str(e))

    logger.debug("Loaded %d currency rates from %s", len(rates), url)
    return RateLoad(rates=rates, live=True)
