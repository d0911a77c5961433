"""Tests for tally.rates."""

from typing import Any

import pytest
import requests

from tally import rates as rates_module
from tally.domain.currency import FALLBACK_RATES
from tally.rates import load_rates, parse_rates


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload: Any = None, status_code: int = 200, json_error: bool = False) -> None:
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self) -> Any:
        if self.json_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


@pytest.fixture
def fake_get(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Patch requests.get; tests set the response on calls[0]['response']."""
    calls: list[dict[str, Any]] = [{"response": FakeResponse({"rates": {"USD": 1, "EUR": 0.9}})}]

    def get(url: str, **kwargs: Any) -> Any:
        calls.append({"url": url, **kwargs})
        response = calls[0]["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(rates_module.requests, "get", get)
    return calls


class TestParseRates:
    """Tests for parse_rates."""

    def test_adds_base_rate(self) -> None:
        """Should add USD when the response omits it."""
        assert parse_rates({"rates": {"EUR": 0.9}}) == {"EUR": 0.9, "USD": 1.0}

    def test_base_rate_pinned_to_one(self) -> None:
        """Should keep the base rate at 1 even when the response disagrees."""
        assert parse_rates({"rates": {"USD": 1.05, "EUR": 0.9}}) == {"USD": 1.0, "EUR": 0.9}

    def test_drops_non_numeric_rates(self) -> None:
        """Should skip rates that are not numbers."""
        assert parse_rates({"rates": {"USD": 1, "EUR": "0.9"}}) == {"USD": 1.0}

    @pytest.mark.parametrize("payload", [None, [], {}, {"rates": None}, {"rates": []}, {"rates": {}}])
    def test_rejects_unusable_payload(self, payload: Any) -> None:
        """Should raise ValueError when there is no rates mapping."""
        with pytest.raises(ValueError):
            parse_rates(payload)


class TestLoadRates:
    """Tests for load_rates."""

    def test_live_rates(self, fake_get: list[dict[str, Any]]) -> None:
        """Should use the live table when the request succeeds."""
        result = load_rates("https://rates.example/latest", timeout=5)

        assert result.live
        assert result.error is None
        assert result.rates == {"USD": 1.0, "EUR": 0.9}
        assert fake_get[1]["url"] == "https://rates.example/latest"
        assert fake_get[1]["timeout"] == 5

    def test_network_error_falls_back(self, fake_get: list[dict[str, Any]]) -> None:
        """Should use the fallback table when the request fails."""
        fake_get[0]["response"] = requests.ConnectionError("no route to host")
        result = load_rates()

        assert not result.live
        assert result.rates == FALLBACK_RATES
        assert "no route to host" in (result.error or "")

    def test_http_error_falls_back(self, fake_get: list[dict[str, Any]]) -> None:
        """Should use the fallback table on an error status."""
        fake_get[0]["response"] = FakeResponse(status_code=503)

        assert load_rates().rates == FALLBACK_RATES

    def test_invalid_json_falls_back(self, fake_get: list[dict[str, Any]]) -> None:
        """Should use the fallback table when the body is not JSON."""
        fake_get[0]["response"] = FakeResponse(json_error=True)

        assert not load_rates().live

    def test_missing_rates_falls_back(self, fake_get: list[dict[str, Any]]) -> None:
        """Should use the fallback table when 'rates' is missing."""
        fake_get[0]["response"] = FakeResponse({"base": "USD"})
        result = load_rates()

        assert result.rates == FALLBACK_RATES
        assert result.error == "Invalid currency API response"

    def test_failure_is_logged(self, fake_get: list[dict[str, Any]], caplog: pytest.LogCaptureFixture) -> None:
        """Should log the failure as a warning."""
        fake_get[0]["response"] = requests.Timeout("timed out")

        with caplog.at_level("WARNING", logger="tally.rates"):
            load_rates()

        assert "Error loading currency rates" in caplog.text

    def test_offline_skips_request(self, fake_get: list[dict[str, Any]]) -> None:
        """Should not make a request in offline mode."""
        result = load_rates(offline=True)

        assert not result.live
        assert result.rates == FALLBACK_RATES
        assert len(fake_get) == 1

    def test_fallback_is_a_copy(self, fake_get: list[dict[str, Any]]) -> None:
        """Should hand out a table callers can modify safely."""
        result = load_rates(offline=True)
        result.rates["EUR"] = 5.0

        assert FALLBACK_RATES["EUR"] == 0.85
