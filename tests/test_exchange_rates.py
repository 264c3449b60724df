import pytest
import requests

from freelance_rates.services import exchange_rates
from freelance_rates.services.exchange_rates import ExchangeRateProvider, DEFAULT_CURRENCIES


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


SUCCESS = {
    "result": "success",
    "base_code": "USD",
    "conversion_rates": {"USD": 1, "EUR": 0.5, "MXN": 20.0},
}


@pytest.fixture
def calls(monkeypatch):
    """Record requests.get calls and answer with whatever the test sets as `calls.response`."""
    class Recorder:
        response = FakeResponse(SUCCESS)
        urls = []

    recorder = Recorder()
    recorder.urls = []

    def fake_get(url, **kwargs):
        recorder.urls.append(url)
        if isinstance(recorder.response, Exception):
            raise recorder.response
        return recorder.response

    monkeypatch.setattr(exchange_rates.requests, "get", fake_get)
    return recorder


def make_provider(api_key="test-key"):
    return ExchangeRateProvider(api_key=api_key, base_url="https://v6.exchangerate-api.com/v6/")


def test_fetch_success(calls):
    provider = make_provider()
    rates = provider.fetch()

    assert rates == {"USD": 1.0, "EUR": 0.5, "MXN": 20.0}
    assert calls.urls == ["https://v6.exchangerate-api.com/v6/test-key/latest/USD"]
    assert provider.currencies == ["EUR", "MXN", "USD"]


def test_fetch_happens_once_per_provider(calls):
    provider = make_provider()
    provider.fetch()
    provider.convert(10, "USD", "EUR")
    _ = provider.currencies

    assert len(calls.urls) == 1

    provider.fetch(refresh=True)
    assert len(calls.urls) == 2


@pytest.mark.parametrize("response", [
    FakeResponse({"result": "error", "error-type": "invalid-key"}, status_code=403),
    FakeResponse({"result": "success"}),
    FakeResponse(["unexpected"]),
    FakeResponse(ValueError("not json")),
    requests.ConnectionError("network down"),
    requests.Timeout("too slow"),
])
def test_failures_leave_rates_empty(calls, response):
    calls.response = response
    provider = make_provider()

    assert provider.fetch() == {}
    assert provider.currencies == list(DEFAULT_CURRENCIES)
    # conversions degrade to identity
    assert provider.convert(100, "USD", "EUR") == 100


def test_missing_api_key_skips_request(calls):
    provider = make_provider(api_key=None)

    assert provider.fetch() == {}
    assert calls.urls == []


def test_convert_through_usd(calls):
    provider = make_provider()

    assert provider.convert(10, "USD", "EUR") == pytest.approx(5)
    assert provider.convert(10, "EUR", "USD") == pytest.approx(20)
    assert provider.convert(10, "EUR", "MXN") == pytest.approx(400)


def test_convert_same_currency_is_identity(calls):
    provider = make_provider()
    assert provider.convert(123.45, "MXN", "MXN") == 123.45


def test_unknown_currency_counts_as_one(calls):
    provider = make_provider()

    assert provider.convert(10, "USD", "XYZ") == 10
    assert provider.convert(10, "XYZ", "EUR") == pytest.approx(5)


def test_non_numeric_rates_are_dropped(calls):
    calls.response = FakeResponse({
        "result": "success",
        "conversion_rates": {"USD": 1, "EUR": "0.9", "GBP": 0, "JPY": 150.0},
    })
    provider = make_provider()

    assert provider.fetch() == {"USD": 1.0, "JPY": 150.0}
