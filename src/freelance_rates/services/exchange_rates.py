"""
Exchange Rate Provider - USD-relative conversion rates from exchangerate-api.com.

Rates are fetched once per provider instance. Any failure (no API key,
network error, HTTP error, unexpected payload) is logged and leaves the
rate table empty; conversions then treat unknown currencies as 1:1.
"""
from typing import Optional

import requests

from ..config.settings import Settings, get_settings
from ..logging_utils import get_logger

logger = get_logger(__name__)

# Offered in the currency picker while no live rates are available
DEFAULT_CURRENCIES = ('USD', 'EUR', 'GBP', 'MXN', 'ARS', 'COP', 'CLP', 'PEN', 'BRL', 'CAD')


class ExchangeRateProvider:
    """One-shot exchange rate lookup with identity fallback."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        base_currency: str = "USD",
        timeout_s: float = 10.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.base_currency = base_currency
        self.timeout_s = timeout_s
        self._rates: dict[str, float] = {}
        self._fetched = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'ExchangeRateProvider':
        settings = settings or get_settings()
        return cls(
            api_key=settings.exchange_api_key,
            base_url=settings.exchange_api_url,
            base_currency=settings.base_currency,
            timeout_s=settings.request_timeout_s,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_key}/latest/{self.base_currency}"

    def fetch(self, refresh: bool = False) -> dict[str, float]:
        """
        Load the rate table (once, unless refresh=True).

        Returns the rates, or an empty dict if they are unavailable.
        """
        if self._fetched and not refresh:
            return self._rates

        self._fetched = True
        self._rates = self._request_rates()
        return self._rates

    def _request_rates(self) -> dict[str, float]:
        if not self.api_key:
            logger.error("Exchange rate API key not set; currency conversion disabled")
            return {}

        try:
            resp = requests.get(self.url, headers={"Accept": "application/json"}, timeout=self.timeout_s)
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching exchange rates", extra={"context": {"error": str(e)}})
            return {}

        if not isinstance(data, dict) or data.get("result") != "success":
            logger.error("Unexpected exchange rate response",
                         extra={"context": {"status": resp.status_code, "body": str(data)[:500]}})
            return {}

        conversion_rates = data.get("conversion_rates")
        if not isinstance(conversion_rates, dict):
            logger.error("Exchange rate response has no conversion_rates",
                         extra={"context": {"status": resp.status_code}})
            return {}

        rates = {}
        for code, rate in conversion_rates.items():
            if isinstance(rate, (int, float)) and not isinstance(rate, bool) and rate > 0:
                rates[str(code)] = float(rate)

        logger.info("Exchange rates loaded", extra={"context": {"count": len(rates)}})
        return rates

    @property
    def rates(self) -> dict[str, float]:
        return self.fetch()

    @property
    def currencies(self) -> list[str]:
        """Currency codes to offer; a default list while live rates are unavailable."""
        rates = self.fetch()
        if not rates:
            return list(DEFAULT_CURRENCIES)
        return sorted(rates)

    def rate_for(self, currency: str) -> float:
        """Units of `currency` per base currency; 1 when unknown."""
        if currency == self.base_currency:
            return 1.0
        return self.fetch().get(currency) or 1.0

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert through the base currency; unknown rates count as 1."""
        if from_currency == to_currency:
            return amount
        amount_in_base = amount / self.rate_for(from_currency)
        return amount_in_base * self.rate_for(to_currency)
