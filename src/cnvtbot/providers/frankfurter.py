"""
Frankfurter API Client (Keyless Alternative)

API Documentation: https://www.frankfurter.app/docs/
"""

import logging
from decimal import Decimal, InvalidOperation

from cnvtbot.providers.base import BaseRateProvider, RateProviderError

logger = logging.getLogger(__name__)


class FrankfurterClient(BaseRateProvider):
    """
    Client for Frankfurter.dev EUR-based exchange rates.

    Frankfurter provides free FX rates from ECB (European Central Bank).
    Currencies: {"AUD": "Australian Dollar", "USD": "United States Dollar", ...}
    Rates: {"amount": 1.0, "date": "2026-01-15", "base": "EUR", "rates": {"USD": 1.163}}

    The base currency is not listed in `rates`; snapshots treat it as 1.
    On weekends and holidays the latest business day is returned.
    """

    PROVIDER_NAME = "frankfurter"

    async def fetch_symbols(self) -> dict[str, bool]:
        data = await self._get_json(f"{self.base_url}/v1/currencies")

        if not isinstance(data, dict) or not data:
            raise RateProviderError(
                message="Invalid response: empty currency list",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"response": data}
            )

        return {code: bool(name) for code, name in data.items()}

    async def fetch_rates(self, date: str) -> tuple[str, dict[str, Decimal]]:
        data = await self._get_json(f"{self.base_url}/v1/{date}")
        raw_rates = self._require_mapping(data, "rates")
        base = data.get("base") or "EUR"

        try:
            rates = {code: self._to_decimal(value) for code, value in raw_rates.items()}
        except InvalidOperation as e:
            raise RateProviderError(
                message="Invalid response: non-numeric rate",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"date": date}
            ) from e

        if data.get("date") != date:
            # Don't fail - ECB does not publish on weekends
            logger.warning(
                f"Frankfurter answered {date} with rates dated {data.get('date')}"
            )

        logger.info(f"Frankfurter fetched {len(rates)} rates for {date} (base {base})")
        return base, rates
