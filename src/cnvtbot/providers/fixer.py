"""
fixer.io API Client (Default Provider)

API Documentation: https://fixer.io/documentation
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from cnvtbot.providers.base import BaseRateProvider, RateProviderError

logger = logging.getLogger(__name__)


class FixerClient(BaseRateProvider):
    """
    Client for fixer.io daily exchange rates.

    fixer answers HTTP 200 even for API errors, so the `success` flag is
    checked on every payload.
    Symbols: {"success": true, "symbols": {"USD": "United States Dollar", ...}}
    Rates:   {"success": true, "date": "2023-01-01", "base": "EUR", "rates": {"USD": 1.07, ...}}
    """

    PROVIDER_NAME = "fixer"

    def __init__(
        self,
        base_url: str,
        access_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.access_key = access_key

    async def fetch_symbols(self) -> dict[str, bool]:
        data = await self._get_json(
            f"{self.base_url}/symbols",
            params={"access_key": self.access_key}
        )
        self._check_success(data)
        symbols = self._require_mapping(data, "symbols")

        logger.info(f"fixer returned {len(symbols)} symbols")
        return {code: bool(name) for code, name in symbols.items()}

    async def fetch_rates(self, date: str) -> tuple[str, dict[str, Decimal]]:
        data = await self._get_json(
            f"{self.base_url}/{date}",
            params={"access_key": self.access_key}
        )
        self._check_success(data)
        raw_rates = self._require_mapping(data, "rates")

        base = data.get("base")
        if not isinstance(base, str) or not base:
            raise RateProviderError(
                message="Invalid response: missing 'base' field",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"date": date}
            )

        try:
            rates = {code: self._to_decimal(value) for code, value in raw_rates.items()}
        except InvalidOperation as e:
            raise RateProviderError(
                message="Invalid response: non-numeric rate",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"date": date}
            ) from e

        if data.get("date") and data["date"] != date:
            logger.warning(f"fixer answered {date} with rates dated {data['date']}")

        logger.info(f"fixer fetched {len(rates)} rates for {date} (base {base})")
        return base, rates

    def _check_success(self, data: Any) -> None:
        if isinstance(data, dict) and data.get("success") is False:
            error = data.get("error") or {}
            raise RateProviderError(
                message=error.get("info") or "fixer reported an unsuccessful request",
                provider=self.PROVIDER_NAME,
                error_type=str(error.get("type") or error.get("code") or "API_ERROR").upper(),
                details={"error": error}
            )
