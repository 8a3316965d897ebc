"""
Base Rate Provider Interface

🔒 Rates are returned as decimal.Decimal; payloads are validated here, at
ingest, so nothing downstream has to trust their shape.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

import httpx


class RateProviderError(Exception):
    """Base exception for rate provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        error_type: str = "UNKNOWN",
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.provider = provider
        self.error_type = error_type
        self.details = details or {}


class BaseRateProvider(ABC):
    """
    Abstract base class for exchange rate providers.

    All implementations MUST return rates as Decimal type.
    """

    PROVIDER_NAME: str = "base"

    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @abstractmethod
    async def fetch_symbols(self) -> dict[str, bool]:
        """
        Fetch the currency codes the provider can quote.

        Returns:
            Mapping of currency code to a truthy marker.

        Raises:
            RateProviderError: If fetching fails
        """
        pass

    @abstractmethod
    async def fetch_rates(self, date: str) -> tuple[str, dict[str, Decimal]]:
        """
        Fetch the base currency and its rates for a specific date.

        Args:
            date: ISO 8601 date string (e.g., "2026-01-15")

        Returns:
            Tuple of (base_code, {code: rate}) with Decimal rates.

        Raises:
            RateProviderError: If fetching fails
        """
        pass

    async def health_check(self) -> bool:
        """Check if provider is reachable and responding; backs /api/v1/health."""
        try:
            await self.fetch_symbols()
            return True
        except RateProviderError:
            return False

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON document, translating httpx failures into RateProviderError."""
        try:
            async with self._client() as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            raise RateProviderError(
                message=f"HTTP error: {e.response.status_code}",
                provider=self.PROVIDER_NAME,
                error_type=f"HTTP_{e.response.status_code}",
                details={"url": str(e.request.url)}
            ) from e

        except httpx.TimeoutException as e:
            raise RateProviderError(
                message="Request timeout",
                provider=self.PROVIDER_NAME,
                error_type="TIMEOUT",
                details={"timeout_seconds": self.timeout}
            ) from e

        except httpx.RequestError as e:
            raise RateProviderError(
                message=f"Request failed: {e}",
                provider=self.PROVIDER_NAME,
                error_type="NETWORK",
                details={"url": url}
            ) from e

        except ValueError as e:
            # response.json() on a non-JSON body
            raise RateProviderError(
                message="Invalid response: body is not JSON",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"url": url}
            ) from e

    def _require_mapping(self, data: Any, field: str) -> dict[str, Any]:
        if not isinstance(data, dict) or not isinstance(data.get(field), dict):
            raise RateProviderError(
                message=f"Invalid response: missing '{field}' field",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"response": data}
            )
        return data[field]

    def _to_decimal(self, value: Any) -> Decimal:
        """
        Convert value to exact Decimal.

        NEVER use float conversion - always use str intermediate.
        """
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value))
