"""
CNVTBOT Rate Providers Module

fixer.io is the default source; Frankfurter is a keyless alternative.
"""

from cnvtbot.config import Settings
from cnvtbot.providers.base import BaseRateProvider, RateProviderError
from cnvtbot.providers.fixer import FixerClient
from cnvtbot.providers.frankfurter import FrankfurterClient


def create_provider(settings: Settings) -> BaseRateProvider:
    """Build the provider selected by RATE_PROVIDER."""
    if settings.rate_provider == "frankfurter":
        return FrankfurterClient(settings.frankfurter_base_url, timeout=settings.http_timeout)
    return FixerClient(
        settings.fixer_base_url,
        settings.fixer_access_key,
        timeout=settings.http_timeout
    )


__all__ = [
    "BaseRateProvider",
    "RateProviderError",
    "FixerClient",
    "FrankfurterClient",
    "create_provider",
]
