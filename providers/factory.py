"""Provider factory — returns the Skyscanner or mock provider based on USE_REAL_APIS."""
from typing import Optional

from core.config import Settings, settings as default_settings
from providers.base import BaseFlightDataProvider


def get_provider(settings: Optional[Settings] = None) -> BaseFlightDataProvider:
    """Return the active flight data provider.

    Raises MissingCredentialError when real APIs are enabled and RAPID_API_KEY
    is not set, before any request is made.
    """
    settings = settings or default_settings

    if settings.use_real_apis:
        from providers.real.skyscanner import SkyscannerProvider
        return SkyscannerProvider(
            api_key=settings.require("rapid_api_key"),
            host=settings.rapid_api_host,
            timeout=settings.http_timeout_seconds,
        )
    from providers.mock.flight_provider import MockFlightDataProvider
    return MockFlightDataProvider()
