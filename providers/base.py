"""Flight data provider ABC.

Providers return the raw provider payloads; interpreting suggestions and
itinerary buckets is left to the resolver and the orchestrator.
"""
from abc import ABC, abstractmethod
from typing import Optional

from core.state import CityDescriptor


class ProviderRequestError(Exception):
    """Network or HTTP-level failure talking to the flight data provider."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class BaseFlightDataProvider(ABC):
    """Auto-complete and one-way search, the two calls a trip search needs."""

    @abstractmethod
    async def auto_complete(self, query: str) -> dict:
        """Return the raw suggestion payload for a free-text place name."""

    @abstractmethod
    async def search_one_way(
        self,
        origin: CityDescriptor,
        destination: CityDescriptor,
        date: str,
        cabin_class: str = "economy",
        adults: int = 1,
        currency: str = "EUR",
    ) -> dict:
        """Return the raw one-way itinerary payload (with its result buckets)."""
