"""Resolves free-text city names to provider location identifiers."""
import json
import logging
from typing import Dict, Optional

from core.state import CityDescriptor
from providers.base import BaseFlightDataProvider

logger = logging.getLogger(__name__)


class UnresolvedCityError(Exception):
    """Raised when the provider has no usable suggestion for a city name."""

    def __init__(self, name: str, response: dict):
        self.name = name
        self.response = response
        super().__init__(
            f"Unknown city: {name}, response: {json.dumps(response, indent=2, default=str)}"
        )


class CityCache:
    """Per-run memo of resolved cities, keyed by the exact input string."""

    def __init__(self):
        self._entries: Dict[str, CityDescriptor] = {}

    def get(self, name: str) -> Optional[CityDescriptor]:
        return self._entries.get(name)

    def put(self, name: str, descriptor: CityDescriptor) -> None:
        self._entries[name] = descriptor

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _first_suggestion(payload: dict) -> Optional[CityDescriptor]:
    suggestions = payload.get("inputSuggest") if isinstance(payload, dict) else None
    if not suggestions:
        return None
    navigation = (suggestions[0] or {}).get("navigation") or {}
    params = navigation.get("relevantFlightParams") or {}
    if not params.get("skyId") or not params.get("entityId"):
        return None
    return CityDescriptor(
        sky_id=params["skyId"],
        entity_id=params["entityId"],
        place_type=params.get("flightPlaceType", ""),
        localized_name=params.get("localizedName", ""),
    )


class CityResolver:
    def __init__(self, provider: BaseFlightDataProvider, cache: Optional[CityCache] = None):
        self.provider = provider
        self.cache = cache if cache is not None else CityCache()

    async def resolve(self, name: str) -> CityDescriptor:
        cached = self.cache.get(name)
        if cached is not None:
            return cached

        payload = await self.provider.auto_complete(name)
        descriptor = _first_suggestion(payload)
        if descriptor is None:
            raise UnresolvedCityError(name, payload)

        logger.info("Resolved %r to %s/%s", name, descriptor.sky_id, descriptor.entity_id)
        self.cache.put(name, descriptor)
        return descriptor
