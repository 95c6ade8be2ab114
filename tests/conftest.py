"""Shared pytest fixtures for the trip search test suite."""
import pytest

from core.config import Settings
from core.result_cache import TripResultCache
from stubs import StubFlightDataProvider, flights_payload, itinerary, suggestion


@pytest.fixture
def stub_provider() -> StubFlightDataProvider:
    """Budapest/Corfu resolve; BUD->CFU on 2025-09-11 has one non-stop flight."""
    return StubFlightDataProvider(
        suggestions={
            "Budapest": suggestion("BUD", "1", "Budapest"),
            "Corfu": suggestion("CFU", "2", "Corfu"),
        },
        flights={
            ("BUD", "CFU", "2025-09-11"): flights_payload([itinerary()]),
        },
    )


@pytest.fixture
def result_cache(tmp_path) -> TripResultCache:
    return TripResultCache(tmp_path)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        rapid_api_key="test-key",
        use_real_apis=False,
        cache_dir=str(tmp_path),
    )
