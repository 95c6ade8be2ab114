"""Search one-way fares for a trip and write them to Google Sheets.

    python main.py [--trip trip.json] [--cache-key results] [--skip-sheet]

Results are memoized in cache-<key>.json; delete the file to search again.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from core.config import MissingCredentialError, Settings, settings as default_settings
from core.result_cache import TripResultCache
from core.state import TripResult
from core.trip_spec import TripSpec, load_trip_spec
from providers.base import BaseFlightDataProvider, ProviderRequestError
from providers.factory import get_provider
from search.city_resolver import CityCache, CityResolver, UnresolvedCityError
from search.orchestrator import FlightSearchOrchestrator

logger = logging.getLogger(__name__)


async def search_trip(
    spec: TripSpec,
    provider: BaseFlightDataProvider,
    cache: TripResultCache,
    cache_key: str,
    settings: Optional[Settings] = None,
) -> TripResult:
    """Run the full outbound + inbound search, or return the cached result for `cache_key`."""
    settings = settings or default_settings

    async def compute() -> TripResult:
        resolver = CityResolver(provider, CityCache())
        orchestrator = FlightSearchOrchestrator(
            provider, resolver, site=settings.skyscanner_site, currency=settings.currency
        )
        return await orchestrator.collect_trip(spec)

    return await cache.memoize(cache_key, compute)


async def run(args: argparse.Namespace, settings: Settings) -> TripResult:
    spec = load_trip_spec(args.trip or settings.trip_file)
    # Fails on a missing RAPID_API_KEY before the cache is even consulted
    provider = get_provider(settings)
    cache = TripResultCache(settings.cache_dir)

    result = await search_trip(spec, provider, cache, args.cache_key or settings.cache_key, settings)

    if args.skip_sheet:
        logger.info(
            "Skipping sheet output: %d outbound, %d inbound flight(s)",
            len(result.outbound), len(result.inbound),
        )
        return result

    from presenters.sheets import SheetsPresenter
    presenter = SheetsPresenter.from_settings(settings)
    await asyncio.to_thread(presenter.publish, result)
    return result


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--trip", help="path to the trip JSON file (default: TRIP_FILE)")
    parser.add_argument("--cache-key", help="name of the result memo (default: CACHE_KEY)")
    parser.add_argument("--skip-sheet", action="store_true", help="search only, do not write the sheet")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run(args, settings))
    except (MissingCredentialError, UnresolvedCityError, ProviderRequestError) as exc:
        logger.error("%s", exc)
        return 1
    except FileNotFoundError as exc:
        logger.error("Trip file not found: %s", exc.filename)
        return 1
    except json.JSONDecodeError as exc:
        logger.error("Trip file is not valid JSON: %s", exc)
        return 1
    except ValidationError as exc:
        logger.error("Invalid trip file: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
