import logging
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlencode

from core.state import CityDescriptor, FlightQuery, FlightResult, TripResult
from core.trip_spec import Leg, TripSpec
from providers.base import BaseFlightDataProvider, ProviderRequestError
from search.city_resolver import CityResolver
from search.query_expander import iter_queries

logger = logging.getLogger(__name__)

DEFAULT_SITE = "https://www.skyscanner.hu"
CABIN_CLASS = "economy"
ADULTS = 1

# Deep-link parameters: one adult, economy, outbound only, no alternate airports
_DEEP_LINK_PARAMS = {
    "adultsv2": 1,
    "cabinclass": "economy",
    "childrenv2": "",
    "ref": "home",
    "rtn": 0,
    "preferdirects": "true",
    "outboundaltsenabled": "false",
    "inboundaltsenabled": "false",
}


def build_flight_url(origin_sky_id: str, destination_sky_id: str, date: str, site: str = DEFAULT_SITE) -> str:
    """Skyscanner booking page for one origin/destination/date."""
    day = date.replace("-", "")
    return (
        f"{site.rstrip('/')}/transport/flights/{origin_sky_id}/{destination_sky_id}/{day}/"
        f"?{urlencode(_DEEP_LINK_PARAMS)}"
    )


def _first_bucket(payload: dict) -> Optional[dict]:
    data = payload.get("data") if isinstance(payload, dict) else None
    buckets = ((data or {}).get("itineraries") or {}).get("buckets") or []
    return buckets[0] if buckets else None


def _is_non_stop(item: dict) -> bool:
    legs = item.get("legs") if isinstance(item, dict) else None
    if not legs or not isinstance(legs[0], dict):
        return False
    return legs[0].get("stopCount") == 0


def _carrier_name(leg: dict) -> Optional[str]:
    carriers = leg.get("carriers")
    marketing = (carriers.get("marketing") if isinstance(carriers, dict) else None) or []
    if not marketing or not isinstance(marketing[0], dict):
        return None
    return marketing[0].get("name")


class FlightSearchOrchestrator:
    """Runs one-way searches for every query of a trip, sequentially and in order."""

    def __init__(
        self,
        provider: BaseFlightDataProvider,
        resolver: CityResolver,
        site: str = DEFAULT_SITE,
        currency: str = "EUR",
    ):
        self.provider = provider
        self.resolver = resolver
        self.site = site
        self.currency = currency

    def _to_result(
        self, item: dict, query: FlightQuery, origin: CityDescriptor, destination: CityDescriptor
    ) -> FlightResult:
        try:
            leg = item["legs"][0]
            return FlightResult(
                date=query.date,
                origin=leg["origin"]["name"],
                destination=leg["destination"]["name"],
                departs_at=datetime.fromisoformat(leg["departure"]),
                arrives_at=datetime.fromisoformat(leg["arrival"]),
                url=build_flight_url(origin.sky_id, destination.sky_id, query.date, self.site),
                price=float(item["price"]["raw"]),
                carrier=_carrier_name(leg),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderRequestError(
                f"Unexpected itinerary shape for {query.origin} -> {query.destination} on {query.date}: {exc}",
                details={"item": item},
            ) from exc

    async def search(self, query: FlightQuery) -> List[FlightResult]:
        origin = await self.resolver.resolve(query.origin)
        destination = await self.resolver.resolve(query.destination)

        payload = await self.provider.search_one_way(
            origin,
            destination,
            query.date,
            cabin_class=CABIN_CLASS,
            adults=ADULTS,
            currency=self.currency,
        )

        # First bucket only, non-stop only
        bucket = _first_bucket(payload)
        if bucket is None:
            logger.info("%s -> %s on %s: no results", query.origin, query.destination, query.date)
            return []

        results = [
            self._to_result(item, query, origin, destination)
            for item in bucket.get("items") or []
            if _is_non_stop(item)
        ]
        logger.info(
            "%s -> %s on %s: %d non-stop flight(s)",
            query.origin, query.destination, query.date, len(results),
        )
        return results

    async def collect_leg(self, spec: TripSpec, leg: Leg) -> List[FlightResult]:
        results: List[FlightResult] = []
        for query in iter_queries(spec, leg):
            results.extend(await self.search(query))
        return results

    async def collect_trip(self, spec: TripSpec) -> TripResult:
        outbound = await self.collect_leg(spec, "outbound")
        inbound = await self.collect_leg(spec, "inbound")
        return TripResult(outbound=outbound, inbound=inbound)
