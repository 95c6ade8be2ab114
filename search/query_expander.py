"""Expands a trip leg into individual one-way queries.

Order is origin-major, destination next, date innermost; it becomes the row
order of the sheet.
"""
import itertools
from typing import Iterator, List

from core.state import FlightQuery
from core.trip_spec import Leg, TripSpec


def iter_queries(spec: TripSpec, leg: Leg) -> Iterator[FlightQuery]:
    leg_spec = spec.leg(leg)
    if leg_spec is None:
        return
    for origin, destination, date in itertools.product(
        leg_spec.origins, leg_spec.destinations, leg_spec.dates
    ):
        yield FlightQuery(origin=origin, destination=destination, date=date)


def expand(spec: TripSpec, leg: Leg) -> List[FlightQuery]:
    return list(iter_queries(spec, leg))
