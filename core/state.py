"""Run-time dataclasses shared by the resolver, orchestrator, cache and presenter."""
import dataclasses
from dataclasses import dataclass, field
from datetime import date as Date, datetime
from typing import List, Optional


@dataclass(frozen=True)
class CityDescriptor:
    sky_id: str
    entity_id: str
    place_type: str = ""          # CITY | AIRPORT | ...
    localized_name: str = ""


@dataclass(frozen=True)
class FlightQuery:
    origin: str
    destination: str
    date: str                     # YYYY-MM-DD


def _text(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass
class FlightResult:
    date: str
    origin: str
    destination: str
    departs_at: datetime
    arrives_at: datetime
    url: str
    price: float
    carrier: Optional[str] = None

    def to_dict(self) -> dict:
        data = dataclasses.asdict(self)
        data["departs_at"] = self.departs_at.isoformat()
        data["arrives_at"] = self.arrives_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FlightResult":
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        carrier = data.get("carrier")
        if carrier is not None and not isinstance(carrier, str):
            raise TypeError(f"carrier must be a string or null, got {type(carrier).__name__}")
        day = _text(data, "date")
        Date.fromisoformat(day)
        return cls(
            date=day,
            origin=_text(data, "origin"),
            destination=_text(data, "destination"),
            departs_at=datetime.fromisoformat(_text(data, "departs_at")),
            arrives_at=datetime.fromisoformat(_text(data, "arrives_at")),
            url=_text(data, "url"),
            price=float(data["price"]),
            carrier=carrier,
        )


@dataclass
class TripResult:
    """Outbound and inbound flights in query-expansion order. The unit that gets cached."""

    outbound: List[FlightResult] = field(default_factory=list)
    inbound: List[FlightResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "outbound": [f.to_dict() for f in self.outbound],
            "inbound": [f.to_dict() for f in self.inbound],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TripResult":
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        return cls(
            outbound=[FlightResult.from_dict(f) for f in data["outbound"]],
            inbound=[FlightResult.from_dict(f) for f in data["inbound"]],
        )
