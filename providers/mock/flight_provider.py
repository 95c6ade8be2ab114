from core.state import CityDescriptor
from providers.base import BaseFlightDataProvider

# Stable fake identifiers so dry runs produce deterministic deep links
_KNOWN_PLACES = {
    "Budapest": ("BUD", "95673439"),
    "Berlin": ("BERL", "27547053"),
    "London": ("LOND", "27544008"),
    "Corfu": ("CFU", "95673502"),
}


class MockFlightDataProvider(BaseFlightDataProvider):
    """Returns Skyscanner-shaped payloads without touching the network."""

    async def auto_complete(self, query: str) -> dict:
        place = _KNOWN_PLACES.get(query)
        if place is None:
            return {"inputSuggest": []}
        sky_id, entity_id = place
        return {
            "inputSuggest": [
                {
                    "navigation": {
                        "relevantFlightParams": {
                            "skyId": sky_id,
                            "entityId": entity_id,
                            "flightPlaceType": "CITY",
                            "localizedName": query,
                        }
                    }
                }
            ]
        }

    async def search_one_way(
        self,
        origin: CityDescriptor,
        destination: CityDescriptor,
        date: str,
        cabin_class: str = "economy",
        adults: int = 1,
        currency: str = "EUR",
    ) -> dict:
        def leg(depart: str, arrive: str, stops: int, carrier: str) -> dict:
            return {
                "origin": {"name": origin.localized_name or origin.sky_id},
                "destination": {"name": destination.localized_name or destination.sky_id},
                "departure": f"{date}T{depart}:00",
                "arrival": f"{date}T{arrive}:00",
                "stopCount": stops,
                "carriers": {"marketing": [{"name": carrier}]},
            }

        return {
            "data": {
                "itineraries": {
                    "buckets": [
                        {
                            "id": "Best",
                            "items": [
                                {"legs": [leg("06:00", "08:05", 0, "Mock Air")], "price": {"raw": round(89.99 * adults, 2)}},
                                {"legs": [leg("09:30", "15:10", 1, "Budget Wings")], "price": {"raw": round(64.5 * adults, 2)}},
                                {"legs": [leg("18:20", "20:25", 0, "Budget Wings")], "price": {"raw": round(119.0 * adults, 2)}},
                            ],
                        },
                        {
                            "id": "Cheapest",
                            "items": [
                                {"legs": [leg("09:30", "15:10", 1, "Budget Wings")], "price": {"raw": round(64.5 * adults, 2)}},
                            ],
                        },
                    ]
                }
            }
        }
