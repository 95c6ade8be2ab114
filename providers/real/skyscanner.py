"""Skyscanner flight data provider over RapidAPI.

Credentials come from settings (RAPID_API_KEY). No retries: any failure is
raised as ProviderRequestError and ends the run.
"""
import logging
from typing import Optional

import httpx

from core.state import CityDescriptor
from providers.base import BaseFlightDataProvider, ProviderRequestError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "skyscanner89.p.rapidapi.com"


class SkyscannerProvider(BaseFlightDataProvider):
    def __init__(
        self,
        api_key: str,
        host: str = DEFAULT_HOST,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._host = host
        self._base_url = f"https://{host}"
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "x-rapidapi-host": self._host,
            "x-rapidapi-key": self._api_key,
        }

    async def _request(self, path: str, params: dict) -> dict:
        """GET a RapidAPI path and decode the JSON body."""
        url = f"{self._base_url}{path}"
        logger.debug("GET %s params=%s", url, params)

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                resp = await client.get(url, params=params, headers=self._headers())
            except httpx.RequestError as exc:
                raise ProviderRequestError(
                    f"Skyscanner request failed: {exc}",
                    details={"path": path, "error": str(exc)},
                ) from exc

        if resp.status_code >= 400:
            try:
                details = resp.json()
            except ValueError:
                details = {"error": resp.text}
            logger.warning("Skyscanner %s returned %d", path, resp.status_code)
            raise ProviderRequestError(
                f"Skyscanner returned HTTP {resp.status_code} for {path}",
                status_code=resp.status_code,
                details=details,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderRequestError(
                f"Skyscanner response for {path} was not valid JSON",
                status_code=resp.status_code,
                details={"body": resp.text[:500]},
            ) from exc

    async def auto_complete(self, query: str) -> dict:
        return await self._request("/flights/auto-complete", {"query": query})

    async def search_one_way(
        self,
        origin: CityDescriptor,
        destination: CityDescriptor,
        date: str,
        cabin_class: str = "economy",
        adults: int = 1,
        currency: str = "EUR",
    ) -> dict:
        return await self._request("/flights/one-way/list", {
            "date": date,
            "origin": origin.sky_id,
            "originId": origin.entity_id,
            "destination": destination.sky_id,
            "destinationId": destination.entity_id,
            "cabinClass": cabin_class,
            "adults": adults,
            "currency": currency,
        })
