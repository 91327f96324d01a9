from __future__ import annotations

import hashlib
import logging
from typing import Any

import httpx
from django.conf import settings
from django.core.cache import cache

from trip_cost.exceptions import InvalidLocationError, UpstreamUnavailableError
from trip_cost.services.types import GeocodeResult, GeoPoint

logger = logging.getLogger(__name__)

STATE_COMPONENT_TYPE = "administrative_area_level_1"


class GeocodingClient:
    def __init__(self) -> None:
        self.base_url = settings.GOOGLE_GEOCODING_BASE_URL.rstrip("/")
        self.timeout = settings.GEOCODING_TIMEOUT_SECONDS
        self.api_key = settings.GOOGLE_MAPS_BACKEND_KEY

    def geocode(self, address: str) -> GeocodeResult:
        cache_key = self._cache_key(address)
        cached = cache.get(cache_key)
        if cached:
            return GeocodeResult(
                point=GeoPoint(latitude=cached["latitude"], longitude=cached["longitude"]),
                region_code=cached["region_code"],
            )

        try:
            response = httpx.get(
                f"{self.base_url}/json",
                params={"address": address, "key": self.api_key},
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Geocoding request failed for %r: %s", address, exc)
            raise UpstreamUnavailableError("Geocoding request failed") from exc

        result = self._parse_result(payload)
        cache.set(
            cache_key,
            {
                "latitude": result.point.latitude,
                "longitude": result.point.longitude,
                "region_code": result.region_code,
            },
            timeout=settings.GEOCODE_CACHE_TTL_SECONDS,
        )
        return result

    @staticmethod
    def _cache_key(address: str) -> str:
        digest = hashlib.sha256(address.strip().lower().encode()).hexdigest()
        return f"geocode:{digest}"

    @staticmethod
    def _parse_result(payload: Any) -> GeocodeResult:
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError("Invalid geocoding response")

        status = payload.get("status", "OK")
        if status == "ZERO_RESULTS":
            raise InvalidLocationError("Location could not be resolved")
        if status != "OK":
            logger.error(
                "Geocoding provider returned %s: %s", status, payload.get("error_message", "")
            )
            raise UpstreamUnavailableError("Geocoding request failed")

        results = payload.get("results") or []
        if not results:
            raise InvalidLocationError("Location could not be resolved")

        first = results[0]
        try:
            location = first["geometry"]["location"]
            latitude = float(location["lat"])
            longitude = float(location["lng"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidLocationError("Invalid geocoding response") from exc

        region_code = None
        for component in first.get("address_components") or []:
            if STATE_COMPONENT_TYPE in (component.get("types") or []):
                region_code = component.get("short_name") or None
                break

        return GeocodeResult(
            point=GeoPoint(latitude=latitude, longitude=longitude),
            region_code=region_code,
        )
