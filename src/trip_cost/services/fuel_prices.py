from __future__ import annotations

import logging
import math
from typing import Any

import httpx
from django.conf import settings

from trip_cost.exceptions import (
    InvalidLocationError,
    NoPriceDataError,
    UpstreamUnavailableError,
)
from trip_cost.services.geocoding import GeocodingClient
from trip_cost.services.normalizer import FUEL_PRODUCT_CODES, NormalizedTrip
from trip_cost.services.types import FuelPriceQuote

logger = logging.getLogger(__name__)

NATIONAL_REGION = "NUS"
ALL_GRADES_PRODUCT_CODE = "EPM0"
AD_HOC_PRODUCT_CODES = {**FUEL_PRODUCT_CODES, "All": ALL_GRADES_PRODUCT_CODE}


class EiaFuelPriceClient:
    """Weekly retail fuel prices from the EIA v2 petroleum series."""

    def __init__(self) -> None:
        self.base_url = settings.EIA_BASE_URL.rstrip("/")
        self.timeout = settings.EIA_TIMEOUT_SECONDS
        self.api_key = settings.EIA_API_KEY

    def latest_weekly_point(self, product_code: str, region: str) -> dict[str, Any] | None:
        params = {
            "api_key": self.api_key,
            "frequency": "weekly",
            "data[0]": "value",
            "facets[product][]": product_code,
            "facets[duoarea][]": self._duoarea(region),
            "sort[0][column]": "period",
            "sort[0][direction]": "desc",
            "offset": 0,
            "length": 1,
        }
        try:
            response = httpx.get(f"{self.base_url}/", params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("EIA price request failed for %s/%s: %s", product_code, region, exc)
            raise UpstreamUnavailableError("Fuel price request failed") from exc

        rows = ((payload or {}).get("response") or {}).get("data") or []
        return rows[0] if rows else None

    @staticmethod
    def _duoarea(region: str) -> str:
        # EIA encodes single states as "S" + postal code, e.g. SCA, STX.
        if region == NATIONAL_REGION or len(region) != 2:
            return region
        return f"S{region.upper()}"


class FuelPriceResolver:
    def __init__(
        self,
        geocoding_client: GeocodingClient | None = None,
        price_client: EiaFuelPriceClient | None = None,
    ) -> None:
        self.geocoding_client = geocoding_client or GeocodingClient()
        self.price_client = price_client or EiaFuelPriceClient()

    def resolve(self, trip: NormalizedTrip) -> FuelPriceQuote:
        request = trip.request
        if request.fuel_price is not None:
            return FuelPriceQuote(
                price_per_gallon=float(request.fuel_price),
                region=None,
                period=None,
                source="override",
            )

        region = self.pricing_region(
            request.origin, request.origin_state, request.destination_state
        )
        source = "national" if region == NATIONAL_REGION else "regional"
        point = self.price_client.latest_weekly_point(trip.product_code, region)

        if point is None and region != NATIONAL_REGION:
            logger.info(
                "No %s price for region %s, falling back to national average",
                trip.product_code,
                region,
            )
            region = NATIONAL_REGION
            source = "national_fallback"
            point = self.price_client.latest_weekly_point(trip.product_code, region)

        price = _price_value(point)
        if price is None:
            raise NoPriceDataError("No fuel price available for selected fuel type")

        return FuelPriceQuote(
            price_per_gallon=price,
            region=region,
            period=_period(point),
            source=source,
        )

    def pricing_region(
        self, origin: str, origin_state: str | None, destination_state: str | None
    ) -> str:
        """Pick the EIA region for a trip.

        A state price applies only to single-state trips whose declared states
        agree with where the origin actually geocodes; everything else prices
        against the national aggregate.
        """
        try:
            actual_state = self.geocoding_client.geocode(origin).region_code
        except InvalidLocationError:
            logger.info("Origin %r did not geocode, pricing nationally", origin)
            return NATIONAL_REGION

        if (
            actual_state
            and origin_state
            and destination_state
            and actual_state.upper() == origin_state.upper() == destination_state.upper()
        ):
            return actual_state.upper()
        return NATIONAL_REGION

    def national_quote(self, product_code: str) -> FuelPriceQuote | None:
        point = self.price_client.latest_weekly_point(product_code, NATIONAL_REGION)
        price = _price_value(point)
        if price is None:
            return None
        return FuelPriceQuote(
            price_per_gallon=price,
            region=NATIONAL_REGION,
            period=_period(point),
            source="national",
        )


def _price_value(point: dict[str, Any] | None) -> float | None:
    if not point:
        return None
    try:
        value = float(point.get("value"))
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or value <= 0:
        return None
    return value


def _period(point: dict[str, Any] | None) -> str | None:
    period = (point or {}).get("period")
    return str(period) if period is not None else None
