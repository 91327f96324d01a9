from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any

import httpx
import polyline
from django.conf import settings

from trip_cost.exceptions import UpstreamUnavailableError
from trip_cost.services.tolls import route_toll_usd
from trip_cost.services.types import RouteCandidate, RoutingOptions

logger = logging.getLogger(__name__)

KM_TO_MILES = 0.621371
DURATION_PATTERN = re.compile(r"^(\d+)s$")

EZPASS_TOLL_PASSES = (
    "US_NJ_EZPASSNJ",
    "US_NY_EZPASSNY",
    "US_PA_EZPASSPA",
    "US_DE_EZPASSDE",
    "US_MD_EZPASSMD",
    "US_VA_EZPASSVA",
    "US_WV_EZPASSWV",
    "US_MA_EZPASSMA",
    "US_ME_EZPASSME",
    "US_NH_EZPASSNH",
    "US_OH_EZPASSOH",
    "US_IL_EZPASSIL",
    "US_IN_EZPASSIN",
    "US_MN_EZPASSMN",
    "US_NC_EZPASSNC",
    "US_RI_EZPASSRI",
)

FIELD_MASK = ",".join(
    (
        "routes.distanceMeters",
        "routes.duration",
        "routes.description",
        "routes.polyline.encodedPolyline",
        "routes.travelAdvisory.tollInfo",
        "routes.legs.travelAdvisory.tollInfo",
    )
)


class DirectionsClient:
    def __init__(self) -> None:
        self.base_url = settings.GOOGLE_ROUTES_BASE_URL.rstrip("/")
        self.timeout = settings.ROUTES_TIMEOUT_SECONDS
        self.api_key = settings.GOOGLE_MAPS_BACKEND_KEY

    def compute_routes(
        self,
        origin: str,
        destination: str,
        intermediates: list[str],
        options: RoutingOptions,
    ) -> list[RouteCandidate]:
        body = build_request_body(origin, destination, intermediates, options)
        try:
            response = httpx.post(
                f"{self.base_url}/directions/v2:computeRoutes",
                json=body,
                timeout=self.timeout,
                headers={
                    "X-Goog-Api-Key": self.api_key,
                    "X-Goog-FieldMask": FIELD_MASK,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Routes request %r -> %r failed: %s", origin, destination, exc)
            raise UpstreamUnavailableError("Directions request failed") from exc

        return parse_routes(payload, options.units)


def build_request_body(
    origin: str,
    destination: str,
    intermediates: list[str],
    options: RoutingOptions,
    departure_time: datetime | None = None,
) -> dict[str, Any]:
    departure_time = departure_time or datetime.now(timezone.utc)
    body: dict[str, Any] = {
        "origin": {"address": origin},
        "destination": {"address": destination},
        "intermediates": [{"address": address} for address in intermediates],
        "travelMode": "DRIVE",
        "routingPreference": "TRAFFIC_AWARE_OPTIMAL",
        "computeAlternativeRoutes": True,
        "units": "IMPERIAL" if options.units == "miles" else "METRIC",
        "extraComputations": ["TOLLS"],
        "departureTime": departure_time.isoformat().replace("+00:00", "Z"),
    }

    if options.avoid_tolls:
        body["routeModifiers"] = {"avoidTolls": True}
    elif options.use_toll_pass:
        body["routeModifiers"] = {"tollPasses": list(EZPASS_TOLL_PASSES)}

    return body


def parse_routes(payload: Any, units: str) -> list[RouteCandidate]:
    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise UpstreamUnavailableError("Invalid directions response")

    routes = payload.get("routes") or []
    if not isinstance(routes, list):
        raise UpstreamUnavailableError("Invalid directions response")

    candidates: list[RouteCandidate] = []
    for index, route in enumerate(routes):
        if not isinstance(route, dict):
            logger.warning("Skipping malformed route entry %d: %r", index, route)
            continue
        try:
            candidates.append(_parse_route(route, index, units))
        except (IndexError, KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.error("Could not parse route entry %d: %s", index, exc)
            raise UpstreamUnavailableError("Invalid directions response") from exc
    return candidates


def _parse_route(route: dict[str, Any], index: int, units: str) -> RouteCandidate:
    encoded = (route.get("polyline") or {}).get("encodedPolyline") or ""
    return RouteCandidate(
        summary=route.get("description") or f"Route {index + 1}",
        distance=convert_distance(float(route.get("distanceMeters") or 0), units),
        distance_units="miles" if units == "miles" else "km",
        duration_minutes=duration_minutes(route.get("duration")),
        toll_usd=route_toll_usd(route),
        path=[tuple(point) for point in polyline.decode(encoded)] if encoded else [],
    )


def convert_distance(distance_meters: float, units: str) -> float:
    distance_km = distance_meters / 1000.0
    if units == "miles":
        return distance_km * KM_TO_MILES
    return distance_km


def parse_duration_seconds(value: Any) -> int:
    if not value:
        return 0
    match = DURATION_PATTERN.match(str(value))
    return int(match.group(1)) if match else 0


def duration_minutes(value: Any) -> int:
    # Rounds half up, unlike round().
    return int(math.floor(parse_duration_seconds(value) / 60.0 + 0.5))
