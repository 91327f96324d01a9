from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass

from trip_cost.exceptions import InvalidTripRequestError
from trip_cost.schemas import StopRequest, TripRequest

FUEL_PRODUCT_CODES = {
    "Regular": "EPMR",
    "Midgrade": "EPMM",
    "Premium": "EPMP",
    "Diesel": "EPD2D",
}


@dataclass(slots=True, frozen=True)
class NormalizedTrip:
    request: TripRequest
    product_code: str
    stops: list[StopRequest]
    fingerprint: str

    @property
    def stop_addresses(self) -> list[str]:
        return [format_stop(stop) for stop in self.stops]


def format_stop(stop: StopRequest) -> str:
    return f"{stop.address.strip()}, {stop.state}"


def usable_stops(stops: list[StopRequest]) -> list[StopRequest]:
    return [stop for stop in stops if stop.address.strip()]


def normalize_trip(request: TripRequest) -> NormalizedTrip:
    if request.fuel_efficiency is None:
        raise InvalidTripRequestError("Missing fuel efficiency (MPG) in request body")

    product_code = FUEL_PRODUCT_CODES.get(request.fuel_type)
    if product_code is None:
        raise InvalidTripRequestError("Invalid fuel type selected")

    stops = usable_stops(request.stops)
    return NormalizedTrip(
        request=request,
        product_code=product_code,
        stops=stops,
        fingerprint=trip_fingerprint(request, stops),
    )


def trip_fingerprint(request: TripRequest, stops: list[StopRequest]) -> str:
    # Stop order is part of the key: it changes the route geometry.
    payload = {
        "origin": request.origin,
        "destination": request.destination,
        "origin_state": request.origin_state,
        "destination_state": request.destination_state,
        "fuel_efficiency": request.fuel_efficiency,
        "fuel_price": request.fuel_price,
        "units": request.units,
        "fuel_type": request.fuel_type,
        "include_round_trip": request.include_round_trip,
        "preferred_route_type": request.preferred_route_type,
        "stops": [format_stop(stop).lower() for stop in stops],
        "use_ezpass": request.use_ezpass,
        "avoid_tolls": request.avoid_tolls,
    }
    encoded = json.dumps(payload, separators=(",", ":")).encode()
    digest = hashlib.sha256(encoded).hexdigest()
    return f"trip:{digest}"
