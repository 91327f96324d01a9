from __future__ import annotations

import logging
import time

from trip_cost.schemas import (
    RouteResponse,
    StopResponse,
    TripRequest,
    TripResultResponse,
)
from trip_cost.services.annotation import annotate_routes
from trip_cost.services.cache import ResultCache, get_trip_cache
from trip_cost.services.directions import DirectionsClient
from trip_cost.services.fuel_prices import FuelPriceResolver
from trip_cost.services.geocoding import GeocodingClient
from trip_cost.services.normalizer import NormalizedTrip, normalize_trip
from trip_cost.services.sorting import sort_routes
from trip_cost.services.stops import StopLocator
from trip_cost.services.types import LocatedStop, Route, RouteCandidate, RoutingOptions

logger = logging.getLogger(__name__)


class TripCostService:
    """Runs the trip cost pipeline for one request.

    normalize -> cache lookup -> fuel price -> outbound (and return) routes ->
    annotate -> sort -> locate stops -> cache store. Any failure before the
    store propagates and leaves the cache untouched.
    """

    def __init__(
        self,
        price_resolver: FuelPriceResolver | None = None,
        directions_client: DirectionsClient | None = None,
        stop_locator: StopLocator | None = None,
        cache: ResultCache | None = None,
    ) -> None:
        geocoding_client = GeocodingClient()
        self.price_resolver = price_resolver or FuelPriceResolver(geocoding_client=geocoding_client)
        self.directions_client = directions_client or DirectionsClient()
        self.stop_locator = stop_locator or StopLocator(geocoding_client=geocoding_client)
        self.cache = cache if cache is not None else get_trip_cache()

    def estimate(self, request: TripRequest) -> TripResultResponse:
        started = time.perf_counter()
        trip = normalize_trip(request)

        computed = False

        def compute() -> TripResultResponse:
            nonlocal computed
            logger.info("Cache MISS [%s]", trip.fingerprint)
            result = self._compute(trip)
            computed = True
            return result

        result = self.cache.get_or_compute(trip.fingerprint, compute)
        if computed:
            logger.info("Cache SET [%s] (took %.0f ms)", trip.fingerprint, _elapsed_ms(started))
        else:
            logger.info("Cache HIT [%s] (took %.0f ms)", trip.fingerprint, _elapsed_ms(started))
        return result

    def _compute(self, trip: NormalizedTrip) -> TripResultResponse:
        request = trip.request
        quote = self.price_resolver.resolve(trip)

        options = RoutingOptions(
            units=request.units,
            use_toll_pass=request.use_ezpass,
            avoid_tolls=request.avoid_tolls,
        )
        stop_addresses = trip.stop_addresses

        outbound = self.directions_client.compute_routes(
            request.origin, request.destination, stop_addresses, options
        )
        inbound: list[RouteCandidate] = []
        if request.include_round_trip:
            inbound = self.directions_client.compute_routes(
                request.destination, request.origin, list(reversed(stop_addresses)), options
            )

        fuel_efficiency = float(request.fuel_efficiency)
        outbound_routes = sort_routes(
            annotate_routes(outbound, fuel_efficiency, quote.price_per_gallon),
            request.preferred_route_type,
        )
        return_routes = sort_routes(
            annotate_routes(inbound, fuel_efficiency, quote.price_per_gallon),
            request.preferred_route_type,
        )

        located_stops = self.stop_locator.locate(trip.stops)

        return TripResultResponse(
            origin=request.origin,
            destination=request.destination,
            round_trip=request.include_round_trip,
            origin_state_used=quote.region,
            fuel_price=round(quote.price_per_gallon, 3),
            fuel_price_source=quote.source,
            fuel_price_period=quote.period,
            fuel_type=request.fuel_type,
            units=request.units,
            preferred_route_type=request.preferred_route_type or "none",
            outbound_routes=[_route_response(route) for route in outbound_routes],
            return_routes=[_route_response(route) for route in return_routes],
            stops=[_stop_response(stop) for stop in located_stops],
        )


def _route_response(route: Route) -> RouteResponse:
    return RouteResponse(
        id=route.id,
        summary=route.summary,
        distance=round(route.distance, 2),
        distance_units=route.distance_units,
        duration_min=route.duration_minutes,
        fuel_used=round(route.fuel_used, 2),
        estimated_cost=round(route.estimated_cost, 2),
        estimated_toll=round(route.estimated_toll, 2) if route.estimated_toll is not None else None,
        total_cost=round(route.total_cost, 2) if route.total_cost is not None else None,
        route_type=route.route_type,
        tags=list(route.tags),
        path=route.path,
    )


def _stop_response(stop: LocatedStop) -> StopResponse:
    return StopResponse(
        address=stop.address,
        state=stop.state,
        path=[(stop.point.latitude, stop.point.longitude)],
    )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
