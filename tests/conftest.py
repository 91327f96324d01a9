from __future__ import annotations

import pytest
from django.core.cache import cache
from django.test import Client

from trip_cost import views
from trip_cost.exceptions import InvalidLocationError
from trip_cost.services.types import GeocodeResult, GeoPoint, RouteCandidate


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGeocoder:
    def __init__(self, results: dict[str, GeocodeResult | Exception] | None = None) -> None:
        self.results = results or {}
        self.calls: list[str] = []

    def geocode(self, address: str) -> GeocodeResult:
        self.calls.append(address)
        result = self.results.get(address)
        if result is None:
            raise InvalidLocationError("Location could not be resolved")
        if isinstance(result, Exception):
            raise result
        return result


class FakePriceClient:
    def __init__(self, points: dict[tuple[str, str], dict | None] | None = None) -> None:
        self.points = points or {}
        self.calls: list[tuple[str, str]] = []

    def latest_weekly_point(self, product_code: str, region: str) -> dict | None:
        self.calls.append((product_code, region))
        return self.points.get((product_code, region))


class FakeDirections:
    def __init__(self, routes: list[RouteCandidate] | None = None, error: Exception | None = None):
        self.routes = routes or []
        self.error = error
        self.calls: list[tuple[str, str, list[str]]] = []

    def compute_routes(self, origin, destination, intermediates, options):
        self.calls.append((origin, destination, list(intermediates)))
        if self.error is not None:
            raise self.error
        return list(self.routes)


def geocoded(latitude: float, longitude: float, region_code: str | None) -> GeocodeResult:
    return GeocodeResult(point=GeoPoint(latitude=latitude, longitude=longitude), region_code=region_code)


def candidate(
    distance: float,
    duration: int,
    toll: float | None = 0.0,
    summary: str = "I-95 N",
) -> RouteCandidate:
    return RouteCandidate(
        summary=summary,
        distance=distance,
        distance_units="miles",
        duration_minutes=duration,
        toll_usd=toll,
        path=[(40.0, -74.0), (40.5 + distance / 1000.0, -73.5)],
    )


@pytest.fixture
def api_client() -> Client:
    return Client()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _reset_shared_state():
    cache.clear()
    views._trip_service = None
    views._price_resolver = None
    views._vehicle_catalog = None
    yield
    cache.clear()
