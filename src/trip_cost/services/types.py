from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

FuelPriceSource = Literal["override", "regional", "national", "national_fallback"]


@dataclass(slots=True, frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(slots=True, frozen=True)
class GeocodeResult:
    point: GeoPoint
    region_code: str | None


@dataclass(slots=True, frozen=True)
class FuelPriceQuote:
    price_per_gallon: float
    region: str | None
    period: str | None
    source: FuelPriceSource


@dataclass(slots=True, frozen=True)
class RoutingOptions:
    units: Literal["miles", "km"] = "miles"
    use_toll_pass: bool = True
    avoid_tolls: bool = False


@dataclass(slots=True, frozen=True)
class RouteCandidate:
    summary: str
    distance: float
    distance_units: Literal["miles", "km"]
    duration_minutes: int
    toll_usd: float | None
    path: list[tuple[float, float]] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class Route:
    id: str
    summary: str
    distance: float
    distance_units: Literal["miles", "km"]
    duration_minutes: int
    fuel_used: float
    estimated_cost: float
    estimated_toll: float | None
    total_cost: float | None
    path: list[tuple[float, float]]
    tags: tuple[str, ...] = ()

    @property
    def route_type(self) -> str | None:
        return ",".join(self.tags) if self.tags else None


@dataclass(slots=True, frozen=True)
class LocatedStop:
    address: str
    state: str
    point: GeoPoint
