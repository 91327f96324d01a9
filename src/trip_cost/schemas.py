from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RouteCriterion = Literal["none", "fastest", "shortest", "fuel_efficient", "cheapest"]
DistanceUnits = Literal["miles", "km"]


class StopRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    address: str = ""
    state: str = ""

    @field_validator("address", "state", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value


class TripRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    origin: str = Field(min_length=1, max_length=300)
    destination: str = Field(min_length=1, max_length=300)
    origin_state: str | None = Field(default=None, alias="originState", max_length=2)
    destination_state: str | None = Field(default=None, alias="destinationState", max_length=2)
    fuel_efficiency: float | None = Field(default=None, alias="fuelEfficiency", gt=0.0, le=500.0)
    fuel_price: float | None = Field(default=None, alias="fuelPrice", gt=0.0, le=100.0)
    fuel_type: str = Field(default="Regular", alias="fuelType")
    units: DistanceUnits = "miles"
    include_round_trip: bool = Field(default=False, alias="includeRoundTrip")
    preferred_route_type: RouteCriterion | None = Field(default=None, alias="preferredRouteType")
    stops: list[StopRequest] = Field(default_factory=list)
    use_ezpass: bool = Field(default=True, alias="useEzpass")
    avoid_tolls: bool = Field(default=False, alias="avoidTolls")

    @field_validator(
        "origin_state",
        "destination_state",
        "fuel_efficiency",
        "fuel_price",
        "preferred_route_type",
        mode="before",
    )
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("stops", mode="before")
    @classmethod
    def _null_stops(cls, value: Any) -> Any:
        return [] if value is None else value


class RouteResponse(BaseModel):
    id: str
    summary: str
    distance: float
    distance_units: DistanceUnits
    duration_min: int
    fuel_used: float
    estimated_cost: float
    estimated_toll: float | None
    total_cost: float | None
    route_type: str | None
    tags: list[str]
    path: list[tuple[float, float]]


class StopResponse(BaseModel):
    address: str
    state: str
    path: list[tuple[float, float]]


class TripResultResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: str
    destination: str
    round_trip: bool
    origin_state_used: str | None
    fuel_price: float
    fuel_price_source: str
    fuel_price_period: str | None
    fuel_type: str
    units: DistanceUnits
    preferred_route_type: RouteCriterion
    outbound_routes: list[RouteResponse]
    return_routes: list[RouteResponse]
    stops: list[StopResponse]


class FuelPriceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str | None
    fuel_price: float
    fuel_type: str = Field(serialization_alias="fuelType")
    product: str


class MpgRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    year: int = Field(ge=1984, le=2100)
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=200)


class MpgResponse(BaseModel):
    mpg: float
