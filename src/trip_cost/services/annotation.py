from __future__ import annotations

import hashlib
import json

from trip_cost.services.types import Route, RouteCandidate

FUEL_TOLERANCE_GALLONS = 1e-4

TAG_FASTEST = "fastest"
TAG_SHORTEST = "shortest"
TAG_FUEL_EFFICIENT = "fuel_efficient"


def annotate_routes(
    candidates: list[RouteCandidate],
    fuel_efficiency: float,
    fuel_price: float,
) -> list[Route]:
    """Cost each sibling route and tag it against the batch minimums."""
    if not candidates:
        return []

    fuel_used = [candidate.distance / fuel_efficiency for candidate in candidates]
    min_duration = min(candidate.duration_minutes for candidate in candidates)
    min_distance = min(candidate.distance for candidate in candidates)
    min_fuel = min(fuel_used)

    routes: list[Route] = []
    for candidate, gallons in zip(candidates, fuel_used):
        tags: list[str] = []
        if candidate.duration_minutes == min_duration:
            tags.append(TAG_FASTEST)
        if candidate.distance == min_distance:
            tags.append(TAG_SHORTEST)
        if abs(gallons - min_fuel) < FUEL_TOLERANCE_GALLONS:
            tags.append(TAG_FUEL_EFFICIENT)

        fuel_cost = gallons * fuel_price
        routes.append(
            Route(
                id=route_id(candidate),
                summary=candidate.summary,
                distance=candidate.distance,
                distance_units=candidate.distance_units,
                duration_minutes=candidate.duration_minutes,
                fuel_used=gallons,
                estimated_cost=fuel_cost,
                estimated_toll=candidate.toll_usd,
                total_cost=fuel_cost + (candidate.toll_usd or 0.0),
                path=list(candidate.path),
                tags=tuple(tags),
            )
        )
    return routes


def route_id(candidate: RouteCandidate) -> str:
    start = list(candidate.path[0]) if candidate.path else []
    end = list(candidate.path[-1]) if candidate.path else []
    encoded = json.dumps(
        [start, end, candidate.duration_minutes, round(candidate.distance, 2)],
        separators=(",", ":"),
    ).encode()
    return hashlib.sha1(encoded).hexdigest()[:12]
