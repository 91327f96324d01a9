from __future__ import annotations

from typing import Callable

from trip_cost.services.types import Route


def _cheapest_key(route: Route) -> float:
    if route.total_cost is not None:
        return route.total_cost
    return route.estimated_cost or 0.0


SORT_KEYS: dict[str, Callable[[Route], float]] = {
    "fastest": lambda route: route.duration_minutes,
    "shortest": lambda route: route.distance,
    "fuel_efficient": lambda route: route.estimated_cost,
    "cheapest": _cheapest_key,
}


def sort_routes(routes: list[Route], criterion: str | None) -> list[Route]:
    """Return a new list ordered by ``criterion``; ``none`` keeps input order."""
    key = SORT_KEYS.get(criterion or "none")
    if key is None:
        return list(routes)
    return sorted(routes, key=key)
