from __future__ import annotations

import logging
from typing import Any

import httpx
from django.conf import settings

from trip_cost.exceptions import UpstreamUnavailableError, VehicleNotFoundError
from trip_cost.services.cache import ResultCache, get_vehicle_models_cache

logger = logging.getLogger(__name__)


class FuelEconomyClient:
    """Vehicle menus and MPG figures from fueleconomy.gov."""

    def __init__(self) -> None:
        self.base_url = settings.FUEL_ECONOMY_BASE_URL.rstrip("/")
        self.timeout = settings.FUEL_ECONOMY_TIMEOUT_SECONDS

    def menu(self, kind: str, **params: Any) -> list[dict[str, str]]:
        payload = self._get(f"/menu/{kind}", params=params)
        items = (payload or {}).get("menuItem") or []
        # Single-entry menus come back as a bare object.
        if isinstance(items, dict):
            items = [items]
        return [item for item in items if isinstance(item, dict)]

    def vehicle(self, vehicle_id: str) -> dict[str, Any]:
        return self._get(f"/{vehicle_id}") or {}

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = httpx.get(
                f"{self.base_url}{path}",
                params=params,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            return response.json() if response.content else None
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Fuel economy request %s failed: %s", path, exc)
            raise UpstreamUnavailableError("Vehicle data request failed") from exc


class VehicleCatalog:
    def __init__(
        self,
        client: FuelEconomyClient | None = None,
        models_cache: ResultCache | None = None,
    ) -> None:
        self.client = client or FuelEconomyClient()
        self.models_cache = models_cache if models_cache is not None else get_vehicle_models_cache()

    def years(self) -> list[int]:
        years = []
        for item in self.client.menu("year"):
            try:
                years.append(int(item.get("value")))
            except (TypeError, ValueError):
                continue
        return sorted((year for year in years if year), reverse=True)

    def makes(self, year: int) -> list[str]:
        return [item["text"] for item in self.client.menu("make", year=year) if item.get("text")]

    def models(self, year: int, make: str) -> list[str]:
        return [
            item["text"]
            for item in self.client.menu("model", year=year, make=make)
            if item.get("text")
        ]

    def combined_mpg(self, year: int, make: str, model: str) -> float:
        options = self.client.menu("options", year=year, make=make, model=model)
        if not options or not options[0].get("value"):
            raise VehicleNotFoundError("Vehicle not found")

        mpg = _combined_mpg(self.client.vehicle(options[0]["value"]))
        if mpg is None:
            raise VehicleNotFoundError("MPG data not available for this vehicle")
        return mpg

    def models_with_mpg(self, year: int, make: str) -> list[str]:
        """Models for ``year``/``make`` that have at least one variant with MPG data."""
        cache_key = f"validModels:{year}:{make}"
        cached = self.models_cache.get(cache_key)
        if cached is not None:
            logger.info("Cached valid models hit: %s", cache_key)
            return cached

        all_models = self.models(year, make)
        valid_models = [model for model in all_models if self._has_mpg(year, make, model)]

        self.models_cache.set(cache_key, valid_models)
        logger.info("Filtered valid models: %d out of %d", len(valid_models), len(all_models))
        return valid_models

    def _has_mpg(self, year: int, make: str, model: str) -> bool:
        try:
            options = self.client.menu("options", year=year, make=make, model=model)
        except UpstreamUnavailableError as exc:
            logger.warning("Skipping model %r: %s", model, exc)
            return False

        for option in options:
            vehicle_id = option.get("value")
            if not vehicle_id:
                continue
            try:
                if _combined_mpg(self.client.vehicle(vehicle_id)) is not None:
                    return True
            except UpstreamUnavailableError as exc:
                logger.warning("Skipping vehicle ID %s for model %r: %s", vehicle_id, model, exc)
        return False


def _combined_mpg(vehicle: dict[str, Any]) -> float | None:
    try:
        mpg = float(vehicle.get("comb08"))
    except (TypeError, ValueError):
        return None
    return mpg if mpg > 0 else None
