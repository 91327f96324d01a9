from __future__ import annotations

import httpx
import pytest

from trip_cost.exceptions import UpstreamUnavailableError, VehicleNotFoundError
from trip_cost.services.cache import ResultCache
from trip_cost.services.vehicles import FuelEconomyClient, VehicleCatalog


class FakeFuelEconomyClient:
    def __init__(self, menus, vehicles, failing_models=()):
        self.menus = menus
        self.vehicles = vehicles
        self.failing_models = set(failing_models)
        self.calls = []

    def menu(self, kind, **params):
        self.calls.append((kind, params))
        if params.get("model") in self.failing_models:
            raise UpstreamUnavailableError("Vehicle data request failed")
        key = (kind, params.get("model"))
        return self.menus.get(key, [])

    def vehicle(self, vehicle_id):
        self.calls.append(("vehicle", vehicle_id))
        return self.vehicles.get(vehicle_id, {})


@pytest.fixture
def client():
    return FakeFuelEconomyClient(
        menus={
            ("year", None): [{"text": "2023", "value": "2023"}, {"text": "2025", "value": "2025"}],
            ("make", None): [{"text": "Honda", "value": "Honda"}],
            ("model", None): [
                {"text": "Civic", "value": "Civic"},
                {"text": "Clarity", "value": "Clarity"},
                {"text": "Ridgeline", "value": "Ridgeline"},
            ],
            ("options", "Civic"): [{"text": "Auto (CVT)", "value": "46001"}],
            ("options", "Clarity"): [{"text": "Auto", "value": "46002"}],
        },
        vehicles={"46001": {"comb08": "36"}, "46002": {"comb08": ""}},
        failing_models={"Ridgeline"},
    )


@pytest.fixture
def catalog(client, clock):
    return VehicleCatalog(client=client, models_cache=ResultCache(86400, clock=clock))


def test_years_are_newest_first(catalog) -> None:
    assert catalog.years() == [2025, 2023]


def test_makes_and_models(catalog) -> None:
    assert catalog.makes(2024) == ["Honda"]
    assert catalog.models(2024, "Honda") == ["Civic", "Clarity", "Ridgeline"]


def test_combined_mpg_uses_first_option(catalog) -> None:
    assert catalog.combined_mpg(2024, "Honda", "Civic") == pytest.approx(36.0)


def test_missing_vehicle_and_missing_mpg(catalog) -> None:
    with pytest.raises(VehicleNotFoundError, match="Vehicle not found"):
        catalog.combined_mpg(2024, "Honda", "Element")
    with pytest.raises(VehicleNotFoundError, match="MPG data"):
        catalog.combined_mpg(2024, "Honda", "Clarity")


def test_models_with_mpg_filters_and_caches(catalog, client) -> None:
    assert catalog.models_with_mpg(2024, "Honda") == ["Civic"]
    calls = len(client.calls)

    assert catalog.models_with_mpg(2024, "Honda") == ["Civic"]
    assert len(client.calls) == calls


def test_single_item_menu_is_normalized(mocker) -> None:
    response = httpx.Response(
        200,
        json={"menuItem": {"text": "Civic", "value": "Civic"}},
        request=httpx.Request("GET", "https://fueleconomy.example/menu/model"),
    )
    get = mocker.patch("trip_cost.services.vehicles.httpx.get", return_value=response)

    items = FuelEconomyClient().menu("model", year=2024, make="Honda")

    assert items == [{"text": "Civic", "value": "Civic"}]
    assert get.call_args.kwargs["headers"]["Accept"] == "application/json"
    assert get.call_args.kwargs["params"] == {"year": 2024, "make": "Honda"}


def test_empty_body_is_an_empty_menu(mocker) -> None:
    response = httpx.Response(
        200,
        content=b"",
        request=httpx.Request("GET", "https://fueleconomy.example/menu/options"),
    )
    mocker.patch("trip_cost.services.vehicles.httpx.get", return_value=response)

    assert FuelEconomyClient().menu("options", year=2024, make="Honda", model="Nope") == []
