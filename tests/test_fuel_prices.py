from __future__ import annotations

import httpx
import pytest

from conftest import FakeGeocoder, FakePriceClient, geocoded
from trip_cost.exceptions import NoPriceDataError, UpstreamUnavailableError
from trip_cost.schemas import TripRequest
from trip_cost.services.fuel_prices import EiaFuelPriceClient, FuelPriceResolver
from trip_cost.services.normalizer import normalize_trip


def _trip(**overrides):
    payload = {
        "origin": "Austin, TX",
        "destination": "Houston, TX",
        "originState": "TX",
        "destinationState": "TX",
        "fuelEfficiency": 25,
        "fuelType": "Regular",
    }
    payload.update(overrides)
    return normalize_trip(TripRequest.model_validate(payload))


def _resolver(points, region_code="TX"):
    geocoder = FakeGeocoder({"Austin, TX": geocoded(30.27, -97.74, region_code)})
    prices = FakePriceClient(points)
    return FuelPriceResolver(geocoding_client=geocoder, price_client=prices), geocoder, prices


def test_override_price_skips_all_lookups() -> None:
    resolver, geocoder, prices = _resolver({})

    quote = resolver.resolve(_trip(fuelPrice=3.19))

    assert quote.price_per_gallon == pytest.approx(3.19)
    assert quote.source == "override"
    assert geocoder.calls == []
    assert prices.calls == []


def test_single_state_trip_uses_state_price() -> None:
    resolver, _, prices = _resolver({("EPMR", "TX"): {"value": "2.891", "period": "2026-10-12"}})

    quote = resolver.resolve(_trip())

    assert quote.price_per_gallon == pytest.approx(2.891)
    assert quote.region == "TX"
    assert quote.source == "regional"
    assert quote.period == "2026-10-12"
    assert prices.calls == [("EPMR", "TX")]


def test_missing_state_price_falls_back_to_national() -> None:
    resolver, _, prices = _resolver({("EPMR", "NUS"): {"value": 3.105, "period": "2026-10-12"}})

    quote = resolver.resolve(_trip())

    assert quote.price_per_gallon == pytest.approx(3.105)
    assert quote.region == "NUS"
    assert quote.source == "national_fallback"
    assert prices.calls == [("EPMR", "TX"), ("EPMR", "NUS")]


def test_multi_state_trip_prices_nationally() -> None:
    resolver, _, prices = _resolver({("EPD2D", "NUS"): {"value": "3.750", "period": "2026-10-12"}})

    quote = resolver.resolve(_trip(destination="Tulsa, OK", destinationState="OK", fuelType="Diesel"))

    assert quote.region == "NUS"
    assert quote.source == "national"
    assert prices.calls == [("EPD2D", "NUS")]


def test_declared_state_must_match_geocoded_origin() -> None:
    resolver, _, prices = _resolver({("EPMR", "NUS"): {"value": "3.1"}}, region_code="OK")

    quote = resolver.resolve(_trip())

    assert quote.region == "NUS"
    assert prices.calls == [("EPMR", "NUS")]


def test_ungeocodable_origin_prices_nationally() -> None:
    resolver = FuelPriceResolver(
        geocoding_client=FakeGeocoder({}),
        price_client=FakePriceClient({("EPMR", "NUS"): {"value": "3.1"}}),
    )

    assert resolver.resolve(_trip()).region == "NUS"


def test_no_price_after_fallback_raises() -> None:
    resolver, _, prices = _resolver({("EPMR", "NUS"): None})

    with pytest.raises(NoPriceDataError):
        resolver.resolve(_trip())
    assert prices.calls == [("EPMR", "TX"), ("EPMR", "NUS")]


def test_non_numeric_price_raises() -> None:
    resolver, _, _ = _resolver({("EPMR", "TX"): {"value": "NA", "period": "2026-10-12"}})

    with pytest.raises(NoPriceDataError):
        resolver.resolve(_trip())


def test_geocoding_outage_is_surfaced() -> None:
    geocoder = FakeGeocoder({"Austin, TX": UpstreamUnavailableError("down")})
    resolver = FuelPriceResolver(geocoding_client=geocoder, price_client=FakePriceClient())

    with pytest.raises(UpstreamUnavailableError):
        resolver.resolve(_trip())


def test_eia_client_maps_states_to_duoarea(mocker) -> None:
    response = httpx.Response(
        200,
        json={"response": {"data": [{"period": "2026-10-12", "value": "2.95"}]}},
        request=httpx.Request("GET", "https://api.eia.example/"),
    )
    get = mocker.patch("trip_cost.services.fuel_prices.httpx.get", return_value=response)

    point = EiaFuelPriceClient().latest_weekly_point("EPMR", "CA")

    assert point == {"period": "2026-10-12", "value": "2.95"}
    params = get.call_args.kwargs["params"]
    assert params["facets[duoarea][]"] == "SCA"
    assert params["facets[product][]"] == "EPMR"
    assert params["sort[0][direction]"] == "desc"
    assert params["length"] == 1


def test_eia_client_returns_none_without_rows(mocker) -> None:
    response = httpx.Response(
        200,
        json={"response": {"data": []}},
        request=httpx.Request("GET", "https://api.eia.example/"),
    )
    mocker.patch("trip_cost.services.fuel_prices.httpx.get", return_value=response)

    assert EiaFuelPriceClient().latest_weekly_point("EPMR", "NUS") is None
