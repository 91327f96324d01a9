from __future__ import annotations

import json
import logging
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from pydantic import ValidationError

from trip_cost.exceptions import (
    InvalidTripRequestError,
    NoPriceDataError,
    UpstreamUnavailableError,
    VehicleNotFoundError,
)
from trip_cost.schemas import FuelPriceResponse, MpgRequest, MpgResponse, TripRequest
from trip_cost.services.cache import get_trip_cache
from trip_cost.services.fuel_prices import AD_HOC_PRODUCT_CODES, FuelPriceResolver
from trip_cost.services.planner import TripCostService
from trip_cost.services.vehicles import VehicleCatalog

logger = logging.getLogger(__name__)

_trip_service: TripCostService | None = None
_price_resolver: FuelPriceResolver | None = None
_vehicle_catalog: VehicleCatalog | None = None


def get_trip_service() -> TripCostService:
    global _trip_service
    if _trip_service is None:
        _trip_service = TripCostService()
    return _trip_service


def get_price_resolver() -> FuelPriceResolver:
    global _price_resolver
    if _price_resolver is None:
        _price_resolver = FuelPriceResolver()
    return _price_resolver


def get_vehicle_catalog() -> VehicleCatalog:
    global _vehicle_catalog
    if _vehicle_catalog is None:
        _vehicle_catalog = VehicleCatalog()
    return _vehicle_catalog


@require_GET
def health_view(_: HttpRequest) -> HttpResponse:
    return JsonResponse({"status": "ok", "cache": {"trip_results": len(get_trip_cache())}})


@csrf_exempt
@require_POST
def optimize_route_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        trip_request = TripRequest.model_validate(payload)
    except ValidationError as exc:
        return _validation_error_response(exc)

    service = get_trip_service()
    try:
        result = service.estimate(trip_request)
    except InvalidTripRequestError as exc:
        return _error_response("validation_error", str(exc), status=400)
    except NoPriceDataError as exc:
        logger.error("Fuel price resolution failed: %s", exc)
        return _error_response("no_price_data", str(exc), status=500)
    except UpstreamUnavailableError as exc:
        logger.error("Error in /optimize-route: %s", exc)
        return _error_response(
            "upstream_error", "Error processing fuel cost estimation", status=500
        )

    return JsonResponse(result.model_dump(mode="json"), status=200)


@require_GET
def fuel_price_view(request: HttpRequest) -> HttpResponse:
    requested = request.GET.get("fuelType") or "Regular"
    product_code = AD_HOC_PRODUCT_CODES.get(requested, AD_HOC_PRODUCT_CODES["Regular"])

    try:
        quote = get_price_resolver().national_quote(product_code)
    except UpstreamUnavailableError as exc:
        logger.error("EIA API error: %s", exc)
        return _error_response("upstream_error", "Failed to fetch fuel price", status=500)

    if quote is None:
        return _error_response("no_price_data", "No fuel price data available", status=404)

    response = FuelPriceResponse(
        date=quote.period,
        fuel_price=round(quote.price_per_gallon, 2),
        fuel_type=requested,
        product=product_code,
    )
    return JsonResponse(response.model_dump(mode="json", by_alias=True), status=200)


@csrf_exempt
@require_POST
def get_mpg_view(request: HttpRequest) -> HttpResponse:
    payload = _parse_json_payload(request)
    if isinstance(payload, JsonResponse):
        return payload

    try:
        mpg_request = MpgRequest.model_validate(payload)
    except ValidationError as exc:
        return _validation_error_response(exc)

    try:
        mpg = get_vehicle_catalog().combined_mpg(
            mpg_request.year, mpg_request.make, mpg_request.model
        )
    except VehicleNotFoundError as exc:
        return _error_response("not_found", str(exc), status=404)
    except UpstreamUnavailableError as exc:
        logger.error("Error fetching MPG: %s", exc)
        return _error_response("upstream_error", "Failed to fetch MPG data", status=500)

    return JsonResponse(MpgResponse(mpg=mpg).model_dump(mode="json"), status=200)


@require_GET
def vehicle_years_view(_: HttpRequest) -> HttpResponse:
    try:
        years = get_vehicle_catalog().years()
    except UpstreamUnavailableError as exc:
        logger.error("Failed to fetch vehicle years: %s", exc)
        return _error_response("upstream_error", "Could not retrieve available years", status=500)
    return JsonResponse({"years": years})


@require_GET
def vehicle_makes_view(request: HttpRequest) -> HttpResponse:
    year = _int_param(request, "year")
    if year is None:
        return _error_response("validation_error", "Missing year parameter", status=400)

    try:
        makes = get_vehicle_catalog().makes(year)
    except UpstreamUnavailableError as exc:
        logger.error("Error fetching makes: %s", exc)
        return _error_response("upstream_error", "Failed to fetch vehicle makes", status=500)
    return JsonResponse({"makes": makes})


@require_GET
def vehicle_models_view(request: HttpRequest) -> HttpResponse:
    year = _int_param(request, "year")
    make = (request.GET.get("make") or "").strip()
    if year is None or not make:
        return _error_response("validation_error", "Missing year or make parameter", status=400)

    try:
        models = get_vehicle_catalog().models_with_mpg(year, make)
    except UpstreamUnavailableError as exc:
        logger.error("Error fetching valid models: %s", exc)
        return _error_response(
            "upstream_error", "Failed to fetch valid vehicle models", status=500
        )
    return JsonResponse({"models": models})


def _parse_json_payload(request: HttpRequest) -> dict[str, Any] | JsonResponse:
    if not request.body:
        return {}

    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        return _error_response("invalid_json", "Request body must be valid JSON", status=400)

    if not isinstance(payload, dict):
        return _error_response("invalid_json", "JSON body must be an object", status=400)

    return payload


def _int_param(request: HttpRequest, name: str) -> int | None:
    try:
        return int(request.GET.get(name, ""))
    except ValueError:
        return None


def _validation_error_response(exc: ValidationError) -> JsonResponse:
    return JsonResponse(
        {
            "error": {
                "code": "validation_error",
                "message": "Invalid request payload",
                "details": exc.errors(include_url=False, include_context=False),
            }
        },
        status=400,
    )


def _error_response(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)
