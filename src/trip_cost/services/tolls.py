"""Toll advisory parsing for Google Routes responses.

A route's toll figure has three states:

* a float, when the provider priced the tolls;
* ``0.0``, when no toll info is attached anywhere (a toll-free route);
* ``None``, when toll info is attached but carries no price.
"""

from __future__ import annotations

from typing import Any

NANOS_PER_UNIT = 1e9


def money_to_number(money: Any) -> float:
    if not money:
        return 0.0
    if isinstance(money, dict):
        if "units" not in money and "nanos" not in money:
            return 0.0
        try:
            return float(money.get("units") or 0) + float(money.get("nanos") or 0) / NANOS_PER_UNIT
        except (TypeError, ValueError):
            return 0.0
    try:
        return float(money)
    except (TypeError, ValueError):
        return 0.0


def toll_info_usd(toll_info: Any) -> float | None:
    """Sum a ``tollInfo`` block, preferring USD entries. ``None`` if unpriced."""
    if not isinstance(toll_info, dict) or not toll_info.get("estimatedPrice"):
        return None

    prices = toll_info["estimatedPrice"]
    if not isinstance(prices, list):
        prices = [prices]

    usd = [
        price
        for price in prices
        if not isinstance(price, dict) or price.get("currencyCode") in (None, "", "USD")
    ]
    return sum(money_to_number(price) for price in (usd or prices))


def route_toll_usd(route: dict[str, Any]) -> float | None:
    route_toll_info = (route.get("travelAdvisory") or {}).get("tollInfo")
    leg_toll_infos = [
        (leg.get("travelAdvisory") or {}).get("tollInfo") for leg in route.get("legs") or []
    ]
    leg_toll_infos = [info for info in leg_toll_infos if info is not None]

    if route_toll_info is None and not leg_toll_infos:
        return 0.0

    route_price = toll_info_usd(route_toll_info)
    if route_price:
        return route_price

    leg_prices = [toll_info_usd(info) for info in leg_toll_infos]
    priced = [price for price in leg_prices if price is not None]
    if priced:
        return sum(priced)
    if route_price is not None:
        return route_price
    return None
