from __future__ import annotations

import logging

from trip_cost.exceptions import InvalidLocationError, UpstreamUnavailableError
from trip_cost.schemas import StopRequest
from trip_cost.services.geocoding import GeocodingClient
from trip_cost.services.types import LocatedStop

logger = logging.getLogger(__name__)


class StopLocator:
    def __init__(self, geocoding_client: GeocodingClient | None = None) -> None:
        self.geocoding_client = geocoding_client or GeocodingClient()

    def locate(self, stops: list[StopRequest]) -> list[LocatedStop]:
        """Geocode stops in order, dropping any that fail to resolve."""
        located: list[LocatedStop] = []
        for stop in stops:
            try:
                result = self.geocoding_client.geocode(stop.address)
            except (InvalidLocationError, UpstreamUnavailableError) as exc:
                logger.warning("Failed to geocode stop %r: %s", stop.address, exc)
                continue
            located.append(LocatedStop(address=stop.address, state=stop.state, point=result.point))
        return located
