class TripCostError(Exception):
    """Base exception for trip cost estimation errors."""


class InvalidTripRequestError(TripCostError):
    """Raised when a trip request is missing required input."""


class InvalidLocationError(TripCostError):
    """Raised when an address cannot be resolved to a location."""


class UpstreamUnavailableError(TripCostError):
    """Raised when a geocoding, directions, price or vehicle API call fails."""


class NoPriceDataError(TripCostError):
    """Raised when no fuel price is available after the national fallback."""


class VehicleNotFoundError(TripCostError):
    """Raised when a vehicle or its MPG figure cannot be found."""
