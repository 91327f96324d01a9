"""Django settings for the trip cost estimator project."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-production")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if host]

INSTALLED_APPS = [
    "trip_cost",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES: list[dict] = []

WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

DATABASES: dict[str, dict] = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "trip-cost-cache",
    }
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "trip_cost": {
            "handlers": ["console"],
            "level": os.getenv("TRIP_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}

GOOGLE_MAPS_BACKEND_KEY = os.getenv("GOOGLE_MAPS_BACKEND_KEY", "")
GOOGLE_GEOCODING_BASE_URL = os.getenv(
    "GOOGLE_GEOCODING_BASE_URL", "https://maps.googleapis.com/maps/api/geocode"
)
GOOGLE_ROUTES_BASE_URL = os.getenv("GOOGLE_ROUTES_BASE_URL", "https://routes.googleapis.com")
GEOCODING_TIMEOUT_SECONDS = float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "12"))
ROUTES_TIMEOUT_SECONDS = float(os.getenv("ROUTES_TIMEOUT_SECONDS", "20"))

EIA_API_KEY = os.getenv("EIA_API_KEY", "")
EIA_BASE_URL = os.getenv("EIA_BASE_URL", "https://api.eia.gov/v2/petroleum/pri/gnd/data")
EIA_TIMEOUT_SECONDS = float(os.getenv("EIA_TIMEOUT_SECONDS", "12"))

FUEL_ECONOMY_BASE_URL = os.getenv(
    "FUEL_ECONOMY_BASE_URL", "https://www.fueleconomy.gov/ws/rest/vehicle"
)
FUEL_ECONOMY_TIMEOUT_SECONDS = float(os.getenv("FUEL_ECONOMY_TIMEOUT_SECONDS", "12"))

TRIP_CACHE_TTL_SECONDS = int(os.getenv("TRIP_CACHE_TTL_SECONDS", "3600"))
TRIP_CACHE_MAX_ENTRIES = int(os.getenv("TRIP_CACHE_MAX_ENTRIES", "1000"))
VEHICLE_MODELS_CACHE_TTL_SECONDS = int(os.getenv("VEHICLE_MODELS_CACHE_TTL_SECONDS", "86400"))
GEOCODE_CACHE_TTL_SECONDS = int(os.getenv("GEOCODE_CACHE_TTL_SECONDS", "86400"))
