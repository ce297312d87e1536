"""
Driving Estimate Module

Duration and distance between two coordinates. With a Google Routes API key
the estimate is traffic aware; without one it is a great-circle distance at
an assumed average speed.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6_371_000
AVERAGE_SPEED_MPS = 45_000 / 3600  # 45 km/h
MIN_DURATION_SECONDS = 60


@dataclass
class LatLng:
    lat: float
    lng: float


@dataclass
class RouteEstimate:
    duration_seconds: int
    distance_meters: int
    provider: str

    def as_response(self) -> dict:
        return {
            "durationSeconds": self.duration_seconds,
            "distanceMeters": self.distance_meters,
            "provider": self.provider,
        }


class RoutingProviderError(Exception):
    """The routing provider answered with a non-success status."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details


def haversine_meters(origin: LatLng, destination: LatLng) -> float:
    d_lat = math.radians(destination.lat - origin.lat)
    d_lng = math.radians(destination.lng - origin.lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.lat)) * math.cos(math.radians(destination.lat)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, unlike ``round()``."""
    return math.floor(value + 0.5)


def fallback_estimate(origin: LatLng, destination: LatLng) -> RouteEstimate:
    distance = haversine_meters(origin, destination)
    duration = max(MIN_DURATION_SECONDS, round_half_up(distance / AVERAGE_SPEED_MPS))
    return RouteEstimate(duration_seconds=duration, distance_meters=round_half_up(distance), provider="fallback")


def parse_duration(value: Optional[str]) -> int:
    """Routes API durations are strings such as ``"1234s"``."""
    try:
        return int(float((value or "0s").rstrip("s")))
    except ValueError:
        return 0


class GoogleRoutesClient:
    def __init__(self, api_key: str, url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def estimate(self, origin: LatLng, destination: LatLng, departure_time: Optional[str] = None) -> RouteEstimate:
        body = {
            "origin": {"location": {"latLng": {"latitude": origin.lat, "longitude": origin.lng}}},
            "destination": {"location": {"latLng": {"latitude": destination.lat, "longitude": destination.lng}}},
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
        }
        if departure_time:
            body["departureTime"] = departure_time

        resp = self.session.post(
            self.url,
            json=body,
            headers={
                "Content-Type": "application/json",
                "X-Goog-Api-Key": self.api_key,
                # Keep response small
                "X-Goog-FieldMask": "routes.duration,routes.distanceMeters",
            },
            timeout=self.timeout,
        )
        if not resp.ok:
            logger.error("Routes API failed with HTTP %s", resp.status_code)
            raise RoutingProviderError("Routes API failed", details=resp.text)

        data = resp.json() or {}
        route = (data.get("routes") or [{}])[0]
        return RouteEstimate(
            duration_seconds=parse_duration(route.get("duration")),
            distance_meters=int(route.get("distanceMeters") or 0),
            provider="google",
        )
