"""Fetch the current ISS position from the wheretheiss.at REST API."""

import logging
import math
from dataclasses import dataclass

import requests

import config

logger = logging.getLogger(__name__)

# API reports altitude in km
METERS_PER_KM = 1000


class PositionFetchError(Exception):
    """Raised when the ISS position could not be retrieved or decoded."""


@dataclass(frozen=True)
class IssPosition:
    latitude: float
    longitude: float
    altitude_m: float

    @property
    def altitude_km(self) -> float:
        return self.altitude_m / METERS_PER_KM

    @classmethod
    def zero(cls) -> "IssPosition":
        return cls(0.0, 0.0, 0.0)

    def is_zero(self) -> bool:
        return self == IssPosition.zero()


def parse_position(payload) -> IssPosition:
    """Build an IssPosition from a decoded API response body."""
    if not isinstance(payload, dict):
        raise PositionFetchError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        lat = float(payload["latitude"])
        lon = float(payload["longitude"])
        alt_km = float(payload["altitude"])
    except KeyError as e:
        raise PositionFetchError(f"Missing field {e} in response") from e
    except (TypeError, ValueError, OverflowError) as e:
        raise PositionFetchError(f"Non-numeric field in response: {e}") from e

    alt_m = alt_km * METERS_PER_KM
    if not all(math.isfinite(v) for v in (lat, lon, alt_m)):
        raise PositionFetchError(f"Non-finite coordinates in response: {lat}, {lon}, {alt_km}")

    return IssPosition(lat, lon, alt_m)


def request_iss_position(
    url: str = config.API_URL,
    timeout: float = config.API_TIMEOUT_S,
    session=None,
) -> IssPosition:
    """
    Perform a blocking GET against the position endpoint.

    Raises PositionFetchError on any network, HTTP status or decoding problem.
    """
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        result = response.json()
    except requests.RequestException as e:
        raise PositionFetchError(f"Request to {url} failed: {e}") from e
    except ValueError as e:
        # requests' JSONDecodeError is a ValueError
        raise PositionFetchError(f"Invalid JSON from {url}: {e}") from e

    return parse_position(result)


def get_iss_position(
    url: str = config.API_URL,
    timeout: float = config.API_TIMEOUT_S,
    session=None,
) -> IssPosition:
    """
    Get the current ISS latitude, longitude and altitude.

    Failures are not retried or raised: they are logged and the zero position
    is returned, so a failed poll shows up as a point at 0°, 0° on the track.
    """
    try:
        return request_iss_position(url, timeout, session)
    except PositionFetchError as e:
        logger.warning("There was a problem retrieving current ISS position: %s", e)
        return IssPosition.zero()
