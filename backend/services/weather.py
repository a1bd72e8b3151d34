"""OpenMeteo client for current temperature at a coordinate.

Free API, no key required. One request per call, no retries: the caller
decides what to do with a failure.
"""

import logging

import httpx

from config import settings
from errors import UpstreamError, UpstreamErrorKind
from models import WeatherRecord

logger = logging.getLogger(__name__)


def fetch_current_temperature(
    lat: float,
    lon: float,
    timeout: float,
    base_url: str | None = None,
    client: httpx.Client | None = None,
) -> WeatherRecord:
    """Fetch the current 2m temperature for (lat, lon).

    The returned record carries the request coordinates, not the grid point
    OpenMeteo answers for, so the cache stays keyed on what was asked.
    `created_at` is left unset for the caller to stamp.
    """
    url = f"{base_url or settings.meteo_base_url}/v1/forecast"
    params = {"latitude": lat, "longitude": lon, "current": "temperature_2m"}

    try:
        if client is None:
            with httpx.Client(timeout=timeout) as own_client:
                resp = own_client.get(url, params=params)
        else:
            resp = client.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
    except httpx.TimeoutException as e:
        logger.warning("Weather fetch timed out for (%s, %s) after %ss", lat, lon, timeout)
        raise UpstreamError(UpstreamErrorKind.TIMEOUT, str(e) or "request timed out") from e
    except httpx.HTTPError as e:
        logger.warning("Weather fetch failed for (%s, %s): %s", lat, lon, e)
        raise UpstreamError(UpstreamErrorKind.TRANSPORT, str(e)) from e

    try:
        data = resp.json()
        temperature = float(data["current"]["temperature_2m"])
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("Unparseable weather response for (%s, %s): %s", lat, lon, e)
        raise UpstreamError(UpstreamErrorKind.DECODE, f"unexpected response body: {e!r}") from e

    return WeatherRecord(latitude=lat, longitude=lon, temperature=temperature)
