"""
Caiyun Weather Provider for Grain Vent

Fetches the hourly temperature/relative humidity forecast for a location from
the Caiyun weather API (api.caiyunapp.com, v2.6).

The API key comes from the CAIYUN_API_KEY environment variable (loaded from
.env by the entry point) unless passed in explicitly.

Response shape consumed here:
    {
      "status": "ok",
      "result": {
        "hourly": {
          "datetime":    ["2024-05-01T08:00+08:00", ...],
          "temperature": [18.5, ...],     # Celsius
          "humidity":    [62.0, ...]      # percent
        }
      }
    }
"""

import asyncio
import logging
import os
from typing import Dict, Optional, TypedDict

import httpx

from grain_vent.resilience import RetryConfig, with_retry

logger = logging.getLogger(__name__)


class Location(TypedDict, total=False):
    latitude: float
    longitude: float
    address: str


class WeatherSample(TypedDict):
    datetime: str  # ISO 8601 as returned by the API
    temperature: float  # Celsius
    humidity: float  # percent


class WeatherConfigError(RuntimeError):
    """Provider cannot be used as configured (e.g. no API key)."""


class WeatherDataError(ValueError):
    """Response arrived but is not a usable hourly series."""


def format_location(location: Location) -> str:
    """Caiyun expects "lon,lat" with 4 decimals."""
    return f"{location['longitude']:.4f},{location['latitude']:.4f}"


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_hourly(data: Dict) -> Dict[str, WeatherSample]:
    """
    Turn a Caiyun response body into an ordered timestamp -> sample map.

    Raises:
        WeatherDataError: status is not "ok" or the hourly arrays are missing
    """
    status = data.get("status")
    if status != "ok":
        raise WeatherDataError(f"Caiyun returned status {status!r}")

    hourly = (data.get("result") or {}).get("hourly") or {}
    times = hourly.get("datetime")
    temps = hourly.get("temperature")
    hums = hourly.get("humidity")

    if not times or not temps or not hums:
        raise WeatherDataError("Caiyun response has no hourly datetime/temperature/humidity")

    samples: Dict[str, WeatherSample] = {}
    skipped = 0

    for dt, temp, hum in zip(times, temps, hums):
        if not dt or not _is_number(temp) or not _is_number(hum):
            skipped += 1
            continue

        samples[dt] = {
            "datetime": dt,
            "temperature": float(temp),
            "humidity": float(hum),
        }

    if skipped:
        logger.debug(f"[parse_hourly] Skipped {skipped} incomplete hourly entries")

    return samples


class CaiyunProvider:
    """
    Provider for the Caiyun hourly forecast.

    Pass a custom httpx transport for testing; production code uses the
    default network transport.
    """

    BASE_URL = "https://api.caiyunapp.com/v2.6"
    TIMEOUT = 15.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key or os.getenv("CAIYUN_API_KEY")
        if not self.api_key:
            raise WeatherConfigError(
                "Caiyun API key not configured; set CAIYUN_API_KEY in the environment or .env"
            )
        self.retry_config = retry_config
        self.transport = transport

    def build_url(self, location: Location) -> str:
        return f"{self.BASE_URL}/{self.api_key}/{format_location(location)}/weather.json"

    async def fetch_async(self, location: Location) -> Dict[str, WeatherSample]:
        """
        Fetch the hourly series for a location.

        Raises:
            httpx.HTTPStatusError: non-2xx response
            httpx.RequestError: transport failure or timeout
            WeatherDataError: unusable payload
        """
        logger.info(f"[CaiyunProvider] Fetching hourly forecast for {format_location(location)}")

        async with httpx.AsyncClient(timeout=self.TIMEOUT, transport=self.transport) as client:
            resp = await client.get(self.build_url(location))
            logger.info(f"[CaiyunProvider] Response status: {resp.status_code}")
            resp.raise_for_status()
            data = resp.json()

        samples = parse_hourly(data)
        logger.info(f"[CaiyunProvider] Retrieved {len(samples)} hourly samples")
        return samples

    async def fetch_with_retry(self, location: Location) -> Optional[Dict[str, WeatherSample]]:
        """fetch_async with retry/backoff. Returns None when every attempt fails."""
        @with_retry(config=self.retry_config, provider_name="Caiyun")
        async def attempt():
            return await self.fetch_async(location)

        return await attempt()

    def fetch(self, location: Location) -> Optional[Dict[str, WeatherSample]]:
        """Synchronous wrapper around fetch_with_retry."""
        return asyncio.run(self.fetch_with_retry(location))
