"""
Weather data providers for Grain Vent.

Only one source today:

1. Caiyun - hourly temperature and relative humidity forecast
"""

from grain_vent.providers.caiyun import (
    CaiyunProvider,
    Location,
    WeatherSample,
    WeatherConfigError,
    WeatherDataError,
    format_location,
    parse_hourly,
)

__all__ = [
    "CaiyunProvider",
    "Location",
    "WeatherSample",
    "WeatherConfigError",
    "WeatherDataError",
    "format_location",
    "parse_hourly",
]
