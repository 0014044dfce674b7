"""
Moisture Forecast Builder for Grain Vent

Runs the engine over an hourly weather series and produces the records shown
to the operator: one row per hour with the estimated grain moisture and the
condensation threshold.

Each hour is evaluated independently. Hours whose moisture cannot be computed
are dropped, not emitted with a blank value.
"""

import logging
from typing import Dict, List, Optional, Tuple, TypedDict, Union

import pandas as pd

from grain_vent.engine import estimate_dew_point_threshold, estimate_moisture
from grain_vent.materials import Material
from grain_vent.providers.caiyun import WeatherSample

logger = logging.getLogger(__name__)


class CalculationResult(TypedDict):
    datetime: str
    temperature: float
    humidity: float
    estimated_moisture: float
    dew_point: Optional[float]


RESULT_COLUMNS = ["datetime", "temperature", "humidity", "estimated_moisture", "dew_point"]


def build_moisture_forecast(
    weather: Dict[str, WeatherSample],
    material: Union[Material, str],
    offset_c: float = 0.0
) -> List[CalculationResult]:
    """
    Evaluate every weather sample for one material.

    Args:
        weather: Timestamp -> sample mapping from a provider
        material: Catalog material
        offset_c: Plenum temperature rise in Celsius

    Returns:
        Records sorted by timestamp; hours with no computable moisture or an
        unreadable timestamp are left out
    """
    logger.info(f"[build_moisture_forecast] {len(weather)} samples, material={material}, offset={offset_c}")

    timed: List[Tuple[pd.Timestamp, CalculationResult]] = []
    dropped = 0
    bad_times = 0

    for dt, sample in weather.items():
        stamp = sample.get("datetime", dt)
        when = _parse_timestamp(stamp)
        if when is None:
            bad_times += 1
            logger.debug(f"[build_moisture_forecast] Skipping sample with unreadable timestamp {stamp!r}")
            continue

        temp = sample["temperature"]
        hum = sample["humidity"]

        moisture = estimate_moisture(material, temp, offset_c, hum)
        if moisture is None:
            dropped += 1
            continue

        dew_point = estimate_dew_point_threshold(temp, hum)

        timed.append((when, {
            "datetime": stamp,
            "temperature": temp,
            "humidity": hum,
            "estimated_moisture": moisture,
            "dew_point": float(dew_point) if dew_point is not None else None,
        }))

    if dropped:
        logger.warning(f"[build_moisture_forecast] Dropped {dropped} samples with no computable moisture")
    if bad_times:
        logger.warning(f"[build_moisture_forecast] Dropped {bad_times} samples with unreadable timestamps")

    timed.sort(key=lambda pair: pair[0])
    return [record for _, record in timed]


def _parse_timestamp(value) -> Optional[pd.Timestamp]:
    """UTC timestamp for an ISO string; naive values are taken as UTC."""
    try:
        when = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if when is None or pd.isna(when):
        return None
    return when


def forecast_to_dataframe(results: List[CalculationResult]) -> pd.DataFrame:
    """Tabular view of forecast records with a parsed (UTC) datetime column."""
    if not results:
        return pd.DataFrame(columns=RESULT_COLUMNS)

    df = pd.DataFrame(results, columns=RESULT_COLUMNS)
    df["datetime"] = pd.to_datetime(df["datetime"], utc=True, format="ISO8601")
    return df
