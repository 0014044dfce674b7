"""
Moisture & Dew-Point Engine for Grain Vent

Public entry points used by the forecast builder and the CLI:

- estimate_moisture()            - wet-basis EMC (%) for Celsius input
- estimate_moisture_f()          - same, for Fahrenheit input
- estimate_dew_point_threshold() - condensation threshold as a "12.34" string

Every function is pure. Domain edge cases (unknown material, humidity of 0 or
100%, air cooled past saturation) come back as None, never as an exception
or a nan leaking out to the caller.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

from grain_vent.isotherms import solve
from grain_vent.materials import Material, lookup_parameters
from grain_vent.psychrometrics import condensation_threshold, reproject_humidity
from grain_vent.units import f_to_c, f_to_c_delta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeasurementInput:
    """One set of readings to evaluate."""
    material: Union[Material, str]
    ambient_temp_c: float
    temp_rise_offset_c: float
    relative_humidity: float  # percent, 0-100


def _calculate(
    material: Union[Material, str],
    ambient_temp_c: float,
    plenum_rise_c: float,
    rh: float
) -> Optional[float]:
    params = lookup_parameters(material)
    if params is None:
        return None

    # First pass at ambient conditions; overwritten by the plenum pass below
    mc_final = solve(params, rh / 100, ambient_temp_c)

    new_temp = ambient_temp_c + plenum_rise_c
    rh2 = reproject_humidity(new_temp, ambient_temp_c, rh)

    mc_final = solve(params, rh2 / 100, new_temp)
    return mc_final


def estimate_moisture(
    material: Union[Material, str],
    ambient_temp_c: float,
    temp_rise_offset_c: float,
    relative_humidity: float
) -> Optional[float]:
    """
    Estimate the equilibrium moisture content grain will reach under
    ventilation air.

    The ambient air is taken through the plenum rise first: its humidity is
    re-projected to ambient + offset and the isotherm is evaluated there.

    Args:
        material: Catalog material (member or name, e.g. "wheat")
        ambient_temp_c: Outside air temperature in Celsius
        temp_rise_offset_c: Fan/plenum temperature rise in Celsius (may be <= 0)
        relative_humidity: Outside relative humidity in percent

    Returns:
        Wet-basis moisture content (%) rounded to 2 decimals, or None if it
        cannot be computed
    """
    try:
        result = _calculate(material, ambient_temp_c, temp_rise_offset_c, relative_humidity)
    except (ArithmeticError, ValueError, TypeError) as e:
        logger.debug(f"[estimate_moisture] Calculation failed for {material!r}: {e}")
        return None

    if result is None or not math.isfinite(result):
        logger.debug(
            f"[estimate_moisture] Not computable: material={material!r}, "
            f"temp={ambient_temp_c}, offset={temp_rise_offset_c}, rh={relative_humidity}"
        )
        return None

    return round(result, 2)


def estimate_moisture_f(
    material: Union[Material, str],
    ambient_temp_f: float,
    temp_rise_offset_f: float,
    relative_humidity: float
) -> Optional[float]:
    """
    Fahrenheit variant of estimate_moisture.

    The ambient reading is converted as a point temperature, the offset as a
    temperature difference.
    """
    return estimate_moisture(
        material,
        f_to_c(ambient_temp_f),
        f_to_c_delta(temp_rise_offset_f),
        relative_humidity
    )


def estimate_measurement(measurement: MeasurementInput) -> Optional[float]:
    """Run estimate_moisture on a MeasurementInput."""
    return estimate_moisture(
        measurement.material,
        measurement.ambient_temp_c,
        measurement.temp_rise_offset_c,
        measurement.relative_humidity
    )


def estimate_dew_point_threshold(ambient_temp_c: float, relative_humidity: float) -> Optional[str]:
    """
    Condensation threshold for the given air, formatted to 2 decimals.

    Args:
        ambient_temp_c: Air temperature in Celsius
        relative_humidity: Relative humidity in percent

    Returns:
        e.g. "11.99", or None when the humidity makes the dew point undefined
    """
    value = condensation_threshold(ambient_temp_c, relative_humidity)
    if not math.isfinite(value):
        logger.debug(
            f"[estimate_dew_point_threshold] Not computable: temp={ambient_temp_c}, "
            f"rh={relative_humidity}"
        )
        return None

    return f"{value:.2f}"
