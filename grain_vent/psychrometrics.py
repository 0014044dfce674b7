"""
Psychrometric helpers for Grain Vent

Two independent pieces:

1. Humidity re-projection - the relative humidity of an air mass after it is
   heated (or cooled) with no moisture added or removed. Used to model the
   temperature rise of air pushed through the fan and plenum.
2. Condensation threshold - Tetens saturation vapor pressure plus a Magnus
   style dew point, evaluated on air heated by a fixed 2C.

Like the isotherm solvers, these return nan instead of raising when the math
is undefined.
"""

import math

NAN = float("nan")
KELVIN_OFFSET = 273.15

# Saturation vapor pressure ratio correlation (absolute temperature)
SVP_A = -27405.526
SVP_B = 97.5413
SVP_C = -0.146244
SVP_D = 0.00012558
SVP_E = -0.000000048502
SVP_F = 4.34903
SVP_G = 0.0039381

# Fixed heating applied before the dew point is evaluated
THRESHOLD_HEATING_C = 2.0

# Magnus coefficients for the dew point inversion
MAGNUS_A = 17.27
MAGNUS_B = 237.7


def _svp_exponent(temp_k: float) -> float:
    numerator = (SVP_A + SVP_B * temp_k + SVP_C * temp_k ** 2 +
                 SVP_D * temp_k ** 3 + SVP_E * temp_k ** 4)
    return numerator / (SVP_F * temp_k - SVP_G * temp_k ** 2)


def reproject_humidity(new_temp_c: float, ambient_temp_c: float, rh: float) -> float:
    """
    Relative humidity after moving air from ambient_temp_c to new_temp_c.

    Absolute humidity is held constant. The result is a percentage and is
    not clamped to 0-100; deciding what an out-of-range value means is up
    to the caller.

    Args:
        new_temp_c: Temperature the air is heated/cooled to (Celsius)
        ambient_temp_c: Starting air temperature (Celsius)
        rh: Starting relative humidity (percent)

    Returns:
        New relative humidity in percent, or nan if undefined
    """
    t1 = ambient_temp_c + KELVIN_OFFSET
    t2 = new_temp_c + KELVIN_OFFSET
    rh1_dec = rh / 100

    try:
        rh2_dec = rh1_dec * math.exp(_svp_exponent(t1)) / math.exp(_svp_exponent(t2))
    except (ZeroDivisionError, OverflowError):
        return NAN

    return rh2_dec * 100


def saturation_vapor_pressure(temp_c: float) -> float:
    """Tetens formula. Returns hPa for a Celsius temperature."""
    return 6.11 * math.pow(10, (7.5 * temp_c) / (237.3 + temp_c))


def condensation_threshold(initial_temp_c: float, initial_humidity: float) -> float:
    """
    Dew point of air heated by THRESHOLD_HEATING_C at constant vapor pressure.

    Args:
        initial_temp_c: Air temperature in Celsius
        initial_humidity: Relative humidity in percent

    Returns:
        Threshold temperature in Celsius, or nan if undefined
    """
    try:
        initial_vapor_pressure = saturation_vapor_pressure(initial_temp_c) * initial_humidity / 100

        new_temp = initial_temp_c + THRESHOLD_HEATING_C
        new_humidity = initial_vapor_pressure / saturation_vapor_pressure(new_temp) * 100

        lu = (MAGNUS_A * new_temp) / (MAGNUS_B + new_temp) + math.log(new_humidity * 0.01)
        return (MAGNUS_B * lu) / (MAGNUS_A - lu)
    except (ValueError, ZeroDivisionError, OverflowError):
        return NAN
