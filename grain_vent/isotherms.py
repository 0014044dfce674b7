"""
Sorption Isotherm Solvers for Grain Vent

Each solver estimates the equilibrium moisture content of a grain from the
relative humidity (as a fraction) and temperature (Celsius) of the air around
it. All four compute dry-basis moisture first and share one dry -> wet
conversion.

Solvers never raise for numeric input. When an argument leaves the domain of
log/pow (humidity outside (0, 1), T + C of the wrong sign, etc.) they return
nan and the engine turns that into "not computable".
"""

import math
from typing import Callable, Dict

from grain_vent.materials import IsothermModel, ModelParameters

ModelFunction = Callable[[float, float, float, float, float], float]

NAN = float("nan")

# Errors raised by the math module for inputs outside a function's domain
NUMERIC_ERRORS = (ValueError, ZeroDivisionError, OverflowError)


def dry_to_wet(mc_dry: float) -> float:
    """
    Convert dry-basis moisture content (%) to wet basis (%).

    A negative dry-basis value (Chung at very low humidity, Oswin with
    A + B*T < 0) has no physical meaning and comes back as nan.
    """
    if mc_dry < 0:
        return NAN
    return (100 * mc_dry) / (100 + mc_dry)


def _valid_fraction(rh_dec: float) -> bool:
    return 0.0 < rh_dec < 1.0


def henderson(rh_dec: float, a: float, b: float, c: float, ambient_temp: float) -> float:
    """Modified Henderson equation."""
    if not _valid_fraction(rh_dec):
        return NAN
    try:
        mc_dry = math.pow(math.log(1 - rh_dec) / (-a * (ambient_temp + c)), 1 / b)
    except NUMERIC_ERRORS:
        return NAN
    return dry_to_wet(mc_dry)


def halsey(rh_dec: float, a: float, b: float, c: float, ambient_temp: float) -> float:
    """Modified Halsey equation."""
    if not _valid_fraction(rh_dec):
        return NAN
    try:
        mc_dry = math.pow(-math.exp(a + b * ambient_temp) / math.log(rh_dec), 1 / c)
    except NUMERIC_ERRORS:
        return NAN
    return dry_to_wet(mc_dry)


def chung(rh_dec: float, a: float, b: float, c: float, ambient_temp: float) -> float:
    """Modified Chung-Pfost equation."""
    if not _valid_fraction(rh_dec):
        return NAN
    try:
        x = math.log(rh_dec)
        y = ambient_temp + c
        z = (x * y) / -a
        mc_dry = -math.log(z) / b
    except NUMERIC_ERRORS:
        return NAN
    return dry_to_wet(mc_dry)


def oswin(rh_dec: float, a: float, b: float, c: float, ambient_temp: float) -> float:
    """Modified Oswin equation. No catalog material uses it today."""
    if not _valid_fraction(rh_dec):
        return NAN
    try:
        mc_dry = (a + b * ambient_temp) * math.pow(1 / rh_dec - 1, -1 / c)
    except NUMERIC_ERRORS:
        return NAN
    return dry_to_wet(mc_dry)


SOLVERS: Dict[IsothermModel, ModelFunction] = {
    IsothermModel.HENDERSON: henderson,
    IsothermModel.HALSEY: halsey,
    IsothermModel.CHUNG: chung,
    IsothermModel.OSWIN: oswin,
}


def solve(params: ModelParameters, rh_dec: float, ambient_temp: float) -> float:
    """
    Evaluate the isotherm selected by params.

    Args:
        params: Model variant and coefficients from the material table
        rh_dec: Relative humidity as a fraction (0-1, exclusive)
        ambient_temp: Air temperature in Celsius

    Returns:
        Wet-basis moisture content in percent, or nan if undefined
    """
    model = SOLVERS[params.model]
    return model(rh_dec, params.a, params.b, params.c, ambient_temp)
