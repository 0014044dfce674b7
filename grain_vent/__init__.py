"""
Grain Vent: aeration decision support for stored grain

Estimates the equilibrium moisture content grain will reach under ventilation
air, and a condensation threshold temperature, from hourly weather readings.

Architecture:
    materials.py      - Grain catalog and isotherm coefficients
    isotherms.py      - Henderson / Halsey / Chung / Oswin solvers
    psychrometrics.py - Humidity re-projection and dew point math
    units.py          - Celsius/Fahrenheit point and delta conversions
    engine.py         - Public moisture and dew point entry points
    forecast.py       - Hourly forecast records and DataFrame export
    providers/        - Weather data fetching:
                        * caiyun.py - Caiyun hourly forecast
    resilience.py     - Retry with exponential backoff
    settings_store.py - Offset and last location persistence

Entry Point:
    main.py - fetch weather, print the moisture forecast
"""

from grain_vent.engine import (
    MeasurementInput,
    estimate_dew_point_threshold,
    estimate_measurement,
    estimate_moisture,
    estimate_moisture_f,
)
from grain_vent.materials import IsothermModel, Material, ModelParameters

__version__ = "1.0.0"

__all__ = [
    "IsothermModel",
    "Material",
    "MeasurementInput",
    "ModelParameters",
    "estimate_dew_point_threshold",
    "estimate_measurement",
    "estimate_moisture",
    "estimate_moisture_f",
]
