"""
Temperature conversions.

Point temperatures and temperature differences convert differently: a reading
of 50F is 10C, but a rise of 9F is a rise of 5C. Keep the two apart.
"""


def c_to_f(deg_c: float) -> float:
    """Celsius reading to Fahrenheit reading."""
    return (9 / 5) * deg_c + 32


def f_to_c(deg_f: float) -> float:
    """Fahrenheit reading to Celsius reading."""
    return (5 / 9) * (deg_f - 32)


def c_to_f_delta(delta_c: float) -> float:
    """Celsius temperature difference to Fahrenheit difference."""
    return (9 / 5) * delta_c


def f_to_c_delta(delta_f: float) -> float:
    """Fahrenheit temperature difference to Celsius difference."""
    return (5 / 9) * delta_f
