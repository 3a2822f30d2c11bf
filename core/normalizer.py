import math

import config

def normalize(value: float, places: int = None) -> float:
    """
    Round a utilization value to a stable precision.

    Normalizing an already normalized value returns it unchanged.
    Non-finite input collapses to 0.0.
    """
    if places is None:
        places = config.USAGE_PRECISION
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return round(value, places)

def percent_to_fraction(percent: float) -> float:
    return normalize(float(percent) / 100)
