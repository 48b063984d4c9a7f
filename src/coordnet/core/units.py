"""Angle units.

Transforms work in radians. Configuration files may give static angles in
degrees instead.
"""

import math


def to_radians(value: float | int, degrees: bool = False) -> float:
    """Angle in radians, converting from degrees when ``degrees`` is set."""
    value = float(value)
    return math.radians(value) if degrees else value


__all__ = ["to_radians"]
