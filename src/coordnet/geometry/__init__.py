"""Rotation, translation and roto-translation algebra."""

from .euclidean import Affine, Euclidean, EuclideanReverse
from .quaternion import UnitQuaternion
from .shift import Shift

__all__ = [
    "Affine",
    "Euclidean",
    "EuclideanReverse",
    "Shift",
    "UnitQuaternion",
]
