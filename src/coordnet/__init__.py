"""Coordinate transform networks.

Model a graph of named coordinate systems joined by rotations, shifts and
other transforms, then move positions and orientations between any two
connected systems along the shortest route.
"""

from .core.errors import (
    CoordinateNetworkError,
    InvalidDimension,
    NonEuclideanTransform,
    NormalizationError,
    PathNotFound,
    UnknownSystem,
)
from .geometry import Affine, Euclidean, EuclideanReverse, Shift, UnitQuaternion
from .network import (
    AxisAngleKeys,
    CompositeTransform,
    CoordinateNetwork,
    CoordinateSystem,
    EuclideanCompositeTransform,
    EuclideanReverseStaticTransform,
    EuclideanStaticTransform,
    EulerKeys,
    PinholeCameraTransform,
    QuaternionKey,
    RotateDynamicTransform,
    RotateStaticTransform,
    ShiftDynamicTransform,
    ShiftStaticTransform,
    Transform,
)

__version__ = "0.1.0"

__all__ = [
    "CoordinateNetworkError",
    "InvalidDimension",
    "NonEuclideanTransform",
    "NormalizationError",
    "PathNotFound",
    "UnknownSystem",
    "Affine",
    "Euclidean",
    "EuclideanReverse",
    "Shift",
    "UnitQuaternion",
    "AxisAngleKeys",
    "CompositeTransform",
    "CoordinateNetwork",
    "CoordinateSystem",
    "EuclideanCompositeTransform",
    "EuclideanReverseStaticTransform",
    "EuclideanStaticTransform",
    "EulerKeys",
    "PinholeCameraTransform",
    "QuaternionKey",
    "RotateDynamicTransform",
    "RotateStaticTransform",
    "ShiftDynamicTransform",
    "ShiftStaticTransform",
    "Transform",
]
