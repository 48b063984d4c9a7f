"""Transforms, coordinate systems and the coordinate network graph."""

from .network import CoordinateNetwork
from .pinhole import PinholeCameraPair, PinholeCameraTransform
from .system import CoordinateSystem
from .transform import (
    AxisAngleKeys,
    CompositeTransform,
    EuclideanCompositeTransform,
    EuclideanReverseStaticTransform,
    EuclideanStaticTransform,
    EuclideanTransform,
    EulerKeys,
    InverseTransform,
    QuaternionKey,
    RotateDynamicTransform,
    RotateStaticTransform,
    ShiftDynamicTransform,
    ShiftStaticTransform,
    Transform,
)

__all__ = [
    "CoordinateNetwork",
    "CoordinateSystem",
    "PinholeCameraPair",
    "PinholeCameraTransform",
    "AxisAngleKeys",
    "CompositeTransform",
    "EuclideanCompositeTransform",
    "EuclideanReverseStaticTransform",
    "EuclideanStaticTransform",
    "EuclideanTransform",
    "EulerKeys",
    "InverseTransform",
    "QuaternionKey",
    "RotateDynamicTransform",
    "RotateStaticTransform",
    "ShiftDynamicTransform",
    "ShiftStaticTransform",
    "Transform",
]
