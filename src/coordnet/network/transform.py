"""Coordinate transformations used as edges of a coordinate network.

:class:`Transform` is the identity and defines the capability contract every
edge offers. Every transform owns an :class:`InverseTransform` view, reachable
as ``transform.inv``, with the transform/untransform pairs swapped.

Euclidean-backed transforms hold a :class:`~coordnet.geometry.euclidean.Euclidean`
value and forward to it (:class:`EuclideanTransform`). Dynamic transforms pull
their parameters out of a state mapping passed to ``update``; keys absent from
the mapping leave the previous parameters untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

import numpy as np

from ..core.errors import InvalidDimension, NonEuclideanTransform
from ..core.types import MutableVector, QuatVector, State, Vector3, as_vector
from ..geometry.euclidean import Euclidean, EuclideanReverse
from ..geometry.quaternion import IDENTITY_QVEC, UnitQuaternion


def _copy_vec(vec: Vector3) -> np.ndarray:
    return np.array(as_vector(vec, 3), dtype=np.float64)


class Transform:
    """Identity transformation between two coordinate systems.

    The identity is a rigid motion, so it has a Euclidean form. Projective
    transforms set ``is_euclidean`` to False.
    """

    is_euclidean = True
    is_inverse = False

    def __init__(self) -> None:
        self._inv = InverseTransform(self)

    @property
    def euclidean(self) -> Euclidean:
        """Euclidean form of this transform.

        Raises:
            NonEuclideanTransform: If the transform is not a rigid motion
        """
        if not self.is_euclidean:
            raise NonEuclideanTransform(f"{self!r} has no Euclidean form")
        return Euclidean()

    @property
    def inv(self) -> Transform:
        """Inverse view of this transform."""
        return self._inv

    def get_inv(self) -> Transform:
        return self.inv

    def update(self, state: State) -> Transform:
        """Pull dynamic parameters out of ``state``."""
        return self

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return _copy_vec(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return _copy_vec(vec)

    def transform_vec_ip(self, vec: MutableVector) -> None:
        pass

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        pass

    def transform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def untransform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def transform_quat_ip(self, quat: UnitQuaternion) -> None:
        pass

    def untransform_quat_ip(self, quat: UnitQuaternion) -> None:
        pass

    def orient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def unorient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def orient_ip(self, quat: UnitQuaternion) -> None:
        pass

    def unorient_ip(self, quat: UnitQuaternion) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class InverseTransform(Transform):
    """Inverse view of a transform.

    Holds its owner and dispatches every call to the owner's opposite method.
    ``update`` does nothing: only the forward edge consumes dynamic state,
    and both directions share its parameters.
    """

    is_inverse = True

    def __init__(self, owner: Transform) -> None:
        self._owner = owner

    @property
    def inv(self) -> Transform:
        return self._owner

    @property
    def is_euclidean(self) -> bool:  # type: ignore[override]
        return self._owner.is_euclidean

    @property
    def euclidean(self) -> Euclidean:
        """Materialized inverse of the owner's Euclidean."""
        return self._owner.euclidean.get_inv()

    def update(self, state: State) -> Transform:
        return self

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self._owner.untransform_vec(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self._owner.transform_vec(vec)

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self._owner.untransform_vec_ip(vec)

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self._owner.transform_vec_ip(vec)

    def transform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self._owner.untransform_quat(quat)

    def untransform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self._owner.transform_quat(quat)

    def transform_quat_ip(self, quat: UnitQuaternion) -> None:
        self._owner.untransform_quat_ip(quat)

    def untransform_quat_ip(self, quat: UnitQuaternion) -> None:
        self._owner.transform_quat_ip(quat)

    def orient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self._owner.unorient(quat)

    def unorient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self._owner.orient(quat)

    def orient_ip(self, quat: UnitQuaternion) -> None:
        self._owner.unorient_ip(quat)

    def unorient_ip(self, quat: UnitQuaternion) -> None:
        self._owner.orient_ip(quat)

    def __repr__(self) -> str:
        return f"{self._owner!r}.inv"


class EuclideanTransform(Transform):
    """Transform backed by a Euclidean value, forwarding every operation to it."""

    def __init__(self, euclidean: Euclidean | None = None) -> None:
        super().__init__()
        self._euclidean = euclidean if euclidean is not None else Euclidean()

    @property
    def euclidean(self) -> Euclidean:
        return self._euclidean

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self.euclidean.transform_vec(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self.euclidean.untransform_vec(vec)

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self.euclidean.transform_vec_ip(vec)

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self.euclidean.untransform_vec_ip(vec)

    def transform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.euclidean.transform_quat(quat)

    def untransform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.euclidean.untransform_quat(quat)

    def transform_quat_ip(self, quat: UnitQuaternion) -> None:
        self.euclidean.transform_quat_ip(quat)

    def untransform_quat_ip(self, quat: UnitQuaternion) -> None:
        self.euclidean.untransform_quat_ip(quat)

    def orient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.euclidean.orient(quat)

    def unorient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.euclidean.unorient(quat)

    def orient_ip(self, quat: UnitQuaternion) -> None:
        self.euclidean.orient_ip(quat)

    def unorient_ip(self, quat: UnitQuaternion) -> None:
        self.euclidean.unorient_ip(quat)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.euclidean!r})"


class EuclideanStaticTransform(EuclideanTransform):
    """Fixed rotate-then-shift transform."""

    def __init__(self, qvec: QuatVector = IDENTITY_QVEC, vec: Vector3 = (0.0, 0.0, 0.0)) -> None:
        super().__init__(Euclidean().set_vecs(qvec, vec))


class EuclideanReverseStaticTransform(EuclideanTransform):
    """Fixed shift-then-rotate transform."""

    def __init__(self, qvec: QuatVector = IDENTITY_QVEC, vec: Vector3 = (0.0, 0.0, 0.0)) -> None:
        super().__init__(EuclideanReverse().set_vecs(qvec, vec))


class ShiftDynamicTransform(EuclideanTransform):
    """Shift whose vector is read from ``state[data_key]`` on every update.

    Orientations are unaffected by shifts.
    """

    def __init__(self, data_key: str | None) -> None:
        super().__init__()
        self.data_key = data_key

    def update(self, state: State) -> Transform:
        if self.data_key is None:
            return self
        vec = state.get(self.data_key)
        if vec is not None:
            self.euclidean.shift.set_vec(vec)
        return self

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self.euclidean.shift.shift(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self.euclidean.shift.unshift(vec)

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self.euclidean.shift.shift_ip(vec)

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self.euclidean.shift.unshift_ip(vec)

    def transform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def untransform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def transform_quat_ip(self, quat: UnitQuaternion) -> None:
        pass

    def untransform_quat_ip(self, quat: UnitQuaternion) -> None:
        pass

    def orient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def unorient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.copy()

    def orient_ip(self, quat: UnitQuaternion) -> None:
        pass

    def unorient_ip(self, quat: UnitQuaternion) -> None:
        pass


class ShiftStaticTransform(ShiftDynamicTransform):
    """Fixed shift."""

    def __init__(self, vec: Vector3) -> None:
        super().__init__(None)
        self.euclidean.shift.set_vec(vec)

    def update(self, state: State) -> Transform:
        return self


@dataclass(frozen=True)
class AxisAngleKeys:
    """State keys for an angle (radians) and a 3d rotation axis."""

    angle: str
    axis: str


@dataclass(frozen=True)
class QuaternionKey:
    """State key for a raw ``[re, i, j, k]`` quaternion vector."""

    key: str


@dataclass(frozen=True)
class EulerKeys:
    """State keys for Euler angles (radians).

    An angle without a key is held at zero.
    """

    yaw: str | None = None
    pitch: str | None = None
    roll: str | None = None


RotationKeys = Union[AxisAngleKeys, QuaternionKey, EulerKeys]


class RotateDynamicTransform(EuclideanTransform):
    """Rotation whose parameters are read from the state on every update.

    The rotation is only replaced when every key it needs is present, so a
    partial state never mixes new and stale components.
    """

    def __init__(self, keys: RotationKeys | None) -> None:
        super().__init__()
        self.keys = keys

    def update(self, state: State) -> Transform:
        keys = self.keys
        quat = self.euclidean.quat
        if isinstance(keys, AxisAngleKeys):
            angle = state.get(keys.angle)
            axis = state.get(keys.axis)
            if angle is not None and axis is not None:
                quat.set_axis(angle, axis)
        elif isinstance(keys, QuaternionKey):
            qvec = state.get(keys.key)
            if qvec is not None:
                quat.set_vec(qvec)
        elif isinstance(keys, EulerKeys):
            angles = {}
            for name in ("yaw", "pitch", "roll"):
                key = getattr(keys, name)
                if key is None:
                    angles[name] = 0.0
                    continue
                value = state.get(key)
                if value is None:
                    return self
                angles[name] = value
            quat.set_euler(**angles)
        return self

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self.euclidean.quat.rotate(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self.euclidean.quat.unrotate(vec)

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self.euclidean.quat.rotate_ip(vec)

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self.euclidean.quat.unrotate_ip(vec)


class RotateStaticTransform(RotateDynamicTransform):
    """Fixed rotation.

    Built from an angle and axis (``RotateStaticTransform(angle, axis)``),
    a quaternion vector (``RotateStaticTransform([re, i, j, k])``) or a
    mapping of Euler angles (``RotateStaticTransform({"pitch": pi})``).
    """

    def __init__(self, rotation: Any, axis: Vector3 | None = None) -> None:
        super().__init__(None)
        quat = self.euclidean.quat
        if axis is not None:
            quat.set_axis(rotation, axis)
        elif isinstance(rotation, Mapping):
            quat.set_euler(
                rotation.get("yaw", 0.0), rotation.get("pitch", 0.0), rotation.get("roll", 0.0)
            )
        elif np.ndim(rotation) == 1 and len(rotation) == 4:
            quat.set_vec(rotation)
        else:
            raise InvalidDimension(
                f"Expected angle and axis, a 4d quaternion vector or Euler angles, got {rotation!r}"
            )

    def update(self, state: State) -> Transform:
        return self


class EuclideanCompositeTransform(EuclideanTransform):
    """Single Euclidean equal to ``first`` followed by ``second``.

    The composite is recomputed after the children update.
    """

    def __init__(self, first: Transform, second: Transform, reverse: bool = False) -> None:
        super().__init__(EuclideanReverse() if reverse else Euclidean())
        self.first = first
        self.second = second
        self._compose()

    def _compose(self) -> None:
        self.euclidean.set_as_composite(self.first.euclidean, self.second.euclidean)

    def update(self, state: State) -> Transform:
        self.first.update(state)
        self.second.update(state)
        self._compose()
        return self


class CompositeTransform(Transform):
    """Generic chain of ``first`` followed by ``second``."""

    is_euclidean = False

    def __init__(self, first: Transform, second: Transform) -> None:
        super().__init__()
        self.first = first
        self.second = second

    def update(self, state: State) -> Transform:
        self.first.update(state)
        self.second.update(state)
        return self

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self.second.transform_vec(self.first.transform_vec(vec))

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self.first.untransform_vec(self.second.untransform_vec(vec))

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self.first.transform_vec_ip(vec)
        self.second.transform_vec_ip(vec)

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self.second.untransform_vec_ip(vec)
        self.first.untransform_vec_ip(vec)

    def transform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.second.transform_quat(self.first.transform_quat(quat))

    def untransform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.first.untransform_quat(self.second.untransform_quat(quat))

    def transform_quat_ip(self, quat: UnitQuaternion) -> None:
        self.first.transform_quat_ip(quat)
        self.second.transform_quat_ip(quat)

    def untransform_quat_ip(self, quat: UnitQuaternion) -> None:
        self.second.untransform_quat_ip(quat)
        self.first.untransform_quat_ip(quat)

    def orient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.second.orient(self.first.orient(quat))

    def unorient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return self.first.unorient(self.second.unorient(quat))

    def orient_ip(self, quat: UnitQuaternion) -> None:
        self.first.orient_ip(quat)
        self.second.orient_ip(quat)

    def unorient_ip(self, quat: UnitQuaternion) -> None:
        self.second.unorient_ip(quat)
        self.first.unorient_ip(quat)

    def __repr__(self) -> str:
        return f"CompositeTransform({self.first!r}, {self.second!r})"


__all__ = [
    "Transform",
    "InverseTransform",
    "EuclideanTransform",
    "EuclideanStaticTransform",
    "EuclideanReverseStaticTransform",
    "ShiftDynamicTransform",
    "ShiftStaticTransform",
    "AxisAngleKeys",
    "QuaternionKey",
    "EulerKeys",
    "RotationKeys",
    "RotateDynamicTransform",
    "RotateStaticTransform",
    "EuclideanCompositeTransform",
    "CompositeTransform",
]
