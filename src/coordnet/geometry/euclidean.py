"""Roto-translations of 3d vectors, a double cover of SE(3).

Two parameterizations are provided. :class:`Euclidean` rotates and then
shifts (affine convention); :class:`EuclideanReverse` shifts and then
rotates. Both compose with each other freely.
"""

from __future__ import annotations

from typing import Any, NamedTuple

import numpy as np

from ..core.types import MutableVector, QuatVector, Vector3
from .quaternion import UnitQuaternion
from .shift import Shift


class Affine(NamedTuple):
    """Affine map ``A @ v + b``."""

    A: np.ndarray
    b: np.ndarray

    def apply(self, vec: Vector3) -> np.ndarray:
        return self.A @ np.asarray(vec, dtype=np.float64) + self.b

    def to_dict(self) -> dict[str, Any]:
        return {"A": self.A.tolist(), "b": self.b.tolist()}


def _homogeneous(affine: Affine) -> np.ndarray:
    mat = np.eye(4, dtype=np.float64)
    mat[:3, :3] = affine.A
    mat[:3, 3] = affine.b
    return mat


class Euclidean:
    """Roto-translation where the rotation is applied before the shift."""

    convention = "forward"

    def __init__(self) -> None:
        self.quat = UnitQuaternion()
        self.shift = Shift()

    @property
    def translation(self) -> np.ndarray:
        """Effective shift applied after the rotation."""
        return self.shift.vec

    def set_vecs(self, qvec: QuatVector, vec: Vector3) -> Euclidean:
        """Set the rotation quaternion vector and the shift vector."""
        self.quat.set_vec(qvec)
        self.shift.set_vec(vec)
        return self

    def set_as_composite(self, first: Euclidean, second: Euclidean) -> Euclidean:
        """Become ``first`` followed by ``second``.

        Either argument may be ``self``.
        """
        # Must be read before self.quat changes
        shifted = second.transform_vec(first.translation)
        self.quat.set_as_composite(first.quat, second.quat)
        self.shift.set_vec(shifted)
        return self

    def set_as_before(self, other: Euclidean) -> Euclidean:
        """Become ``self`` followed by ``other``."""
        return self.set_as_composite(self, other)

    def set_as_after(self, other: Euclidean) -> Euclidean:
        """Become ``other`` followed by ``self``."""
        return self.set_as_composite(other, self)

    def copy(self) -> Euclidean:
        euc = type(self)()
        euc.quat = self.quat.copy()
        euc.shift = self.shift.copy()
        return euc

    def get_inv(self) -> Euclidean:
        """Materialize the inverse transformation."""
        inv = type(self)()
        inv.quat = self.quat.conj()
        inv.shift = Shift().set_vec(-self.quat.unrotate(self.shift.vec))
        return inv

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self.shift.shift(self.quat.rotate(vec))

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self.quat.rotate_ip(vec)
        self.shift.shift_ip(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self.quat.unrotate(self.shift.unshift(vec))

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self.shift.unshift_ip(vec)
        self.quat.unrotate_ip(vec)

    def transform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        """Relabel an orientation quaternion into this frame's axes."""
        return quat.with_coordinate_convention(self.quat)

    def transform_quat_ip(self, quat: UnitQuaternion) -> None:
        quat.set_with_coordinate_convention(self.quat)

    def untransform_quat(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.without_coordinate_convention(self.quat)

    def untransform_quat_ip(self, quat: UnitQuaternion) -> None:
        quat.set_without_coordinate_convention(self.quat)

    def orient(self, quat: UnitQuaternion) -> UnitQuaternion:
        """Re-reference an orientation quaternion; the shift plays no part."""
        return quat.with_reference(self.quat)

    def orient_ip(self, quat: UnitQuaternion) -> None:
        quat.set_with_reference(self.quat)

    def unorient(self, quat: UnitQuaternion) -> UnitQuaternion:
        return quat.without_reference(self.quat)

    def unorient_ip(self, quat: UnitQuaternion) -> None:
        quat.set_without_reference(self.quat)

    @property
    def affine(self) -> Affine:
        """``Affine(A, b)`` with ``A @ v + b == self.transform_vec(v)``."""
        return Affine(self.quat.matrix, np.array(self.translation, dtype=np.float64))

    @property
    def affine_inv(self) -> Affine:
        """``Affine(A, b)`` with ``A @ v + b == self.untransform_vec(v)``."""
        return Affine(self.quat.matrix_inv, -self.quat.unrotate(self.translation))

    @property
    def matrix(self) -> np.ndarray:
        """4x4 homogeneous form of :attr:`affine`."""
        return _homogeneous(self.affine)

    @property
    def matrix_inv(self) -> np.ndarray:
        """4x4 homogeneous form of :attr:`affine_inv`."""
        return _homogeneous(self.affine_inv)

    def to_dict(self) -> dict[str, Any]:
        return {
            "quat": self.quat.to_dict(),
            "shift": self.shift.vec.tolist(),
            "type": self.convention,
        }

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(quat={self.quat.qvec.tolist()}, shift={self.shift.vec.tolist()})"


class EuclideanReverse(Euclidean):
    """Roto-translation where the shift is applied before the rotation."""

    convention = "reverse"

    @property
    def translation(self) -> np.ndarray:
        """Effective shift applied after the rotation."""
        return self.quat.rotate(self.shift.vec)

    def set_as_composite(self, first: Euclidean, second: Euclidean) -> EuclideanReverse:
        shifted = second.transform_vec(first.translation)
        # The shift is kept in the local frame, so it is un-rotated by the
        # already composed quaternion
        self.quat.set_as_composite(first.quat, second.quat)
        self.shift.set_vec(self.quat.unrotate(shifted))
        return self

    def get_inv(self) -> EuclideanReverse:
        inv = EuclideanReverse()
        inv.quat = self.quat.conj()
        inv.shift = Shift().set_vec(-self.quat.rotate(self.shift.vec))
        return inv

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self.quat.rotate(self.shift.shift(vec))

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self.shift.shift_ip(vec)
        self.quat.rotate_ip(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self.shift.unshift(self.quat.unrotate(vec))

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self.quat.unrotate_ip(vec)
        self.shift.unshift_ip(vec)


__all__ = [
    "Affine",
    "Euclidean",
    "EuclideanReverse",
]
