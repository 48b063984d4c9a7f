"""Shifts of 3d vectors, a single cover of T(3), the translation group."""

from __future__ import annotations

import numpy as np

from ..core.types import MutableVector, Vector3, as_vector, check_length


def shift_vec(s: Vector3, v_in: Vector3, v_out: MutableVector) -> None:
    """Write ``s + v_in`` into ``v_out`` (which may be ``v_in``)."""
    v_out[0] = s[0] + v_in[0]
    v_out[1] = s[1] + v_in[1]
    v_out[2] = s[2] + v_in[2]


def shift_vec_inv(s: Vector3, v_in: Vector3, v_out: MutableVector) -> None:
    """Inverse of :func:`shift_vec`."""
    v_out[0] = v_in[0] - s[0]
    v_out[1] = v_in[1] - s[1]
    v_out[2] = v_in[2] - s[2]


def shift_vec_ip(s: Vector3, v: MutableVector) -> None:
    shift_vec(s, v, v)


def shift_vec_ip_inv(s: Vector3, v: MutableVector) -> None:
    shift_vec_inv(s, v, v)


class Shift:
    """A shift (translation) of 3d vectors. The identity is the zero vector."""

    def __init__(self) -> None:
        self._vec = np.zeros(3, dtype=np.float64)

    @property
    def vec(self) -> np.ndarray:
        """Shift vector (a live view, do not mutate)."""
        return self._vec

    # ----------------
    # Mutation Methods
    # ----------------

    def set_vec(self, vec: Vector3) -> Shift:
        """Set the shift vector.

        Raises:
            InvalidDimension: If ``vec`` is not 3d
        """
        self._set_vec(as_vector(vec, 3, "shift vector"))
        return self

    def _set_vec(self, vec: Vector3) -> None:
        self._vec[0] = vec[0]
        self._vec[1] = vec[1]
        self._vec[2] = vec[2]

    def set_as_composite(self, first: Shift, second: Shift) -> Shift:
        """Become the shift ``first`` followed by ``second``."""
        shift_vec(first.vec, second.vec, self._vec)
        return self

    # --------------------
    # Construction Methods
    # --------------------

    @classmethod
    def from_vec(cls, vec: Vector3) -> Shift:
        return cls().set_vec(vec)

    def copy(self) -> Shift:
        return Shift().set_vec(self._vec)

    # ----------
    # Operations
    # ----------

    def add(self, other: Shift) -> Shift:
        """Compose with another shift."""
        vec = np.zeros(3, dtype=np.float64)
        shift_vec(self._vec, other.vec, vec)
        return Shift().set_vec(vec)

    def after(self, other: Shift) -> Shift:
        """Alias for :meth:`add`, shifts commute."""
        return self.add(other)

    def inv(self) -> Shift:
        return Shift().set_vec(-self._vec)

    def shift(self, vec: Vector3) -> np.ndarray:
        """Shift a 3d vector, returning a new array."""
        vec = as_vector(vec, 3)
        out = np.zeros(3, dtype=np.float64)
        shift_vec(self._vec, vec, out)
        return out

    def shift_ip(self, vec: MutableVector) -> None:
        check_length(vec, 3)
        shift_vec_ip(self._vec, vec)

    def unshift(self, vec: Vector3) -> np.ndarray:
        """Undo :meth:`shift`, returning a new array."""
        vec = as_vector(vec, 3)
        out = np.zeros(3, dtype=np.float64)
        shift_vec_inv(self._vec, vec, out)
        return out

    def unshift_ip(self, vec: MutableVector) -> None:
        check_length(vec, 3)
        shift_vec_ip_inv(self._vec, vec)

    def __repr__(self) -> str:
        return f"Shift({self._vec.tolist()})"


__all__ = [
    "shift_vec",
    "shift_vec_inv",
    "shift_vec_ip",
    "shift_vec_ip_inv",
    "Shift",
]
