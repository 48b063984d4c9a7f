"""Unit quaternions for rotating 3d vectors.

Unit quaternions are a double cover of SO(3): ``q`` and ``-q`` describe the
same rotation. The component convention throughout is ``[re, i, j, k]`` for
quaternion vectors and ``[x, y, z]`` for 3d vectors.

Rotation of a vector is the sandwich product ``q^-1 * [0, v] * q``, so
composing ``a`` then ``b`` is the product ``a * b``.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from ..core.errors import NormalizationError
from ..core.types import MutableVector, QuatVector, Vector3, as_vector, check_length

# Magnitude below which a vector cannot be normalized
NORM_TOL = 1e-9

IDENTITY_QVEC = (1.0, 0.0, 0.0, 0.0)

# Axis reported for the identity rotation, whose axis is undefined
DEFAULT_AXIS = (0.0, 0.0, 1.0)


def quat_mult(a: QuatVector, b: QuatVector, c: MutableVector) -> None:
    """Write the Hamilton product ``a * b`` into ``c``.

    ``c`` must not alias ``a`` or ``b``.

    Args:
        a: Multiplier quaternion vector (length 4)
        b: Multiplicand quaternion vector (length 4)
        c: Output quaternion vector (length 4)
    """
    c[0] = a[0] * b[0] - a[1] * b[1] - a[2] * b[2] - a[3] * b[3]
    c[1] = a[0] * b[1] + a[1] * b[0] + a[2] * b[3] - a[3] * b[2]
    c[2] = a[0] * b[2] + a[2] * b[0] + a[3] * b[1] - a[1] * b[3]
    c[3] = a[0] * b[3] + a[3] * b[0] + a[1] * b[2] - a[2] * b[1]


def quat_wrap(q: QuatVector, v_in: Vector3, v_out: MutableVector, c: MutableVector) -> None:
    """Write ``q^-1 * [0, v_in] * q`` into ``v_out``.

    ``v_out`` may be ``v_in``; ``c`` is scratch space of length 4.

    Args:
        q: Unit quaternion vector to rotate with
        v_in: 3d vector to rotate
        v_out: Rotated 3d vector
        c: Working space, overwritten
    """
    # [0, v] * q
    c[0] = -v_in[0] * q[1] - v_in[1] * q[2] - v_in[2] * q[3]
    c[1] = v_in[0] * q[0] + v_in[1] * q[3] - v_in[2] * q[2]
    c[2] = v_in[1] * q[0] + v_in[2] * q[1] - v_in[0] * q[3]
    c[3] = v_in[2] * q[0] + v_in[0] * q[2] - v_in[1] * q[1]
    # q^-1 * c
    v_out[0] = q[0] * c[1] - q[1] * c[0] - q[2] * c[3] + q[3] * c[2]
    v_out[1] = q[0] * c[2] - q[2] * c[0] - q[3] * c[1] + q[1] * c[3]
    v_out[2] = q[0] * c[3] - q[3] * c[0] - q[1] * c[2] + q[2] * c[1]


def quat_wrap_inv(q: QuatVector, v_in: Vector3, v_out: MutableVector, c: MutableVector) -> None:
    """Write ``q * [0, v_in] * q^-1`` into ``v_out``, the inverse of :func:`quat_wrap`."""
    # [0, v] * q^-1
    c[0] = v_in[0] * q[1] + v_in[1] * q[2] + v_in[2] * q[3]
    c[1] = v_in[0] * q[0] - v_in[1] * q[3] + v_in[2] * q[2]
    c[2] = v_in[1] * q[0] - v_in[2] * q[1] + v_in[0] * q[3]
    c[3] = v_in[2] * q[0] - v_in[0] * q[2] + v_in[1] * q[1]
    # q * c
    v_out[0] = q[0] * c[1] + q[1] * c[0] + q[2] * c[3] - q[3] * c[2]
    v_out[1] = q[0] * c[2] + q[2] * c[0] + q[3] * c[1] - q[1] * c[3]
    v_out[2] = q[0] * c[3] + q[3] * c[0] + q[1] * c[2] - q[2] * c[1]


def quat_wrap_ip(q: QuatVector, v: MutableVector, c: MutableVector) -> None:
    """Rotate ``v`` in place with ``q^-1 * [0, v] * q``."""
    quat_wrap(q, v, v, c)


def quat_wrap_ip_inv(q: QuatVector, v: MutableVector, c: MutableVector) -> None:
    """Inverse of :func:`quat_wrap_ip`."""
    quat_wrap_inv(q, v, v, c)


def norm3(vec: Vector3) -> float:
    return math.sqrt(max(0.0, vec[0] * vec[0] + vec[1] * vec[1] + vec[2] * vec[2]))


def norm4(vec: QuatVector) -> float:
    return math.sqrt(
        max(0.0, vec[0] * vec[0] + vec[1] * vec[1] + vec[2] * vec[2] + vec[3] * vec[3])
    )


def format_number(num: float, digits: int, no_sign: bool = False) -> str:
    """Format a number with ``digits`` significant digits.

    Signed output separates the sign with a space (``"+ 0.1"``, ``"- 0.1"``)
    so quaternion components read as a sum.

    Args:
        num: Number to format
        digits: Number of significant digits, trailing zeros are dropped
        no_sign: If True, omit the sign for non-negative numbers

    Returns:
        Formatted string
    """
    body = f"{abs(num):.{digits}g}"
    if no_sign:
        return f"-{body}" if num < 0 else body
    return f"- {body}" if num < 0 else f"+ {body}"


def _check_angle(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        raise TypeError(f"{name} must be a number, got {value!r}")
    if math.isnan(value):
        raise ValueError(f"{name} must be a number, got NaN")
    return float(value)


class UnitQuaternion:
    """A unit quaternion for rotating 3d vectors and orientations.

    The norm invariant is enforced on every public setter. The conjugate is
    cached alongside the quaternion vector and refreshed on every mutation.
    """

    def __init__(self) -> None:
        self._qvec = np.array(IDENTITY_QVEC, dtype=np.float64)
        self._qvec_inv = np.array(IDENTITY_QVEC, dtype=np.float64)
        self._working_space = np.zeros(4, dtype=np.float64)

    @property
    def re(self) -> float:
        """Real part of the quaternion."""
        return float(self._qvec[0])

    @property
    def i(self) -> float:
        """i component of the quaternion."""
        return float(self._qvec[1])

    @property
    def j(self) -> float:
        """j component of the quaternion."""
        return float(self._qvec[2])

    @property
    def k(self) -> float:
        """k component of the quaternion."""
        return float(self._qvec[3])

    @property
    def qvec(self) -> np.ndarray:
        """Vector form ``[re, i, j, k]`` (a live view, do not mutate)."""
        return self._qvec

    @property
    def qvec_inv(self) -> np.ndarray:
        """Cached conjugate vector ``[re, -i, -j, -k]``."""
        return self._qvec_inv

    @property
    def angle(self) -> float:
        """Rotation angle in ``[0, pi]``.

        The sign of the real part is folded into :attr:`axis` so the angle is
        never negative.
        """
        vnorm = norm3(self._qvec[1:])
        return 2.0 * math.atan2(vnorm, abs(self._qvec[0]))

    @property
    def axis(self) -> np.ndarray:
        """Unit rotation axis, ``(0, 0, 1)`` for the identity rotation."""
        vnorm = norm3(self._qvec[1:])
        if vnorm < NORM_TOL:
            return np.array(DEFAULT_AXIS, dtype=np.float64)
        sign = -1.0 if self._qvec[0] < 0 else 1.0
        return sign * self._qvec[1:] / vnorm

    @property
    def matrix(self) -> np.ndarray:
        """3x3 matrix ``M`` with ``M @ v == self.rotate(v)``."""
        re, i, j, k = self._qvec
        return np.array(
            [
                [1.0 - 2.0 * (j * j + k * k), 2.0 * (i * j + k * re), 2.0 * (i * k - j * re)],
                [2.0 * (i * j - k * re), 1.0 - 2.0 * (i * i + k * k), 2.0 * (j * k + i * re)],
                [2.0 * (i * k + j * re), 2.0 * (j * k - i * re), 1.0 - 2.0 * (i * i + j * j)],
            ],
            dtype=np.float64,
        )

    @property
    def matrix_inv(self) -> np.ndarray:
        """3x3 matrix ``M`` with ``M @ v == self.unrotate(v)``."""
        return self.matrix.T.copy()

    # ----------------
    # Mutation Methods
    # ----------------

    def _set_vec(self, normalized_qvec: QuatVector) -> None:
        """Set the quaternion vector without renormalizing."""
        self._qvec[0] = normalized_qvec[0]
        self._qvec[1] = normalized_qvec[1]
        self._qvec[2] = normalized_qvec[2]
        self._qvec[3] = normalized_qvec[3]
        self._qvec_inv[0] = self._qvec[0]
        self._qvec_inv[1] = -self._qvec[1]
        self._qvec_inv[2] = -self._qvec[2]
        self._qvec_inv[3] = -self._qvec[3]

    def set_vec(self, qvec: QuatVector) -> UnitQuaternion:
        """Set the quaternion from a 4d vector, normalizing it.

        Raises:
            InvalidDimension: If ``qvec`` is not 4d
            NormalizationError: If ``qvec`` is (nearly) zero
        """
        qvec = as_vector(qvec, 4, "quaternion vector")
        norm = norm4(qvec)
        if norm < NORM_TOL:
            raise NormalizationError(f"Cannot normalize quaternion vector {qvec.tolist()}")
        self._set_vec(qvec / norm)
        return self

    def _set_axis(self, angle: float, normalized_vec: Vector3) -> None:
        cos = math.cos(angle / 2.0)
        sin = math.sin(angle / 2.0)
        self._set_vec(
            (cos, normalized_vec[0] * sin, normalized_vec[1] * sin, normalized_vec[2] * sin)
        )

    def set_axis(self, angle: float, vec: Vector3) -> UnitQuaternion:
        """Set from a rotation angle (radians) and an axis, normalizing the axis.

        Raises:
            InvalidDimension: If ``vec`` is not 3d
            NormalizationError: If ``vec`` is (nearly) zero
        """
        vec = as_vector(vec, 3, "rotation axis")
        norm = norm3(vec)
        if norm < NORM_TOL:
            raise NormalizationError(f"Cannot normalize rotation axis {vec.tolist()}")
        self._set_axis(angle, vec / norm)
        return self

    def _set_euler(self, yaw: float, pitch: float, roll: float) -> None:
        sy = math.sin(yaw / 2.0)
        cy = math.cos(yaw / 2.0)
        sp = math.sin(pitch / 2.0)
        cp = math.cos(pitch / 2.0)
        sr = math.sin(roll / 2.0)
        cr = math.cos(roll / 2.0)

        self._set_vec(
            (
                sp * sr * sy + cp * cr * cy,
                sp * cr * cy + sr * sy * cp,
                -sp * sy * cr + sr * cp * cy,
                sp * sr * cy - sy * cp * cr,
            )
        )

    def set_euler(self, yaw: float = 0.0, pitch: float = 0.0, roll: float = 0.0) -> UnitQuaternion:
        """Set from Euler angles in radians.

        Args:
            yaw: Rotation around "up"
            pitch: Rotation around "right"
            roll: Rotation around "forward"
        """
        self._set_euler(yaw, pitch, roll)
        return self

    def set_as_composite(self, first: UnitQuaternion, second: UnitQuaternion) -> UnitQuaternion:
        """Become the rotation ``first`` followed by ``second``.

        Either argument may be ``self``.
        """
        quat_mult(first.qvec, second.qvec, self._working_space)
        return self.set_vec(self._working_space)

    def set_as_inv(self) -> UnitQuaternion:
        """Invert this quaternion in place."""
        self._set_vec(self._qvec_inv.copy())
        return self

    def set_with_reference(self, other: UnitQuaternion) -> UnitQuaternion:
        """In place version of :meth:`with_reference`."""
        quat_mult(other.qvec_inv, self._qvec, self._working_space)
        return self.set_vec(self._working_space)

    def set_without_reference(self, other: UnitQuaternion) -> UnitQuaternion:
        """In place version of :meth:`without_reference`."""
        quat_mult(other.qvec, self._qvec, self._working_space)
        return self.set_vec(self._working_space)

    def set_with_coordinate_convention(self, other: UnitQuaternion) -> UnitQuaternion:
        """In place version of :meth:`with_coordinate_convention`."""
        quat_mult(other.qvec_inv, self._qvec, self._working_space)
        tmp = self._working_space.copy()
        quat_mult(tmp, other.qvec, self._working_space)
        return self.set_vec(self._working_space)

    def set_without_coordinate_convention(self, other: UnitQuaternion) -> UnitQuaternion:
        """In place version of :meth:`without_coordinate_convention`."""
        quat_mult(other.qvec, self._qvec, self._working_space)
        tmp = self._working_space.copy()
        quat_mult(tmp, other.qvec_inv, self._working_space)
        return self.set_vec(self._working_space)

    # --------------------
    # Construction Methods
    # --------------------

    @classmethod
    def identity(cls) -> UnitQuaternion:
        """Construct the identity rotation."""
        return cls()

    @classmethod
    def from_vec(cls, qvec: QuatVector) -> UnitQuaternion:
        """Construct from a 4d vector ``[re, i, j, k]``, normalizing it."""
        return cls().set_vec(qvec)

    @classmethod
    def from_axis(cls, angle: float, vec: Vector3) -> UnitQuaternion:
        """Construct from a rotation angle (radians) and a nonzero axis."""
        angle = _check_angle(angle, "angle")
        return cls().set_axis(angle, vec)

    @classmethod
    def from_euler(
        cls, yaw: float = 0.0, pitch: float = 0.0, roll: float = 0.0
    ) -> UnitQuaternion:
        """Construct from Euler angles in radians."""
        return cls().set_euler(
            _check_angle(yaw, "yaw"),
            _check_angle(pitch, "pitch"),
            _check_angle(roll, "roll"),
        )

    def copy(self) -> UnitQuaternion:
        quat = UnitQuaternion()
        quat._set_vec(self._qvec)
        return quat

    # ----------
    # Operations
    # ----------

    def mult(self, other: UnitQuaternion) -> UnitQuaternion:
        """Right multiply: ``self * other``."""
        qvec = np.zeros(4, dtype=np.float64)
        quat_mult(self._qvec, other.qvec, qvec)
        return UnitQuaternion().set_vec(qvec)

    def before(self, other: UnitQuaternion) -> UnitQuaternion:
        """Rotation equivalent to ``self`` followed by ``other``."""
        return self.mult(other)

    def after(self, other: UnitQuaternion) -> UnitQuaternion:
        """Rotation equivalent to ``other`` followed by ``self``."""
        return other.mult(self)

    def conj(self) -> UnitQuaternion:
        """Conjugate, which is also the inverse for unit quaternions."""
        quat = UnitQuaternion()
        quat._set_vec(self._qvec_inv)
        return quat

    def inv(self) -> UnitQuaternion:
        return self.conj()

    def with_reference(self, other: UnitQuaternion) -> UnitQuaternion:
        """Re-express this orientation relative to the reference ``other``.

        Returns ``other^-1 * self``.
        """
        qvec = np.zeros(4, dtype=np.float64)
        quat_mult(other.qvec_inv, self._qvec, qvec)
        return UnitQuaternion().set_vec(qvec)

    def without_reference(self, other: UnitQuaternion) -> UnitQuaternion:
        """Undo :meth:`with_reference`, returning ``other * self``."""
        qvec = np.zeros(4, dtype=np.float64)
        quat_mult(other.qvec, self._qvec, qvec)
        return UnitQuaternion().set_vec(qvec)

    def with_coordinate_convention(self, other: UnitQuaternion) -> UnitQuaternion:
        """Relabel the axes of this orientation, returning ``other^-1 * self * other``."""
        return self.copy().set_with_coordinate_convention(other)

    def without_coordinate_convention(self, other: UnitQuaternion) -> UnitQuaternion:
        """Undo :meth:`with_coordinate_convention`, returning ``other * self * other^-1``."""
        return self.copy().set_without_coordinate_convention(other)

    def rotate(self, vec: Vector3) -> np.ndarray:
        """Rotate a 3d vector, returning a new array."""
        vec = as_vector(vec, 3)
        out = np.zeros(3, dtype=np.float64)
        quat_wrap(self._qvec, vec, out, self._working_space)
        return out

    def rotate_ip(self, vec: MutableVector) -> None:
        """Rotate a 3d vector in place."""
        check_length(vec, 3)
        quat_wrap_ip(self._qvec, vec, self._working_space)

    def unrotate(self, vec: Vector3) -> np.ndarray:
        """Undo :meth:`rotate`, returning a new array."""
        vec = as_vector(vec, 3)
        out = np.zeros(3, dtype=np.float64)
        quat_wrap(self._qvec_inv, vec, out, self._working_space)
        return out

    def unrotate_ip(self, vec: MutableVector) -> None:
        """Undo :meth:`rotate_ip` in place."""
        check_length(vec, 3)
        quat_wrap_ip(self._qvec_inv, vec, self._working_space)

    def to_dict(self) -> dict[str, float]:
        return {"re": self.re, "i": self.i, "j": self.j, "k": self.k}

    def __str__(self) -> str:
        return (
            f"{format_number(self.re, 4, no_sign=True)} "
            f"{format_number(self.i, 4)}i "
            f"{format_number(self.j, 4)}j "
            f"{format_number(self.k, 4)}k"
        )

    def __repr__(self) -> str:
        return f"UnitQuaternion({self._qvec.tolist()})"


__all__ = [
    "quat_mult",
    "quat_wrap",
    "quat_wrap_inv",
    "quat_wrap_ip",
    "quat_wrap_ip_inv",
    "format_number",
    "UnitQuaternion",
    "IDENTITY_QVEC",
    "NORM_TOL",
]
