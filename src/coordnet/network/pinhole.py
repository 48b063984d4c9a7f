"""Pinhole stereo camera model.

The 4x4 reprojection matrix ``Q`` encodes the focal length ``f = Q[2, 3]``,
the inverse baseline ``1/B = Q[3, 2]`` and the principal point offsets
``-Q[0, 3]`` and ``-Q[1, 3]``. Image coordinates are ``(i, j, disparity)``.

A point on the camera plane (``z = 0``) images to infinite disparity, and a
zero disparity projects to infinite depth; neither raises.
"""

from __future__ import annotations

import numpy as np

from ..core.errors import InvalidDimension
from ..core.types import Matrix, MutableVector, State, Vector3, as_vector, check_length
from .transform import Transform

DEFAULT_Q = (
    (0.0, 0.0, 0.0, 0.0),
    (0.0, 0.0, 0.0, 0.0),
    (0.0, 0.0, 0.0, 1.0),
    (0.0, 0.0, 1.0, 0.0),
)


def _as_q(Q) -> np.ndarray:
    arr = np.asarray(Q, dtype=np.float64)
    if arr.shape != (4, 4):
        raise InvalidDimension(f"Q must be a 4x4 matrix, got shape {arr.shape}")
    return arr


def image(wvec: Vector3, ivec: MutableVector, Q: Matrix) -> None:
    """Write the image coordinates of world point ``wvec`` into ``ivec``.

    ``ivec`` may be ``wvec``.
    """
    Q = np.asarray(Q, dtype=np.float64)
    f = Q[2, 3]
    with np.errstate(divide="ignore", invalid="ignore"):
        disparity = f / (np.float64(wvec[2]) * Q[3, 2])
        i = np.float64(wvec[0]) * f / disparity - Q[0, 3]
        j = np.float64(wvec[1]) * f / disparity - Q[1, 3]
    ivec[0] = float(i)
    ivec[1] = float(j)
    ivec[2] = float(disparity)


def image_ip(wvec: MutableVector, Q: Matrix) -> None:
    image(wvec, wvec, Q)


def project(ivec: Vector3, wvec: MutableVector, Q: Matrix) -> None:
    """Write the world point of image coordinates ``ivec`` into ``wvec``.

    ``wvec`` may be ``ivec``.
    """
    Q = np.asarray(Q, dtype=np.float64)
    f = Q[2, 3]
    with np.errstate(divide="ignore", invalid="ignore"):
        z = f / (np.float64(ivec[2]) * Q[3, 2])
        x = (np.float64(ivec[0]) + Q[0, 3]) * z / f
        y = (np.float64(ivec[1]) + Q[1, 3]) * z / f
    wvec[0] = float(x)
    wvec[1] = float(y)
    wvec[2] = float(z)


def project_ip(ivec: MutableVector, Q: Matrix) -> None:
    project(ivec, ivec, Q)


class PinholeCameraPair:
    """Stereo camera pair defined by its reprojection matrix."""

    def __init__(self) -> None:
        self.Q = np.array(DEFAULT_Q, dtype=np.float64)

    def set_Q(self, Q: Matrix) -> PinholeCameraPair:
        self.Q = _as_q(Q)
        return self

    def image(self, wvec: Vector3) -> np.ndarray:
        wvec = as_vector(wvec, 3, "world vector")
        ivec = np.zeros(3, dtype=np.float64)
        image(wvec, ivec, self.Q)
        return ivec

    def image_ip(self, wvec: MutableVector) -> None:
        check_length(wvec, 3, "world vector")
        image_ip(wvec, self.Q)

    def project(self, ivec: Vector3) -> np.ndarray:
        ivec = as_vector(ivec, 3, "image vector")
        wvec = np.zeros(3, dtype=np.float64)
        project(ivec, wvec, self.Q)
        return wvec

    def project_ip(self, ivec: MutableVector) -> None:
        check_length(ivec, 3, "image vector")
        project_ip(ivec, self.Q)


class PinholeCameraTransform(Transform):
    """Projective edge from world coordinates to image coordinates.

    ``Q`` is read from ``state[q_key]`` on update. Orientations pass through
    unchanged, and the edge can never be folded into an affine map.
    """

    is_euclidean = False

    def __init__(self, q_key: str | None, Q: Matrix | None = None) -> None:
        super().__init__()
        self.q_key = q_key
        self.camera = PinholeCameraPair()
        if Q is not None:
            self.camera.set_Q(Q)

    def update(self, state: State) -> Transform:
        if self.q_key is None:
            return self
        Q = state.get(self.q_key)
        if Q is not None:
            self.camera.set_Q(Q)
        return self

    def transform_vec(self, vec: Vector3) -> np.ndarray:
        return self.camera.image(vec)

    def untransform_vec(self, vec: Vector3) -> np.ndarray:
        return self.camera.project(vec)

    def transform_vec_ip(self, vec: MutableVector) -> None:
        self.camera.image_ip(vec)

    def untransform_vec_ip(self, vec: MutableVector) -> None:
        self.camera.project_ip(vec)

    def __repr__(self) -> str:
        return f"PinholeCameraTransform(q_key={self.q_key!r})"


__all__ = [
    "DEFAULT_Q",
    "image",
    "image_ip",
    "project",
    "project_ip",
    "PinholeCameraPair",
    "PinholeCameraTransform",
]
