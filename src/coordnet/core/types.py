"""Type definitions and aliases for coordinate networks."""

from collections.abc import Mapping, MutableSequence, Sequence
from typing import Any

import numpy as np

from .errors import InvalidDimension

# Common type aliases
Vector3 = Sequence[float] | np.ndarray
QuatVector = Sequence[float] | np.ndarray
MutableVector = MutableSequence[float] | np.ndarray
Matrix = np.ndarray
State = Mapping[str, Any]


def as_vector(vec: Any, dim: int, name: str = "vector") -> np.ndarray:
    """Coerce ``vec`` to a float64 array of length ``dim``.

    Raises:
        InvalidDimension: If ``vec`` is not a flat sequence of ``dim`` numbers
    """
    try:
        arr = np.asarray(vec, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidDimension(f"{name} must be a {dim}d vector, got {vec!r}") from e
    if arr.shape != (dim,):
        raise InvalidDimension(f"{name} must be a {dim}d vector, got shape {arr.shape}")
    return arr


def check_length(vec: Any, dim: int, name: str = "vector") -> None:
    """Check that a mutable sequence used for in-place work has ``dim`` entries.

    Raises:
        InvalidDimension: If ``vec`` does not have ``dim`` entries
        TypeError: If ``vec`` is an array that cannot hold floats
    """
    if isinstance(vec, np.ndarray) and not np.issubdtype(vec.dtype, np.floating):
        raise TypeError(f"{name} must be a floating point array, got dtype {vec.dtype}")
    try:
        n = len(vec)
    except TypeError as e:
        raise InvalidDimension(f"{name} must be a {dim}d vector, got {vec!r}") from e
    if n != dim:
        raise InvalidDimension(f"{name} must be a {dim}d vector, got length {n}")


__all__ = [
    "Vector3",
    "QuatVector",
    "MutableVector",
    "Matrix",
    "State",
    "as_vector",
    "check_length",
]
