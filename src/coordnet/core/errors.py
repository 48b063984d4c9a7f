"""Custom exception types for coordinate networks."""


class CoordinateNetworkError(Exception):
    """Base exception for all coordinate network errors."""

    pass


class NormalizationError(CoordinateNetworkError):
    """A quaternion or rotation axis was built from a near-zero vector."""

    pass


class InvalidDimension(CoordinateNetworkError):
    """A vector or quaternion argument has the wrong arity."""

    pass


class UnknownSystem(CoordinateNetworkError):
    """A query references a coordinate system that is not in the network."""

    pass


class PathNotFound(CoordinateNetworkError):
    """Two coordinate systems exist but are not connected."""

    pass


class NonEuclideanTransform(CoordinateNetworkError):
    """A path crosses an edge that cannot be folded into a rigid motion."""

    pass


class ConfigError(CoordinateNetworkError):
    """Configuration-related errors."""

    pass


__all__ = [
    "CoordinateNetworkError",
    "NormalizationError",
    "InvalidDimension",
    "UnknownSystem",
    "PathNotFound",
    "NonEuclideanTransform",
    "ConfigError",
]
