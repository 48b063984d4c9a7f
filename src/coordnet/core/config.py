"""Configuration models and I/O for coordinate networks.

Pydantic models describing the edges of a network, with YAML/JSON I/O.
Static angles may be given in degrees and are normalized to radians when
the transforms are built.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..network.network import CoordinateNetwork
from ..network.pinhole import PinholeCameraTransform
from ..network.transform import (
    AxisAngleKeys,
    CompositeTransform,
    EuclideanCompositeTransform,
    EuclideanReverseStaticTransform,
    EuclideanStaticTransform,
    EulerKeys,
    QuaternionKey,
    RotateDynamicTransform,
    RotateStaticTransform,
    ShiftDynamicTransform,
    ShiftStaticTransform,
    Transform,
)
from .errors import ConfigError
from .logging import get_logger
from .units import to_radians

logger = get_logger(__name__)


class IdentitySpec(BaseModel):
    """Edge that leaves coordinates unchanged."""

    kind: Literal["identity"] = "identity"

    def to_transform(self) -> Transform:
        return Transform()


class ShiftSpec(BaseModel):
    """Fixed shift."""

    kind: Literal["shift"] = "shift"
    vec: tuple[float, float, float] = Field(description="Shift vector (x, y, z)")

    def to_transform(self) -> Transform:
        return ShiftStaticTransform(self.vec)


class ShiftDynamicSpec(BaseModel):
    """Shift read from the state on every update."""

    kind: Literal["shift_dynamic"] = "shift_dynamic"
    key: str = Field(description="State key holding the shift vector")

    def to_transform(self) -> Transform:
        return ShiftDynamicTransform(self.key)


class RotateSpec(BaseModel):
    """Fixed rotation given by exactly one of: quat, axis and angle, or Euler angles."""

    kind: Literal["rotate"] = "rotate"
    quat: tuple[float, float, float, float] | None = Field(
        default=None, description="Quaternion vector (re, i, j, k)"
    )
    axis: tuple[float, float, float] | None = Field(default=None, description="Rotation axis")
    angle: float | None = Field(default=None, description="Rotation angle about axis")
    yaw: float | None = Field(default=None, description="Euler yaw")
    pitch: float | None = Field(default=None, description="Euler pitch")
    roll: float | None = Field(default=None, description="Euler roll")
    degrees: bool = Field(default=False, description="Angles are given in degrees")

    @model_validator(mode="after")
    def validate_mode(self) -> RotateSpec:
        """Ensure exactly one rotation parameterization is used."""
        modes = [
            self.quat is not None,
            self.axis is not None or self.angle is not None,
            any(v is not None for v in (self.yaw, self.pitch, self.roll)),
        ]
        if sum(modes) != 1:
            raise ValueError(
                "Rotation needs exactly one of quat, axis and angle, or yaw/pitch/roll"
            )
        if (self.axis is None) != (self.angle is None):
            raise ValueError("Rotation axis and angle must be given together")
        return self

    def _radians(self, value: float | None) -> float:
        if value is None:
            return 0.0
        return to_radians(value, self.degrees)

    def to_transform(self) -> Transform:
        if self.quat is not None:
            return RotateStaticTransform(list(self.quat))
        if self.axis is not None:
            return RotateStaticTransform(self._radians(self.angle), self.axis)
        return RotateStaticTransform(
            {
                "yaw": self._radians(self.yaw),
                "pitch": self._radians(self.pitch),
                "roll": self._radians(self.roll),
            }
        )


class RotateDynamicSpec(BaseModel):
    """Rotation read from the state on every update (angles in radians)."""

    kind: Literal["rotate_dynamic"] = "rotate_dynamic"
    quat_key: str | None = Field(default=None, description="State key of a quaternion vector")
    axis_key: str | None = Field(default=None, description="State key of a rotation axis")
    angle_key: str | None = Field(default=None, description="State key of a rotation angle")
    yaw_key: str | None = Field(default=None, description="State key of the Euler yaw")
    pitch_key: str | None = Field(default=None, description="State key of the Euler pitch")
    roll_key: str | None = Field(default=None, description="State key of the Euler roll")

    @model_validator(mode="after")
    def validate_mode(self) -> RotateDynamicSpec:
        """Ensure exactly one family of keys is used."""
        modes = [
            self.quat_key is not None,
            self.axis_key is not None or self.angle_key is not None,
            any(k is not None for k in (self.yaw_key, self.pitch_key, self.roll_key)),
        ]
        if sum(modes) != 1:
            raise ValueError(
                "Dynamic rotation needs exactly one of quat_key, axis_key and angle_key, "
                "or yaw_key/pitch_key/roll_key"
            )
        if (self.axis_key is None) != (self.angle_key is None):
            raise ValueError("axis_key and angle_key must be given together")
        return self

    def to_transform(self) -> Transform:
        if self.quat_key is not None:
            return RotateDynamicTransform(QuaternionKey(self.quat_key))
        if self.axis_key is not None:
            return RotateDynamicTransform(AxisAngleKeys(self.angle_key, self.axis_key))
        return RotateDynamicTransform(EulerKeys(self.yaw_key, self.pitch_key, self.roll_key))


class EuclideanSpec(BaseModel):
    """Fixed roto-translation."""

    kind: Literal["euclidean"] = "euclidean"
    quat: tuple[float, float, float, float] = Field(
        default=(1.0, 0.0, 0.0, 0.0), description="Quaternion vector (re, i, j, k)"
    )
    shift: tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0), description="Shift vector (x, y, z)"
    )
    convention: Literal["forward", "reverse"] = Field(
        default="forward",
        description="forward rotates then shifts, reverse shifts then rotates",
    )

    def to_transform(self) -> Transform:
        if self.convention == "reverse":
            return EuclideanReverseStaticTransform(self.quat, self.shift)
        return EuclideanStaticTransform(self.quat, self.shift)


class CompositeSpec(BaseModel):
    """Two transforms applied one after the other."""

    kind: Literal["composite"] = "composite"
    first: TransformSpec = Field(description="Transform applied first")
    second: TransformSpec = Field(description="Transform applied second")
    euclidean: bool = Field(
        default=True, description="Fold both children into a single Euclidean"
    )
    reverse: bool = Field(
        default=False, description="Store the folded Euclidean in the reverse convention"
    )

    def to_transform(self) -> Transform:
        first = self.first.to_transform()
        second = self.second.to_transform()
        if self.euclidean:
            return EuclideanCompositeTransform(first, second, reverse=self.reverse)
        return CompositeTransform(first, second)


class PinholeSpec(BaseModel):
    """Projective camera edge from world to image coordinates."""

    kind: Literal["pinhole"] = "pinhole"
    q_key: str | None = Field(default=None, description="State key of the 4x4 Q matrix")
    Q: list[list[float]] | None = Field(default=None, description="Initial 4x4 Q matrix")

    @field_validator("Q")
    @classmethod
    def validate_q(cls, v: list[list[float]] | None) -> list[list[float]] | None:
        """Validate Q is 4x4."""
        if v is not None and (len(v) != 4 or any(len(row) != 4 for row in v)):
            raise ValueError("Q must be a 4x4 matrix")
        return v

    def to_transform(self) -> Transform:
        return PinholeCameraTransform(self.q_key, self.Q)


# Union type for all transform specs
TransformSpec = Annotated[
    Union[
        IdentitySpec,
        ShiftSpec,
        ShiftDynamicSpec,
        RotateSpec,
        RotateDynamicSpec,
        EuclideanSpec,
        CompositeSpec,
        PinholeSpec,
    ],
    Field(discriminator="kind"),
]

CompositeSpec.model_rebuild()


class Connection(BaseModel):
    """Edge between two named coordinate systems."""

    first: str = Field(description="System the transform maps from")
    second: str = Field(description="System the transform maps to")
    transform: TransformSpec = Field(
        default_factory=IdentitySpec, description="Transform from first to second"
    )
    one_way: bool = Field(default=False, description="Do not attach the inverse edge")

    @model_validator(mode="after")
    def validate_systems(self) -> Connection:
        """Ensure the connection joins two different systems."""
        if self.first == self.second:
            raise ValueError(f"Connection cannot join system '{self.first}' to itself")
        return self


class NetworkConfig(BaseModel):
    """Complete network configuration."""

    connections: list[Connection] = Field(default_factory=list, description="Network edges")
    state: dict[str, Any] = Field(
        default_factory=dict, description="Dynamic data applied after compiling"
    )


def _read_data(path: str | Path) -> Any:
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            # YAML is a superset of JSON
            return yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e


def parse_config(data: Any) -> NetworkConfig:
    """Validate raw data as a network configuration.

    Raises:
        ConfigError: If the data is not a valid configuration
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")
    try:
        return NetworkConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid network config: {e}") from e


def load_config(path: str | Path) -> NetworkConfig:
    """Load configuration from YAML or JSON file.

    Args:
        path: Path to configuration file

    Returns:
        Validated NetworkConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If config is invalid
    """
    config = parse_config(_read_data(path))
    logger.info(
        f"Loaded network config from {path}",
        {"connections": len(config.connections), "state_keys": sorted(config.state)},
    )
    return config


def load_state(path: str | Path) -> dict[str, Any]:
    """Load a dynamic state mapping from YAML or JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the file does not hold a mapping
    """
    data = _read_data(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"State must be a mapping, got {type(data).__name__}")
    return data


def save_config(config: NetworkConfig, path: str | Path) -> None:
    """Save configuration to YAML or JSON file.

    Args:
        config: Network configuration to save
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_none=True)

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def round_trip_config(config: NetworkConfig) -> NetworkConfig:
    """Serialize a configuration to YAML and back.

    Args:
        config: Input configuration

    Returns:
        Configuration after serialization and deserialization
    """
    data = config.model_dump(mode="json", exclude_none=True)
    yaml_str = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    loaded_data = yaml.safe_load(yaml_str)
    return NetworkConfig(**loaded_data)


def build_network(config: NetworkConfig) -> CoordinateNetwork:
    """Connect every configured edge, compile, and apply the initial state."""
    net = CoordinateNetwork()
    for conn in config.connections:
        net.connect_systems(conn.first, conn.transform.to_transform(), conn.second, conn.one_way)
    net.compile()
    if config.state:
        net.update(config.state)
    return net


__all__ = [
    "IdentitySpec",
    "ShiftSpec",
    "ShiftDynamicSpec",
    "RotateSpec",
    "RotateDynamicSpec",
    "EuclideanSpec",
    "CompositeSpec",
    "PinholeSpec",
    "TransformSpec",
    "Connection",
    "NetworkConfig",
    "parse_config",
    "load_config",
    "load_state",
    "save_config",
    "round_trip_config",
    "build_network",
]
