"""Folding wall configuration."""

from dataclasses import dataclass, field, asdict, fields, replace
from pathlib import Path
from typing import Dict, Any, Union
import math

import yaml


class WallConfigError(ValueError):
    """Raised when a wall configuration is rejected."""


@dataclass(frozen=True)
class KinematicsParams:
    """Numeric constants of the per-strip fold update.

    Rates are in 1/s; a smoothing step moves ``min(1, rate * dt)`` of the
    remaining distance toward the target.
    """
    compression_gain: float = 1.5
    wave_speed: float = 0.5
    wave_phase_step: float = 0.1  # per strip index
    wave_amplitude: float = 0.1
    wave_weight: float = 0.2
    rotation_rate: float = 10.0
    position_rate: float = 8.0
    tilt_rate: float = 5.0
    depth_scale: float = 0.25  # fraction of strip width
    tilt_gain: float = 0.2

    def validate(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise WallConfigError(f"kinematics.{f.name} must be a finite number, got {value!r}")
        for name in ("rotation_rate", "position_rate", "tilt_rate"):
            if getattr(self, name) <= 0:
                raise WallConfigError(f"kinematics.{name} must be > 0, got {getattr(self, name)}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "KinematicsParams":
        valid_keys = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in d.items() if k in valid_keys})


@dataclass(frozen=True)
class WallConfig:
    """Wall geometry and fold limits.

    Validated on construction so that no layout is ever generated from a
    bad configuration.
    """
    strip_count: int = 24
    wall_width: float = 12.0
    wall_height: float = 8.0
    max_fold_angle: float = math.pi / 2.2  # radians
    kinematics: KinematicsParams = field(default_factory=KinematicsParams)
    device: str = "cpu"

    def __post_init__(self):
        self.validate()

    @property
    def strip_width(self) -> float:
        return self.wall_width / self.strip_count

    def validate(self) -> None:
        if isinstance(self.strip_count, bool) or not isinstance(self.strip_count, int):
            raise WallConfigError(f"strip_count must be an integer, got {self.strip_count!r}")
        if self.strip_count <= 0:
            raise WallConfigError(f"strip_count must be > 0, got {self.strip_count}")
        for name in ("wall_width", "wall_height"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise WallConfigError(f"{name} must be a positive finite number, got {value}")
        if not (0 < self.max_fold_angle <= math.pi):
            raise WallConfigError(f"max_fold_angle must be in (0, pi], got {self.max_fold_angle}")
        self.kinematics.validate()

    def with_updates(self, **changes) -> "WallConfig":
        """Copy with some fields replaced (re-validated)."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WallConfig":
        d = dict(d)
        kin = d.pop("kinematics", None)
        if "max_fold_angle_deg" in d:
            d["max_fold_angle"] = math.radians(float(d.pop("max_fold_angle_deg")))
        valid_keys = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in d.items() if k in valid_keys}
        if "strip_count" in kwargs:
            kwargs["strip_count"] = _as_int(kwargs["strip_count"])
        for name in ("wall_width", "wall_height", "max_fold_angle"):
            if name in kwargs:
                kwargs[name] = float(kwargs[name])
        if kin is not None:
            kwargs["kinematics"] = KinematicsParams.from_dict(kin)
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "WallConfig":
        """Load from a YAML file; a top-level ``wall`` section is used if present."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data.get("wall", data))


def _as_int(value: Any) -> int:
    # CSV round-trips turn integers into "24.0"
    as_float = float(value)
    if not as_float.is_integer():
        raise WallConfigError(f"strip_count must be an integer, got {value!r}")
    return int(as_float)
