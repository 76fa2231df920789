"""Per-strip fold kinematics: target transform and damped smoothing.

Each strip's rotation follows an alternating-direction fold driven by the
horizontal pointer distance from center plus a slow phase-shifted wave. Its
horizontal position is pulled toward the centerline by the cosine of the
current rotation, a small depth offset keeps neighbouring strips from
intersecting, and the whole wall tilts with the vertical pointer position.
All four quantities relax exponentially toward their targets at distinct
rates, independent of frame rate.
"""

import logging
import math
from dataclasses import dataclass, astuple
from typing import Optional, Tuple

import torch

from .config import WallConfig, KinematicsParams
from .layout import StripLayout

logger = logging.getLogger(__name__)

MIN_FRAME_DELTA = 1e-6
STATE_COLUMNS = ("rotation_y", "position_x", "position_z", "tilt_x")


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _finite_or(x: float, default: float) -> float:
    x = float(x)
    return x if math.isfinite(x) else default


@dataclass(frozen=True)
class InputSample:
    """One frame of host input. Pointer is normalized to [-1, 1], +1 top/right."""
    pointer_x: float = 0.0
    pointer_y: float = 0.0
    elapsed_time: float = 0.0
    frame_delta: float = 1.0 / 60.0

    def sanitized(self) -> "InputSample":
        """Clamp pointer into range and replace a stalled frame delta with an epsilon."""
        dt = float(self.frame_delta)
        if not math.isfinite(dt) or dt <= 0:
            logger.debug(f"Clamping frame delta {self.frame_delta} to {MIN_FRAME_DELTA}")
            dt = MIN_FRAME_DELTA
        return InputSample(
            pointer_x=clamp(_finite_or(self.pointer_x, 0.0), -1.0, 1.0),
            pointer_y=clamp(_finite_or(self.pointer_y, 0.0), -1.0, 1.0),
            elapsed_time=_finite_or(self.elapsed_time, 0.0),
            frame_delta=dt,
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return astuple(self)


@dataclass
class StripSmoothingState:
    """Smoothed transform of a single strip; starts flat, centered and untilted."""
    rotation_y: float = 0.0
    position_x: float = 0.0
    position_z: float = 0.0
    tilt_x: float = 0.0

    def copy(self) -> "StripSmoothingState":
        return StripSmoothingState(*astuple(self))

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return astuple(self)


def damping_factor(rate: float, frame_delta: float) -> float:
    """Fraction of the remaining distance covered this frame."""
    return clamp(rate * frame_delta, 0.0, 1.0)


def fold_direction(index: int) -> int:
    return 1 if index % 2 == 0 else -1


def compression(pointer_x: float, params: Optional[KinematicsParams] = None) -> float:
    """Fold intensity in [0, 1]; saturates once |pointer_x| >= 1 / compression_gain."""
    if params is None:
        params = KinematicsParams()
    return clamp(abs(pointer_x) * params.compression_gain, 0.0, 1.0)


def wave(elapsed_time: float, index: int, params: Optional[KinematicsParams] = None) -> float:
    """Slow idle oscillation, phase-shifted per strip."""
    if params is None:
        params = KinematicsParams()
    return math.sin(elapsed_time * params.wave_speed + index * params.wave_phase_step) * params.wave_amplitude


def target_angle(index: int, sample: InputSample, cfg: WallConfig) -> float:
    params = cfg.kinematics
    fold = cfg.max_fold_angle * compression(sample.pointer_x, params)
    return fold_direction(index) * (fold + wave(sample.elapsed_time, index, params) * params.wave_weight)


def update_strip(
    layout: StripLayout,
    state: StripSmoothingState,
    sample: InputSample,
    cfg: WallConfig,
) -> StripSmoothingState:
    """Advance one strip's smoothing state by one frame (in place).

    ``sample`` is expected to be sanitized by the caller.
    """
    params = cfg.kinematics
    dt = sample.frame_delta
    direction = fold_direction(layout.index)

    angle = target_angle(layout.index, sample, cfg)
    state.rotation_y = lerp(state.rotation_y, angle, damping_factor(params.rotation_rate, dt))

    # Position targets follow the smoothed rotation, not the raw target
    abs_angle = abs(state.rotation_y)
    target_x = layout.flat_center_x * math.cos(abs_angle)
    target_z = math.sin(abs_angle) * (cfg.strip_width * params.depth_scale) * direction

    k_pos = damping_factor(params.position_rate, dt)
    state.position_x = lerp(state.position_x, target_x, k_pos)
    state.position_z = lerp(state.position_z, target_z, k_pos)

    target_tilt = sample.pointer_y * params.tilt_gain
    state.tilt_x = lerp(state.tilt_x, target_tilt, damping_factor(params.tilt_rate, dt))
    return state


def steady_state(layout: StripLayout, sample: InputSample, cfg: WallConfig) -> StripSmoothingState:
    """State a strip converges to when ``sample`` is held constant."""
    params = cfg.kinematics
    angle = target_angle(layout.index, sample, cfg)
    abs_angle = abs(angle)
    return StripSmoothingState(
        rotation_y=angle,
        position_x=layout.flat_center_x * math.cos(abs_angle),
        position_z=math.sin(abs_angle) * (cfg.strip_width * params.depth_scale) * fold_direction(layout.index),
        tilt_x=sample.pointer_y * params.tilt_gain,
    )


def update_strips(
    states: torch.Tensor,
    centers: torch.Tensor,
    indices: torch.Tensor,
    sample: InputSample,
    cfg: WallConfig,
) -> torch.Tensor:
    """Batched ``update_strip`` over all strips of a wall (in place).

    Args:
        states: [N, 4] columns rotation_y, position_x, position_z, tilt_x
        centers: [N] flat strip centers
        indices: [N] strip indices (long)
        sample: sanitized input shared by every strip this frame
        cfg: WallConfig

    Returns:
        states, updated
    """
    params = cfg.kinematics
    dt = sample.frame_delta
    dtype = states.dtype

    direction = (1 - 2 * (indices % 2)).to(dtype)
    phase = sample.elapsed_time * params.wave_speed + indices.to(dtype) * params.wave_phase_step
    wave_t = torch.sin(phase) * params.wave_amplitude
    fold = cfg.max_fold_angle * compression(sample.pointer_x, params)
    angle = direction * (fold + wave_t * params.wave_weight)

    states[:, 0] = torch.lerp(states[:, 0], angle, damping_factor(params.rotation_rate, dt))

    abs_angle = states[:, 0].abs()
    target_x = centers * torch.cos(abs_angle)
    target_z = torch.sin(abs_angle) * (cfg.strip_width * params.depth_scale) * direction

    k_pos = damping_factor(params.position_rate, dt)
    states[:, 1] = torch.lerp(states[:, 1], target_x, k_pos)
    states[:, 2] = torch.lerp(states[:, 2], target_z, k_pos)

    target_tilt = torch.full_like(states[:, 3], sample.pointer_y * params.tilt_gain)
    states[:, 3] = torch.lerp(states[:, 3], target_tilt, damping_factor(params.tilt_rate, dt))
    return states
