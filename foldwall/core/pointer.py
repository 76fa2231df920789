"""Synthetic pointer input: per-frame InputSample sequences for offline runs."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple
import math

import numpy as np

from .kinematics import InputSample

PROFILES = ("static", "sweep", "orbit", "smooth_walk")


def _smooth_walk_path(n: int, jerk: float, rng: np.random.Generator) -> np.ndarray:
    """Integrated bounded-jerk noise path in [-1, 1], centered at the midpoint."""
    if jerk <= 0 or n < 2:
        return np.zeros(n)
    dt = 2.0 / max(n - 1, 1)
    j = jerk * (2 * rng.random(n) - 1)
    a = np.zeros(n)
    for i in range(1, n):
        a[i] = np.clip(a[i - 1] + j[i] * dt, -1, 1)
    v = np.cumsum(a * dt)
    p = np.cumsum(v * dt)
    p = p - p[n // 2]
    return p / max(np.abs(p).max(), 1e-6)


@dataclass
class PointerPath:
    """Pointer motion profile.

    - static: fixed at (offset_x, offset_y)
    - sweep: horizontal sine sweep, slow vertical bob at half frequency
    - orbit: ellipse with semi-axes (amplitude_x, amplitude_y)
    - smooth_walk: integrated random jerk, scaled by the amplitudes
    """
    profile: str = "sweep"
    amplitude_x: float = 1.0
    amplitude_y: float = 0.5
    period: float = 4.0  # seconds
    offset_x: float = 0.0
    offset_y: float = 0.0
    jerk: float = 0.5  # smooth_walk only

    def __post_init__(self):
        if self.profile not in PROFILES:
            raise ValueError(f"Unknown pointer profile: {self.profile}")
        if self.period <= 0:
            raise ValueError(f"period must be > 0, got {self.period}")

    def positions(self, times: np.ndarray, rng: Optional[np.random.Generator] = None) -> Tuple[np.ndarray, np.ndarray]:
        """Pointer (x, y) at each time, clipped to [-1, 1]."""
        times = np.asarray(times, dtype=np.float64)
        w = 2 * math.pi / self.period

        if self.profile == "static":
            x = np.zeros_like(times)
            y = np.zeros_like(times)
        elif self.profile == "sweep":
            x = self.amplitude_x * np.sin(w * times)
            y = self.amplitude_y * np.sin(0.5 * w * times)
        elif self.profile == "orbit":
            x = self.amplitude_x * np.cos(w * times)
            y = self.amplitude_y * np.sin(w * times)
        else:
            if rng is None:
                rng = np.random.default_rng()
            x = self.amplitude_x * _smooth_walk_path(len(times), self.jerk, rng)
            y = self.amplitude_y * _smooth_walk_path(len(times), self.jerk, rng)

        x = np.clip(x + self.offset_x, -1.0, 1.0)
        y = np.clip(y + self.offset_y, -1.0, 1.0)
        return x, y

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PointerPath":
        valid_keys = set(cls.__dataclass_fields__)
        kwargs = {k: v for k, v in d.items() if k in valid_keys}
        for k, v in kwargs.items():
            if k != "profile":
                kwargs[k] = float(v)
        return cls(**kwargs)


def frame_times(
    duration: float,
    fps: float,
    rng: Optional[np.random.Generator] = None,
    frame_jitter: float = 0.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Elapsed times and frame deltas for a run of ``duration`` seconds.

    ``frame_jitter`` is the relative spread of each delta around 1 / fps;
    deltas stay strictly positive.
    """
    if fps <= 0:
        raise ValueError(f"fps must be > 0, got {fps}")
    n = max(int(round(duration * fps)), 1)
    base = 1.0 / fps
    if frame_jitter > 0:
        if rng is None:
            rng = np.random.default_rng()
        jitter = np.clip(frame_jitter, 0.0, 0.9)
        deltas = base * (1 + jitter * (2 * rng.random(n) - 1))
    else:
        deltas = np.full(n, base)
    times = np.cumsum(deltas)
    return times, deltas


def build_input_samples(
    path: PointerPath,
    duration: float,
    fps: float = 60.0,
    rng: Optional[np.random.Generator] = None,
    frame_jitter: float = 0.0,
) -> List[InputSample]:
    """Per-frame samples following ``path``."""
    if rng is None:
        rng = np.random.default_rng()
    times, deltas = frame_times(duration, fps, rng, frame_jitter)
    xs, ys = path.positions(times, rng)
    return [
        InputSample(pointer_x=float(x), pointer_y=float(y), elapsed_time=float(t), frame_delta=float(dt))
        for x, y, t, dt in zip(xs, ys, times, deltas)
    ]
