"""Flat strip layout: geometry and texture windows of the unfolded wall."""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import torch

from .config import WallConfig


@dataclass(frozen=True)
class StripLayout:
    """Static geometry of one strip."""
    index: int
    flat_center_x: float
    width: float
    height: float
    texture_offset_u: float
    texture_repeat_u: float

    @property
    def left_edge(self) -> float:
        return self.flat_center_x - self.width / 2

    @property
    def right_edge(self) -> float:
        return self.flat_center_x + self.width / 2

    @property
    def direction(self) -> int:
        """Fold direction: +1 for even strips, -1 for odd."""
        return 1 if self.index % 2 == 0 else -1


def generate_layout(cfg: WallConfig) -> List[StripLayout]:
    """Lay out ``cfg.strip_count`` strips left to right, centered on x=0.

    Assumes a validated config.
    """
    n = cfg.strip_count
    strip_width = cfg.strip_width
    left = -cfg.wall_width / 2
    return [
        StripLayout(
            index=i,
            flat_center_x=left + i * strip_width + strip_width / 2,
            width=strip_width,
            height=cfg.wall_height,
            texture_offset_u=i / n,
            texture_repeat_u=1 / n,
        )
        for i in range(n)
    ]


def layout_array(layouts: List[StripLayout]) -> np.ndarray:
    """[N, 4] flat_center_x, width, texture_offset_u, texture_repeat_u."""
    return np.array(
        [[l.flat_center_x, l.width, l.texture_offset_u, l.texture_repeat_u] for l in layouts],
        dtype=np.float64,
    ).reshape(len(layouts), 4)


def layout_tensors(
    layouts: List[StripLayout],
    device: Optional[torch.device] = None,
    dtype: Optional[torch.dtype] = None,
):
    """Strip indices [N] (long) and flat centers [N] for the batched update."""
    if device is None:
        device = torch.device("cpu")
    if dtype is None:
        dtype = torch.float64
    indices = torch.tensor([l.index for l in layouts], device=device, dtype=torch.long)
    centers = torch.tensor([l.flat_center_x for l in layouts], device=device, dtype=dtype)
    return indices, centers
