"""FoldingWall: per-frame driver that owns every strip's layout and state."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np
import torch
from tqdm import tqdm

from .config import WallConfig
from .kinematics import InputSample, StripSmoothingState, update_strip, update_strips
from .layout import StripLayout, generate_layout, layout_tensors
from .texture import TextureHandle, StripTextureView, build_texture_views

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StripTransform:
    """What the renderer needs to draw one strip this frame."""
    index: int
    rotation_y: float
    position_x: float
    position_z: float
    tilt_x: float
    width: float
    height: float
    offset_u: float
    repeat_u: float


class FoldingWall:
    """Folding wall engine.

    State lives in an [N, 4] table (rotation_y, position_x, position_z,
    tilt_x); row i is touched only by strip i's update.
    """

    def __init__(
        self,
        cfg: WallConfig,
        texture: Optional[TextureHandle] = None,
        vectorized: bool = True,
        dtype: torch.dtype = torch.float64,
    ):
        self.vectorized = vectorized
        self.dtype = dtype
        self._texture = texture if texture is not None else TextureHandle.placeholder()
        self.configure(cfg)

    def configure(self, cfg: WallConfig) -> None:
        """(Re)build layouts, views and zeroed state for a new configuration."""
        self.cfg = cfg
        self.device = torch.device(cfg.device)
        self._layouts = generate_layout(cfg)
        self._indices, self._centers = layout_tensors(self._layouts, self.device, self.dtype)
        self._views = build_texture_views(self._layouts, self._texture)
        self._states = torch.zeros(cfg.strip_count, 4, device=self.device, dtype=self.dtype)
        self.frame_count = 0
        logger.info(
            f"Configured wall: {cfg.strip_count} strips, "
            f"{cfg.wall_width}x{cfg.wall_height}, max fold {cfg.max_fold_angle:.3f} rad"
        )

    def set_texture(self, texture: Optional[TextureHandle]) -> None:
        """Swap the shared texture; strip state is untouched."""
        self._texture = texture if texture is not None else TextureHandle.placeholder()
        self._views = build_texture_views(self._layouts, self._texture)
        logger.debug(f"Texture views rebuilt (placeholder={self._texture.is_placeholder})")

    def reset(self) -> None:
        """Discard every strip's smoothing state."""
        self._states.zero_()
        self.frame_count = 0
        logger.info("Wall state reset.")

    @property
    def layouts(self) -> List[StripLayout]:
        return list(self._layouts)

    @property
    def views(self) -> List[StripTextureView]:
        return list(self._views)

    @property
    def texture(self) -> TextureHandle:
        return self._texture

    @torch.no_grad()
    def tick(self, sample: InputSample) -> List[StripTransform]:
        """Advance every strip by one frame using the same input sample."""
        sample = sample.sanitized()
        if self.vectorized:
            update_strips(self._states, self._centers, self._indices, sample, self.cfg)
        else:
            for layout in self._layouts:
                state = update_strip(layout, self.state_of(layout.index), sample, self.cfg)
                self._states[layout.index] = torch.tensor(state.as_tuple(), device=self.device, dtype=self.dtype)
        self.frame_count += 1
        return self.transforms()

    def state_of(self, index: int) -> StripSmoothingState:
        return StripSmoothingState(*(float(v) for v in self._states[index].tolist()))

    def snapshot(self) -> np.ndarray:
        """Copy of the state table as [N, 4]."""
        return self._states.detach().cpu().numpy().copy()

    def transforms(self) -> List[StripTransform]:
        rows = self._states.tolist()
        return [
            StripTransform(
                index=layout.index,
                rotation_y=row[0],
                position_x=row[1],
                position_z=row[2],
                tilt_x=row[3],
                width=layout.width,
                height=layout.height,
                offset_u=view.offset_u,
                repeat_u=view.repeat_u,
            )
            for layout, view, row in zip(self._layouts, self._views, rows)
        ]

    def run(self, samples: Iterable[InputSample], progress: bool = False) -> np.ndarray:
        """Tick through ``samples`` and record the state table after each frame.

        Returns:
            states: [F, N, 4]
        """
        samples = list(samples)
        frames = np.zeros((len(samples), self.cfg.strip_count, 4), dtype=np.float64)
        iterator = tqdm(samples, desc="Simulating") if progress else samples
        for i, sample in enumerate(iterator):
            self.tick(sample)
            frames[i] = self.snapshot()
        logger.debug(f"Simulated {len(samples)} frames")
        return frames
