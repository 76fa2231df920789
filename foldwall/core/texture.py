"""Shared source texture and per-strip UV windows."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from .layout import StripLayout

logger = logging.getLogger(__name__)

PLACEHOLDER_GREY = 0.5


@dataclass(frozen=True, eq=False)
class TextureHandle:
    """One decoded RGB image shared by every strip, or a placeholder.

    The image is float32 [H, W, 3] in [0, 1] and is made read-only so strips
    can only ever look at it.
    """
    image: Optional[np.ndarray] = None
    source: Optional[str] = None

    def __post_init__(self):
        if self.image is not None:
            if self.image.ndim != 3 or self.image.shape[-1] != 3:
                raise ValueError(f"Expected [H, W, 3] image, got shape {self.image.shape}")
            self.image.setflags(write=False)

    @property
    def is_placeholder(self) -> bool:
        return self.image is None

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) in pixels; (0, 0) for a placeholder."""
        if self.image is None:
            return 0, 0
        return self.image.shape[1], self.image.shape[0]

    @classmethod
    def placeholder(cls) -> "TextureHandle":
        return cls()

    @classmethod
    def from_array(cls, image: np.ndarray, source: Optional[str] = None) -> "TextureHandle":
        img = np.asarray(image)
        if img.dtype == np.uint8:
            img = img.astype(np.float32) / 255.0
        return cls(image=np.ascontiguousarray(img, dtype=np.float32), source=source)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "TextureHandle":
        """Decode an image file as float32 RGB in [0, 1]."""
        img = Image.open(path).convert("RGB")
        logger.info(f"Loaded texture {path} ({img.width}x{img.height})")
        return cls(image=np.array(img, dtype=np.float32) / 255.0, source=str(path))


@dataclass(frozen=True)
class StripTextureView:
    """Window [offset_u, offset_u + repeat_u) of the shared texture."""
    texture: TextureHandle
    offset_u: float
    repeat_u: float

    def pixel_bounds(self) -> Tuple[int, int]:
        """Column range [x0, x1) covered by this window."""
        width = self.texture.size[0]
        x0 = min(int(round(self.offset_u * width)), max(width - 1, 0))
        x1 = int(round(min(1.0, self.offset_u + self.repeat_u) * width))
        return x0, x1

    def sample(self, placeholder_shape: Tuple[int, int] = (8, 1)) -> np.ndarray:
        """Pixels of this window as a view into the shared image.

        A placeholder texture yields a flat grey block of ``placeholder_shape``
        (height, width).
        """
        if self.texture.is_placeholder:
            h, w = placeholder_shape
            return np.full((h, w, 3), PLACEHOLDER_GREY, dtype=np.float32)
        x0, x1 = self.pixel_bounds()
        return self.texture.image[:, x0:max(x1, x0 + 1)]


def build_texture_views(layouts: List[StripLayout], texture: Optional[TextureHandle] = None) -> List[StripTextureView]:
    """One view per strip; rebuilding for the same inputs gives equal views."""
    if texture is None:
        texture = TextureHandle.placeholder()
    return [
        StripTextureView(texture=texture, offset_u=l.texture_offset_u, repeat_u=l.texture_repeat_u)
        for l in layouts
    ]
