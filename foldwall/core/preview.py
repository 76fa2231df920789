"""Orthographic front-view preview of the folded wall."""

from pathlib import Path
from typing import List, Tuple, Union
import math

import cv2
import numpy as np
from PIL import Image

from .texture import StripTextureView
from .wall import StripTransform


def _shade(rotation_y: float) -> float:
    """Lambert-like falloff for a strip facing away from the viewer."""
    return 0.35 + 0.65 * abs(math.cos(rotation_y))


def render_preview(
    transforms: List[StripTransform],
    views: List[StripTextureView],
    wall_width: float,
    wall_height: float,
    size: Tuple[int, int] = (640, 427),
    background: float = 0.07,
) -> np.ndarray:
    """Draw strips as seen head-on.

    Args:
        transforms: per-strip transforms from FoldingWall.tick
        views: matching texture views
        wall_width, wall_height: world extent mapped onto the canvas
        size: (width, height) in pixels
        background: grey level of the empty canvas

    Returns:
        image: [H, W, 3] float32 in [0, 1]
    """
    out_w, out_h = size
    canvas = np.full((out_h, out_w, 3), background, dtype=np.float32)
    px_per_unit_x = out_w / wall_width
    px_per_unit_y = out_h / wall_height

    # Back to front
    order = sorted(range(len(transforms)), key=lambda i: transforms[i].position_z)
    for i in order:
        t, view = transforms[i], views[i]
        cos_rot = math.cos(t.rotation_y)
        w_px = int(round(t.width * abs(cos_rot) * px_per_unit_x))
        h_px = int(round(t.height * abs(math.cos(t.tilt_x)) * px_per_unit_y))
        if w_px < 1 or h_px < 1:
            continue

        src = view.sample(placeholder_shape=(h_px, w_px))
        strip = cv2.resize(np.ascontiguousarray(src), (w_px, h_px), interpolation=cv2.INTER_AREA)
        if strip.ndim == 2:
            strip = strip[..., None]
        if cos_rot < 0:
            strip = strip[:, ::-1]
        strip = strip * _shade(t.rotation_y)

        cx = out_w / 2 + t.position_x * px_per_unit_x
        x0 = int(round(cx - w_px / 2))
        y0 = int(round((out_h - h_px) / 2))

        # Clip to canvas
        sx0, sy0 = max(0, -x0), max(0, -y0)
        dx0, dy0 = max(0, x0), max(0, y0)
        dx1, dy1 = min(out_w, x0 + w_px), min(out_h, y0 + h_px)
        if dx1 <= dx0 or dy1 <= dy0:
            continue
        canvas[dy0:dy1, dx0:dx1] = strip[sy0:sy0 + (dy1 - dy0), sx0:sx0 + (dx1 - dx0)]

    return canvas.clip(0, 1)


def save_image(path: Union[str, Path], img: np.ndarray) -> None:
    """Save float32 [H, W, 3] image in [0, 1]."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    img = (img.clip(0, 1) * 255).astype(np.uint8)
    Image.fromarray(img).save(path)
