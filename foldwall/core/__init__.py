"""Foldwall Core: strip layout and fold kinematics."""

from .config import WallConfig, KinematicsParams, WallConfigError
from .layout import StripLayout, generate_layout
from .kinematics import (
    InputSample,
    StripSmoothingState,
    MIN_FRAME_DELTA,
    update_strip,
    update_strips,
    steady_state,
)
from .texture import TextureHandle, StripTextureView, build_texture_views
from .wall import FoldingWall, StripTransform
from .pointer import PointerPath, build_input_samples
from .preview import render_preview, save_image

__all__ = [
    "WallConfig",
    "KinematicsParams",
    "WallConfigError",
    "StripLayout",
    "generate_layout",
    "InputSample",
    "StripSmoothingState",
    "MIN_FRAME_DELTA",
    "update_strip",
    "update_strips",
    "steady_state",
    "TextureHandle",
    "StripTextureView",
    "build_texture_views",
    "FoldingWall",
    "StripTransform",
    "PointerPath",
    "build_input_samples",
    "render_preview",
    "save_image",
]
