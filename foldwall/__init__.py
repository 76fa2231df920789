"""Foldwall: accordion-folding image wall kinematics.

Main components:
- core: Wall configuration, strip layout, fold kinematics (FoldingWall)
- generators: Scenario CSV sampling and batch simulation
- codecs: Transform sequence encoding/decoding
"""

from .core import (
    WallConfig,
    KinematicsParams,
    WallConfigError,
    StripLayout,
    generate_layout,
    InputSample,
    StripSmoothingState,
    update_strip,
    update_strips,
    TextureHandle,
    StripTextureView,
    build_texture_views,
    FoldingWall,
    StripTransform,
    PointerPath,
    build_input_samples,
    render_preview,
)
from .generators import ScenarioGenerator, SequenceGenerator
from .codecs import TransformCodec

__version__ = "0.1.0"
__all__ = [
    # Core
    "WallConfig",
    "KinematicsParams",
    "WallConfigError",
    "StripLayout",
    "generate_layout",
    "InputSample",
    "StripSmoothingState",
    "update_strip",
    "update_strips",
    "TextureHandle",
    "StripTextureView",
    "build_texture_views",
    "FoldingWall",
    "StripTransform",
    "PointerPath",
    "build_input_samples",
    "render_preview",
    # Generators
    "ScenarioGenerator",
    "SequenceGenerator",
    # Codecs
    "TransformCodec",
]
