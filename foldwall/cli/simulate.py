"""CLI for simulating a single folding wall."""

import argparse
import logging
import math
from pathlib import Path

import numpy as np

from foldwall import WallConfig, FoldingWall, PointerPath, TextureHandle, build_input_samples, render_preview
from foldwall.codecs import TransformCodec
from foldwall.core import save_image
from foldwall.core.layout import layout_array
from foldwall.core.pointer import PROFILES
from foldwall.logging_config import setup_logging

logger = logging.getLogger("foldwall.cli.simulate")


def build_config(args) -> WallConfig:
    """YAML config (if given) with command-line overrides."""
    cfg = WallConfig.from_yaml(args.config) if args.config else WallConfig()
    overrides = {}
    if args.strips is not None:
        overrides["strip_count"] = args.strips
    if args.width is not None:
        overrides["wall_width"] = args.width
    if args.height is not None:
        overrides["wall_height"] = args.height
    if args.max_fold_deg is not None:
        overrides["max_fold_angle"] = math.radians(args.max_fold_deg)
    overrides["device"] = args.device
    return cfg.with_updates(**overrides)


def main():
    parser = argparse.ArgumentParser(description="Simulate a folding wall under a synthetic pointer path")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Wall YAML configuration file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output .npy file for transforms")
    parser.add_argument("--strips", type=int, default=None, help="Number of strips")
    parser.add_argument("--width", type=float, default=None, help="Wall width")
    parser.add_argument("--height", type=float, default=None, help="Wall height")
    parser.add_argument("--max-fold-deg", type=float, default=None, help="Maximum fold angle in degrees")
    parser.add_argument("--device", type=str, default="cpu", help="Torch device for the batched update")

    parser.add_argument("--profile", type=str, default="sweep", choices=PROFILES, help="Pointer path profile")
    parser.add_argument("--amplitude-x", type=float, default=1.0, help="Horizontal pointer amplitude")
    parser.add_argument("--amplitude-y", type=float, default=0.5, help="Vertical pointer amplitude")
    parser.add_argument("--period", type=float, default=4.0, help="Pointer path period in seconds")
    parser.add_argument("--duration", type=float, default=5.0, help="Simulated seconds")
    parser.add_argument("--fps", type=float, default=60.0, help="Frames per second")
    parser.add_argument("--frame-jitter", type=float, default=0.0, help="Relative frame time jitter")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")

    parser.add_argument("--texture", type=Path, default=None, help="Image used for the preview")
    parser.add_argument("--preview", type=Path, default=None, help="Write a PNG preview of the final frame")
    parser.add_argument("--no-compress", action="store_true", help="Store float32 instead of float16")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")

    args = parser.parse_args()
    setup_logging(args.log_level)

    cfg = build_config(args)
    path = PointerPath(
        profile=args.profile,
        amplitude_x=args.amplitude_x,
        amplitude_y=args.amplitude_y,
        period=args.period,
    )
    rng = np.random.default_rng(args.seed)
    samples = build_input_samples(path, args.duration, args.fps, rng=rng, frame_jitter=args.frame_jitter)

    texture = TextureHandle.load(args.texture) if args.texture else None
    wall = FoldingWall(cfg, texture=texture)
    transforms = wall.run(samples, progress=not args.no_progress)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    TransformCodec.save(
        args.output,
        transforms=transforms,
        samples=np.array([s.as_tuple() for s in samples]),
        layout=layout_array(wall.layouts),
        params={"wall": cfg.to_dict(), "pointer": path.to_dict(), "fps": args.fps, "seed": args.seed},
        compress=not args.no_compress,
    )
    logger.info(f"Saved {transforms.shape[0]} frames x {transforms.shape[1]} strips -> {args.output}")

    if args.preview:
        img = render_preview(wall.transforms(), wall.views, cfg.wall_width, cfg.wall_height)
        save_image(args.preview, img)
        logger.info(f"Preview -> {args.preview}")


if __name__ == "__main__":
    main()
