"""Sequence Generator: parallel wall simulation from a scenario CSV."""

import csv
import logging
import traceback
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, List, Union

import numpy as np
from tqdm import tqdm

from ..core import FoldingWall, PointerPath, TextureHandle, WallConfig, build_input_samples, render_preview, save_image
from ..core.layout import layout_array
from ..codecs import TransformCodec

logger = logging.getLogger(__name__)

_PATH_COLUMNS = ["scenario_id", "output_traj", "output_preview"]


@dataclass
class ScenarioSpec:
    """Specification for a single scenario."""
    scenario_id: str
    output_traj: str
    output_preview: str
    params: Dict[str, Any]


def _parse_value(value: str):
    try:
        return float(value)
    except (ValueError, TypeError):
        return value


def simulate_scenario(spec: ScenarioSpec, texture: Optional[TextureHandle] = None) -> Dict[str, Any]:
    """Run one scenario in memory.

    Returns:
        dict with transforms [F, N, 4], samples [F, 4], layout [N, 4], the wall and its config
    """
    p = spec.params
    cfg = WallConfig.from_dict({
        "strip_count": p.get("strip_count", 24),
        "wall_width": p.get("wall_width", 12.0),
        "wall_height": p.get("wall_height", 8.0),
        "max_fold_angle_deg": p.get("max_fold_angle_deg", 81.8),
    })
    path = PointerPath.from_dict({
        "profile": p.get("pointer_profile", "sweep"),
        "amplitude_x": p.get("amplitude_x", 1.0),
        "amplitude_y": p.get("amplitude_y", 0.5),
        "period": p.get("period", 4.0),
        "offset_x": p.get("offset_x", 0.0),
        "offset_y": p.get("offset_y", 0.0),
        "jerk": p.get("jerk", 0.5),
    })
    rng = np.random.default_rng(int(p.get("seed", 0)))
    samples = build_input_samples(
        path,
        duration=float(p.get("duration", 5.0)),
        fps=float(p.get("fps", 60.0)),
        rng=rng,
        frame_jitter=float(p.get("frame_jitter", 0.0)),
    )

    wall = FoldingWall(cfg, texture=texture)
    transforms = wall.run(samples)
    return {
        "transforms": transforms,
        "samples": np.array([s.as_tuple() for s in samples], dtype=np.float64),
        "layout": layout_array(wall.layouts),
        "wall": wall,
        "config": cfg,
        "path": path,
    }


def _process_scenario(
    spec: ScenarioSpec,
    output_root: Path,
    texture_path: Optional[Path] = None,
    preview_size: tuple = (640, 427),
) -> Dict[str, Any]:
    """Simulate and save a single scenario (worker function)."""
    try:
        texture = TextureHandle.load(texture_path) if texture_path else None
        result = simulate_scenario(spec, texture)
        cfg, wall = result["config"], result["wall"]

        output_traj_path = output_root / spec.output_traj
        output_traj_path.parent.mkdir(parents=True, exist_ok=True)
        TransformCodec.save(
            output_traj_path,
            transforms=result["transforms"],
            samples=result["samples"],
            layout=result["layout"],
            params={"wall": cfg.to_dict(), "pointer": result["path"].to_dict(), **spec.params},
            meta={"scenario_id": spec.scenario_id},
        )

        if spec.output_preview:
            img = render_preview(wall.transforms(), wall.views, cfg.wall_width, cfg.wall_height, size=preview_size)
            save_image(output_root / spec.output_preview, img)

        return {"scenario_id": spec.scenario_id, "status": "success"}

    except Exception as e:
        return {
            "scenario_id": spec.scenario_id,
            "status": "error",
            "error": str(e),
            "traceback": traceback.format_exc(),
        }


class SequenceGenerator:
    """Simulate every scenario of a CSV and store the transform sequences."""

    def __init__(
        self,
        csv_path: Union[str, Path],
        output_root: Union[str, Path],
        texture_path: Optional[Union[str, Path]] = None,
        write_previews: bool = True,
    ):
        """Initialize generator.

        Args:
            csv_path: path to scenario CSV
            output_root: root directory for outputs
            texture_path: image used for preview renders (grey placeholder if None)
            write_previews: render a PNG of the final frame per scenario
        """
        self.csv_path = Path(csv_path)
        self.output_root = Path(output_root)
        self.texture_path = Path(texture_path) if texture_path else None
        self.write_previews = write_previews

        self.scenarios = self._load_csv()

    def _load_csv(self) -> List[ScenarioSpec]:
        """Load scenarios from CSV."""
        scenarios = []
        with open(self.csv_path) as f:
            reader = csv.DictReader(f)
            for row in reader:
                params = {k: _parse_value(v) for k, v in row.items() if k not in _PATH_COLUMNS}
                scenarios.append(ScenarioSpec(
                    scenario_id=row["scenario_id"],
                    output_traj=row["output_traj"],
                    output_preview=row.get("output_preview", "") if self.write_previews else "",
                    params=params,
                ))
        logger.info(f"Loaded {len(scenarios)} scenarios from {self.csv_path}")
        return scenarios

    def generate(
        self,
        num_workers: int = 4,
        skip_existing: bool = True,
        progress: bool = True,
    ) -> Dict[str, Any]:
        """Generate all sequences.

        Args:
            num_workers: number of parallel worker processes
            skip_existing: skip scenarios whose transform file exists
            progress: show progress bar

        Returns:
            dict with generation statistics
        """
        to_process = [
            spec for spec in self.scenarios
            if not (skip_existing and (self.output_root / spec.output_traj).exists())
        ]

        results = {
            "total": len(self.scenarios),
            "processed": 0,
            "skipped": len(self.scenarios) - len(to_process),
            "errors": [],
        }
        if not to_process:
            return results

        if num_workers <= 1:
            iterator = tqdm(to_process, desc="Simulating") if progress else to_process
            for spec in iterator:
                self._collect(results, _process_scenario(spec, self.output_root, self.texture_path))
        else:
            with ProcessPoolExecutor(max_workers=num_workers) as executor:
                futures = {
                    executor.submit(_process_scenario, spec, self.output_root, self.texture_path): spec
                    for spec in to_process
                }
                iterator = tqdm(as_completed(futures), total=len(futures), desc="Simulating") if progress else as_completed(futures)
                for future in iterator:
                    self._collect(results, future.result())

        logger.info(
            f"Processed {results['processed']}/{results['total']} scenarios "
            f"({results['skipped']} skipped, {len(results['errors'])} errors)"
        )
        return results

    def generate_single(self, scenario_id: str) -> Dict[str, Any]:
        """Generate a single scenario by ID."""
        spec = next((s for s in self.scenarios if s.scenario_id == scenario_id), None)
        if spec is None:
            return {"status": "error", "error": f"Scenario {scenario_id} not found"}
        return _process_scenario(spec, self.output_root, self.texture_path)

    @staticmethod
    def _collect(results: Dict[str, Any], result: Dict[str, Any]) -> None:
        if result["status"] == "success":
            results["processed"] += 1
        else:
            logger.warning(f"Scenario {result['scenario_id']} failed: {result['error']}")
            results["errors"].append(result)
