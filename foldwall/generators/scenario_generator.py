"""Scenario CSV Generator: sample simulation scenarios from a YAML spec."""

import csv
import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, Union

import numpy as np
import yaml

logger = logging.getLogger(__name__)


@dataclass
class SamplingSpec:
    """Specification for parameter sampling."""
    distribution: str = "uniform"  # "uniform" | "normal" | "fixed"
    min_val: float = 0.0
    max_val: float = 1.0
    mean: float = 0.5
    std: float = 0.1
    value: Optional[Any] = None  # for "fixed"; may be a string

    def sample(self, rng: np.random.Generator):
        if self.distribution == "fixed":
            return self.value if self.value is not None else self.mean
        elif self.distribution == "uniform":
            return float(rng.uniform(self.min_val, self.max_val))
        elif self.distribution == "normal":
            val = float(rng.normal(self.mean, self.std))
            return float(np.clip(val, self.min_val, self.max_val))
        else:
            raise ValueError(f"Unknown distribution: {self.distribution}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SamplingSpec":
        return cls(
            distribution=d.get("distribution", "uniform"),
            min_val=d.get("min", 0.0),
            max_val=d.get("max", 1.0),
            mean=d.get("mean", (d.get("min", 0.0) + d.get("max", 1.0)) / 2),
            std=d.get("std", 0.1),
            value=d.get("value"),
        )


@dataclass
class WallSpec:
    """Fixed wall dimensions shared by every scenario."""
    wall_width: float = 12.0
    wall_height: float = 8.0


@dataclass
class OutputSpec:
    """Specification for output paths."""
    root: str
    traj_subdir: str = "transforms"
    preview_subdir: str = "previews"


class ScenarioGenerator:
    """Generate a CSV of simulation scenarios.

    YAML config format:
    ```yaml
    wall:
      wall_width: 12.0
      wall_height: 8.0

    output:
      root: /path/to/output
      traj_subdir: transforms
      preview_subdir: previews

    params:
      strip_count:
        distribution: uniform
        min: 8
        max: 48
      pointer_profile:
        distribution: fixed
        value: sweep
      amplitude_x:
        distribution: normal
        mean: 0.8
        std: 0.2
        min: 0.0
        max: 1.0

    generation:
      seed: 42
      num_scenarios: 100
    ```
    """

    PARAM_COLUMNS = [
        "strip_count",
        "max_fold_angle_deg",
        "pointer_profile",
        "amplitude_x",
        "amplitude_y",
        "period",
        "offset_x",
        "offset_y",
        "jerk",
        "duration",
        "fps",
        "frame_jitter",
    ]

    INTEGER_COLUMNS = {"strip_count"}

    DEFAULT_SPECS = {
        "strip_count": {"distribution": "fixed", "value": 24},
        "max_fold_angle_deg": {"distribution": "uniform", "min": 45.0, "max": 85.0},
        "pointer_profile": {"distribution": "fixed", "value": "sweep"},
        "amplitude_x": {"distribution": "uniform", "min": 0.3, "max": 1.0},
        "amplitude_y": {"distribution": "uniform", "min": 0.0, "max": 0.6},
        "period": {"distribution": "uniform", "min": 2.0, "max": 8.0},
        "offset_x": {"distribution": "fixed", "value": 0.0},
        "offset_y": {"distribution": "fixed", "value": 0.0},
        "jerk": {"distribution": "uniform", "min": 0.1, "max": 1.0},
        "duration": {"distribution": "fixed", "value": 5.0},
        "fps": {"distribution": "fixed", "value": 60},
        "frame_jitter": {"distribution": "uniform", "min": 0.0, "max": 0.2},
    }

    def __init__(self, config_path: Union[str, Path]):
        """Initialize generator from YAML config."""
        self.config_path = Path(config_path)
        with open(config_path) as f:
            self.config = yaml.safe_load(f) or {}

        wall_cfg = self.config.get("wall", {})
        self.wall = WallSpec(
            wall_width=float(wall_cfg.get("wall_width", 12.0)),
            wall_height=float(wall_cfg.get("wall_height", 8.0)),
        )

        out_cfg = self.config.get("output", {})
        self.output = OutputSpec(
            root=out_cfg.get("root", "."),
            traj_subdir=out_cfg.get("traj_subdir", "transforms"),
            preview_subdir=out_cfg.get("preview_subdir", "previews"),
        )

        self.param_specs = {}
        for param in self.PARAM_COLUMNS:
            if "params" in self.config and param in self.config["params"]:
                self.param_specs[param] = SamplingSpec.from_dict(self.config["params"][param])
            else:
                self.param_specs[param] = SamplingSpec.from_dict(self.DEFAULT_SPECS.get(param, {}))

        gen_cfg = self.config.get("generation", {})
        self.seed = gen_cfg.get("seed", 42)
        self.num_scenarios = int(gen_cfg.get("num_scenarios", 10))

    def _generate_output_paths(self, scenario_id: str) -> Dict[str, str]:
        return {
            "output_traj": f"{self.output.traj_subdir}/{scenario_id}.npy",
            "output_preview": f"{self.output.preview_subdir}/{scenario_id}.png",
        }

    def sample_row(self, index: int, rng: np.random.Generator) -> Dict[str, Any]:
        """Sample one scenario row."""
        scenario_id = hashlib.md5(f"scenario_{self.seed}_{index}".encode()).hexdigest()[:12]
        row = {
            "scenario_id": scenario_id,
            "seed": int(rng.integers(0, 2**31 - 1)),
            "wall_width": self.wall.wall_width,
            "wall_height": self.wall.wall_height,
        }
        row.update(self._generate_output_paths(scenario_id))

        for param in self.PARAM_COLUMNS:
            value = self.param_specs[param].sample(rng)
            if param in self.INTEGER_COLUMNS:
                value = max(1, int(round(float(value))))
            row[param] = value
        return row

    def generate(self, output_csv: Union[str, Path]) -> int:
        """Generate CSV configuration file.

        Args:
            output_csv: path to output CSV

        Returns:
            number of scenarios generated
        """
        rng = np.random.default_rng(self.seed)

        output_csv = Path(output_csv)
        output_csv.parent.mkdir(parents=True, exist_ok=True)

        columns = ["scenario_id", "seed", "wall_width", "wall_height",
                   "output_traj", "output_preview"] + self.PARAM_COLUMNS

        with open(output_csv, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            writer.writeheader()
            for i in range(self.num_scenarios):
                writer.writerow(self.sample_row(i, rng))

        logger.info(f"Wrote {self.num_scenarios} scenarios to {output_csv}")
        return self.num_scenarios
