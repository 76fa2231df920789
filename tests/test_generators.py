"""Tests for generators."""

import csv
import tempfile
from pathlib import Path

import numpy as np
import pytest
import yaml

from foldwall.codecs import TransformCodec
from foldwall.generators import ScenarioGenerator, SequenceGenerator
from foldwall.generators.scenario_generator import SamplingSpec
from foldwall.generators.sequence_generator import ScenarioSpec, simulate_scenario


@pytest.fixture
def sample_config():
    return {
        "wall": {"wall_width": 6.0, "wall_height": 4.0},
        "output": {"root": "/tmp/output", "traj_subdir": "traj", "preview_subdir": "prev"},
        "params": {
            "strip_count": {"distribution": "uniform", "min": 4, "max": 12},
            "max_fold_angle_deg": {"distribution": "normal", "mean": 60.0, "std": 10.0, "min": 30.0, "max": 85.0},
            "pointer_profile": {"distribution": "fixed", "value": "orbit"},
            "duration": {"distribution": "fixed", "value": 0.25},
            "fps": {"distribution": "fixed", "value": 40},
        },
        "generation": {"seed": 42, "num_scenarios": 3},
    }


def _write_yaml(tmpdir, config):
    path = Path(tmpdir) / "config.yaml"
    with open(path, "w") as f:
        yaml.dump(config, f)
    return path


class TestScenarioGenerator:
    def test_load_config(self, sample_config):
        with tempfile.TemporaryDirectory() as tmpdir:
            gen = ScenarioGenerator(_write_yaml(tmpdir, sample_config))

            assert gen.wall.wall_width == 6.0
            assert gen.seed == 42
            assert gen.num_scenarios == 3
            assert gen.param_specs["strip_count"].distribution == "uniform"
            assert gen.param_specs["pointer_profile"].value == "orbit"
            # Unlisted params fall back to defaults
            assert gen.param_specs["frame_jitter"].distribution == "uniform"

    def test_generate_csv(self, sample_config):
        with tempfile.TemporaryDirectory() as tmpdir:
            gen = ScenarioGenerator(_write_yaml(tmpdir, sample_config))
            out = Path(tmpdir) / "csv" / "scenarios.csv"

            n = gen.generate(out)

            with open(out) as f:
                rows = list(csv.DictReader(f))
            assert n == 3
            assert len(rows) == 3
            assert len({r["scenario_id"] for r in rows}) == 3
            for r in rows:
                assert 4 <= int(r["strip_count"]) <= 12
                assert 30.0 <= float(r["max_fold_angle_deg"]) <= 85.0
                assert r["pointer_profile"] == "orbit"
                assert r["output_traj"] == f"traj/{r['scenario_id']}.npy"

    def test_generate_deterministic(self, sample_config):
        with tempfile.TemporaryDirectory() as tmpdir:
            gen = ScenarioGenerator(_write_yaml(tmpdir, sample_config))
            a, b = Path(tmpdir) / "a.csv", Path(tmpdir) / "b.csv"
            gen.generate(a)
            gen.generate(b)
            assert a.read_text() == b.read_text()


class TestSamplingSpec:
    def test_uniform(self):
        spec = SamplingSpec(distribution="uniform", min_val=0.0, max_val=1.0)
        rng = np.random.default_rng(42)
        assert all(0.0 <= spec.sample(rng) <= 1.0 for _ in range(100))

    def test_normal_clipped(self):
        spec = SamplingSpec(distribution="normal", mean=0.0, std=1.0, min_val=-3.0, max_val=3.0)
        rng = np.random.default_rng(42)
        values = [spec.sample(rng) for _ in range(100)]
        assert all(-3.0 <= v <= 3.0 for v in values)
        assert abs(np.mean(values)) < 0.5

    def test_fixed_string(self):
        spec = SamplingSpec(distribution="fixed", value="sweep")
        assert spec.sample(np.random.default_rng(0)) == "sweep"

    def test_unknown_distribution(self):
        with pytest.raises(ValueError):
            SamplingSpec(distribution="poisson").sample(np.random.default_rng(0))


class TestSequenceGenerator:
    def test_simulate_scenario(self):
        spec = ScenarioSpec(
            scenario_id="abc",
            output_traj="traj/abc.npy",
            output_preview="",
            params={"strip_count": 5.0, "wall_width": 5.0, "wall_height": 2.0, "max_fold_angle_deg": 70.0,
                    "pointer_profile": "sweep", "duration": 0.5, "fps": 20.0, "seed": 1.0},
        )
        result = simulate_scenario(spec)

        assert result["transforms"].shape == (10, 5, 4)
        assert result["samples"].shape == (10, 4)
        assert result["layout"].shape == (5, 4)
        assert result["config"].strip_count == 5

    def test_generate_end_to_end(self, sample_config):
        with tempfile.TemporaryDirectory() as tmpdir:
            csv_path = Path(tmpdir) / "scenarios.csv"
            ScenarioGenerator(_write_yaml(tmpdir, sample_config)).generate(csv_path)
            out_root = Path(tmpdir) / "out"

            gen = SequenceGenerator(csv_path, out_root)
            results = gen.generate(num_workers=1, progress=False)

            assert results == {"total": 3, "processed": 3, "skipped": 0, "errors": []}
            for spec in gen.scenarios:
                data = TransformCodec.load(out_root / spec.output_traj)
                assert data["transforms"].shape == (10, int(spec.params["strip_count"]), 4)
                assert data["meta"]["scenario_id"] == spec.scenario_id
                assert (out_root / spec.output_preview).exists()

            again = gen.generate(num_workers=1, progress=False)
            assert again["skipped"] == 3
            assert again["processed"] == 0

    def test_errors_collected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            csv_path = Path(tmpdir) / "bad.csv"
            with open(csv_path, "w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=["scenario_id", "output_traj", "output_preview", "strip_count"])
                writer.writeheader()
                writer.writerow({"scenario_id": "bad", "output_traj": "traj/bad.npy",
                                 "output_preview": "", "strip_count": 0})

            results = SequenceGenerator(csv_path, Path(tmpdir) / "out").generate(num_workers=1, progress=False)

            assert results["processed"] == 0
            assert len(results["errors"]) == 1
            assert results["errors"][0]["scenario_id"] == "bad"
            assert "strip_count" in results["errors"][0]["error"]

    def test_generate_single_unknown(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            csv_path = Path(tmpdir) / "empty.csv"
            csv_path.write_text("scenario_id,output_traj,output_preview\n")
            gen = SequenceGenerator(csv_path, tmpdir)
            assert gen.generate_single("missing")["status"] == "error"
