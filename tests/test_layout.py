"""Tests for strip layout generation."""

import numpy as np
import pytest
import torch

from foldwall.core import WallConfig, generate_layout
from foldwall.core.layout import layout_array, layout_tensors


class TestGenerateLayout:
    def test_four_strip_scenario(self):
        layouts = generate_layout(WallConfig(strip_count=4, wall_width=8.0, wall_height=4.0))

        assert [l.index for l in layouts] == [0, 1, 2, 3]
        assert [l.width for l in layouts] == pytest.approx([2.0] * 4)
        assert [l.flat_center_x for l in layouts] == pytest.approx([-3.0, -1.0, 1.0, 3.0])
        assert [l.texture_offset_u for l in layouts] == pytest.approx([0.0, 0.25, 0.5, 0.75])
        assert [l.texture_repeat_u for l in layouts] == pytest.approx([0.25] * 4)
        assert all(l.height == 4.0 for l in layouts)

    @pytest.mark.parametrize("n", [1, 2, 3, 7, 24, 101])
    def test_flat_extents_tile_wall(self, n):
        cfg = WallConfig(strip_count=n, wall_width=12.0, wall_height=8.0)
        layouts = generate_layout(cfg)

        assert len(layouts) == n
        assert layouts[0].left_edge == pytest.approx(-6.0)
        assert layouts[-1].right_edge == pytest.approx(6.0)
        for a, b in zip(layouts, layouts[1:]):
            assert a.right_edge == pytest.approx(b.left_edge, abs=1e-12)

    @pytest.mark.parametrize("n", [1, 3, 7, 24])
    def test_texture_windows_tile_unit_interval(self, n):
        layouts = generate_layout(WallConfig(strip_count=n))

        assert layouts[0].texture_offset_u == 0.0
        assert layouts[-1].texture_offset_u + layouts[-1].texture_repeat_u == pytest.approx(1.0)
        for a, b in zip(layouts, layouts[1:]):
            assert a.texture_offset_u + a.texture_repeat_u == pytest.approx(b.texture_offset_u, abs=1e-12)

    def test_deterministic(self):
        cfg = WallConfig(strip_count=9)
        assert generate_layout(cfg) == generate_layout(cfg)

    def test_direction_alternates(self):
        layouts = generate_layout(WallConfig(strip_count=5))
        assert [l.direction for l in layouts] == [1, -1, 1, -1, 1]


class TestLayoutArrays:
    def test_layout_array(self):
        arr = layout_array(generate_layout(WallConfig(strip_count=4, wall_width=8.0, wall_height=4.0)))
        assert arr.shape == (4, 4)
        assert np.allclose(arr[:, 0], [-3, -1, 1, 3])
        assert np.allclose(arr[:, 2], [0, 0.25, 0.5, 0.75])

    def test_layout_tensors(self):
        indices, centers = layout_tensors(generate_layout(WallConfig(strip_count=3, wall_width=3.0)))
        assert indices.dtype == torch.long
        assert indices.tolist() == [0, 1, 2]
        assert torch.allclose(centers, torch.tensor([-1.0, 0.0, 1.0], dtype=torch.float64))
