"""Tests for the solid terrain mesh builder."""

import numpy as np
import pytest

from terrastl.core.grid import ElevationGrid
from terrastl.exceptions import CapacityExceededError
from terrastl.model.builder import (
    BASE_THICKNESS_MM,
    base_triangles,
    build_solid_mesh,
    compute_vertical_scaling,
    count_perimeter_cell_sides,
    expected_triangle_count
)
from terrastl.model.config import ModelSettings
from terrastl.model.utils.heightmap import calculate_terrain_stats


class TestTriangleCounts:

    @pytest.mark.parametrize("width, height, perimeter", [
        (2, 2, 4), (3, 3, 8), (5, 4, 14), (10, 2, 20)
    ])
    def test_perimeter_cell_sides(self, width, height, perimeter):
        assert count_perimeter_cell_sides(width, height) == perimeter

    @pytest.mark.parametrize("width, height, count", [
        (2, 2, 12), (3, 3, 26), (5, 4, 54)
    ])
    def test_expected_count(self, width, height, count):
        assert expected_triangle_count(width, height) == count

    @pytest.mark.parametrize("width, height", [(2, 2), (2, 5), (5, 2), (7, 6)])
    def test_mesh_matches_expected_count(self, width, height):
        rng = np.random.default_rng(width * 10 + height)
        grid = ElevationGrid.from_array(rng.uniform(0, 1000, size=(height, width)))
        mesh, _ = build_solid_mesh(grid, ModelSettings())
        assert mesh.triangle_count == expected_triangle_count(width, height)


class TestVerticalScaling:

    def _stats(self, values):
        return calculate_terrain_stats(np.asarray(values, dtype=float))

    def test_relief_is_thirty_percent_of_largest_side(self):
        settings = ModelSettings(physical_width_mm=100, physical_length_mm=50)
        scaling = compute_vertical_scaling(self._stats([0, 30]), settings)
        assert scaling.base_scale == pytest.approx(1.0)
        assert scaling.final_scale == pytest.approx(1.0)
        assert scaling.max_model_height_mm == pytest.approx(32.0)

    def test_exaggeration_multiplies(self):
        settings = ModelSettings(physical_width_mm=100, vertical_exaggeration=2.0)
        scaling = compute_vertical_scaling(self._stats([0, 30]), settings)
        assert scaling.final_scale == pytest.approx(2.0)
        assert scaling.max_model_height_mm == pytest.approx(62.0)

    def test_exaggeration_below_one_acts_as_one(self):
        low = compute_vertical_scaling(self._stats([0, 30]), ModelSettings(vertical_exaggeration=0.25))
        one = compute_vertical_scaling(self._stats([0, 30]), ModelSettings(vertical_exaggeration=1.0))
        assert low.final_scale == one.final_scale
        assert low.vertical_exaggeration == 1.0

    def test_flat_terrain_has_zero_scale(self):
        scaling = compute_vertical_scaling(self._stats([250, 250]), ModelSettings())
        assert scaling.base_scale == 0.0
        assert scaling.final_scale == 0.0
        assert scaling.max_model_height_mm == BASE_THICKNESS_MM

    def test_scale_heights(self):
        scaling = compute_vertical_scaling(self._stats([100, 130]), ModelSettings())
        np.testing.assert_allclose(scaling.scale_heights([100, 115, 130]), [2.0, 17.0, 32.0])


class TestBuildSolidMesh:

    def test_flat_two_by_two_layout(self):
        grid = ElevationGrid.from_array(np.full((2, 2), 5.0))
        mesh, scaling = build_solid_mesh(grid, ModelSettings())
        tri = mesh.triangles

        assert scaling.max_model_height_mm == BASE_THICKNESS_MM
        assert mesh.triangle_count == 12

        # base plate
        np.testing.assert_allclose(tri[0], [[0, 0, 0], [100, 0, 0], [0, 100, 0]])
        np.testing.assert_allclose(tri[1], [[100, 0, 0], [100, 100, 0], [0, 100, 0]])
        # top pair
        np.testing.assert_allclose(tri[2], [[0, 0, 2], [100, 0, 2], [0, 100, 2]])
        np.testing.assert_allclose(tri[3], [[100, 0, 2], [100, 100, 2], [0, 100, 2]])
        # left, right, front, back walls
        np.testing.assert_allclose(tri[4], [[0, 0, 0], [0, 100, 0], [0, 0, 2]])
        np.testing.assert_allclose(tri[6], [[100, 0, 0], [100, 0, 2], [100, 100, 0]])
        np.testing.assert_allclose(tri[8], [[0, 0, 0], [0, 0, 2], [100, 0, 0]])
        np.testing.assert_allclose(tri[10], [[0, 100, 0], [100, 100, 0], [0, 100, 2]])

    def test_flat_normals_never_point_down(self):
        grid = ElevationGrid.from_array(np.full((2, 2), 5.0))
        mesh, _ = build_solid_mesh(grid, ModelSettings())
        assert np.all(mesh.normals[2:, 2] >= 0)
        np.testing.assert_allclose(np.linalg.norm(mesh.normals, axis=1), 1.0)

    def test_sloped_top_heights(self):
        grid = ElevationGrid.from_array([[0.0, 10.0], [20.0, 30.0]])
        settings = ModelSettings(physical_width_mm=100, physical_length_mm=50)
        mesh, _ = build_solid_mesh(grid, settings)

        np.testing.assert_allclose(mesh.triangles[2], [[0, 0, 2], [100, 0, 12], [0, 50, 22]])
        np.testing.assert_allclose(mesh.triangles[3], [[100, 0, 12], [100, 50, 32], [0, 50, 22]])

    def test_wall_order_for_three_by_three(self):
        grid = ElevationGrid.from_array(np.arange(9, dtype=float).reshape(3, 3))
        mesh, _ = build_solid_mesh(grid, ModelSettings())
        tri = mesh.triangles

        # first cell: top, left wall, front wall
        assert np.all(tri[4:6, :, 0] == 0)
        assert np.all(tri[6:8, :, 1] == 0)
        # second cell: top, right wall, front wall
        assert np.all(tri[10:12, :, 0] == 100)
        assert np.all(tri[12:14, :, 1] == 0)
        # last row: back walls at y = length
        assert np.all(tri[18:20, :, 1] == 100)
        assert np.all(tri[24:26, :, 1] == 100)

    def test_model_stays_inside_bounds(self, ramp_grid):
        settings = ModelSettings(physical_width_mm=80, physical_length_mm=60, vertical_exaggeration=3)
        mesh, scaling = build_solid_mesh(ramp_grid, settings)
        lo, hi = mesh.get_bounding_box()

        np.testing.assert_allclose(lo, [0, 0, 0])
        np.testing.assert_allclose(hi, [80, 60, scaling.max_model_height_mm])

    def test_top_normals_point_up(self):
        grid = ElevationGrid.from_array(np.full((3, 3), 1.0))
        mesh, _ = build_solid_mesh(grid, ModelSettings())
        np.testing.assert_allclose(mesh.normals[2], [0, 0, 1])
        np.testing.assert_allclose(mesh.normals[3], [0, 0, 1])

    def test_capacity_overflow_raises(self, ramp_grid, monkeypatch):
        monkeypatch.setattr(
            "terrastl.model.builder.expected_triangle_count", lambda width, height: 10
        )
        with pytest.raises(CapacityExceededError):
            build_solid_mesh(ramp_grid, ModelSettings())

    def test_deterministic(self, ramp_grid):
        first, _ = build_solid_mesh(ramp_grid, ModelSettings())
        second, _ = build_solid_mesh(ramp_grid, ModelSettings())
        np.testing.assert_array_equal(first.triangles, second.triangles)


def test_base_triangles_cover_footprint():
    base = base_triangles(30.0, 20.0)
    assert base.shape == (2, 3, 3)
    assert np.all(base[:, :, 2] == 0)
    assert base[:, :, 0].max() == 30.0
    assert base[:, :, 1].max() == 20.0
