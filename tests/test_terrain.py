"""Tests for the RaceTerrain terrain module."""

import pytest
import numpy as np

from raceterrain.errors import ConfigurationError
from raceterrain.terrain.noise import NoiseField, OctaveConfig, DEFAULT_OCTAVES
from raceterrain.terrain.surface import (
    Classification,
    SURFACE_PROPERTIES,
    classify,
    classify_heights,
)
from raceterrain.terrain.grid import Cell, TerrainConfig, TerrainGrid, build_terrain
from raceterrain.terrain.query import SpatialQuery


def flat_grid(size: int = 10, height: float = 0.0, scale: float = 1.0) -> TerrainGrid:
    heights = np.full((size, size), height, dtype=np.float32)
    return TerrainGrid(heights, classify_heights(heights), scale)


class TestNoiseField:
    """Test layered noise sampling."""

    def test_deterministic(self):
        """Test same seed and coordinate give the same height."""
        a = NoiseField(seed=3)
        b = NoiseField(seed=3)

        for x, z in [(0, 0), (7, 12), (150, 42)]:
            assert a.get_height(x, z) == b.get_height(x, z)

    def test_seed_changes_field(self):
        """Test different seeds produce different fields."""
        a = NoiseField(seed=1).sample_grid(16)
        b = NoiseField(seed=2).sample_grid(16)

        assert not np.array_equal(a, b)

    def test_sample_grid_matches_point_samples(self):
        """Test vectorized sampling agrees with per-point sampling."""
        field = NoiseField(seed=5)
        grid = field.sample_grid(8)

        assert grid.shape == (8, 8)
        for x, z in [(0, 0), (1, 6), (7, 3), (5, 5)]:
            assert grid[x, z] == pytest.approx(field.get_height(x, z), rel=1e-12, abs=1e-12)

    def test_amplitude_scales_octave(self):
        """Test an octave's amplitude scales its contribution linearly."""
        single = NoiseField(seed=9, octaves=[OctaveConfig(0, 10.0, 1.0)])
        double = NoiseField(seed=9, octaves=[OctaveConfig(0, 10.0, 2.0)])

        h1 = single.get_height(13, 4)
        h2 = double.get_height(13, 4)

        assert h2 == pytest.approx(2.0 * h1)

    def test_no_octaves_is_flat(self):
        """Test an empty octave list gives a flat field."""
        field = NoiseField(seed=1, octaves=[])
        assert field.get_height(3, 4) == 0.0
        assert np.all(field.sample_grid(4) == 0.0)

    def test_default_octaves(self):
        """Test the default octave stack uses distinct seed offsets."""
        offsets = [octave.seed_offset for octave in DEFAULT_OCTAVES]
        assert len(set(offsets)) == len(offsets)


class TestClassification:
    """Test height band classification."""

    def test_band_thresholds(self):
        """Test each band boundary."""
        assert classify(-10.0) == Classification.GRASS
        assert classify(-5.0) == Classification.MEADOW
        assert classify(-0.1) == Classification.MEADOW
        assert classify(0.0) == Classification.GRAVEL
        assert classify(6.0) == Classification.ROCK
        assert classify(7.0) == Classification.SNOW
        assert classify(100.0) == Classification.SNOW

    def test_vectorized_matches_scalar(self):
        """Test array classification agrees with scalar classification."""
        heights = np.array([-20.0, -5.0, -4.9, 0.0, 4.99, 5.0, 6.9, 7.0, 30.0])
        classes = classify_heights(heights)

        assert classes.dtype == np.int8
        assert [Classification(int(c)) for c in classes] == [classify(h) for h in heights]

    def test_road_never_assigned_by_height(self):
        """Test ROAD only comes from carving."""
        heights = np.linspace(-50.0, 50.0, 1001)
        assert not np.any(classify_heights(heights) == Classification.ROAD)

    def test_surface_properties_cover_all_classes(self):
        """Test every classification has surface properties."""
        for classification in Classification:
            assert SURFACE_PROPERTIES[classification].classification == classification
        assert SURFACE_PROPERTIES[Classification.ROAD].grip_multiplier == 1.0


class TestTerrainGrid:
    """Test terrain grid construction and lookups."""

    def test_build_is_deterministic(self):
        """Test two builds with the same seed are bit-identical."""
        a = build_terrain(10, 1.0, seed=1)
        b = build_terrain(10, 1.0, seed=1)

        assert np.array_equal(a.heights, b.heights)
        assert np.array_equal(a.classifications, b.classifications)

    def test_origin_height_is_reproducible(self):
        """Test the centre height of seed 1 keeps its known value."""
        grid = build_terrain(10, 1.0, seed=1)
        again = build_terrain(10, 1.0, seed=1)

        height = grid.get_height(0.0, 0.0)
        expected = float(np.float32(NoiseField(seed=1).get_height(5, 5)))

        assert height is not None
        assert height == again.get_height(0.0, 0.0)
        assert height == pytest.approx(expected, rel=1e-6, abs=1e-6)
        assert height == pytest.approx(5.69541597366333, abs=1e-5)

    def test_classification_follows_height(self):
        """Test built cells are classified from their heights."""
        grid = build_terrain(16, 1.0, seed=4)
        assert np.array_equal(grid.classifications, classify_heights(grid.heights))

    def test_zero_size_rejected(self):
        """Test a zero-sized grid is a configuration error."""
        with pytest.raises(ConfigurationError):
            build_terrain(0, 1.0, seed=1)

    @pytest.mark.parametrize("scale", [0.0, -1.0, float("nan"), float("inf")])
    def test_bad_scale_rejected(self, scale):
        """Test non-positive or non-finite scales are rejected."""
        with pytest.raises(ConfigurationError):
            TerrainConfig(grid_size=4, scale=scale)

    def test_non_square_rejected(self):
        """Test grids must be square."""
        with pytest.raises(ConfigurationError):
            TerrainGrid(np.zeros((3, 4)), np.zeros((3, 4)), 1.0)

    def test_dimensions(self):
        """Test world extent is centred on the origin."""
        assert flat_grid(10).get_dimensions() == ((-5.0, -5.0), (5.0, 5.0))
        assert flat_grid(10, scale=2.0).get_dimensions() == ((-10.0, -10.0), (10.0, 10.0))

    def test_world_to_index(self):
        """Test world to index mapping and its bounds."""
        grid = flat_grid(10)

        assert grid.world_to_index(0.0, 0.0) == (5, 5)
        assert grid.world_to_index(-5.0, -5.0) == (0, 0)
        assert grid.world_to_index(4.99, 4.99) == (9, 9)
        assert grid.world_to_index(-0.5, 0.5) == (4, 5)
        assert grid.world_to_index(5.0, 0.0) is None
        assert grid.world_to_index(-5.01, 0.0) is None
        assert grid.world_to_index(float("nan"), 0.0) is None

    def test_index_to_world_round_trip(self):
        """Test a cell's min corner maps back to the cell."""
        grid = flat_grid(8, scale=2.5)
        for ix, iz in [(0, 0), (3, 7), (7, 7)]:
            x, z = grid.index_to_world(ix, iz)
            assert grid.world_to_index(x, z) == (ix, iz)

    def test_bounds(self):
        """Test heights exist everywhere on the grid and nowhere off it."""
        grid = build_terrain(12, 2.0, seed=8)
        (min_x, min_z), (max_x, max_z) = grid.get_dimensions()

        for x in np.linspace(min_x, max_x - 1e-3, 9):
            for z in np.linspace(min_z, max_z - 1e-3, 9):
                assert grid.get_height(x, z) is not None

        for x, z in [(min_x - 0.01, 0.0), (max_x, 0.0), (0.0, max_z), (0.0, min_z - 5.0), (100.0, 100.0)]:
            assert grid.get_height(x, z) is None

    def test_get_cell(self):
        """Test bounds-checked cell access."""
        grid = flat_grid(4, height=2.0)

        assert grid.get_cell(0, 0) == Cell(2.0, Classification.GRAVEL)
        assert grid.get_cell(-1, 0) is None
        assert grid.get_cell(0, 4) is None


class TestNeighborhood:
    """Test neighborhood windows."""

    @pytest.mark.parametrize("radius", [0, 1, 3])
    @pytest.mark.parametrize("position", [(0.0, 0.0), (-5.0, -5.0), (4.5, -4.5), (20.0, 20.0)])
    def test_shape(self, radius, position):
        """Test the window is always (2r+1) x (2r+1)."""
        grid = flat_grid(10)
        window = grid.get_neighborhood(position[0], position[1], radius)

        assert len(window) == 2 * radius + 1
        assert all(len(row) == 2 * radius + 1 for row in window)

    def test_centre_entry(self):
        """Test the middle entry is the cell under the position."""
        grid = build_terrain(10, 1.0, seed=2)
        window = grid.get_neighborhood(0.0, 0.0, 2)

        assert window[2][2] == grid.get_cell(5, 5)
        assert window[0][4] == grid.get_cell(3, 7)

    def test_corner_clipping(self):
        """Test entries off the grid are None, not clamped."""
        grid = flat_grid(10)
        window = grid.get_neighborhood(-5.0, -5.0, 1)

        assert window[0] == [None, None, None]
        assert window[1][0] is None and window[2][0] is None
        assert window[1][1] is not None
        assert window[2][2] is not None

    def test_outside_centre(self):
        """Test a centre just off the grid still sees the edge cells."""
        grid = flat_grid(10)
        window = grid.get_neighborhood(-5.5, 0.0, 1)

        assert all(cell is None for cell in window[0] + window[1])
        assert all(cell is not None for cell in window[2])

    def test_negative_radius(self):
        """Test a negative radius is rejected."""
        with pytest.raises(ValueError):
            flat_grid(4).get_neighborhood(0.0, 0.0, -1)


class TestFreezeAndQuery:
    """Test freezing and the read-only query surface."""

    def test_freeze_blocks_writes(self):
        """Test a frozen grid cannot be modified."""
        grid = flat_grid(6)
        grid.freeze()

        assert grid.is_frozen
        with pytest.raises(RuntimeError):
            grid.fill_window(grid.window_bounds(2, 2, 1), 1.0, Classification.ROAD)
        with pytest.raises(ValueError):
            grid.heights[0, 0] = 5.0

    def test_query_requires_frozen_grid(self):
        """Test the query surface refuses a mutable grid."""
        with pytest.raises(RuntimeError):
            SpatialQuery(flat_grid(4))

    def test_query_matches_grid(self):
        """Test query lookups agree with the grid."""
        grid = build_terrain(10, 1.0, seed=6)
        query = grid.freeze()

        assert query.get_height(1.5, -2.5) == grid.get_height(1.5, -2.5)
        assert query.get_dimensions() == grid.get_dimensions()
        assert query.get_neighborhood(0.0, 0.0, 1) == grid.get_neighborhood(0.0, 0.0, 1)
        assert query.get_height(50.0, 0.0) is None

    def test_surface_lookup(self):
        """Test surface properties under a position."""
        query = flat_grid(4, height=-10.0).freeze()

        assert query.get_surface(0.0, 0.0) == SURFACE_PROPERTIES[Classification.GRASS]
        assert query.get_surface(10.0, 0.0) is None

    def test_grid_state(self):
        """Test grid summary."""
        state = flat_grid(4, height=1.0).get_state()

        assert state["grid_size"] == 4
        assert state["classification_counts"]["gravel"] == 16
        assert state["min_height"] == state["max_height"] == 1.0
