"""Tests for the RaceTerrain world generation pipeline."""

import logging

import pytest
import numpy as np

from raceterrain import generate_world, WorldConfig, ConfigurationError
from raceterrain.terrain.grid import TerrainConfig
from raceterrain.terrain.surface import Classification
from raceterrain.track.generator import GeneratorConfig


def small_config(seed: int = 1) -> WorldConfig:
    return WorldConfig(
        terrain=TerrainConfig(grid_size=24, scale=1.0, seed=seed),
        track=GeneratorConfig(step_count=10, step_length=1.0),
    )


class TestGenerateWorld:
    """Test the one-shot pipeline."""

    def test_world_contents(self):
        """Test every stage produces its output."""
        world = generate_world(small_config())

        assert len(world.path) == 10
        assert world.grid.is_frozen
        assert world.render.surface.vertex_count == 24 * 24 * 4
        assert world.collision.positions is world.render.positions
        assert np.any(world.grid.classifications == Classification.ROAD)

    def test_track_starts_at_start_block(self):
        """Test the path begins at the start block."""
        world = generate_world(small_config())
        x, y, z = world.start_position

        assert (x, z) == (0.0, 11.0)
        assert world.path.start == (0.0, 11.0)
        assert y == world.query.get_height(0.0, 11.0)

    def test_deterministic(self):
        """Test the same config reproduces the same world."""
        a = generate_world(small_config(seed=5))
        b = generate_world(small_config(seed=5))

        assert np.array_equal(a.grid.heights, b.grid.heights)
        assert np.array_equal(a.path.waypoints, b.path.waypoints)
        assert np.array_equal(a.render.normals, b.render.normals)

    def test_track_seed_override(self):
        """Test an explicit track seed decouples the path from the terrain seed."""
        config = small_config(seed=5)
        config.track = GeneratorConfig(step_count=10, step_length=1.0, seed=99)

        assert config.track_seed == 99
        assert small_config(seed=5).track_seed == 5

    def test_checkpoints_numbered(self):
        """Test checkpoints are numbered in driving order."""
        world = generate_world(small_config())

        assert [c.number for c in world.checkpoints] == list(range(len(world.checkpoints)))
        history = world.new_history()
        assert history.total == len(world.checkpoints)

    def test_state(self):
        """Test world summary."""
        state = generate_world(small_config()).get_state()

        assert state["terrain"]["grid_size"] == 24
        assert state["track"]["num_waypoints"] == 10
        assert state["mesh"]["triangles"] == 24 * 24 * 2

    def test_bad_config_aborts(self):
        """Test configuration errors surface before generation."""
        with pytest.raises(ConfigurationError):
            generate_world(WorldConfig(terrain=TerrainConfig(grid_size=0)))

    def test_logs_stages(self, caplog):
        """Test pipeline stages are logged."""
        with caplog.at_level(logging.INFO, logger="raceterrain"):
            generate_world(small_config())

        messages = " ".join(record.getMessage() for record in caplog.records)
        assert "Generating world" in messages
        assert "Road carved" in messages
        assert "Geometry built" in messages
