"""
World - One-shot generation of a drivable world.

Runs, in order:
- Terrain build from the noise field
- Start placement and track path generation
- Road carving
- Freezing and geometry export
- Checkpoint placement
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import logging
import numpy as np

from raceterrain.mesh.atlas import StripTextureAtlas, TextureAtlas
from raceterrain.mesh.builder import CollisionGeometry, MeshBuilder, RenderGeometry
from raceterrain.terrain.grid import TerrainConfig, TerrainGrid
from raceterrain.terrain.query import SpatialQuery
from raceterrain.track.carver import CarveConfig, RoadCarver
from raceterrain.track.checkpoints import (
    Checkpoint,
    CheckpointHistory,
    find_start_position,
    place_checkpoints,
)
from raceterrain.track.generator import GeneratorConfig, TrackPath, TrackPathGenerator

logger = logging.getLogger(__name__)


@dataclass
class WorldConfig:
    """Configuration for the whole generation pipeline."""
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    track: GeneratorConfig = field(default_factory=GeneratorConfig)
    carve: CarveConfig = field(default_factory=CarveConfig)

    # Placement
    start_margin: float = 1.0
    checkpoint_every: int = 5
    checkpoint_radius: float = 3.0

    @property
    def track_seed(self) -> int | None:
        """Track seed, falling back to the terrain seed."""
        return self.track.seed if self.track.seed is not None else self.terrain.seed


@dataclass
class World:
    """Generated world, read-only after construction."""
    config: WorldConfig
    grid: TerrainGrid
    query: SpatialQuery
    path: TrackPath
    render: RenderGeometry
    collision: CollisionGeometry
    start_position: Tuple[float, float, float]
    checkpoints: List[Checkpoint]

    def new_history(self) -> CheckpointHistory:
        """Fresh checkpoint history for one run over this world."""
        return CheckpointHistory(len(self.checkpoints))

    def get_state(self) -> dict:
        """Get world summary for serialization."""
        return {
            "terrain": self.grid.get_state(),
            "track": {
                "num_waypoints": len(self.path),
                "length": self.path.length,
            },
            "mesh": {
                "vertices": self.render.surface.vertex_count,
                "triangles": self.render.surface.triangle_count,
            },
            "start_position": self.start_position,
            "num_checkpoints": len(self.checkpoints),
        }


def generate_world(
    config: WorldConfig | None = None,
    atlas: TextureAtlas | None = None,
) -> World:
    """Run the full generation pipeline.

    Args:
        config: Pipeline configuration. Uses defaults if None.
        atlas: UV lookup for render geometry. Uses a StripTextureAtlas if None.

    Returns:
        Generated world

    Raises:
        ConfigurationError: If any stage is misconfigured
    """
    config = config or WorldConfig()
    atlas = atlas or StripTextureAtlas()

    logger.info(
        f"Generating world: {config.terrain.grid_size}x{config.terrain.grid_size} cells, "
        f"seed={config.terrain.seed}"
    )
    grid = TerrainGrid.build(config.terrain)

    # Placed again after carving so the height matches the final terrain
    start_x, _, start_z = find_start_position(grid, config.start_margin)
    start = (start_x, start_z)

    rng = np.random.default_rng(config.track_seed)
    path = TrackPathGenerator(config.track, rng=rng).generate(start)
    logger.info(f"Track path: {len(path)} waypoints, {path.length:.1f} units")

    written = RoadCarver(grid, config.carve).carve(path)
    logger.info(f"Road carved: {written} cell writes")

    query = grid.freeze()
    render, collision = MeshBuilder(grid).build(atlas)
    logger.info(
        f"Geometry built: {render.surface.vertex_count} vertices, "
        f"{render.surface.triangle_count} triangles"
    )

    start_position = find_start_position(query, config.start_margin)
    checkpoints = place_checkpoints(
        path, query, every=config.checkpoint_every, radius=config.checkpoint_radius
    )
    logger.info(f"Placed {len(checkpoints)} checkpoints")

    return World(
        config=config,
        grid=grid,
        query=query,
        path=path,
        render=render,
        collision=collision,
        start_position=start_position,
        checkpoints=checkpoints,
    )

