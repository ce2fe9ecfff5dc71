"""
RaceTerrain - Procedural drivable landscapes for racing simulation.

This package provides:
- Layered-noise height fields on a square terrain grid
- Seeded random-walk race track generation
- Road carving into the terrain along the track
- Render and collision geometry with identical vertices and triangles
- A read-only query surface for placement and telemetry
"""

__version__ = "0.1.0"

from raceterrain.errors import ConfigurationError
from raceterrain.terrain.grid import TerrainGrid, build_terrain
from raceterrain.terrain.query import SpatialQuery
from raceterrain.track.generator import TrackPath, generate_track
from raceterrain.track.carver import carve_road
from raceterrain.mesh.builder import build_collision_geometry, build_render_geometry
from raceterrain.simulation.world import World, WorldConfig, generate_world

__all__ = [
    "ConfigurationError",
    "TerrainGrid",
    "build_terrain",
    "SpatialQuery",
    "TrackPath",
    "generate_track",
    "carve_road",
    "build_collision_geometry",
    "build_render_geometry",
    "World",
    "WorldConfig",
    "generate_world",
    "__version__",
]
