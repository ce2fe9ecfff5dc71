"""
Terrain module - Height field synthesis and lookup.

This module contains:
- NoiseField: Layered noise height function
- TerrainGrid: Cell storage with world/index mapping
- SpatialQuery: Read-only lookups after generation
- Classification: Height bands and road cells
"""

from raceterrain.terrain.noise import NoiseField, OctaveConfig, DEFAULT_OCTAVES
from raceterrain.terrain.surface import Classification, SurfaceProperties, classify
from raceterrain.terrain.grid import Cell, TerrainConfig, TerrainGrid, build_terrain
from raceterrain.terrain.query import SpatialQuery

__all__ = [
    "NoiseField",
    "OctaveConfig",
    "DEFAULT_OCTAVES",
    "Classification",
    "SurfaceProperties",
    "classify",
    "Cell",
    "TerrainConfig",
    "TerrainGrid",
    "build_terrain",
    "SpatialQuery",
]
