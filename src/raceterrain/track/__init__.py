"""
Track module - Track path generation and road carving.

This module contains:
- TrackPathGenerator: Seeded random-walk waypoint generation
- RoadCarver: Flattens a road corridor into the terrain
- Checkpoints: Start and checkpoint placement along the path
"""

from raceterrain.track.generator import (
    GeneratorConfig,
    TrackPath,
    TrackPathGenerator,
    TurnState,
    generate_track,
)
from raceterrain.track.carver import CarveConfig, RoadCarver, carve_road
from raceterrain.track.checkpoints import (
    Checkpoint,
    CheckpointHistory,
    find_start_position,
    place_checkpoints,
)

__all__ = [
    "GeneratorConfig",
    "TrackPath",
    "TrackPathGenerator",
    "TurnState",
    "generate_track",
    "CarveConfig",
    "RoadCarver",
    "carve_road",
    "Checkpoint",
    "CheckpointHistory",
    "find_start_position",
    "place_checkpoints",
]
