"""
Simulation module - World generation pipeline.

This module contains:
- WorldConfig: Configuration for every generation stage
- World: Generated terrain, track, geometry and checkpoints
- generate_world: Runs the pipeline once, in order
"""

from raceterrain.simulation.world import World, WorldConfig, generate_world

__all__ = [
    "World",
    "WorldConfig",
    "generate_world",
]
