"""
Mesh module - Geometry export for renderers and physics.

This module contains:
- MeshBuilder: Quad mesh with seam-averaged corner heights
- RenderGeometry / CollisionGeometry: Paired outputs over one surface
- TextureAtlas: UV lookup capability supplied by the renderer
"""

from raceterrain.mesh.atlas import StripTextureAtlas, TextureAtlas, UvRect
from raceterrain.mesh.builder import (
    CollisionGeometry,
    MeshBuilder,
    MeshSurface,
    RenderGeometry,
    build_collision_geometry,
    build_render_geometry,
)

__all__ = [
    "StripTextureAtlas",
    "TextureAtlas",
    "UvRect",
    "CollisionGeometry",
    "MeshBuilder",
    "MeshSurface",
    "RenderGeometry",
    "build_collision_geometry",
    "build_render_geometry",
]
