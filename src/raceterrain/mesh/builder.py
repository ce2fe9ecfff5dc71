"""
Mesh builder - Render and collision geometry from a finished terrain grid.

Builds:
- One quad (4 vertices, 2 triangles) per cell
- Corner heights averaged across the cells sharing each corner
- Per-vertex normals and atlas UVs for rendering
- Collision geometry sharing the exact render positions and indices
"""

from dataclasses import dataclass
from typing import Tuple
import logging
import weakref
import numpy as np

from raceterrain.mesh.atlas import TextureAtlas
from raceterrain.terrain.grid import TerrainGrid
from raceterrain.terrain.surface import Classification

logger = logging.getLogger(__name__)


# (dx, dz) of each quad corner relative to the cell's minimum corner
CORNER_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 0), (1, 0), (0, 1), (1, 1))

# Two triangles per quad, indices into the quad's own 4 vertices
QUAD_TRIANGLES = np.array([[0, 2, 1], [2, 3, 1]], dtype=np.uint32)

# Surface of every meshed grid; a frozen grid is only ever meshed once
_surfaces: "weakref.WeakKeyDictionary[TerrainGrid, MeshSurface]" = weakref.WeakKeyDictionary()


def _read_only(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class MeshSurface:
    """Vertex positions and triangle indices shared by render and collision geometry."""
    positions: np.ndarray  # (V, 3) float32
    indices: np.ndarray    # (T, 3) uint32

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)


@dataclass(frozen=True, eq=False)
class RenderGeometry:
    """Renderable terrain mesh."""
    surface: MeshSurface
    normals: np.ndarray    # (V, 3) float32
    uvs: np.ndarray        # (V, 2) float32

    @property
    def positions(self) -> np.ndarray:
        return self.surface.positions

    @property
    def indices(self) -> np.ndarray:
        return self.surface.indices

    def collision(self) -> "CollisionGeometry":
        """Collision geometry over this mesh's own positions and indices."""
        return CollisionGeometry(self.surface)


@dataclass(frozen=True, eq=False)
class CollisionGeometry:
    """Triangle mesh for the physics collaborator."""
    surface: MeshSurface

    @property
    def positions(self) -> np.ndarray:
        return self.surface.positions

    @property
    def indices(self) -> np.ndarray:
        return self.surface.indices


def corner_heights(heights: np.ndarray) -> np.ndarray:
    """Averaged corner heights for every cell.

    Each corner takes the mean of the four cells touching it. Cells off
    the grid are replaced by the height of the cell being meshed, so
    boundary quads do not bow outward.

    Args:
        heights: (N, N) heights indexed [x, z]

    Returns:
        (N, N, 4) corner heights in CORNER_OFFSETS order
    """
    own = heights.astype(np.float64)
    n = own.shape[0]
    padded = np.zeros((n + 2, n + 2), dtype=np.float64)
    valid = np.zeros((n + 2, n + 2), dtype=bool)
    padded[1:-1, 1:-1] = own
    valid[1:-1, 1:-1] = True

    corners = np.empty((n, n, 4), dtype=np.float64)
    for k, (cx, cz) in enumerate(CORNER_OFFSETS):
        total = np.zeros((n, n), dtype=np.float64)
        for dx in (cx - 1, cx):
            for dz in (cz - 1, cz):
                rows = slice(1 + dx, 1 + dx + n)
                cols = slice(1 + dz, 1 + dz + n)
                total += np.where(valid[rows, cols], padded[rows, cols], own)
        corners[..., k] = total / 4.0
    return corners


def normalize_or_zero(vectors: np.ndarray) -> np.ndarray:
    """Normalize along the last axis; zero-length vectors map to zero."""
    lengths = np.linalg.norm(vectors, axis=-1, keepdims=True)
    safe = np.where(lengths > 0.0, lengths, 1.0)
    return np.where(lengths > 0.0, vectors / safe, 0.0)


def vertex_normals(quad_positions: np.ndarray) -> np.ndarray:
    """Per-vertex normals for quads laid out as (..., 4, 3).

    Vertices 0 and 3 belong to one triangle each and take its face
    normal; vertices 1 and 2 border both triangles and take the
    normalized average.
    """
    p = quad_positions.astype(np.float64)
    p0, p1, p2, p3 = p[..., 0, :], p[..., 1, :], p[..., 2, :], p[..., 3, :]
    first = normalize_or_zero(np.cross(p2 - p0, p1 - p0))
    second = normalize_or_zero(np.cross(p3 - p2, p1 - p2))
    shared = normalize_or_zero(first + second)
    return np.stack([first, shared, shared, second], axis=-2)


class MeshBuilder:
    """Converts a terrain grid into paired render and collision geometry.

    Both geometries are built from one MeshSurface, so their positions
    and indices are the same arrays. The surface is built once per grid
    and shared by every builder over that grid. Vertices are not shared
    between quads; neighbouring quads meet because their corner heights
    are averaged from the same cells.

    Building freezes the grid.

    Usage:
        builder = MeshBuilder(grid)
        render = builder.render_geometry(atlas)
        collision = builder.collision_geometry()
    """

    def __init__(self, grid: TerrainGrid):
        """Initialize builder.

        Args:
            grid: Finished terrain grid
        """
        if not grid.is_frozen:
            grid.freeze()
        self.grid = grid

    def _build_quads(self) -> np.ndarray:
        n = self.grid.size
        scale = self.grid.scale
        half = n / 2.0
        ix = np.arange(n, dtype=np.float64)[:, None]
        iz = np.arange(n, dtype=np.float64)[None, :]
        heights = corner_heights(self.grid.heights)

        quads = np.empty((n, n, 4, 3), dtype=np.float64)
        for k, (cx, cz) in enumerate(CORNER_OFFSETS):
            quads[:, :, k, 0] = (ix - half + cx) * scale
            quads[:, :, k, 1] = heights[..., k]
            quads[:, :, k, 2] = (iz - half + cz) * scale
        return quads.astype(np.float32)

    @property
    def surface(self) -> MeshSurface:
        """Shared positions/indices of the grid, built on first access."""
        surface = _surfaces.get(self.grid)
        if surface is None:
            quads = self._build_quads()
            cell_count = self.grid.size * self.grid.size
            base = (np.arange(cell_count, dtype=np.uint32) * 4)[:, None, None]
            indices = (base + QUAD_TRIANGLES[None, :, :]).reshape(-1, 3)
            surface = MeshSurface(
                positions=_read_only(quads.reshape(-1, 3)),
                indices=_read_only(indices),
            )
            _surfaces[self.grid] = surface
            logger.debug(
                f"Built terrain surface: {surface.vertex_count} vertices, "
                f"{surface.triangle_count} triangles"
            )
        return surface

    def _uv_table(self, atlas: TextureAtlas) -> np.ndarray:
        """Corner UVs per classification, looked up once per class present."""
        table = np.zeros((len(Classification), 4, 2), dtype=np.float32)
        for value in np.unique(self.grid.classifications):
            rect = atlas.lookup(Classification(int(value)))
            table[value] = [
                [rect.left, rect.bottom],
                [rect.right, rect.bottom],
                [rect.left, rect.top],
                [rect.right, rect.top],
            ]
        return table

    def render_geometry(self, atlas: TextureAtlas) -> RenderGeometry:
        """Build the render mesh.

        Args:
            atlas: UV lookup by classification

        Returns:
            Geometry with positions, normals, UVs and indices
        """
        surface = self.surface
        quads = surface.positions.reshape(-1, 4, 3)
        normals = vertex_normals(quads).astype(np.float32).reshape(-1, 3)
        uvs = self._uv_table(atlas)[self.grid.classifications].reshape(-1, 2)
        return RenderGeometry(surface=surface, normals=_read_only(normals), uvs=_read_only(uvs))

    def collision_geometry(self) -> CollisionGeometry:
        return CollisionGeometry(self.surface)

    def build(self, atlas: TextureAtlas) -> Tuple[RenderGeometry, CollisionGeometry]:
        """Build render and collision geometry over the same surface."""
        render = self.render_geometry(atlas)
        return render, render.collision()


def build_render_geometry(grid: TerrainGrid, atlas: TextureAtlas) -> RenderGeometry:
    return MeshBuilder(grid).render_geometry(atlas)


def build_collision_geometry(grid: TerrainGrid) -> CollisionGeometry:
    return MeshBuilder(grid).collision_geometry()
