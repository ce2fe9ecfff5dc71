"""
Spatial query - Read-only terrain lookups after generation.

Used by placement, telemetry and other runtime consumers once the grid
is frozen. Safe to share between concurrent readers.
"""

from typing import List, Optional, Tuple

from raceterrain.terrain.grid import Cell, TerrainGrid
from raceterrain.terrain.surface import SURFACE_PROPERTIES, SurfaceProperties


class SpatialQuery:
    """Read-only view over a frozen TerrainGrid.

    Obtain one from ``TerrainGrid.freeze()``. Out-of-bounds positions
    produce None rather than raising.
    """

    def __init__(self, grid: TerrainGrid):
        """Wrap a frozen grid.

        Args:
            grid: Terrain grid; must already be frozen
        """
        if not grid.is_frozen:
            raise RuntimeError("SpatialQuery requires a frozen terrain grid")
        self._grid = grid

    @property
    def size(self) -> int:
        return self._grid.size

    @property
    def scale(self) -> float:
        return self._grid.scale

    def get_height(self, x: float, z: float) -> Optional[float]:
        return self._grid.get_height(x, z)

    def get_cell(self, ix: int, iz: int) -> Optional[Cell]:
        return self._grid.get_cell(ix, iz)

    def world_to_index(self, x: float, z: float) -> Optional[Tuple[int, int]]:
        return self._grid.world_to_index(x, z)

    def get_neighborhood(self, x: float, z: float, radius: int) -> List[List[Optional[Cell]]]:
        """(2*radius+1)^2 window of cells around (x, z); None where off-grid."""
        return self._grid.get_neighborhood(x, z, radius)

    def get_dimensions(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        return self._grid.get_dimensions()

    def get_surface(self, x: float, z: float) -> Optional[SurfaceProperties]:
        """Surface properties of the cell under (x, z).

        Args:
            x: World X coordinate
            z: World Z coordinate

        Returns:
            Properties of the cell's classification, None off the grid
        """
        index = self._grid.world_to_index(x, z)
        if index is None:
            return None
        cell = self._grid.get_cell(*index)
        return SURFACE_PROPERTIES[cell.classification]
