"""
Terrain grid - Height field storage and coordinate mapping.

Contains:
- Cell view type
- Terrain configuration
- Square grid of heights and classifications
- World <-> index mapping and bounds-checked accessors
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple
import logging
import math
import numpy as np

from raceterrain.errors import ConfigurationError
from raceterrain.terrain.noise import DEFAULT_OCTAVES, NoiseField, OctaveConfig
from raceterrain.terrain.surface import Classification, classify_heights

if TYPE_CHECKING:
    from raceterrain.terrain.query import SpatialQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """Snapshot of one grid cell."""
    height: float
    classification: Classification


@dataclass
class TerrainConfig:
    """Terrain generation configuration."""
    grid_size: int = 430          # Cells per side
    scale: float = 1.0            # World units per cell
    seed: int = 0
    octaves: Sequence[OctaveConfig] = DEFAULT_OCTAVES
    fbm_layers: int = 4

    def __post_init__(self):
        """Validate configuration."""
        if self.grid_size <= 0:
            raise ConfigurationError(f"grid_size must be positive, got {self.grid_size}")
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ConfigurationError(f"scale must be a positive finite number, got {self.scale}")
        if self.fbm_layers <= 0:
            raise ConfigurationError(f"fbm_layers must be positive, got {self.fbm_layers}")


class TerrainGrid:
    """Square grid of terrain cells centred on the world origin.

    The grid spans [-N*scale/2, +N*scale/2] on both axes. Cell (ix, iz)
    covers [(ix - N/2)*scale, (ix + 1 - N/2)*scale) on x, likewise on z.
    Size and scale are fixed; cell contents only change through carving,
    and not at all once the grid is frozen.

    Usage:
        grid = TerrainGrid.build(TerrainConfig(grid_size=128, seed=7))
        h = grid.get_height(0.0, 0.0)
        query = grid.freeze()
    """

    def __init__(self, heights: np.ndarray, classifications: np.ndarray, scale: float = 1.0):
        """Wrap existing height/classification arrays.

        Args:
            heights: (N, N) heights indexed [x, z]
            classifications: (N, N) Classification values
            scale: World units per cell
        """
        heights = np.asarray(heights, dtype=np.float32)
        if heights.ndim != 2 or heights.shape[0] != heights.shape[1] or heights.shape[0] == 0:
            raise ConfigurationError(f"heights must be a non-empty square array, got shape {heights.shape}")
        if np.shape(classifications) != heights.shape:
            raise ConfigurationError("classifications must match the height array shape")
        if not math.isfinite(scale) or scale <= 0:
            raise ConfigurationError(f"scale must be a positive finite number, got {scale}")

        self._heights = heights.copy()
        self._classes = np.asarray(classifications, dtype=np.int8).copy()
        self._size = heights.shape[0]
        self._scale = float(scale)
        self._frozen = False

    @classmethod
    def build(cls, config: TerrainConfig | None = None) -> "TerrainGrid":
        """Sample the noise field at every cell and classify it.

        Args:
            config: Terrain configuration. Uses defaults if None.

        Returns:
            Newly built grid
        """
        config = config or TerrainConfig()
        field = NoiseField(config.seed, config.octaves, config.fbm_layers)
        heights = field.sample_grid(config.grid_size).astype(np.float32)
        grid = cls(heights, classify_heights(heights), config.scale)

        low, high = grid.height_range()
        logger.debug(
            f"Built {config.grid_size}x{config.grid_size} terrain (seed={config.seed}), "
            f"heights {low:.2f}..{high:.2f}"
        )
        return grid

    @property
    def size(self) -> int:
        """Cells per side."""
        return self._size

    @property
    def scale(self) -> float:
        """World units per cell."""
        return self._scale

    @property
    def heights(self) -> np.ndarray:
        """Height array indexed [x, z] (read-only view)."""
        view = self._heights.view()
        view.flags.writeable = False
        return view

    @property
    def classifications(self) -> np.ndarray:
        """Classification array indexed [x, z] (read-only view)."""
        view = self._classes.view()
        view.flags.writeable = False
        return view

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _raw_index(self, x: float, z: float) -> Optional[Tuple[int, int]]:
        """Unchecked cell index for a world position (may lie off-grid)."""
        if not (math.isfinite(x) and math.isfinite(z)):
            return None
        half = self._size / 2.0
        return (math.floor(x / self._scale + half), math.floor(z / self._scale + half))

    def in_bounds(self, ix: int, iz: int) -> bool:
        return 0 <= ix < self._size and 0 <= iz < self._size

    def world_to_index(self, x: float, z: float) -> Optional[Tuple[int, int]]:
        """Convert world coordinates to a cell index.

        Args:
            x: World X coordinate
            z: World Z coordinate

        Returns:
            (ix, iz) if the position lies on the grid, None otherwise
        """
        index = self._raw_index(x, z)
        if index is None or not self.in_bounds(*index):
            return None
        return index

    def index_to_world(self, ix: int, iz: int) -> Tuple[float, float]:
        """World position of the minimum corner of cell (ix, iz)."""
        half = self._size / 2.0
        return ((ix - half) * self._scale, (iz - half) * self._scale)

    def get_cell(self, ix: int, iz: int) -> Optional[Cell]:
        """Bounds-checked cell access by index."""
        if not self.in_bounds(ix, iz):
            return None
        return Cell(
            height=float(self._heights[ix, iz]),
            classification=Classification(int(self._classes[ix, iz])),
        )

    def get_height(self, x: float, z: float) -> Optional[float]:
        """Height at a world position, None off the grid."""
        index = self.world_to_index(x, z)
        if index is None:
            return None
        return float(self._heights[index])

    def get_neighborhood(self, x: float, z: float, radius: int) -> List[List[Optional[Cell]]]:
        """Cells around a world position.

        Args:
            x: World X coordinate of the centre
            z: World Z coordinate of the centre
            radius: Window radius in cells

        Returns:
            (2*radius+1) x (2*radius+1) nested list; entry [i][j] is the cell
            at index offset (i - radius, j - radius), None where off-grid
        """
        if radius < 0:
            raise ValueError(f"radius must be non-negative, got {radius}")

        width = 2 * radius + 1
        centre = self._raw_index(x, z)
        if centre is None:
            return [[None] * width for _ in range(width)]

        cx, cz = centre
        return [
            [self.get_cell(cx + dx, cz + dz) for dz in range(-radius, radius + 1)]
            for dx in range(-radius, radius + 1)
        ]

    def get_dimensions(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """World-space (min corner, max corner) as ((x, z), (x, z))."""
        half_extent = self._size * self._scale / 2.0
        return ((-half_extent, -half_extent), (half_extent, half_extent))

    def height_range(self) -> Tuple[float, float]:
        return (float(self._heights.min()), float(self._heights.max()))

    def window_bounds(self, ix: int, iz: int, radius: int) -> Tuple[slice, slice]:
        """Index slices of a square window clipped to the grid edges."""
        return (
            slice(max(ix - radius, 0), min(ix + radius + 1, self._size)),
            slice(max(iz - radius, 0), min(iz + radius + 1, self._size)),
        )

    def window_heights(self, window: Tuple[slice, slice]) -> np.ndarray:
        return self._heights[window]

    def window_classifications(self, window: Tuple[slice, slice]) -> np.ndarray:
        return self._classes[window]

    def fill_window(
        self,
        window: Tuple[slice, slice],
        height: float,
        classification: Classification,
    ) -> int:
        """Overwrite every cell in a window.

        Returns:
            Number of cells written
        """
        if self._frozen:
            raise RuntimeError("Cannot modify a frozen terrain grid")

        self._heights[window] = height
        self._classes[window] = int(classification)
        return self._heights[window].size

    def freeze(self) -> "SpatialQuery":
        """Stop all further mutation and return the read-only query surface."""
        from raceterrain.terrain.query import SpatialQuery

        self._frozen = True
        self._heights.flags.writeable = False
        self._classes.flags.writeable = False
        return SpatialQuery(self)

    def get_state(self) -> dict:
        """Get grid summary for serialization."""
        low, high = self.height_range()
        counts = np.bincount(self._classes.ravel(), minlength=len(Classification))
        return {
            "grid_size": self._size,
            "scale": self._scale,
            "frozen": self._frozen,
            "min_height": low,
            "max_height": high,
            "classification_counts": {
                c.name.lower(): int(counts[c]) for c in Classification
            },
        }


def build_terrain(grid_size: int, scale: float, seed: int) -> TerrainGrid:
    """Build a terrain grid from plain parameters.

    Raises:
        ConfigurationError: If grid_size or scale is invalid
    """
    return TerrainGrid.build(TerrainConfig(grid_size=grid_size, scale=scale, seed=seed))
