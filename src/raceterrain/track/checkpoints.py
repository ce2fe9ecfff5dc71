"""
Checkpoints - Start position and checkpoint placement along a track path.

Provides:
- Start block placement on the terrain edge
- Checkpoints lifted to terrain height
- In-order checkpoint collection
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from raceterrain.errors import ConfigurationError
from raceterrain.terrain.grid import TerrainGrid
from raceterrain.terrain.query import SpatialQuery
from raceterrain.track.generator import TrackPath


@dataclass(frozen=True)
class Checkpoint:
    """Spherical checkpoint sensor along the track."""
    number: int
    x: float
    y: float
    z: float
    radius: float = 3.0

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def contains(self, x: float, y: float, z: float) -> bool:
        """Check if a point lies inside the checkpoint sphere."""
        dx, dy, dz = x - self.x, y - self.y, z - self.z
        return dx * dx + dy * dy + dz * dz <= self.radius * self.radius


def find_start_position(
    query: Union[SpatialQuery, TerrainGrid],
    margin: float = 1.0,
) -> Tuple[float, float, float]:
    """Start block position on the centre of the terrain's far (max z) edge.

    Args:
        query: Terrain query surface, or a grid still being generated
        margin: Distance inside the edge in world units

    Returns:
        (x, y, z) with y the terrain height there

    Raises:
        ConfigurationError: If the terrain is too small to hold the start
    """
    _, (_, max_z) = query.get_dimensions()
    z = max_z - margin
    height = query.get_height(0.0, z)
    if height is None:
        raise ConfigurationError(f"Could not place start block at (0, {z})")
    return (0.0, height, z)


def place_checkpoints(
    path: TrackPath,
    query: SpatialQuery,
    every: int = 5,
    radius: float = 3.0,
) -> List[Checkpoint]:
    """Place numbered checkpoints along a path.

    A checkpoint goes on every ``every``-th waypoint and on the final
    waypoint. Waypoints off the terrain get no checkpoint; numbering
    stays contiguous.

    Args:
        path: Track path
        query: Terrain query surface for heights
        every: Waypoint spacing between checkpoints
        radius: Checkpoint sphere radius

    Returns:
        Checkpoints in driving order, numbered from 0
    """
    if every <= 0:
        raise ConfigurationError(f"every must be positive, got {every}")

    last = len(path) - 1
    checkpoints: List[Checkpoint] = []
    for i, (x, z) in enumerate(path):
        if (i + 1) % every != 0 and i != last:
            continue
        height = query.get_height(x, z)
        if height is None:
            continue
        checkpoints.append(Checkpoint(len(checkpoints), x, height, z, radius))
    return checkpoints


class CheckpointHistory:
    """Tracks which checkpoints have been collected.

    Only the next checkpoint in sequence can be collected; anything
    else is ignored.
    """

    def __init__(self, total: int):
        """Initialize history.

        Args:
            total: Number of checkpoints on the track
        """
        self.total = total
        self._collected: List[int] = []

    @property
    def collected(self) -> List[int]:
        return list(self._collected)

    @property
    def next_checkpoint(self) -> Optional[int]:
        """Number of the checkpoint to collect next, None when complete."""
        if self.is_complete:
            return None
        return len(self._collected)

    @property
    def is_complete(self) -> bool:
        return len(self._collected) >= self.total

    def collect(self, number: int) -> bool:
        """Record a checkpoint if it is the next one in sequence.

        Returns:
            True if the checkpoint was accepted
        """
        if number != self.next_checkpoint:
            return False
        self._collected.append(number)
        return True

    def reset(self) -> None:
        self._collected.clear()
