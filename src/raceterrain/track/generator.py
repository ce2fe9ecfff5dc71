"""
Track path generator - Biased random walk producing track waypoints.

Generates:
- Runs of straight and curving steps rather than per-step jitter
- A fixed number of waypoints, reproducible from a seed
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple
import logging
import math
import numpy as np

from raceterrain.errors import ConfigurationError

logger = logging.getLogger(__name__)


class TurnState(Enum):
    """Current steering state of the walk."""
    STRAIGHT = "straight"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class GeneratorConfig:
    """Configuration for track path generation."""
    step_count: int = 50
    step_length: float = 3.0          # World units advanced per step
    initial_direction: Tuple[float, float] = (0.0, -1.0)  # Scaled to step_length

    # Steering
    max_turn_rad: float = 1.0         # Largest rotation applied in one step
    change_odds: int = 10             # Turn state changes when randint(change_odds) < streak

    # Random seed (None for random)
    seed: int | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.step_count < 0:
            raise ConfigurationError(f"step_count must be non-negative, got {self.step_count}")
        if not math.isfinite(self.step_length) or self.step_length <= 0:
            raise ConfigurationError(f"step_length must be positive, got {self.step_length}")
        if math.hypot(*self.initial_direction) == 0:
            raise ConfigurationError("initial_direction must have non-zero length")
        if self.change_odds <= 0:
            raise ConfigurationError(f"change_odds must be positive, got {self.change_odds}")


@dataclass(frozen=True, eq=False)
class TrackPath:
    """Ordered, read-only sequence of track waypoints.

    Waypoints are (x, z) world positions; the start point itself is
    not one of them.
    """
    waypoints: np.ndarray
    start: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        points = np.array(self.waypoints, dtype=np.float64).reshape(-1, 2)
        points.flags.writeable = False
        object.__setattr__(self, "waypoints", points)

    def __len__(self) -> int:
        return len(self.waypoints)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for x, z in self.waypoints:
            yield (float(x), float(z))

    def __getitem__(self, index: int) -> Tuple[float, float]:
        x, z = self.waypoints[index]
        return (float(x), float(z))

    @property
    def length(self) -> float:
        """Polyline length from the start through every waypoint."""
        if len(self.waypoints) == 0:
            return 0.0
        points = np.vstack([np.asarray(self.start, dtype=np.float64), self.waypoints])
        return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())

    def get_state(self) -> dict:
        return {
            "start": self.start,
            "num_waypoints": len(self),
            "length": self.length,
            "waypoints": self.waypoints.tolist(),
        }


def rotate(vector: np.ndarray, angle: float) -> np.ndarray:
    """Rotate a 2D vector counter-clockwise by angle radians."""
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return np.array([
        cos_a * vector[0] - sin_a * vector[1],
        sin_a * vector[0] + cos_a * vector[1],
    ])


class TrackPathGenerator:
    """Random-walk track path generator.

    Each step may change the turn state with probability streak/change_odds,
    where streak counts the steps since the last change. Long streaks are
    therefore increasingly likely to end, which yields runs of straights
    and bends.

    Usage:
        generator = TrackPathGenerator(GeneratorConfig(seed=2))
        path = generator.generate(start=(0.0, -9.0))
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        rng: np.random.Generator | None = None,
    ):
        """Initialize generator.

        Args:
            config: Generator configuration. Uses defaults if None.
            rng: Random generator to draw from. Seeded from config.seed if None.
        """
        self.config = config or GeneratorConfig()
        self._rng = rng if rng is not None else np.random.default_rng(self.config.seed)

    def _initial_direction(self) -> np.ndarray:
        direction = np.asarray(self.config.initial_direction, dtype=np.float64)
        return direction / np.linalg.norm(direction) * self.config.step_length

    def generate(self, start: Tuple[float, float] = (0.0, 0.0)) -> TrackPath:
        """Walk step_count steps from start.

        Args:
            start: (x, z) world position the walk starts from

        Returns:
            Path with exactly step_count waypoints
        """
        position = np.asarray(start, dtype=np.float64)
        direction = self._initial_direction()
        turn_state = TurnState.STRAIGHT
        streak = 1
        states = list(TurnState)
        waypoints: List[np.ndarray] = []

        for _ in range(self.config.step_count):
            if self._rng.integers(0, self.config.change_odds) < streak:
                turn_state = states[self._rng.integers(0, len(states))]
                streak = 1
            else:
                streak += 1

            if turn_state == TurnState.LEFT:
                direction = rotate(direction, self._rng.random() * self.config.max_turn_rad)
            elif turn_state == TurnState.RIGHT:
                direction = rotate(direction, -self._rng.random() * self.config.max_turn_rad)

            position = position + direction
            waypoints.append(position)

        path = TrackPath(
            waypoints=np.array(waypoints, dtype=np.float64).reshape(-1, 2),
            start=(float(start[0]), float(start[1])),
        )
        logger.debug(f"Generated track path: {len(path)} waypoints, length {path.length:.1f}")
        return path

    def generate_with_seed(self, seed: int, start: Tuple[float, float] = (0.0, 0.0)) -> TrackPath:
        """Generate a path with a specific seed.

        Args:
            seed: Random seed
            start: (x, z) start position

        Returns:
            Generated path
        """
        self._rng = np.random.default_rng(seed)
        return self.generate(start)


def generate_track(
    seed: int,
    start: Tuple[float, float] = (0.0, 0.0),
    step_count: int = 50,
) -> TrackPath:
    """Generate a track path from plain parameters."""
    config = GeneratorConfig(step_count=step_count, seed=seed)
    return TrackPathGenerator(config).generate(start)
