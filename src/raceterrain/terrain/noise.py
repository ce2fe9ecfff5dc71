"""
Noise field - Layered noise height function.

Provides:
- Octave descriptors (seed offset, wavelength divisor, amplitude)
- Fractal OpenSimplex sampling per octave
- Scalar and whole-grid height evaluation
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple
import numpy as np
from opensimplex import OpenSimplex


@dataclass(frozen=True)
class OctaveConfig:
    """One noise layer of the height field."""
    seed_offset: int = 0
    wavelength_divisor: float = 50.0   # Larger = broader features
    amplitude_multiplier: float = 1.0  # Height contribution in world units


# Broad hills dominate, small layers add surface detail
DEFAULT_OCTAVES: Tuple[OctaveConfig, ...] = (
    OctaveConfig(seed_offset=0, wavelength_divisor=50.0, amplitude_multiplier=2.5),
    OctaveConfig(seed_offset=1, wavelength_divisor=10.0, amplitude_multiplier=1.5),
    OctaveConfig(seed_offset=2, wavelength_divisor=5.0, amplitude_multiplier=0.5),
    OctaveConfig(seed_offset=3, wavelength_divisor=75.0, amplitude_multiplier=5.5),
    OctaveConfig(seed_offset=4, wavelength_divisor=100.0, amplitude_multiplier=20.5),
)


class FractalNoise:
    """Fractal Brownian motion over a single seeded OpenSimplex generator.

    Output is normalized by the summed layer weights, so it stays
    roughly within [-1, 1].
    """

    def __init__(
        self,
        seed: int,
        layers: int = 4,
        lacunarity: float = 2.0,
        persistence: float = 0.5,
    ):
        self.seed = seed
        self._simplex = OpenSimplex(seed=seed)
        self._frequencies = [lacunarity ** i for i in range(layers)]
        self._weights = [persistence ** i for i in range(layers)]
        self._norm = sum(self._weights)

    def sample(self, x: float, z: float) -> float:
        total = 0.0
        for frequency, weight in zip(self._frequencies, self._weights):
            total += weight * self._simplex.noise2(x * frequency, z * frequency)
        return total / self._norm

    def sample_array(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        """Sample on the lattice spanned by xs and zs.

        Returns:
            Array of shape (len(xs), len(zs)) indexed [x, z]
        """
        total = np.zeros((len(xs), len(zs)), dtype=np.float64)
        for frequency, weight in zip(self._frequencies, self._weights):
            # noise2array returns rows over its second argument
            total += weight * self._simplex.noise2array(xs * frequency, zs * frequency).T
        return total / self._norm


class NoiseField:
    """Deterministic height function of integer grid coordinates.

    Sums one fractal noise layer per octave descriptor. Each layer is
    seeded with ``seed + seed_offset``; identical (seed, x, z) always
    produce the identical height.

    Usage:
        field = NoiseField(seed=1)
        h = field.get_height(10, 20)
        heights = field.sample_grid(64)
    """

    def __init__(
        self,
        seed: int = 0,
        octaves: Sequence[OctaveConfig] = DEFAULT_OCTAVES,
        fbm_layers: int = 4,
    ):
        """Initialize noise layers.

        Args:
            seed: Base seed shared by all octaves
            octaves: Octave descriptors, summed in order
            fbm_layers: Fractal layers inside each octave
        """
        self.seed = seed
        self.octaves: List[OctaveConfig] = list(octaves)
        self._samplers = [
            FractalNoise(seed + octave.seed_offset, layers=fbm_layers)
            for octave in self.octaves
        ]

    def get_height(self, x: int, z: int) -> float:
        """Height at integer grid coordinate (x, z)."""
        height = 0.0
        for octave, sampler in zip(self.octaves, self._samplers):
            divisor = octave.wavelength_divisor
            height += octave.amplitude_multiplier * sampler.sample(x / divisor, z / divisor)
        return height

    def sample_grid(self, size: int) -> np.ndarray:
        """Heights for every coordinate in [0, size)^2, indexed [x, z]."""
        coords = np.arange(size, dtype=np.float64)
        heights = np.zeros((size, size), dtype=np.float64)
        for octave, sampler in zip(self.octaves, self._samplers):
            scaled = coords / octave.wavelength_divisor
            heights += octave.amplitude_multiplier * sampler.sample_array(scaled, scaled)
        return heights
