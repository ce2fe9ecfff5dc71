"""
Surface - Height-band classification and surface properties.

Defines:
- Cell classifications (texture bands and road)
- Ordered height threshold table
- Grip/roughness properties per classification
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple
import numpy as np


class Classification(IntEnum):
    """Cell category driving texture selection and road status."""
    GRASS = 0
    MEADOW = 1
    GRAVEL = 2
    ROCK = 3
    SNOW = 4
    ROAD = 5


# (exclusive upper bound, classification), scanned in order
HEIGHT_BANDS: Tuple[Tuple[float, Classification], ...] = (
    (-5.0, Classification.GRASS),
    (0.0, Classification.MEADOW),
    (5.0, Classification.GRAVEL),
    (7.0, Classification.ROCK),
)
TOP_BAND = Classification.SNOW


def classify(height: float) -> Classification:
    """Classification for a single height."""
    for threshold, band in HEIGHT_BANDS:
        if height < threshold:
            return band
    return TOP_BAND


def classify_heights(heights: np.ndarray) -> np.ndarray:
    """Vectorized ``classify`` over an array of heights.

    Args:
        heights: Array of heights, any shape

    Returns:
        int8 array of Classification values, same shape
    """
    thresholds = np.array([threshold for threshold, _ in HEIGHT_BANDS])
    bands = np.array([int(band) for _, band in HEIGHT_BANDS] + [int(TOP_BAND)], dtype=np.int8)
    return bands[np.searchsorted(thresholds, heights, side="right")]


@dataclass(frozen=True)
class SurfaceProperties:
    """Surface grip and behavior properties."""
    classification: Classification
    grip_multiplier: float = 1.0      # 1.0 = full grip
    roughness: float = 0.0            # Vibration/instability factor
    speed_reduction: float = 0.0      # Speed penalty (friction)


SURFACE_PROPERTIES: Dict[Classification, SurfaceProperties] = {
    Classification.GRASS: SurfaceProperties(Classification.GRASS, 0.5, 0.6, 0.2),
    Classification.MEADOW: SurfaceProperties(Classification.MEADOW, 0.55, 0.5, 0.15),
    Classification.GRAVEL: SurfaceProperties(Classification.GRAVEL, 0.4, 0.8, 0.3),
    Classification.ROCK: SurfaceProperties(Classification.ROCK, 0.8, 0.4, 0.05),
    Classification.SNOW: SurfaceProperties(Classification.SNOW, 0.3, 0.3, 0.25),
    Classification.ROAD: SurfaceProperties(Classification.ROAD, 1.0, 0.0, 0.0),
}
