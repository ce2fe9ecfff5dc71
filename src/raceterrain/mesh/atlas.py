"""
Texture atlas - UV regions per cell classification.

The mesh builder only needs ``lookup``; renderers supply their own atlas.
StripTextureAtlas lays equally sized textures side by side.
"""

from dataclasses import dataclass
from typing import Dict, Protocol, Sequence

from raceterrain.terrain.surface import Classification


@dataclass(frozen=True)
class UvRect:
    """Rectangular region of the atlas texture in UV space."""
    left: float
    right: float
    top: float
    bottom: float


class TextureAtlas(Protocol):
    """Anything that maps a classification to its UV region."""

    def lookup(self, classification: Classification) -> UvRect:
        ...


class StripTextureAtlas:
    """Atlas with one equally wide texture per classification, left to right.

    Usage:
        atlas = StripTextureAtlas()
        rect = atlas.lookup(Classification.ROAD)
    """

    def __init__(self, classifications: Sequence[Classification] = tuple(Classification)):
        """Initialize atlas layout.

        Args:
            classifications: Textures in strip order
        """
        count = len(classifications)
        self._regions: Dict[Classification, UvRect] = {
            c: UvRect(left=i / count, right=(i + 1) / count, top=0.0, bottom=1.0)
            for i, c in enumerate(classifications)
        }

    def lookup(self, classification: Classification) -> UvRect:
        return self._regions[classification]
