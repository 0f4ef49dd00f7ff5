"""
Sign Colors

Canonical approximated colors, the fixed lighting-condition color schemes
and the measured share of a color on a sign.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

import numpy as np


class ApproximatedColor(Enum):
    """The five canonical colors every sign pixel is mapped to."""

    WHITE = 0
    BLACK = 1
    RED = 2
    YELLOW = 3
    BLUE = 4

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return _CANONICAL_RGB[self]

    @property
    def brightness(self) -> float:
        """Sum of the canonical RGB channels normalized to [0, 1]."""
        return sum(self.rgb) / (3 * 255)


_CANONICAL_RGB = {
    ApproximatedColor.WHITE: (255, 255, 255),
    ApproximatedColor.BLACK: (0, 0, 0),
    ApproximatedColor.RED: (255, 0, 0),
    ApproximatedColor.YELLOW: (255, 255, 0),
    ApproximatedColor.BLUE: (0, 0, 255),
}


class ColorScheme(Enum):
    """Reference RGB palettes for five lighting conditions.

    Each value lists the reference color of WHITE, BLACK, RED, YELLOW, BLUE
    in that order.
    """

    VERY_DIM = ((101, 99, 99), (0, 0, 0), (35, 3, 13), (92, 69, 24), (4, 21, 34))
    DIM = ((205, 203, 201), (23, 22, 19), (99, 35, 27), (196, 155, 48), (35, 62, 92))
    NEUTRAL = ((255, 255, 255), (43, 43, 40), (203, 67, 45), (249, 226, 73), (81, 132, 187))
    BRIGHT = ((255, 255, 255), (75, 76, 79), (214, 127, 114), (255, 253, 161), (131, 185, 236))
    VERY_BRIGHT = ((255, 255, 255), (117, 122, 128), (242, 182, 174), (255, 254, 208), (187, 222, 252))

    @property
    def palette(self) -> np.ndarray:
        """Reference colors as a (5, 3) int array in ApproximatedColor order."""
        return np.array(self.value, dtype=np.int32)

    def squared_distances(self, pixels: np.ndarray) -> np.ndarray:
        """
        Squared RGB distance of every pixel to every reference color.

        Args:
            pixels: (N, 3) array of RGB values

        Returns:
            (N, 5) int32 array, columns in ApproximatedColor order
        """
        pixels = np.asarray(pixels, dtype=np.int32).reshape(-1, 3)
        columns = []
        for reference in self.palette:
            diff = pixels - reference
            columns.append(np.einsum('ij,ij->i', diff, diff))
        return np.stack(columns, axis=1)

    def find_best_matching_colors(self, pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Nearest reference color for each pixel.

        Ties go to the color that comes first in ApproximatedColor order.

        Returns:
            Tuple of (color indices, squared distances), both of shape (N,)
        """
        distances = self.squared_distances(pixels)
        indices = np.argmin(distances, axis=1)
        best = distances[np.arange(len(indices)), indices]
        return indices, best

    def calculate_distance(self, pixels: np.ndarray) -> int:
        """Total distance of all pixels to this scheme, accumulated as int64."""
        _, best = self.find_best_matching_colors(pixels)
        return int(best.astype(np.int64).sum())


@dataclass(frozen=True)
class SignColor:
    """Share of one approximated color over the non-transparent sign pixels."""

    color: ApproximatedColor
    share: float

    def __post_init__(self):
        if not 0.0 <= self.share <= 1.0:
            raise ValueError(f"Share must be between 0 and 1, got {self.share}")


def share_of(colors: List[SignColor], color: ApproximatedColor) -> float:
    """Look up the share of a color, 0.0 if it is not listed."""
    for sign_color in colors:
        if sign_color.color == color:
            return sign_color.share
    return 0.0
