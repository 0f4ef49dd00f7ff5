"""
Color Analysis Module

Selects the color scheme that best fits the lighting of a sign, maps every
non-transparent pixel to its nearest approximated color and measures the
share of each color on the sign.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from sign_analysis.colors import ApproximatedColor, ColorScheme, SignColor
from sign_analysis.errors import SignAnalysisError

log = logging.getLogger(__name__)

TRANSPARENT = -1


class ApproximatedColorSign:
    """Per-pixel approximated colors of a sign.

    Holds one label per pixel: the ApproximatedColor value, or TRANSPARENT.
    """

    def __init__(self, labels: np.ndarray):
        self.labels = labels

    @property
    def shape(self):
        return self.labels.shape

    @property
    def opaque_mask(self) -> np.ndarray:
        return self.labels != TRANSPARENT

    def pixel_count(self) -> int:
        return int(np.count_nonzero(self.opaque_mask))

    def color_mask(self, color: ApproximatedColor) -> np.ndarray:
        return self.labels == color.value

    def label_image(self) -> np.ndarray:
        """Single channel uint8 image of labels, transparent pixels set to 255."""
        image = self.labels.astype(np.uint8)
        image[~self.opaque_mask] = 255
        return image

    def to_rgba(self) -> np.ndarray:
        """Render the sign with canonical colors, transparent outside."""
        h, w = self.labels.shape
        rgba = np.zeros((h, w, 4), dtype=np.uint8)
        for color in ApproximatedColor:
            rgba[self.color_mask(color)] = (*color.rgb, 255)
        return rgba


@dataclass
class ColorAnalysisResult:
    """Output of ColorAnalyzer.analyze."""

    colors: List[SignColor]
    scheme: ColorScheme
    approximated: ApproximatedColorSign


def opaque_pixels(image: np.ndarray) -> np.ndarray:
    """RGB values of all pixels with alpha > 0, in row-major order."""
    return image[image[:, :, 3] > 0][:, :3]


class ColorAnalyzer:
    """Measures the color composition of a cropped sign."""

    def __init__(self, schemes: Optional[Sequence[ColorScheme]] = None):
        """
        Initialize color analyzer.

        Args:
            schemes: Candidate color schemes, all ColorScheme members if None
        """
        self.schemes = list(schemes) if schemes else list(ColorScheme)

    def find_best_color_scheme(self, pixels: np.ndarray) -> ColorScheme:
        """Scheme with the lowest total distance to the pixels; first one wins ties."""
        best_scheme = None
        best_distance = None
        for scheme in self.schemes:
            distance = scheme.calculate_distance(pixels)
            if best_distance is None or distance < best_distance:
                best_scheme = scheme
                best_distance = distance
        log.debug("Selected color scheme %s (distance %s)", best_scheme.name, best_distance)
        return best_scheme

    def approximate(self, image: np.ndarray, scheme: ColorScheme) -> ApproximatedColorSign:
        """Map each non-transparent pixel to its nearest color under the scheme."""
        opaque = image[:, :, 3] > 0
        labels = np.full(image.shape[:2], TRANSPARENT, dtype=np.int8)
        if np.any(opaque):
            indices, _ = scheme.find_best_matching_colors(image[opaque][:, :3])
            labels[opaque] = indices
        return ApproximatedColorSign(labels)

    @staticmethod
    def measure_shares(approximated: ApproximatedColorSign) -> List[SignColor]:
        """Share of each color in ApproximatedColor order, 0.0 for an empty sign."""
        total = approximated.pixel_count()
        colors = []
        for color in ApproximatedColor:
            count = int(np.count_nonzero(approximated.color_mask(color)))
            share = count / total if total > 0 else 0.0
            colors.append(SignColor(color, share))
        return colors

    def analyze(self, image: np.ndarray) -> ColorAnalysisResult:
        """
        Analyze the colors of a cropped sign.

        Args:
            image: RGBA image with a transparent background

        Returns:
            ColorAnalysisResult with the shares, chosen scheme and per-pixel colors
        """
        if image is None or image.size == 0:
            raise SignAnalysisError("The input image is empty")
        if image.ndim != 3 or image.shape[2] != 4:
            raise SignAnalysisError("Color analysis needs an RGBA image")

        scheme = self.find_best_color_scheme(opaque_pixels(image))
        approximated = self.approximate(image, scheme)
        return ColorAnalysisResult(
            colors=self.measure_shares(approximated),
            scheme=scheme,
            approximated=approximated
        )
