"""
Shape Recognition Module

Reduces the sign silhouette to its corners and classifies the resulting
polygon into one of the canonical sign shapes.
"""

from enum import Enum

import cv2
import numpy as np

from config import PipelineConfig
from sign_analysis.errors import SignAnalysisError


class SignShape(Enum):
    """Canonical sign shapes."""

    CIRCLE = 0
    TRIANGLE = 1
    TRIANGLE_FLIPPED = 2
    SQUARE = 3
    OCTAGON = 4


class CornerFinder:
    """Approximates a contour to a polygon with a perimeter-relative tolerance."""

    def __init__(self, config: dict = None):
        """
        Initialize corner finder.

        Args:
            config: Optional config dict, uses PipelineConfig.CORNER_FINDING if None
        """
        self.config = config or PipelineConfig.CORNER_FINDING
        self.epsilon_factor = self.config['APPROX_EPSILON']

    def find_corners(self, contour: np.ndarray) -> np.ndarray:
        """
        Find the corners of the sign silhouette.

        Args:
            contour: Silhouette contour, shape (N, 1, 2)

        Returns:
            Ordered corner points as an int32 (M, 2) array
        """
        if contour is None or len(contour) == 0:
            raise SignAnalysisError("Contour is empty")

        contour = np.asarray(contour, dtype=np.int32).reshape(-1, 1, 2)
        peri = cv2.arcLength(contour, True)
        approx = cv2.approxPolyDP(contour, self.epsilon_factor * peri, True)
        return approx.reshape(-1, 2).astype(np.int32)


def recognize_shape(corners: np.ndarray) -> SignShape:
    """
    Classify a polygon by its number of corners.

    Round shapes approximate to many short segments and fall through to CIRCLE.
    """
    count = len(corners)
    if count == 3:
        return recognize_triangle_type(corners)
    if count == 4:
        return SignShape.SQUARE
    if count == 8:
        return SignShape.OCTAGON
    return SignShape.CIRCLE


def recognize_triangle_type(corners: np.ndarray) -> SignShape:
    """
    Tell an upright triangle from a flipped one.

    With the points sorted bottom to top, an upright triangle has its two
    closest points at the bottom.
    """
    points = np.asarray(corners, dtype=float).reshape(-1, 2)
    if len(points) != 3:
        raise SignAnalysisError(f"Invalid number of points for triangle: {len(points)}")

    ys = sorted((p[1] for p in points), reverse=True)
    if abs(ys[0] - ys[1]) < abs(ys[1] - ys[2]):
        return SignShape.TRIANGLE
    return SignShape.TRIANGLE_FLIPPED
