"""
Sign Cropping Module

Finds the silhouette of the sign and makes everything outside of it transparent.
Uses Canny edges with threshold relaxation for low-contrast captures.
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from config import PipelineConfig
from sign_analysis.errors import SignAnalysisError

log = logging.getLogger(__name__)


def to_rgba(image: np.ndarray) -> np.ndarray:
    """Return an RGBA copy of an RGB, RGBA or grayscale image."""
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2RGBA)
    if image.shape[2] == 4:
        return image.copy()
    raise SignAnalysisError(f"Unsupported channel count: {image.shape[2]}")


class SignCropper:
    """Removes the background around a sign."""

    def __init__(self, config: dict = None):
        """
        Initialize sign cropper.

        Args:
            config: Optional config dict, uses PipelineConfig.SIGN_CROPPING if None
        """
        self.config = config or PipelineConfig.SIGN_CROPPING
        self.canny_lower = self.config['CANNY_LOWER']
        self.canny_upper = self.config['CANNY_UPPER']
        self.threshold_floor = self.config['THRESHOLD_FLOOR']

    def find_largest_contour(self, gray: np.ndarray,
                             lower: float, upper: float) -> Optional[np.ndarray]:
        """Largest-area external contour of the Canny edges, None if no contour has an area."""
        edges = cv2.Canny(gray, lower, upper)
        contours, _ = cv2.findContours(edges, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        # An outline broken by a gap traces as a thin open curve of almost no area,
        # so a closed ring inside it wins.

        largest = None
        largest_area = 0.0
        for contour in contours:
            area = cv2.contourArea(contour)
            if area > largest_area:
                largest_area = area
                largest = contour
        return largest

    def find_sign_contour(self, gray: np.ndarray) -> np.ndarray:
        """
        Find the outer contour of the sign, halving the Canny thresholds until one is found.

        Args:
            gray: Grayscale image

        Returns:
            Largest external contour, shape (N, 1, 2)

        Raises:
            SignAnalysisError: If no contour is found above the threshold floor
        """
        lower, upper = self.canny_lower, self.canny_upper
        while lower >= self.threshold_floor:
            contour = self.find_largest_contour(gray, lower, upper)
            if contour is not None:
                return contour
            log.debug("No contour at Canny thresholds (%.2f, %.2f), relaxing", lower, upper)
            lower /= 2.0
            upper /= 2.0
        raise SignAnalysisError("No contour found")

    def crop(self, image: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Make the background transparent.

        Args:
            image: RGB or RGBA input image

        Returns:
            Tuple of (rgba image with alpha 0 outside the sign, convex hull contour)
        """
        if image is None or image.size == 0:
            raise SignAnalysisError("The input image is empty")

        rgba = to_rgba(image)
        gray = cv2.cvtColor(rgba, cv2.COLOR_RGBA2GRAY)

        contour = self.find_sign_contour(gray)
        hull = cv2.convexHull(contour)

        mask = np.zeros(gray.shape, dtype=np.uint8)
        cv2.drawContours(mask, [hull], -1, 255, -1)
        rgba[mask == 0] = 0

        return rgba, hull
