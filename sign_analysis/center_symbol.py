"""
Center Symbol Module

Isolates the inner pictogram of a sign with a flood fill, divides it along the
line from its lowest point to the farthest point visible from there, and
measures how the symbol pixels are distributed over the two halves.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import cv2
import numpy as np

from config import PipelineConfig
from sign_analysis.color_analysis import ApproximatedColorSign
from sign_analysis.colors import ApproximatedColor, SignColor, share_of
from sign_analysis.errors import SignAnalysisError

log = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass
class CenterSymbolResult:
    """Brightness of the symbol color plus the symbol share left and right of the dividing line."""

    color_value: float = 0.5
    left_share: float = 0.5
    right_share: float = 0.5
    symbol_color: Optional[ApproximatedColor] = None
    symbol_mask: Optional[np.ndarray] = field(default=None, repr=False)
    division_line: Optional[Tuple[Point, Point]] = None

    def as_features(self) -> List[float]:
        return [self.color_value, self.left_share, self.right_share]


def half_shares(left_pixels: int, right_pixels: int) -> Tuple[float, float]:
    """Normalize the two half counts, 0.5/0.5 when there is nothing to count."""
    total = left_pixels + right_pixels
    if total <= 0:
        return 0.5, 0.5
    return left_pixels / total, right_pixels / total


def line_inside_mask(mask: np.ndarray, start: Tuple[int, int], end: Tuple[int, int]) -> bool:
    """
    Walk the Bresenham line from start to end and check every pixel is set in the mask.

    Args:
        mask: Boolean or uint8 mask, non-zero means inside
        start: (x, y) start point
        end: (x, y) end point

    Returns:
        False as soon as a pixel outside the mask (or the image) is hit
    """
    h, w = mask.shape[:2]
    x1, y1 = int(start[0]), int(start[1])
    x2, y2 = int(end[0]), int(end[1])

    dx = abs(x2 - x1)
    dy = -abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx + dy

    x, y = x1, y1
    while True:
        if not (0 <= x < w and 0 <= y < h) or not mask[y, x]:
            return False
        if x == x2 and y == y2:
            return True
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy


def project_line_to_image_edges(p1: Point, p2: Point, width: int, height: int) -> Tuple[Point, Point]:
    """
    Extend the line through p1 and p2 to the borders of the image.

    Returns:
        The two border intersections, upper one first

    Raises:
        SignAnalysisError: If the line does not cross the image in two distinct points
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]

    if dx == 0:
        return (float(p1[0]), 0.0), (float(p1[0]), float(height))

    slope = dy / dx
    intercept = p1[1] - slope * p1[0]

    candidates = []
    if slope != 0:
        x_at_top = -intercept / slope
        if 0 <= x_at_top <= width:
            candidates.append((x_at_top, 0.0))
        x_at_bottom = (height - intercept) / slope
        if 0 <= x_at_bottom <= width:
            candidates.append((x_at_bottom, float(height)))
    y_at_left = intercept
    if 0 <= y_at_left <= height:
        candidates.append((0.0, y_at_left))
    y_at_right = slope * width + intercept
    if 0 <= y_at_right <= height:
        candidates.append((float(width), y_at_right))

    intersections = []
    for point in candidates:
        if all(np.hypot(point[0] - q[0], point[1] - q[1]) > 1e-9 for q in intersections):
            intersections.append(point)

    if len(intersections) < 2:
        raise SignAnalysisError("Division line does not cross the image")

    first, second = sorted(intersections[:2], key=lambda p: (p[1], p[0]))
    return first, second


class CenterSymbolAnalyzer:
    """Finds and measures the center symbol of a sign."""

    def __init__(self, config: dict = None):
        """
        Initialize center symbol analyzer.

        Args:
            config: Optional config dict, uses PipelineConfig.CENTER_SYMBOL if None
        """
        self.config = config or PipelineConfig.CENTER_SYMBOL
        self.min_red = self.config['MIN_RED_SHARE']
        self.min_blue = self.config['MIN_BLUE_SHARE']
        self.min_black = self.config['MIN_BLACK_SHARE']
        self.neutral = self.config['NEUTRAL_VALUE']

    def symbol_color(self, sign_colors: List[SignColor]) -> Optional[ApproximatedColor]:
        """
        Decide which color the center symbol has, None if the sign has no center symbol.

        Red signs carry a black symbol, blue signs a white one.
        """
        red = share_of(sign_colors, ApproximatedColor.RED)
        blue = share_of(sign_colors, ApproximatedColor.BLUE)
        black = share_of(sign_colors, ApproximatedColor.BLACK)

        if red < self.min_red and blue < self.min_blue:
            return None
        if red > blue:
            return ApproximatedColor.BLACK if black >= self.min_black else None
        return ApproximatedColor.WHITE

    @staticmethod
    def find_innermost_point(contour: np.ndarray, shape: Tuple[int, int]) -> Tuple[int, int]:
        """Point inside the contour that is farthest from its border."""
        mask = np.zeros(shape, dtype=np.uint8)
        cv2.drawContours(mask, [np.asarray(contour, dtype=np.int32)], -1, 255, -1)
        dist = cv2.distanceTransform(mask, cv2.DIST_L2, cv2.DIST_MASK_PRECISE)
        _, _, _, max_loc = cv2.minMaxLoc(dist)
        return max_loc

    def find_seed_point(self, approximated: ApproximatedColorSign,
                        contour: np.ndarray,
                        color: ApproximatedColor) -> Tuple[int, int]:
        """
        Pixel of the symbol color nearest to the innermost point of the contour.

        Returns:
            (x, y) seed point inside the image
        """
        cx, cy = self.find_innermost_point(contour, approximated.shape)
        ys, xs = np.nonzero(approximated.color_mask(color))
        if len(xs) == 0:
            raise SignAnalysisError(f"No {color.name} pixel found for the center symbol")

        distances = (ys - cy) ** 2 + (xs - cx) ** 2
        nearest = int(np.argmin(distances))
        return int(xs[nearest]), int(ys[nearest])

    @staticmethod
    def isolate_symbol(approximated: ApproximatedColorSign, seed: Tuple[int, int]) -> np.ndarray:
        """Flood fill from the seed over exactly matching colors; returns a boolean mask."""
        h, w = approximated.shape
        x, y = seed
        if not (0 <= x < w and 0 <= y < h):
            raise SignAnalysisError("The seed point is not within the sign")

        labels = approximated.label_image()
        fill_mask = np.zeros((h + 2, w + 2), dtype=np.uint8)
        flags = 4 | cv2.FLOODFILL_MASK_ONLY | cv2.FLOODFILL_FIXED_RANGE | (255 << 8)
        cv2.floodFill(labels, fill_mask, (x, y), 0, 0, 0, flags)
        return fill_mask[1:-1, 1:-1] > 0

    @staticmethod
    def symbol_contour(symbol_mask: np.ndarray) -> np.ndarray:
        contours, _ = cv2.findContours(symbol_mask.astype(np.uint8) * 255,
                                       cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        if not contours:
            raise SignAnalysisError("No contour found in the center symbol")
        return max(contours, key=cv2.contourArea).reshape(-1, 2)

    def division_line(self, symbol_mask: np.ndarray) -> Tuple[Point, Point]:
        """
        Line from the lowest symbol point to the farthest contour point reachable
        without leaving the symbol, extended to the image borders.
        """
        points = self.symbol_contour(symbol_mask)
        if len(points) == 0:
            raise SignAnalysisError("Contour of the center symbol is empty")

        lowest = points[int(np.argmax(points[:, 1]))]
        best, best_distance = None, -1.0
        for point in points:
            if not line_inside_mask(symbol_mask, tuple(lowest), tuple(point)):
                continue
            distance = float(np.hypot(point[0] - lowest[0], point[1] - lowest[1]))
            if distance > best_distance:
                best, best_distance = point, distance
        if best is None:
            raise SignAnalysisError("No division line found for the center symbol")

        h, w = symbol_mask.shape
        return project_line_to_image_edges(
            (float(lowest[0]), float(lowest[1])), (float(best[0]), float(best[1])), w, h)

    @staticmethod
    def split_counts(symbol_mask: np.ndarray, line: Tuple[Point, Point]) -> Tuple[int, int]:
        """Count symbol pixels left and right of the division line."""
        h, w = symbol_mask.shape
        (x1, y1), (x2, y2) = line
        polygon_left = np.array([[0, 0], [x1, y1], [x2, y2], [0, h]], dtype=np.float64)
        polygon_right = np.array([[w, 0], [x1, y1], [x2, y2], [w, h]], dtype=np.float64)

        left_mask = np.zeros((h, w), dtype=np.uint8)
        right_mask = np.zeros((h, w), dtype=np.uint8)
        cv2.fillPoly(left_mask, [np.round(polygon_left).astype(np.int32)], 255)
        cv2.fillPoly(right_mask, [np.round(polygon_right).astype(np.int32)], 255)

        left = int(np.count_nonzero(symbol_mask & (left_mask > 0)))
        right = int(np.count_nonzero(symbol_mask & (right_mask > 0)))
        return left, right

    def analyze(self, approximated: ApproximatedColorSign,
                sign_colors: List[SignColor],
                contour: np.ndarray) -> CenterSymbolResult:
        """
        Analyze the center symbol of a sign.

        Args:
            approximated: Per-pixel approximated colors of the cropped sign
            sign_colors: Color shares of the sign
            contour: Silhouette contour of the sign

        Returns:
            CenterSymbolResult, neutral (0.5, 0.5, 0.5) if the sign has no center symbol
        """
        color = self.symbol_color(sign_colors)
        if color is None:
            return CenterSymbolResult(self.neutral, self.neutral, self.neutral)

        seed = self.find_seed_point(approximated, contour, color)
        symbol_mask = self.isolate_symbol(approximated, seed)
        line = self.division_line(symbol_mask)
        left, right = half_shares(*self.split_counts(symbol_mask, line))

        log.debug("Center symbol %s seed=%s left=%.3f right=%.3f", color.name, seed, left, right)
        return CenterSymbolResult(
            color_value=color.brightness,
            left_share=left,
            right_share=right,
            symbol_color=color,
            symbol_mask=symbol_mask,
            division_line=line
        )
