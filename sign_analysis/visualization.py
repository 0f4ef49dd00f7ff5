"""
Visualization utilities for the sign analysis pipeline.
Common functions for rendering debug images of the analysis stages.
"""

from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

Panel = Tuple[str, np.ndarray]


def rgba_to_bgr(img: np.ndarray) -> np.ndarray:
    """Convert an RGBA analysis image to BGR for drawing and writing."""
    return cv2.cvtColor(img, cv2.COLOR_RGBA2BGR)


def title_panel(panel: np.ndarray, title: str,
                color: Tuple[int, int, int] = (255, 255, 255)) -> np.ndarray:
    """Write the stage title on a dark strip across the top of a BGR panel."""
    vis = panel.copy()
    w = vis.shape[1]
    font_scale = max(w / 600.0, 0.3)
    (_, text_h), baseline = cv2.getTextSize(title, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 1)
    strip_h = min(text_h + baseline + 4, vis.shape[0])
    vis[:strip_h] = vis[:strip_h] // 4
    cv2.putText(vis, title, (3, strip_h - baseline - 2), cv2.FONT_HERSHEY_SIMPLEX,
                font_scale, color, 1, cv2.LINE_AA)
    return vis


def tile_panels(panels: Sequence[Panel], columns: int = 2) -> np.ndarray:
    """
    Lay out titled stage panels row by row.

    Every panel must have the size of the first; missing cells of the last
    row stay black.

    Args:
        panels: (title, BGR image) pairs in stage order
        columns: Panels per row

    Returns:
        Single BGR image holding all panels
    """
    if not panels:
        raise ValueError("No panels to tile")

    h, w = panels[0][1].shape[:2]
    rows = -(-len(panels) // columns)
    sheet = np.zeros((rows * h, columns * w, 3), dtype=np.uint8)
    for idx, (title, image) in enumerate(panels):
        if image.shape[:2] != (h, w):
            raise ValueError(f"Panel '{title}' is {image.shape[1]}x{image.shape[0]}, expected {w}x{h}")
        r, c = divmod(idx, columns)
        sheet[r * h:(r + 1) * h, c * w:(c + 1) * w] = title_panel(image, title)
    return sheet


def draw_contours_with_style(img: np.ndarray,
                             contours: List[np.ndarray],
                             color: Tuple[int, int, int],
                             filled: bool = False,
                             thickness: int = 2) -> np.ndarray:
    """Draw contours with consistent styling."""
    vis = img.copy()
    contours = [np.asarray(c, dtype=np.int32).reshape(-1, 1, 2) for c in contours]
    cv2.drawContours(vis, contours, -1, color, -1 if filled else thickness)
    return vis


def draw_corners(img: np.ndarray,
                 corners: np.ndarray,
                 color: Tuple[int, int, int],
                 radius: Optional[int] = None) -> np.ndarray:
    """Draw a filled marker on every corner, sized relative to the image."""
    vis = img.copy()
    if radius is None:
        h, w = vis.shape[:2]
        radius = max(2, int(np.sqrt(h * w) / 40))
    for x, y in np.asarray(corners).reshape(-1, 2):
        cv2.circle(vis, (int(x), int(y)), radius, color, thickness=-1)
    return vis


def draw_text_lines(img: np.ndarray,
                    lines: Sequence[str],
                    color: Tuple[int, int, int] = (255, 255, 255)) -> np.ndarray:
    """Write lines of text at the bottom of the image, with an outline for contrast."""
    vis = img.copy()
    h, w = vis.shape[:2]
    font_scale = max(w / 900.0, 0.3)
    step = max(int(30 * font_scale), 10)
    y = h - step * len(lines)
    for line in lines:
        cv2.putText(vis, line, (5, y), cv2.FONT_HERSHEY_SIMPLEX, font_scale, (0, 0, 0), 3)
        cv2.putText(vis, line, (5, y), cv2.FONT_HERSHEY_SIMPLEX, font_scale, color, 1)
        y += step
    return vis


def dim(img: np.ndarray, factor: float) -> np.ndarray:
    """Scale brightness so overlays stand out against the sign."""
    return cv2.convertScaleAbs(img, alpha=factor)
