"""
Feature Vector Module

Flattens the measured sign properties into the fixed-length vector consumed by the learners:
five color shares, one shape signal and the three center symbol values.
"""

from typing import List, Sequence, Tuple

from config import PipelineConfig
from sign_analysis.colors import ApproximatedColor, SignColor, share_of
from sign_analysis.shape_recognition import SignShape

FEATURE_VECTOR_LENGTH = len(ApproximatedColor) + 1 + 3

FeatureVector = Tuple[float, ...]


def corner_signal(corner_count: int, max_corners: int = 9) -> float:
    """Corner count normalized to [0, 1]."""
    return min(corner_count / max_corners, 1.0)


def shape_signal(shape: SignShape, corner_count: int, config: dict = None) -> float:
    """Shape part of the feature vector, either the normalized corner count or the shape ordinal."""
    config = config or PipelineConfig.FEATURE_VECTOR
    if config['SHAPE_SIGNAL'] == 'shape':
        return float(shape.value)
    return corner_signal(corner_count, config['MAX_CORNERS'])


def to_feature_vector(colors: List[SignColor],
                      shape_value: float,
                      center_symbol: Sequence[float]) -> FeatureVector:
    """
    Assemble the feature vector.

    Args:
        colors: Color shares of the sign
        shape_value: Shape signal from shape_signal()
        center_symbol: (color value, left share, right share)

    Returns:
        Tuple of FEATURE_VECTOR_LENGTH floats
    """
    if len(center_symbol) != 3:
        raise ValueError("Center symbol needs exactly three values")

    vector = [share_of(colors, color) for color in ApproximatedColor]
    vector.append(float(shape_value))
    vector.extend(float(v) for v in center_symbol)
    return tuple(vector)


def colors_from_feature_vector(vector: Sequence[float]) -> List[SignColor]:
    """Recover the color shares from the first slots of a feature vector."""
    return [SignColor(color, vector[i]) for i, color in enumerate(ApproximatedColor)]
