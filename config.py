"""
Configuration settings for the sign classification pipeline.
Centralized configuration for all analysis modules and learners.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class SignPaths:
    """Resolved file locations, built once at start-up and read-only afterwards."""

    sign_directory: Path
    training_data_file: Path
    debug_output_dir: Optional[Path] = None

    @classmethod
    def from_strings(cls,
                     sign_directory: str,
                     training_data_file: str,
                     debug_output_dir: Optional[str] = None) -> 'SignPaths':
        """Build paths from command line strings."""
        return cls(
            sign_directory=Path(sign_directory),
            training_data_file=Path(training_data_file),
            debug_output_dir=Path(debug_output_dir) if debug_output_dir else None
        )


class PipelineConfig:
    """Configuration for the entire sign classification pipeline."""

    # Background removal
    SIGN_CROPPING = {
        'CANNY_LOWER': 100.0,
        'CANNY_UPPER': 200.0,
        'THRESHOLD_FLOOR': 1.0
    }

    # Corner finding
    CORNER_FINDING = {
        'APPROX_EPSILON': 0.02
    }

    # Center symbol detection (shares of the approximated colors)
    CENTER_SYMBOL = {
        'MIN_RED_SHARE': 0.15,
        'MIN_BLUE_SHARE': 0.20,
        'MIN_BLACK_SHARE': 0.02,
        'NEUTRAL_VALUE': 0.5
    }

    # Feature vector composition
    FEATURE_VECTOR = {
        'SHAPE_SIGNAL': 'corner_count',   # 'corner_count' or 'shape'
        'MAX_CORNERS': 9
    }

    # k-nearest-neighbors
    KNN = {
        'K': 3,
        'METRIC': 'EUCLIDEAN',
        'MINKOWSKI_P': 1.5
    }

    # Decision tree
    DECISION_TREE = {
        'DISCRETIZATION_SCALE': 1.0
    }

    # Perceptron ensemble
    PERCEPTRON = {
        'EPOCHS': 10000,
        'LEARNING_RATE': 0.01,
        'INITIAL_WEIGHT_RANGE': 0.05,
        'SEED': None
    }

    # Hyperparameter sweep
    KNN_SWEEP = {
        'MIN_K': 1,
        'MAX_K': 200,
        'WORKERS': 8
    }

    # Visualization Colors (BGR, used on debug images only)
    VIZ_COLORS = {
        'BG_DIM': 0.3,
        'CONTOUR': (0, 255, 0),
        'CORNER': (0, 0, 255),
        'DIVISION_LINE': (255, 0, 255),
        'SYMBOL': (255, 255, 255),
        'TEXT': (255, 255, 255)
    }
