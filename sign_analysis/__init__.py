"""
Sign Analysis Modules

This package contains the stages that turn a sign image into a feature vector:
- sign_cropper: Removes the background around the sign silhouette
- shape_recognition: Finds corners and classifies the sign shape
- color_analysis: Picks a color scheme and measures color shares
- center_symbol: Isolates and splits the inner pictogram
- feature_vector: Assembles the vector consumed by the learners
"""

from .errors import SignAnalysisError
from .colors import ApproximatedColor, ColorScheme, SignColor
from .sign_cropper import SignCropper
from .shape_recognition import CornerFinder, SignShape, recognize_shape
from .color_analysis import ApproximatedColorSign, ColorAnalyzer, ColorAnalysisResult
from .center_symbol import CenterSymbolAnalyzer, CenterSymbolResult
from .feature_vector import FEATURE_VECTOR_LENGTH, to_feature_vector

__all__ = [
    'SignAnalysisError',
    'ApproximatedColor',
    'ColorScheme',
    'SignColor',
    'SignCropper',
    'CornerFinder',
    'SignShape',
    'recognize_shape',
    'ApproximatedColorSign',
    'ColorAnalyzer',
    'ColorAnalysisResult',
    'CenterSymbolAnalyzer',
    'CenterSymbolResult',
    'FEATURE_VECTOR_LENGTH',
    'to_feature_vector'
]
