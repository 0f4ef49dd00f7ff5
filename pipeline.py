"""
Traffic Sign Classification Pipeline

Main script that orchestrates the analysis modules and the learners.
Process: Cropping -> Corner/Shape Extraction -> Color Analysis -> Center Symbol -> Feature Vector

Usage:
    python pipeline.py train <sign_directory> <training_data_file> [--split N_TRAIN N_CLASSIFY --evaluation-file <file>]
    python pipeline.py classify <sign_directory> <training_data_file> [--learner knn|tree|perceptron] [--debug-output <dir>]
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from config import PipelineConfig, SignPaths
from evaluation import log_summary, summarize_results
from learners import DistanceMetric, LearnerError, LearnerType, TrainingExample, create_learner
from learners.training_data import read_training_data, write_training_data
from logging_setup import setup_logging
from sign_analysis import (CenterSymbolAnalyzer, CenterSymbolResult, ColorAnalysisResult, ColorAnalyzer,
                           CornerFinder, SignAnalysisError, SignCropper, SignShape, recognize_shape,
                           to_feature_vector)
from sign_analysis.feature_vector import FeatureVector, shape_signal
from sign_analysis.visualization import (dim, draw_contours_with_style, draw_corners, draw_text_lines,
                                         rgba_to_bgr, tile_panels)
from sign_loading import LoadableSign, discover_signs, load_image, split_signs

log = logging.getLogger(__name__)


@dataclass
class SignFeatures:
    """Everything measured on one sign, kept for debug rendering."""

    cropped: np.ndarray
    contour: np.ndarray
    corners: np.ndarray
    shape: SignShape
    color: ColorAnalysisResult
    center_symbol: CenterSymbolResult
    feature_vector: FeatureVector


class SignAnalysisPipeline:
    """Turns a sign image into its feature vector."""

    def __init__(self, config: dict = None, debug_output_dir: Optional[Path] = None):
        """
        Initialize all analysis stages.

        Args:
            config: Optional feature vector config, uses PipelineConfig.FEATURE_VECTOR if None
            debug_output_dir: Directory for debug images, none are written if None
        """
        self.config = config or PipelineConfig.FEATURE_VECTOR
        self.cropper = SignCropper()
        self.corner_finder = CornerFinder()
        self.color_analyzer = ColorAnalyzer()
        self.center_symbol_analyzer = CenterSymbolAnalyzer()

        self.debug_output_dir = Path(debug_output_dir) if debug_output_dir else None
        self.viz_colors = PipelineConfig.VIZ_COLORS

    def _run_stages(self, image: np.ndarray) -> SignFeatures:
        # Step 1: Background removal
        cropped, contour = self.cropper.crop(image)

        # Step 2: Corners and shape
        corners = self.corner_finder.find_corners(contour)
        shape = recognize_shape(corners)

        # Step 3: Color scheme and shares
        color = self.color_analyzer.analyze(cropped)

        # Step 4: Center symbol
        center_symbol = self.center_symbol_analyzer.analyze(color.approximated, color.colors, contour)

        # Step 5: Feature vector
        feature_vector = to_feature_vector(color.colors,
                                           shape_signal(shape, len(corners), self.config),
                                           center_symbol.as_features())

        return SignFeatures(cropped, contour, corners, shape, color, center_symbol, feature_vector)

    def process_image(self, image: np.ndarray, name: str = 'sign') -> SignFeatures:
        """
        Run all analysis stages on an image.

        Args:
            image: RGBA (or RGB) input image
            name: Base name of the debug image

        Returns:
            SignFeatures with the intermediate results and the feature vector

        Raises:
            SignAnalysisError: If any stage fails
        """
        try:
            features = self._run_stages(image)
        except SignAnalysisError:
            raise
        except Exception as e:
            raise SignAnalysisError(f"Error during sign analysis: {e}") from e

        if self.debug_output_dir is not None:
            self.save_debug_image(features, name)

        return features

    def save_debug_image(self, features: SignFeatures, name: str) -> None:
        """Write the analysis grid; failures are logged and never abort the analysis."""
        out_path = self.debug_output_dir / f"{name}_analysis.jpg"
        try:
            self.debug_output_dir.mkdir(exist_ok=True, parents=True)
            if not cv2.imwrite(str(out_path), self.visualize_results(features)):
                log.warning("Could not write debug image %s", out_path)
                return
        except (OSError, cv2.error) as e:
            log.warning("Could not write debug image %s: %s", out_path, e)
            return
        log.debug("Saved debug image %s", out_path)

    def analyze(self, image: np.ndarray) -> FeatureVector:
        return self.process_image(image).feature_vector

    def visualize_results(self, features: SignFeatures) -> np.ndarray:
        """
        Create a visualization of all analysis stages.

        Args:
            features: Results from process_image

        Returns:
            BGR visualization image (2x2 grid)
        """
        cropped = rgba_to_bgr(features.cropped)
        base_vis = dim(cropped, self.viz_colors['BG_DIM'])
        text_color = self.viz_colors['TEXT']

        # Panel 2: Silhouette and corners
        v2 = draw_contours_with_style(base_vis, [features.contour], self.viz_colors['CONTOUR'])
        v2 = draw_corners(v2, features.corners, self.viz_colors['CORNER'])
        v2 = draw_text_lines(v2, [f"{features.shape.name} ({len(features.corners)} corners)"], text_color)

        # Panel 3: Approximated colors
        v3 = rgba_to_bgr(features.color.approximated.to_rgba())
        share_lines = [f"{c.color.name}: {c.share:.2f}" for c in features.color.colors if c.share > 0]
        v3 = draw_text_lines(v3, [features.color.scheme.name] + share_lines, text_color)

        # Panel 4: Center symbol and dividing line
        v4 = base_vis.copy()
        symbol = features.center_symbol
        if symbol.symbol_mask is not None:
            v4[symbol.symbol_mask] = self.viz_colors['SYMBOL']
            if symbol.division_line is not None:
                p1, p2 = symbol.division_line
                cv2.line(v4, (int(p1[0]), int(p1[1])), (int(p2[0]), int(p2[1])),
                         self.viz_colors['DIVISION_LINE'], 2)
            lines = [f"{symbol.symbol_color.name}", f"L {symbol.left_share:.2f} / R {symbol.right_share:.2f}"]
        else:
            lines = ["No center symbol"]
        v4 = draw_text_lines(v4, lines, text_color)

        return tile_panels([("1. Cropped", cropped), ("2. Shape", v2),
                            ("3. Colors", v3), ("4. Center Symbol", v4)])


def analyze_signs(pipeline: SignAnalysisPipeline, signs: List[LoadableSign]) -> List[TrainingExample]:
    """Analyze signs into training examples, skipping signs that fail."""
    examples = []
    for idx, sign in enumerate(signs, 1):
        log.info("[%d/%d] Analyzing %s", idx, len(signs), sign.path.name)
        try:
            features = pipeline.process_image(load_image(sign.path), sign.path.stem)
        except SignAnalysisError as e:
            log.warning("Skipping %s: %s", sign.path, e)
            continue
        examples.append(TrainingExample(sign.classification, features.feature_vector))
    return examples


def run_training(paths: SignPaths, split: Optional[List[int]] = None,
                 evaluation_file: Optional[Path] = None, seed: Optional[int] = None) -> None:
    signs = discover_signs(paths.sign_directory)
    pipeline = SignAnalysisPipeline(debug_output_dir=paths.debug_output_dir)

    if split:
        training_signs, evaluation_signs = split_signs(signs, split[0], split[1], seed)
        evaluation = analyze_signs(pipeline, evaluation_signs)
        write_training_data(evaluation_file, evaluation)
        log.info("Wrote %d evaluation record(s) to %s", len(evaluation), evaluation_file)
    else:
        training_signs = signs

    training = analyze_signs(pipeline, training_signs)
    write_training_data(paths.training_data_file, training)
    log.info("Wrote %d training record(s) to %s", len(training), paths.training_data_file)


def run_classification(paths: SignPaths, learner_type: LearnerType,
                       k: Optional[int] = None, metric: Optional[DistanceMetric] = None,
                       seed: Optional[int] = None) -> None:
    training = read_training_data(paths.training_data_file)
    learner = create_learner(learner_type, k=k, metric=metric, seed=seed)
    learner.learn(training)
    log.info("%s learned from %d example(s)", type(learner).__name__, len(training))

    signs = discover_signs(paths.sign_directory)
    pipeline = SignAnalysisPipeline(debug_output_dir=paths.debug_output_dir)

    flags = []
    for idx, sign in enumerate(signs, 1):
        try:
            vector = pipeline.process_image(load_image(sign.path), sign.path.stem).feature_vector
        except SignAnalysisError as e:
            log.warning("[%d/%d] %s could not be analyzed: %s", idx, len(signs), sign.path.name, e)
            flags.append(False)
            continue

        predicted = learner.classify(vector)
        correct = predicted == sign.classification
        flags.append(correct)
        log.info("[%d/%d] %s: expected %s, got %s %s", idx, len(signs), sign.path.name,
                 sign.classification.name, predicted.name, "✓" if correct else "✗")

    log_summary(summarize_results(flags))


def main():
    parser = argparse.ArgumentParser(description='Traffic Sign Classification Pipeline')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', type=str, default='sign_classifier.log', help='Rotating log file')
    subparsers = parser.add_subparsers(dest='command', required=True)

    train = subparsers.add_parser('train', help='Analyze labelled signs into training records')
    train.add_argument('sign_directory', type=str, help='Directory with one subdirectory per classification')
    train.add_argument('training_data_file', type=str, help='Output training records (JSON lines)')
    train.add_argument('--split', type=int, nargs=2, metavar=('N_TRAIN', 'N_CLASSIFY'),
                       help='Shuffle and split the signs into a training and an evaluation set')
    train.add_argument('--evaluation-file', type=str, help='Output evaluation records when splitting')
    train.add_argument('--seed', type=int, help='Shuffle seed')
    train.add_argument('--debug-output', type=str, help='Directory for debug images')

    classify = subparsers.add_parser('classify', help='Classify labelled signs and report accuracy')
    classify.add_argument('sign_directory', type=str, help='Directory with one subdirectory per classification')
    classify.add_argument('training_data_file', type=str, help='Training records (JSON lines)')
    classify.add_argument('--learner', choices=[t.value for t in LearnerType], default=LearnerType.KNN.value)
    classify.add_argument('--k', type=int, help='Neighbors for k-NN')
    classify.add_argument('--metric', choices=[m.name for m in DistanceMetric], help='Distance metric for k-NN')
    classify.add_argument('--seed', type=int, help='Initial weight seed for the perceptrons')
    classify.add_argument('--debug-output', type=str, help='Directory for debug images')

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    paths = SignPaths.from_strings(args.sign_directory, args.training_data_file, args.debug_output)

    try:
        if args.command == 'train':
            if args.split and not args.evaluation_file:
                parser.error('--split requires --evaluation-file')
            evaluation_file = Path(args.evaluation_file) if args.evaluation_file else None
            run_training(paths, args.split, evaluation_file, args.seed)
        else:
            metric = DistanceMetric[args.metric] if args.metric else None
            run_classification(paths, LearnerType(args.learner), args.k, metric, args.seed)
    except ValueError as e:
        log.error("%s", e)
        sys.exit(1)
    except LearnerError as e:
        log.error("Learner error: %s", e)
        sys.exit(2)


if __name__ == "__main__":
    main()
