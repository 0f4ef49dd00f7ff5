"""
End-to-end tests of the sign analysis pipeline on a synthetic sign.
"""

import tempfile
import unittest
from pathlib import Path
from unittest import mock

import cv2
import numpy as np

from learners import LearnerType, SignClassification
from learners.training_data import read_training_data
from pipeline import SignAnalysisPipeline, run_classification, run_training
from config import SignPaths
from sign_analysis import ApproximatedColor, ColorScheme, SignAnalysisError
from visualize.viz_signs import find_images


def synthetic_blue_sign() -> np.ndarray:
    """RGB image: blue disc on black with a white L (vertical bar, arm to the right at the top)."""
    image = np.zeros((120, 120, 3), dtype=np.uint8)
    cv2.circle(image, (60, 60), 50, (81, 132, 187), -1)
    image[30:91, 50:61] = (255, 255, 255)
    image[30:41, 61:86] = (255, 255, 255)
    return image


class SignAnalysisPipelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.pipeline = SignAnalysisPipeline()

    def test_feature_vector_of_blue_sign(self) -> None:
        features = self.pipeline.process_image(synthetic_blue_sign())
        vector = features.feature_vector

        self.assertEqual(len(vector), 9)
        self.assertTrue(all(0.0 <= v <= 1.0 for v in vector))
        self.assertEqual(features.color.scheme, ColorScheme.NEUTRAL)
        self.assertGreater(vector[ApproximatedColor.BLUE.value], 0.7)
        self.assertEqual(features.center_symbol.symbol_color, ApproximatedColor.WHITE)
        self.assertEqual(vector[6], 1.0)
        self.assertGreater(vector[8], vector[7])

    def test_analyze_returns_the_vector(self) -> None:
        image = synthetic_blue_sign()
        self.assertEqual(self.pipeline.analyze(image), self.pipeline.process_image(image).feature_vector)

    def test_blank_image_fails(self) -> None:
        with self.assertRaises(SignAnalysisError):
            self.pipeline.analyze(np.zeros((50, 50, 3), dtype=np.uint8))

    def test_unexpected_errors_are_wrapped(self) -> None:
        with mock.patch.object(self.pipeline.cropper, 'crop', side_effect=ValueError("boom")):
            with self.assertRaises(SignAnalysisError) as ctx:
                self.pipeline.analyze(synthetic_blue_sign())
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_visualization_is_a_two_by_two_grid(self) -> None:
        features = self.pipeline.process_image(synthetic_blue_sign())
        vis = self.pipeline.visualize_results(features)
        self.assertEqual(vis.shape, (240, 240, 3))

    def test_debug_image_is_written(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            pipeline = SignAnalysisPipeline(debug_output_dir=Path(tmp) / "debug")
            pipeline.process_image(synthetic_blue_sign(), "sign_01")
            self.assertTrue((Path(tmp) / "debug" / "sign_01_analysis.jpg").exists())


class BatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        sign_dir = self.root / "signs" / "FAHRTRICHTUNG_RECHTS"
        sign_dir.mkdir(parents=True)
        bgr = cv2.cvtColor(synthetic_blue_sign(), cv2.COLOR_RGB2BGR)
        cv2.imwrite(str(sign_dir / "right.png"), bgr)
        cv2.imwrite(str(sign_dir / "blank.png"), np.zeros((40, 40, 3), dtype=np.uint8))
        self.paths = SignPaths.from_strings(str(self.root / "signs"), str(self.root / "training.jsonl"))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_training_skips_signs_that_fail(self) -> None:
        run_training(self.paths)

        examples = read_training_data(self.paths.training_data_file)
        self.assertEqual(len(examples), 1)
        self.assertEqual(examples[0].classification, SignClassification.FAHRTRICHTUNG_RECHTS)

    def test_classification_logs_a_summary(self) -> None:
        run_training(self.paths)
        with self.assertLogs('evaluation', level='INFO') as logs:
            run_classification(self.paths, LearnerType.KNN, k=1)

        self.assertIn("Correct: 1 / 2", "\n".join(logs.output))

    def test_unwritable_debug_output_does_not_stop_the_batch(self) -> None:
        blocker = self.root / "debug"
        blocker.write_text("a file where the debug directory should be")
        paths = SignPaths(self.paths.sign_directory, self.paths.training_data_file, blocker)

        with self.assertLogs("pipeline", level="WARNING") as logs:
            run_training(paths)

        self.assertEqual(len(read_training_data(paths.training_data_file)), 1)
        self.assertTrue(any("Could not write debug image" in line for line in logs.output))


class FindImagesTests(unittest.TestCase):
    def test_earlier_results_are_not_analyzed_again(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            output_dir = root / "viz_signs"
            output_dir.mkdir()
            cv2.imwrite(str(root / "a.png"), synthetic_blue_sign())
            (root / "sub").mkdir()
            cv2.imwrite(str(root / "sub" / "nested.png"), synthetic_blue_sign())
            cv2.imwrite(str(output_dir / "a_analysis.jpg"), synthetic_blue_sign())

            found = find_images(root, output_dir)

        self.assertEqual([p.name for p in found], ["a.png", "nested.png"])


if __name__ == "__main__":
    unittest.main()
