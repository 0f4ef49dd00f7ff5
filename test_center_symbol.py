"""
Tests for center symbol isolation and the left/right split.
"""

import unittest
from unittest import mock

import cv2
import numpy as np

from sign_analysis import ApproximatedColor, CenterSymbolAnalyzer, SignAnalysisError, SignColor
from sign_analysis.center_symbol import half_shares, line_inside_mask, project_line_to_image_edges
from sign_analysis.color_analysis import TRANSPARENT, ApproximatedColorSign, ColorAnalyzer


def blue_sign_with_l_symbol():
    """Blue disc with a white L: a vertical bar and an arm to the right at its top."""
    disc = np.zeros((100, 100), dtype=np.uint8)
    cv2.circle(disc, (50, 50), 45, 255, -1)

    labels = np.full((100, 100), TRANSPARENT, dtype=np.int8)
    labels[disc > 0] = ApproximatedColor.BLUE.value
    labels[20:81, 40:51] = ApproximatedColor.WHITE.value
    labels[20:31, 51:76] = ApproximatedColor.WHITE.value

    contours, _ = cv2.findContours(disc, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_NONE)
    return ApproximatedColorSign(labels), contours[0]


def shares(**values):
    return [SignColor(color, values.get(color.name.lower(), 0.0)) for color in ApproximatedColor]


class SymbolColorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.analyzer = CenterSymbolAnalyzer()

    def test_blue_sign_has_white_symbol(self) -> None:
        self.assertEqual(self.analyzer.symbol_color(shares(blue=0.8, white=0.2)), ApproximatedColor.WHITE)

    def test_red_sign_has_black_symbol(self) -> None:
        self.assertEqual(self.analyzer.symbol_color(shares(red=0.4, white=0.5, black=0.1)),
                         ApproximatedColor.BLACK)

    def test_red_sign_without_black_has_no_symbol(self) -> None:
        self.assertIsNone(self.analyzer.symbol_color(shares(red=0.4, white=0.59, black=0.01)))

    def test_weak_red_and_blue_have_no_symbol(self) -> None:
        self.assertIsNone(self.analyzer.symbol_color(shares(yellow=0.8, white=0.2)))


class CenterSymbolAnalyzerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.analyzer = CenterSymbolAnalyzer()

    def test_l_symbol_leans_right(self) -> None:
        approximated, contour = blue_sign_with_l_symbol()
        colors = ColorAnalyzer.measure_shares(approximated)

        result = self.analyzer.analyze(approximated, colors, contour)

        self.assertEqual(result.symbol_color, ApproximatedColor.WHITE)
        self.assertEqual(result.color_value, 1.0)
        self.assertGreater(result.right_share, result.left_share)
        self.assertAlmostEqual(result.left_share + result.right_share, 1.0)

    def test_flood_fill_stays_inside_the_symbol(self) -> None:
        approximated, contour = blue_sign_with_l_symbol()

        seed = self.analyzer.find_seed_point(approximated, contour, ApproximatedColor.WHITE)
        mask = self.analyzer.isolate_symbol(approximated, seed)

        self.assertEqual(int(np.count_nonzero(mask)), 61 * 11 + 11 * 25)
        self.assertTrue(np.all(approximated.color_mask(ApproximatedColor.WHITE)[mask]))

    def test_black_symbol_does_not_leak_into_background(self) -> None:
        labels = np.full((20, 20), TRANSPARENT, dtype=np.int8)
        labels[5:15, 5:15] = ApproximatedColor.BLACK.value
        approximated = ApproximatedColorSign(labels)

        mask = CenterSymbolAnalyzer.isolate_symbol(approximated, (10, 10))

        self.assertEqual(int(np.count_nonzero(mask)), 100)

    def test_no_symbol_gives_neutral_values_without_flood_fill(self) -> None:
        labels = np.full((20, 20), ApproximatedColor.YELLOW.value, dtype=np.int8)
        approximated = ApproximatedColorSign(labels)
        colors = ColorAnalyzer.measure_shares(approximated)
        contour = np.array([[[0, 0]], [[19, 0]], [[19, 19]], [[0, 19]]], dtype=np.int32)

        with mock.patch('sign_analysis.center_symbol.cv2.floodFill') as flood_fill:
            result = self.analyzer.analyze(approximated, colors, contour)

        flood_fill.assert_not_called()
        self.assertEqual(result.as_features(), [0.5, 0.5, 0.5])
        self.assertIsNone(result.symbol_mask)

    def test_missing_symbol_pixels_raise(self) -> None:
        labels = np.full((20, 20), ApproximatedColor.BLUE.value, dtype=np.int8)
        contour = np.array([[[0, 0]], [[19, 0]], [[19, 19]], [[0, 19]]], dtype=np.int32)
        with self.assertRaises(SignAnalysisError):
            self.analyzer.find_seed_point(ApproximatedColorSign(labels), contour, ApproximatedColor.WHITE)


class GeometryHelperTests(unittest.TestCase):
    def test_half_shares_of_nothing_are_even(self) -> None:
        self.assertEqual(half_shares(0, 0), (0.5, 0.5))
        self.assertEqual(half_shares(1, 3), (0.25, 0.75))

    def test_line_inside_mask(self) -> None:
        mask = np.zeros((10, 10), dtype=bool)
        mask[2:8, 2:8] = True
        self.assertTrue(line_inside_mask(mask, (2, 2), (7, 7)))
        self.assertFalse(line_inside_mask(mask, (2, 2), (9, 9)))

    def test_vertical_line_spans_the_image(self) -> None:
        p1, p2 = project_line_to_image_edges((5, 3), (5, 8), 20, 30)
        self.assertEqual(p1, (5.0, 0.0))
        self.assertEqual(p2, (5.0, 30.0))

    def test_diagonal_line_hits_two_borders_top_first(self) -> None:
        p1, p2 = project_line_to_image_edges((2, 8), (4, 6), 10, 10)
        self.assertEqual(p1, (10.0, 0.0))
        self.assertEqual(p2, (0.0, 10.0))

    def test_line_outside_the_image_raises(self) -> None:
        with self.assertRaises(SignAnalysisError):
            project_line_to_image_edges((0, 50), (10, 50), 10, 10)


if __name__ == "__main__":
    unittest.main()
