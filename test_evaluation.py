"""
Tests for the accuracy summary.
"""

import unittest

from evaluation import summarize_results


class SummarizeResultsTests(unittest.TestCase):
    def test_half_correct(self) -> None:
        summary = summarize_results([True, True, False, False])

        self.assertEqual(summary.correct, 2)
        self.assertEqual(summary.total, 4)
        self.assertEqual(summary.accuracy, 0.5)
        self.assertAlmostEqual(summary.half_width, 0.49)
        self.assertAlmostEqual(summary.lower, 0.01)
        self.assertAlmostEqual(summary.upper, 0.99)

    def test_bounds_are_clamped(self) -> None:
        summary = summarize_results([True] * 9 + [False])

        self.assertAlmostEqual(summary.accuracy, 0.9)
        self.assertEqual(summary.upper, 1.0)
        self.assertGreater(summary.lower, 0.7)

    def test_all_correct_has_no_spread(self) -> None:
        summary = summarize_results([True, True, True])

        self.assertEqual(summary.accuracy, 1.0)
        self.assertEqual(summary.half_width, 0.0)
        self.assertEqual((summary.lower, summary.upper), (1.0, 1.0))

    def test_empty_batch(self) -> None:
        summary = summarize_results([])
        self.assertEqual((summary.correct, summary.total, summary.accuracy), (0, 0, 0.0))


if __name__ == "__main__":
    unittest.main()
