"""
Tests for the parallel k-NN hyperparameter sweep.
"""

import tempfile
import unittest
from pathlib import Path

from knn_sweep import average_accuracy, generate_k_values, plot_results, results_table, run_knn_sweep
from learners import DistanceMetric, SignClassification, TrainingExample

STOP = SignClassification.STOP
MAIN_ROAD = SignClassification.VORFAHRTSSTRASSE


def cluster(label, center, n=5):
    return [TrainingExample.create(label, [center + 0.01 * i, center - 0.01 * i]) for i in range(n)]


class KnnSweepTests(unittest.TestCase):
    def setUp(self) -> None:
        self.training = cluster(STOP, 0.0) + cluster(MAIN_ROAD, 1.0)
        self.evaluation = cluster(STOP, 0.05, 2) + cluster(MAIN_ROAD, 0.95, 2)

    def test_k_values_are_odd(self) -> None:
        self.assertEqual(generate_k_values(1, 9), [1, 3, 5, 7, 9])
        self.assertEqual(generate_k_values(2, 6), [3, 5])
        self.assertEqual(generate_k_values()[-1], 199)

    def test_every_combination_is_evaluated(self) -> None:
        metrics = [DistanceMetric.EUCLIDEAN, DistanceMetric.MANHATTAN, DistanceMetric.CHEBYSHEV]
        results = run_knn_sweep(self.training, self.evaluation, [1, 3, 5], metrics, workers=3)

        self.assertEqual(len(results), 9)
        self.assertEqual({(r.k, r.metric) for r in results},
                         {(k, m) for k in (1, 3, 5) for m in metrics})
        self.assertTrue(all(r.accuracy == 1.0 for r in results))

    def test_results_are_sorted_best_first(self) -> None:
        training = cluster(STOP, 0.0) + cluster(MAIN_ROAD, 1.0, 8)
        # k=13 lets the eight MAIN_ROAD examples outvote the five STOP examples
        results = run_knn_sweep(training, self.evaluation, [13, 1], [DistanceMetric.EUCLIDEAN], workers=2)

        self.assertEqual([(r.k, r.accuracy) for r in results], [(1, 1.0), (13, 0.5)])

    def test_table_has_one_column_per_metric(self) -> None:
        results = run_knn_sweep(self.training, self.evaluation, [1, 3],
                                [DistanceMetric.EUCLIDEAN, DistanceMetric.MINKOWSKI], workers=2)
        table = results_table(results)

        self.assertEqual(list(table.index), [1, 3])
        self.assertEqual(sorted(table.columns), ['Euclidean', 'Minkowski'])
        self.assertEqual(average_accuracy(results)['Euclidean'], 1.0)

    def test_plot_is_written(self) -> None:
        results = run_knn_sweep(self.training, self.evaluation, [1, 3], [DistanceMetric.COSINE], workers=1)
        with tempfile.TemporaryDirectory() as tmp:
            output = Path(tmp) / "sweep.png"
            plot_results(results_table(results), output)
            self.assertTrue(output.exists())


if __name__ == "__main__":
    unittest.main()
