"""
k-NN Hyperparameter Sweep

Evaluates k-nearest-neighbors over a range of odd k values and several distance
metrics in parallel, then reports the accuracy per combination.

Usage:
    python knn_sweep.py <training_data> <evaluation_data> [--output <dir>] [--workers N]
"""

import argparse
import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd

from config import PipelineConfig
from learners.classification import TrainingExample
from learners.knn import DistanceMetric, KNearestNeighbor
from learners.training_data import read_training_data
from logging_setup import setup_logging

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    k: int
    metric: DistanceMetric
    accuracy: float


def generate_k_values(min_k: int = None, max_k: int = None) -> List[int]:
    """Odd k values in [min_k, max_k]."""
    min_k = PipelineConfig.KNN_SWEEP['MIN_K'] if min_k is None else min_k
    max_k = PipelineConfig.KNN_SWEEP['MAX_K'] if max_k is None else max_k
    return [k for k in range(max(min_k, 1), max_k + 1) if k % 2 == 1]


def evaluate_accuracy(learner: KNearestNeighbor, evaluation: Sequence[TrainingExample]) -> float:
    if not evaluation:
        return 0.0
    correct = sum(1 for e in evaluation if learner.classify(e.feature_vector) == e.classification)
    return correct / len(evaluation)


def run_knn_sweep(training: Sequence[TrainingExample],
                  evaluation: Sequence[TrainingExample],
                  k_values: Sequence[int] = None,
                  metrics: Sequence[DistanceMetric] = None,
                  workers: int = None) -> List[SweepResult]:
    """
    Evaluate every (k, metric) combination.

    Args:
        training: Examples the learners are trained on
        evaluation: Examples whose labels are predicted and checked
        k_values: k values to try, odd 1..200 if None
        metrics: Distance metrics to try, all if None
        workers: Thread pool size, config value if None

    Returns:
        Results sorted by accuracy, best first
    """
    k_values = list(k_values) if k_values is not None else generate_k_values()
    metrics = list(metrics) if metrics is not None else list(DistanceMetric)
    workers = workers or PipelineConfig.KNN_SWEEP['WORKERS']

    results: List[SweepResult] = []
    lock = threading.Lock()

    def evaluate_k(k: int) -> None:
        for metric in metrics:
            learner = KNearestNeighbor(k=k, metric=metric)
            learner.learn(training)
            accuracy = evaluate_accuracy(learner, evaluation)
            with lock:
                results.append(SweepResult(k, metric, accuracy))
        log.debug("k=%d evaluated", k)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # list() re-raises the first exception of a task
        list(executor.map(evaluate_k, k_values))

    return sorted(results, key=lambda r: (-r.accuracy, r.k, r.metric.label))


def results_table(results: Sequence[SweepResult]) -> pd.DataFrame:
    """Accuracy table with one row per k and one column per metric."""
    df = pd.DataFrame([{'k': r.k, 'metric': r.metric.label, 'accuracy': r.accuracy} for r in results])
    return df.pivot(index='k', columns='metric', values='accuracy').sort_index()


def average_accuracy(results: Sequence[SweepResult]) -> pd.Series:
    """Mean accuracy of each metric over all k values."""
    return results_table(results).mean(axis=0)


def plot_results(table: pd.DataFrame, output_file: Path) -> None:
    """Plot accuracy against k, one line per metric."""
    fig, ax = plt.subplots(figsize=(12, 6))
    for metric in table.columns:
        ax.plot(table.index, table[metric], label=metric)
    ax.set_xlabel('k')
    ax.set_ylabel('Accuracy')
    ax.set_title('k-NN accuracy per distance metric')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_file, dpi=150, bbox_inches='tight')
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description='k-NN hyperparameter sweep')
    parser.add_argument('training_data', type=str, help='Training records (JSON lines)')
    parser.add_argument('evaluation_data', type=str, help='Evaluation records (JSON lines)')
    parser.add_argument('--output', '-o', type=str, default='knn_sweep_results', help='Output directory')
    parser.add_argument('--min-k', type=int, default=PipelineConfig.KNN_SWEEP['MIN_K'])
    parser.add_argument('--max-k', type=int, default=PipelineConfig.KNN_SWEEP['MAX_K'])
    parser.add_argument('--workers', type=int, default=PipelineConfig.KNN_SWEEP['WORKERS'])
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        training = read_training_data(Path(args.training_data))
        evaluation = read_training_data(Path(args.evaluation_data))
    except ValueError as e:
        log.error("%s", e)
        sys.exit(1)

    output_dir = Path(args.output)
    output_dir.mkdir(exist_ok=True, parents=True)

    k_values = generate_k_values(args.min_k, args.max_k)
    log.info("Sweeping %d k value(s) over %d metric(s) with %d training and %d evaluation examples",
             len(k_values), len(DistanceMetric), len(training), len(evaluation))

    results = run_knn_sweep(training, evaluation, k_values, workers=args.workers)
    table = results_table(results)

    csv_path = output_dir / 'knn_sweep.csv'
    table.to_csv(csv_path)
    plot_results(table, output_dir / 'knn_sweep.png')

    best = results[0]
    log.info("Best: k=%d %s accuracy=%.2f%%", best.k, best.metric.label, best.accuracy * 100)
    for metric, accuracy in average_accuracy(results).items():
        log.info("Average accuracy %s: %.2f%%", metric, accuracy * 100)
    log.info("Results saved to: %s", output_dir)


if __name__ == "__main__":
    main()
