"""
Classification accuracy summary.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

log = logging.getLogger(__name__)

Z_95 = 1.96


@dataclass(frozen=True)
class ClassificationSummary:
    correct: int
    total: int
    accuracy: float
    half_width: float
    lower: float
    upper: float


def summarize_results(flags: Iterable[bool]) -> ClassificationSummary:
    """
    Accuracy of a batch with its 95% normal-approximation confidence interval.

    Args:
        flags: One entry per classified sign, True when the label was correct

    Returns:
        ClassificationSummary, all zeros for an empty batch
    """
    flags = list(flags)
    total = len(flags)
    if total == 0:
        return ClassificationSummary(0, 0, 0.0, 0.0, 0.0, 0.0)

    correct = sum(1 for f in flags if f)
    p = correct / total
    half_width = Z_95 * math.sqrt(p * (1 - p) / total)
    return ClassificationSummary(
        correct=correct,
        total=total,
        accuracy=p,
        half_width=half_width,
        lower=max(0.0, p - half_width),
        upper=min(1.0, p + half_width)
    )


def log_summary(summary: ClassificationSummary) -> None:
    log.info("Correct: %d / %d", summary.correct, summary.total)
    log.info("Accuracy: %.2f%% (95%% CI %.2f%% - %.2f%%)",
             summary.accuracy * 100, summary.lower * 100, summary.upper * 100)
