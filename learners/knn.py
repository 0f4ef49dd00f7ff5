"""
k-Nearest-Neighbors Learner

Keeps the training set verbatim and classifies by majority vote among the
k closest examples. Classification costs O(n*d) per query.
"""

from collections import Counter
from enum import Enum
from typing import Iterable, Sequence

import numpy as np
from scipy.spatial.distance import cdist

from config import PipelineConfig
from learners.classification import LearnerError, SignClassification, TrainingExample


class DistanceMetric(Enum):
    """Named distance functions, values are scipy metric names."""

    EUCLIDEAN = 'euclidean'
    MANHATTAN = 'cityblock'
    MINKOWSKI = 'minkowski'
    CHEBYSHEV = 'chebyshev'
    COSINE = 'cosine'

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def distances(self, query: np.ndarray, data: np.ndarray, p: float = 1.5) -> np.ndarray:
        """Distance from the query to every row of data; NaN becomes inf."""
        kwargs = {'p': p} if self is DistanceMetric.MINKOWSKI else {}
        with np.errstate(divide='ignore', invalid='ignore'):
            result = cdist(query.reshape(1, -1), data, metric=self.value, **kwargs)[0]
        return np.where(np.isnan(result), np.inf, result)


class KNearestNeighbor:
    """k-NN classifier over feature vectors."""

    def __init__(self, k: int = None, metric: DistanceMetric = None, config: dict = None):
        """
        Initialize k-NN learner.

        Args:
            k: Number of neighbors to vote, config value if None
            metric: Distance metric, config value if None
            config: Optional config dict, uses PipelineConfig.KNN if None
        """
        self.config = config or PipelineConfig.KNN
        self.k = k if k is not None else self.config['K']
        if self.k < 1:
            raise ValueError("k must be a positive integer")
        self.metric = metric or DistanceMetric[self.config['METRIC']]
        self.p = self.config['MINKOWSKI_P']

        self._labels = []
        self._vectors = None

    def learn(self, training_data: Iterable[TrainingExample]) -> None:
        examples = list(training_data)
        self._labels = [e.classification for e in examples]
        self._vectors = np.array([e.feature_vector for e in examples], dtype=np.float64) if examples else None

    def classify(self, feature_vector: Sequence[float]) -> SignClassification:
        """Majority label of the k nearest examples; ties go to the label seen first."""
        if self._vectors is None:
            raise LearnerError("No training data available")

        query = np.asarray(feature_vector, dtype=np.float64)
        if query.shape != self._vectors.shape[1:]:
            raise LearnerError(f"Feature vector has {query.size} values, training data has {self._vectors.shape[1]}")
        distances = self.metric.distances(query, self._vectors, self.p)
        nearest = np.argsort(distances, kind='stable')[:self.k]

        votes = Counter(self._labels[i] for i in nearest)
        return max(votes, key=votes.get)
