"""
Perceptron Ensemble Learner

Three independent linear binary classifiers, one per bit of a small code that
identifies each sign classification.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from config import PipelineConfig
from learners.classification import LearnerError, SignClassification, TrainingExample

BitPattern = Tuple[bool, bool, bool]

CLASSIFICATION_CODES: Dict[SignClassification, BitPattern] = {
    SignClassification.VORFAHRT_VON_RECHTS: (False, False, False),
    SignClassification.VORFAHRT_GEWAEHREN: (False, False, True),
    SignClassification.STOP: (False, True, False),
    SignClassification.FAHRTRICHTUNG_LINKS: (False, True, True),
    SignClassification.FAHRTRICHTUNG_RECHTS: (True, False, False),
    SignClassification.VORFAHRTSSTRASSE: (True, False, True),
    SignClassification.UNKNOWN: (True, True, True),
}

CODE_CLASSIFICATIONS: Dict[BitPattern, SignClassification] = {
    code: classification for classification, code in CLASSIFICATION_CODES.items()
}


def classification_to_code(classification: SignClassification) -> BitPattern:
    try:
        return CLASSIFICATION_CODES[classification]
    except KeyError:
        raise LearnerError(f"No code for classification {classification}") from None


def code_to_classification(code: BitPattern) -> SignClassification:
    try:
        return CODE_CLASSIFICATIONS[tuple(bool(bit) for bit in code)]
    except KeyError:
        raise LearnerError(f"No SignClassification found for bit pattern {code}") from None


def with_bias(feature_vector: Sequence[float]) -> np.ndarray:
    return np.append(np.asarray(feature_vector, dtype=np.float64), 1.0)


class Perceptron:
    """Linear threshold unit with a bias weight."""

    def __init__(self, weights: np.ndarray, learning_rate: float):
        self.weights = np.asarray(weights, dtype=np.float64)
        self.learning_rate = learning_rate

    def output(self, inputs: np.ndarray) -> bool:
        """Fire when the weighted sum of the biased inputs is not negative."""
        return bool(np.dot(self.weights, inputs) >= 0)

    def learn(self, inputs: np.ndarray, expected: bool) -> None:
        """Perceptron update: weight += rate * error * input."""
        error = (1 if expected else -1) - (1 if self.output(inputs) else -1)
        if error != 0:
            self.weights += self.learning_rate * error * inputs


class PerceptronEnsemble:
    """One perceptron per code bit; their outputs decode to a classification."""

    BITS = 3

    def __init__(self, config: dict = None, epochs: Optional[int] = None, seed: Optional[int] = None):
        """
        Initialize perceptron ensemble.

        Args:
            config: Optional config dict, uses PipelineConfig.PERCEPTRON if None
            epochs: Training epochs, config value if None
            seed: Seed for the initial weights, config value if None
        """
        self.config = config or PipelineConfig.PERCEPTRON
        self.epochs = epochs if epochs is not None else self.config['EPOCHS']
        self.learning_rate = self.config['LEARNING_RATE']
        self.weight_range = self.config['INITIAL_WEIGHT_RANGE']
        self.rng = np.random.default_rng(seed if seed is not None else self.config['SEED'])
        self.perceptrons: List[Perceptron] = []

    def _initialize(self, n_features: int) -> None:
        self.perceptrons = [
            Perceptron(self.rng.uniform(-self.weight_range, self.weight_range, n_features + 1),
                       self.learning_rate)
            for _ in range(self.BITS)
        ]

    def learn(self, training_data: Iterable[TrainingExample]) -> None:
        examples = list(training_data)
        if not examples:
            raise LearnerError("No training data available")

        self._initialize(len(examples[0].feature_vector))
        inputs = [with_bias(e.feature_vector) for e in examples]
        codes = [classification_to_code(e.classification) for e in examples]

        for _ in range(self.epochs):
            for x, code in zip(inputs, codes):
                for perceptron, bit in zip(self.perceptrons, code):
                    perceptron.learn(x, bit)

    def classify(self, feature_vector: Sequence[float]) -> SignClassification:
        if not self.perceptrons:
            raise LearnerError("The perceptron ensemble has not learned yet")
        x = with_bias(feature_vector)
        if len(x) != len(self.perceptrons[0].weights):
            raise LearnerError("Feature vector length does not match the trained weights")
        return code_to_classification(tuple(p.output(x) for p in self.perceptrons))
