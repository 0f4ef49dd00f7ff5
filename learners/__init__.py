"""
Learners package

Interchangeable classifiers over feature vectors. Every learner exposes
learn(training_data) and classify(feature_vector) -> SignClassification.
"""

from enum import Enum
from typing import Optional, Union

from learners.classification import LearnerError, SignClassification, TrainingExample
from learners.decision_tree import DecisionTree
from learners.knn import DistanceMetric, KNearestNeighbor
from learners.perceptron import PerceptronEnsemble

Learner = Union[KNearestNeighbor, DecisionTree, PerceptronEnsemble]


class LearnerType(Enum):
    KNN = 'knn'
    DECISION_TREE = 'tree'
    PERCEPTRON = 'perceptron'


def create_learner(learner_type: LearnerType, config: Optional[dict] = None, **kwargs) -> Learner:
    """
    Build an untrained learner of the given type.

    Args:
        learner_type: Which learner to build
        config: Optional config section for that learner
        **kwargs: Learner specific overrides (k and metric for k-NN, seed for the perceptrons)

    Returns:
        New learner instance
    """
    if learner_type is LearnerType.KNN:
        return KNearestNeighbor(k=kwargs.get('k'), metric=kwargs.get('metric'), config=config)
    if learner_type is LearnerType.DECISION_TREE:
        return DecisionTree(config=config)
    if learner_type is LearnerType.PERCEPTRON:
        return PerceptronEnsemble(config=config, epochs=kwargs.get('epochs'), seed=kwargs.get('seed'))
    raise ValueError(f"Unknown learner type: {learner_type}")


__all__ = [
    'Learner',
    'LearnerType',
    'LearnerError',
    'SignClassification',
    'TrainingExample',
    'DistanceMetric',
    'KNearestNeighbor',
    'DecisionTree',
    'PerceptronEnsemble',
    'create_learner',
]
