"""
Sign classifications and the labelled examples learners are trained on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple


class SignClassification(Enum):
    """Sign categories. Directory names of the sign images must match these names."""

    VORFAHRT_VON_RECHTS = 'VORFAHRT_VON_RECHTS'
    VORFAHRT_GEWAEHREN = 'VORFAHRT_GEWAEHREN'
    STOP = 'STOP'
    FAHRTRICHTUNG_LINKS = 'FAHRTRICHTUNG_LINKS'
    FAHRTRICHTUNG_RECHTS = 'FAHRTRICHTUNG_RECHTS'
    VORFAHRTSSTRASSE = 'VORFAHRTSSTRASSE'
    UNKNOWN = 'UNKNOWN'


class LearnerError(RuntimeError):
    """Raised when a learner is used out of order or cannot produce a label."""


@dataclass(frozen=True)
class TrainingExample:
    """A feature vector with its known classification."""

    classification: SignClassification
    feature_vector: Tuple[float, ...]

    @classmethod
    def create(cls, classification: SignClassification, feature_vector: Sequence[float]) -> 'TrainingExample':
        return cls(classification, tuple(float(v) for v in feature_vector))
