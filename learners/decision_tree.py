"""
Decision Tree Learner

ID3-style induction over discretized feature values. Nodes live in a flat
arena and refer to their children by index. Examples can be included one at a
time; the tree is rebuilt lazily on the next classification.

Feature values are truncated to integers before grouping (after an optional
scale factor), so close but distinct values can fall into the same branch.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from scipy.stats import entropy

from config import PipelineConfig
from learners.classification import LearnerError, SignClassification, TrainingExample

log = logging.getLogger(__name__)


@dataclass
class DecisionNode:
    """A node of the tree. Leaves have a label, inner nodes an attribute and children."""

    examples: List[TrainingExample]
    attribute: Optional[int] = None
    children: Dict[int, int] = field(default_factory=dict)
    label: Optional[SignClassification] = None

    @property
    def is_leaf(self) -> bool:
        return self.attribute is None


def label_entropy(examples: Sequence[TrainingExample]) -> float:
    counts = list(Counter(e.classification for e in examples).values())
    return float(entropy(counts, base=2)) if counts else 0.0


def majority_label(examples: Sequence[TrainingExample]) -> SignClassification:
    votes = Counter(e.classification for e in examples)
    return max(votes, key=votes.get)


class DecisionTree:
    """Decision tree classifier."""

    def __init__(self, config: dict = None):
        """
        Initialize decision tree.

        Args:
            config: Optional config dict, uses PipelineConfig.DECISION_TREE if None
        """
        self.config = config or PipelineConfig.DECISION_TREE
        self.scale = self.config['DISCRETIZATION_SCALE']

        self.examples: List[TrainingExample] = []
        self.nodes: List[DecisionNode] = []
        self._dirty = False

    def discretize(self, value: float) -> int:
        return int(value * self.scale)

    def partition(self, examples: Sequence[TrainingExample], attribute: int) -> Dict[int, List[TrainingExample]]:
        """Group examples by the discretized value of one attribute, in first-seen order."""
        groups: Dict[int, List[TrainingExample]] = {}
        for example in examples:
            groups.setdefault(self.discretize(example.feature_vector[attribute]), []).append(example)
        return groups

    def information_gain(self, examples: Sequence[TrainingExample], attribute: int) -> float:
        total = len(examples)
        remainder = sum(len(group) / total * label_entropy(group)
                        for group in self.partition(examples, attribute).values())
        return label_entropy(examples) - remainder

    def best_attribute(self, examples: Sequence[TrainingExample]) -> Optional[int]:
        """Attribute with the highest information gain; the first one wins ties, None if nothing gains."""
        best, best_gain = None, 0.0
        for attribute in range(len(examples[0].feature_vector)):
            gain = self.information_gain(examples, attribute)
            if gain > best_gain + 1e-12:
                best, best_gain = attribute, gain
        return best

    def _grow(self, examples: List[TrainingExample]) -> int:
        index = len(self.nodes)
        node = DecisionNode(examples=examples)
        self.nodes.append(node)

        if len({e.classification for e in examples}) == 1:
            node.label = examples[0].classification
            return index

        attribute = self.best_attribute(examples)
        if attribute is None:
            node.label = majority_label(examples)
            return index

        node.attribute = attribute
        for value, group in self.partition(examples, attribute).items():
            node.children[value] = self._grow(group)
        return index

    def _rebuild(self) -> None:
        self.nodes = []
        if self.examples:
            self._grow(list(self.examples))
        self._dirty = False
        log.debug("Decision tree rebuilt with %d nodes from %d examples", len(self.nodes), len(self.examples))

    def include(self, example: TrainingExample) -> None:
        """Add one example; the tree is regrown before the next classification."""
        self.examples.append(example)
        self._dirty = True

    def learn(self, training_data: Iterable[TrainingExample]) -> None:
        self.examples = []
        for example in training_data:
            self.include(example)
        self._rebuild()

    def classify(self, feature_vector: Sequence[float]) -> SignClassification:
        """
        Walk the tree along the discretized feature values.

        Returns:
            The leaf label, or UNKNOWN if a value has no matching branch
        """
        if self._dirty:
            self._rebuild()
        if not self.nodes:
            raise LearnerError("No training data available")

        node = self.nodes[0]
        while not node.is_leaf:
            value = self.discretize(feature_vector[node.attribute])
            child = node.children.get(value)
            if child is None:
                return SignClassification.UNKNOWN
            node = self.nodes[child]
        return node.label

    def depth(self) -> int:
        """Number of edges on the longest root-to-leaf path."""
        if not self.nodes:
            return 0
        depths = np.zeros(len(self.nodes), dtype=int)
        for index, node in enumerate(self.nodes):
            for child in node.children.values():
                depths[child] = depths[index] + 1
        return int(depths.max())
