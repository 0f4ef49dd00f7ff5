"""
Sign image discovery and loading.

Sign images are stored below one directory per classification:

    <sign_directory>/STOP/*.png
    <sign_directory>/VORFAHRTSSTRASSE/more/*.jpg
"""

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from learners.classification import SignClassification
from sign_analysis.errors import SignAnalysisError

log = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp'}


@dataclass(frozen=True)
class LoadableSign:
    """An image file on disk with the classification of its directory."""

    path: Path
    classification: SignClassification


def discover_signs(sign_directory: Path) -> List[LoadableSign]:
    """
    Find all sign images below the label directories.

    Args:
        sign_directory: Root holding one subdirectory per classification

    Returns:
        Signs sorted by label directory, then path
    """
    sign_directory = Path(sign_directory)
    if not sign_directory.is_dir():
        raise ValueError(f"Invalid sign directory: {sign_directory}")

    signs = []
    for label_dir in sorted(p for p in sign_directory.iterdir() if p.is_dir()):
        try:
            classification = SignClassification[label_dir.name]
        except KeyError:
            raise ValueError(f"Unknown sign classification directory: {label_dir.name}") from None

        files = sorted(p for p in label_dir.rglob('*')
                       if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)
        signs.extend(LoadableSign(path, classification) for path in files)

    log.info("Found %d sign image(s) in %s", len(signs), sign_directory)
    return signs


def split_signs(signs: Sequence[LoadableSign],
                n_train: int,
                n_classify: int,
                seed: Optional[int] = None) -> Tuple[List[LoadableSign], List[LoadableSign]]:
    """
    Shuffle the signs and split them into a training and a classification set.

    Training takes the first n_train signs, classification the last n_classify.
    """
    if n_train < 0 or n_classify < 0:
        raise ValueError("Set sizes must not be negative")
    if n_train + n_classify > len(signs):
        raise ValueError(f"Not enough signs: {n_train} + {n_classify} requested, {len(signs)} available")

    shuffled = list(signs)
    random.Random(seed).shuffle(shuffled)
    training = shuffled[:n_train]
    classification = shuffled[len(shuffled) - n_classify:]
    return training, classification


def load_image(path: Path) -> np.ndarray:
    """Decode an image file into an RGBA array."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise SignAnalysisError(f"Could not read image: {path}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
