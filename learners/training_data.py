"""
Line-delimited JSON persistence of training examples.

Each line holds one record: {"classification": "STOP", "featureVector": [...]}.
"""

import json
from pathlib import Path
from typing import Iterable, List

from learners.classification import SignClassification, TrainingExample


def to_record(example: TrainingExample) -> str:
    return json.dumps({
        'classification': example.classification.name,
        'featureVector': list(example.feature_vector)
    })


def from_record(line: str) -> TrainingExample:
    try:
        record = json.loads(line)
        return TrainingExample.create(SignClassification[record['classification']],
                                      record['featureVector'])
    except (ValueError, KeyError, TypeError) as e:
        raise ValueError(f"Invalid training record: {line.strip()!r}") from e


def read_training_data(path: Path) -> List[TrainingExample]:
    """Read all records; blank lines are skipped."""
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Invalid file location: {path}")
    with path.open('r', encoding='utf-8') as f:
        return [from_record(line) for line in f if line.strip()]


def write_training_data(path: Path, examples: Iterable[TrainingExample]) -> None:
    """Replace the file contents with the given examples."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', encoding='utf-8') as f:
        for example in examples:
            f.write(to_record(example) + '\n')


def append_training_example(path: Path, example: TrainingExample) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('a', encoding='utf-8') as f:
        f.write(to_record(example) + '\n')
