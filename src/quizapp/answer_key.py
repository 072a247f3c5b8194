import logging
import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator

import pandas as pd

from .exceptions import InvalidQuestionId

logger = logging.getLogger(__name__)

DEFAULT_ANSWERS: Dict[int, str] = {
    1: "Warszawa",
    2: "2004",
    3: "Wisła",
}


def coerce_question_id(raw: Any) -> int:
    """Turns a JSON value (number or numeric string) into a positive integer id."""
    if raw is None or isinstance(raw, bool):
        raise InvalidQuestionId(f"Question id missing or not numeric: {raw!r}")

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, (float, str)):
        try:
            number = float(raw)
        except ValueError:
            raise InvalidQuestionId(f"Question id not numeric: {raw!r}")
        if not number.is_integer():
            raise InvalidQuestionId(f"Question id not an integer: {raw!r}")
        value = int(number)
    else:
        raise InvalidQuestionId(f"Question id has unsupported type: {type(raw).__name__}")

    if value <= 0:
        raise InvalidQuestionId(f"Question id must be positive: {raw!r}")
    return value


class AnswerKey(Mapping):
    """Read-only mapping from question id to the correct answer text."""

    def __init__(self, answers: Mapping):
        self._answers = MappingProxyType(dict(answers))

    def __getitem__(self, question_id: int) -> str:
        return self._answers[question_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._answers)

    def __len__(self) -> int:
        return len(self._answers)

    def lookup(self, raw_question_id: Any) -> str:
        question_id = coerce_question_id(raw_question_id)
        try:
            return self._answers[question_id]
        except KeyError:
            raise InvalidQuestionId(f"Unknown question id: {question_id}")

    @classmethod
    def load(cls, path: str) -> "AnswerKey":
        """Loads `question_id,correct_answer` rows from CSV, falling back to the built-in key."""
        if not os.path.exists(path):
            logger.warning(f"Answer key {path} not found. Using built-in answers.")
            return cls(DEFAULT_ANSWERS)

        try:
            df = pd.read_csv(path, encoding="utf-8", dtype=str, keep_default_na=False)
        except Exception as e:
            logger.error(f"Failed to load {path}: {e}")
            return cls(DEFAULT_ANSWERS)

        if "question_id" not in df.columns or "correct_answer" not in df.columns:
            logger.error(f"Skipping {path}: Missing columns.")
            return cls(DEFAULT_ANSWERS)

        answers: Dict[int, str] = {}
        try:
            for row in df.to_dict("records"):
                question_id = coerce_question_id(row["question_id"])
                if question_id in answers:
                    raise InvalidQuestionId(f"Duplicate question id: {question_id}")
                answers[question_id] = row["correct_answer"]
        except InvalidQuestionId as e:
            logger.error(f"Skipping {path}: {e}")
            return cls(DEFAULT_ANSWERS)

        logger.info(f"Loaded {len(answers)} answers from {path}")
        return cls(answers)
