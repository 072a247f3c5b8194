import logging
import os
from typing import List, Tuple

import pandas as pd

from .models import Question

logger = logging.getLogger(__name__)

OPTION_SEPARATOR = "|"

DEFAULT_QUESTIONS: Tuple[Question, ...] = (
    Question(
        id=1,
        prompt="Jakie jest największe miasto w Polsce?",
        options=["Warszawa", "Kraków", "Gdańsk", "Wrocław"],
    ),
    Question(
        id=2,
        prompt="W którym roku Polska wstąpiła do UE?",
        options=["2003", "2004", "2005", "2006"],
    ),
    Question(
        id=3,
        prompt="Która rzeka przepływa przez Warszawę?",
        options=["Odra", "Wisła", "Warta", "Bug"],
    ),
)


class QuestionBank:
    """Loads the ordered question list shown by the client."""

    def __init__(self, path: str):
        self.path = path
        self.questions: Tuple[Question, ...] = ()
        self.load_all()

    def load_all(self):
        self.questions = DEFAULT_QUESTIONS
        if not os.path.exists(self.path):
            logger.warning(f"Question file {self.path} not found. Using built-in questions.")
            return

        try:
            df = pd.read_csv(self.path, encoding="utf-8", dtype=str, keep_default_na=False)
        except Exception as e:
            logger.error(f"Failed to load {self.path}: {e}")
            return

        if not {"id", "prompt", "options"}.issubset(df.columns):
            logger.error(f"Skipping {self.path}: Missing columns.")
            return

        try:
            questions = parse_questions(df.to_dict("records"))
        except ValueError as e:
            logger.error(f"Skipping {self.path}: {e}")
            return

        self.questions = tuple(questions)
        logger.info(f"Loaded {len(questions)} questions from {self.path}")

    def get_questions(self) -> Tuple[Question, ...]:
        return self.questions


def parse_questions(rows: List[dict]) -> List[Question]:
    questions: List[Question] = []
    seen = set()
    for row in rows:
        question_id = int(row["id"])
        if question_id <= 0:
            raise ValueError(f"Question id must be positive: {question_id}")
        if question_id in seen:
            raise ValueError(f"Duplicate question id: {question_id}")
        options = [o.strip() for o in row["options"].split(OPTION_SEPARATOR) if o.strip()]
        if not options:
            raise ValueError(f"Question {question_id} has no options")
        seen.add(question_id)
        questions.append(Question(id=question_id, prompt=row["prompt"], options=options))
    if not questions:
        raise ValueError("No questions defined")
    return questions
