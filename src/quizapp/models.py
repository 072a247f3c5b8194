from typing import Any, List

from pydantic import BaseModel, ConfigDict


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    prompt: str
    options: List[str]


class AnswerRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: int
    selected_option: str
    is_correct: bool


# --- Wire schemas ---
class CorrectAnswerRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Raw value; numeric coercion happens in AnswerKey so every bad id gets the same 400.
    question_id: Any = None


class CorrectAnswerResponse(BaseModel):
    correct_answer: str


class ErrorResponse(BaseModel):
    error: str
