"""
Client-side quiz session.

The session is an immutable value; every user action or lookup outcome is an
event, and ``apply(session, event)`` returns the next session. Nothing here
performs I/O, so the whole quiz flow can be driven without a browser or an
oracle.

Phases::

    answering --OptionSelected--> loading --AnswerReceived--> feedback
        ^                            |                           |
        |<-------AnswerFailed--------+                           |
        |<----FeedbackAcknowledged (more questions)--------------+
    summary <--FeedbackAcknowledged (last question) / SummaryRequested
    summary --ResetRequested--> answering(0)
"""
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from .exceptions import (
    AlreadyAnswered,
    InvalidTransition,
    SubmissionPending,
)
from .models import AnswerRecord, Question


class Phase(str, Enum):
    ANSWERING = "answering"
    LOADING = "loading"
    FEEDBACK = "feedback"
    SUMMARY = "summary"


class PendingSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: int
    selected_option: str


class Feedback(BaseModel):
    model_config = ConfigDict(frozen=True)

    record: AnswerRecord
    correct_answer: str


class QuizSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    questions: Tuple[Question, ...]
    current_index: int = 0
    records: Dict[int, AnswerRecord] = {}
    pending: Optional[PendingSubmission] = None
    feedback: Optional[Feedback] = None
    error: Optional[str] = None
    summary_visible: bool = False

    @property
    def phase(self) -> Phase:
        if self.summary_visible:
            return Phase.SUMMARY
        if self.pending is not None:
            return Phase.LOADING
        if self.feedback is not None:
            return Phase.FEEDBACK
        return Phase.ANSWERING

    @property
    def loading(self) -> bool:
        return self.pending is not None

    @property
    def current_question(self) -> Question:
        return self.questions[self.current_index]

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def answered_count(self) -> int:
        return len(self.records)

    @property
    def score(self) -> int:
        return sum(1 for record in self.records.values() if record.is_correct)

    def record_for(self, question_id: int) -> Optional[AnswerRecord]:
        return self.records.get(question_id)


# --- Events ---
class OptionSelected(BaseModel):
    option: str


class AnswerReceived(BaseModel):
    question_id: int
    correct_answer: str


class AnswerFailed(BaseModel):
    question_id: int
    message: str


class FeedbackAcknowledged(BaseModel):
    pass


class ErrorDismissed(BaseModel):
    pass


class Navigated(BaseModel):
    index: int


class SummaryRequested(BaseModel):
    pass


class ResetRequested(BaseModel):
    pass


def new_session(questions: Sequence[Question]) -> QuizSession:
    if not questions:
        raise ValueError("A quiz needs at least one question")
    return QuizSession(questions=tuple(questions))


def _require_phase(session: QuizSession, *phases: Phase):
    if session.phase in phases:
        return
    if session.phase is Phase.LOADING:
        raise SubmissionPending("An answer is already being checked")
    raise InvalidTransition(f"Not allowed while {session.phase.value}")


def _require_pending(session: QuizSession, question_id: int) -> PendingSubmission:
    pending = session.pending
    if pending is None or pending.question_id != question_id:
        raise InvalidTransition(f"No lookup pending for question {question_id}")
    return pending


# --- Transitions ---
def _on_option_selected(session: QuizSession, event: OptionSelected) -> QuizSession:
    _require_phase(session, Phase.ANSWERING)
    question = session.current_question
    if question.id in session.records:
        raise AlreadyAnswered(f"Question {question.id} is already answered")
    if event.option not in question.options:
        raise InvalidTransition(f"{event.option!r} is not an option of question {question.id}")
    return session.model_copy(
        update={
            "pending": PendingSubmission(question_id=question.id, selected_option=event.option),
            "error": None,
        }
    )


def _on_answer_received(session: QuizSession, event: AnswerReceived) -> QuizSession:
    pending = _require_pending(session, event.question_id)
    if pending.question_id in session.records:
        raise AlreadyAnswered(f"Question {pending.question_id} is already answered")
    record = AnswerRecord(
        question_id=pending.question_id,
        selected_option=pending.selected_option,
        is_correct=event.correct_answer == pending.selected_option,
    )
    return session.model_copy(
        update={
            "records": {**session.records, record.question_id: record},
            "pending": None,
            "feedback": Feedback(record=record, correct_answer=event.correct_answer),
        }
    )


def _on_answer_failed(session: QuizSession, event: AnswerFailed) -> QuizSession:
    _require_pending(session, event.question_id)
    return session.model_copy(update={"pending": None, "error": event.message})


def _on_feedback_acknowledged(session: QuizSession, event: FeedbackAcknowledged) -> QuizSession:
    _require_phase(session, Phase.FEEDBACK)
    next_index = session.current_index + 1
    if next_index < session.total:
        return session.model_copy(update={"feedback": None, "current_index": next_index})
    return session.model_copy(update={"feedback": None, "summary_visible": True})


def _on_error_dismissed(session: QuizSession, event: ErrorDismissed) -> QuizSession:
    return session.model_copy(update={"error": None})


def _on_navigated(session: QuizSession, event: Navigated) -> QuizSession:
    _require_phase(session, Phase.ANSWERING)
    if not (0 <= event.index < session.total):
        raise InvalidTransition(f"Question index {event.index} out of range")
    return session.model_copy(update={"current_index": event.index, "error": None})


def _on_summary_requested(session: QuizSession, event: SummaryRequested) -> QuizSession:
    _require_phase(session, Phase.ANSWERING)
    return session.model_copy(update={"summary_visible": True, "error": None})


def _on_reset_requested(session: QuizSession, event: ResetRequested) -> QuizSession:
    _require_phase(session, Phase.ANSWERING, Phase.FEEDBACK, Phase.SUMMARY)
    return new_session(session.questions)


_HANDLERS: Dict[type, Callable] = {
    OptionSelected: _on_option_selected,
    AnswerReceived: _on_answer_received,
    AnswerFailed: _on_answer_failed,
    FeedbackAcknowledged: _on_feedback_acknowledged,
    ErrorDismissed: _on_error_dismissed,
    Navigated: _on_navigated,
    SummaryRequested: _on_summary_requested,
    ResetRequested: _on_reset_requested,
}


def apply(session: QuizSession, event: BaseModel) -> QuizSession:
    """Returns the session that results from ``event``; raises SessionError if it is not allowed."""
    try:
        handler = _HANDLERS[type(event)]
    except KeyError:
        raise TypeError(f"Unknown session event: {type(event).__name__}")
    return handler(session, event)
