import asyncio
import logging
from typing import Sequence

from pydantic import BaseModel

from .exceptions import OracleError, OracleRejected
from .models import Question
from .oracle_client import OracleClient
from .session import (
    AnswerFailed,
    AnswerReceived,
    OptionSelected,
    QuizSession,
    apply,
    new_session,
)

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Nie udało się pobrać poprawnej odpowiedzi"
CONNECTION_ERROR_MESSAGE = "Problemy z połączeniem z serwerem"


class QuizController:
    """Drives one quiz session, performing the oracle lookup for each answer."""

    def __init__(self, questions: Sequence[Question], client: OracleClient):
        self.session: QuizSession = new_session(questions)
        self.client = client

    def dispatch(self, event: BaseModel) -> QuizSession:
        self.session = apply(self.session, event)
        return self.session

    async def answer(self, option: str) -> QuizSession:
        # Moves to loading before awaiting, so a second submission is rejected.
        pending = self.dispatch(OptionSelected(option=option)).pending
        question_id = pending.question_id

        try:
            correct_answer = await self.client.get_correct_answer(question_id)
        except OracleRejected as e:
            logger.warning(f"Answer lookup for question {question_id} rejected: {e}")
            return self.dispatch(AnswerFailed(question_id=question_id, message=FETCH_FAILED_MESSAGE))
        except OracleError as e:
            logger.warning(f"Error checking answer for question {question_id}: {e}")
            return self.dispatch(AnswerFailed(question_id=question_id, message=CONNECTION_ERROR_MESSAGE))
        except asyncio.CancelledError:
            self.dispatch(AnswerFailed(question_id=question_id, message=CONNECTION_ERROR_MESSAGE))
            raise
        except Exception:
            logger.exception(f"Unexpected error checking answer for question {question_id}")
            return self.dispatch(AnswerFailed(question_id=question_id, message=CONNECTION_ERROR_MESSAGE))

        return self.dispatch(AnswerReceived(question_id=question_id, correct_answer=correct_answer))
