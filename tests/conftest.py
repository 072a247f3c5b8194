"""Shared fixtures for the oracle, client and session tests."""
import httpx
import pytest

from quizapp.answer_key import DEFAULT_ANSWERS, AnswerKey
from quizapp.app import create_oracle_app
from quizapp.models import Question
from quizapp.oracle_client import OracleClient
from quizapp.questions import DEFAULT_QUESTIONS
from quizapp.session import new_session


@pytest.fixture
def questions():
    """The three built-in Polish questions (ids 1-3)."""
    return DEFAULT_QUESTIONS


@pytest.fixture
def unknown_question():
    """A question the oracle has no answer for."""
    return Question(id=99, prompt="Pytanie spoza klucza?", options=["Tak", "Nie"])


@pytest.fixture
def answer_key():
    return AnswerKey(DEFAULT_ANSWERS)


@pytest.fixture
def oracle_app(answer_key):
    return create_oracle_app(answer_key=answer_key)


@pytest.fixture
def oracle_client(oracle_app):
    """Client wired to the in-process oracle app, no network involved."""
    return OracleClient(
        base_url="http://oracle.test",
        timeout=1.0,
        transport=httpx.ASGITransport(app=oracle_app),
    )


@pytest.fixture
def session(questions):
    return new_session(questions)
