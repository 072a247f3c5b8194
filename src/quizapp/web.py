import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from pydantic import BaseModel

from .config import settings
from .controller import QuizController
from .exceptions import SessionError
from .globals import templates
from .session import (
    ErrorDismissed,
    FeedbackAcknowledged,
    Navigated,
    Phase,
    QuizSession,
    ResetRequested,
    SummaryRequested,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ActiveQuiz:
    def __init__(self, controller: QuizController):
        self.controller = controller
        self.created_at = datetime.now()


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def _is_expired(quiz: ActiveQuiz) -> bool:
    return datetime.now() - quiz.created_at > timedelta(
        minutes=settings.SESSION_TIMEOUT_MINUTES
    )


def get_controller(
    request: Request, session_id: Optional[str] = Depends(get_session_id)
) -> Optional[QuizController]:
    quizzes = request.app.state.quizzes
    if not session_id or session_id not in quizzes:
        return None
    quiz = quizzes[session_id]
    if _is_expired(quiz):
        del quizzes[session_id]
        logger.info(f"Session expired: {session_id}")
        return None
    return quiz.controller


def _dispatch(controller: Optional[QuizController], event: BaseModel):
    if controller is None:
        return RedirectResponse(url="/", status_code=303)
    try:
        controller.dispatch(event)
    except SessionError as e:
        logger.info(f"Rejected {type(event).__name__}: {e}")
        return JSONResponse({"error": str(e)}, status_code=409)
    return RedirectResponse(url="/quiz", status_code=303)


def session_state(session: QuizSession) -> dict:
    question = session.current_question
    return {
        "phase": session.phase.value,
        "current_index": session.current_index,
        "total_questions": session.total,
        "question": question.model_dump(),
        "answer_record": (
            session.records[question.id].model_dump()
            if question.id in session.records
            else None
        ),
        "records": [record.model_dump() for record in session.records.values()],
        "loading": session.loading,
        "feedback": session.feedback.model_dump() if session.feedback else None,
        "error": session.error,
        "summary_visible": session.summary_visible,
        "score": session.score,
        "answered_count": session.answered_count,
    }


# --- Routes ---
@router.get("/", response_class=RedirectResponse)
async def start_quiz(request: Request, session_id: Optional[str] = Depends(get_session_id)):
    quizzes = request.app.state.quizzes
    if session_id in quizzes:
        del quizzes[session_id]
    for expired_id in [key for key, quiz in quizzes.items() if _is_expired(quiz)]:
        del quizzes[expired_id]
        logger.info(f"Session expired: {expired_id}")

    controller = QuizController(request.app.state.questions, request.app.state.oracle_client)
    new_id = str(uuid.uuid4())
    quizzes[new_id] = ActiveQuiz(controller)
    logger.info(f"New session: {new_id} [{controller.session.total} questions]")

    redirect = RedirectResponse(url="/quiz", status_code=302)
    redirect.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=new_id,
        httponly=True,
        samesite="Lax",
    )
    return redirect


@router.get("/quiz", response_class=HTMLResponse)
async def display_quiz(
    request: Request, controller: Optional[QuizController] = Depends(get_controller)
):
    if controller is None:
        return RedirectResponse(url="/", status_code=302)

    session = controller.session
    if session.phase is Phase.SUMMARY:
        return templates.TemplateResponse(
            request,
            "summary.html",
            {
                "session": session,
                "score": session.score,
                "total_questions": session.total,
            },
        )

    question = session.current_question
    return templates.TemplateResponse(
        request,
        "quiz.html",
        {
            "session": session,
            "question": question,
            "answer_record": session.record_for(question.id),
            "total_questions": session.total,
        },
    )


@router.post("/answer")
async def submit_answer(
    option: str = Form(...),
    controller: Optional[QuizController] = Depends(get_controller),
):
    if controller is None:
        return RedirectResponse(url="/", status_code=303)
    try:
        await controller.answer(option)
    except SessionError as e:
        logger.info(f"Rejected answer {option!r}: {e}")
        return JSONResponse({"error": str(e)}, status_code=409)
    return RedirectResponse(url="/quiz", status_code=303)


@router.post("/acknowledge")
async def acknowledge_feedback(controller: Optional[QuizController] = Depends(get_controller)):
    return _dispatch(controller, FeedbackAcknowledged())


@router.post("/dismiss-error")
async def dismiss_error(controller: Optional[QuizController] = Depends(get_controller)):
    return _dispatch(controller, ErrorDismissed())


@router.post("/navigate/{index}")
async def navigate(index: int, controller: Optional[QuizController] = Depends(get_controller)):
    return _dispatch(controller, Navigated(index=index))


@router.post("/finish")
async def finish_quiz(controller: Optional[QuizController] = Depends(get_controller)):
    return _dispatch(controller, SummaryRequested())


@router.post("/reset")
async def reset_quiz(controller: Optional[QuizController] = Depends(get_controller)):
    return _dispatch(controller, ResetRequested())


@router.get("/api/state")
async def get_state(controller: Optional[QuizController] = Depends(get_controller)):
    if controller is None:
        return JSONResponse({"error": "Session invalid"}, status_code=401)
    return session_state(controller.session)
