import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .answer_key import AnswerKey
from .exceptions import InvalidQuestionId
from .models import CorrectAnswerRequest, CorrectAnswerResponse, ErrorResponse

logger = logging.getLogger(__name__)

INVALID_QUESTION_ID_MESSAGE = "Nieprawidłowe ID pytania"
INTERNAL_ERROR_MESSAGE = "Wewnętrzny błąd serwera"

router = APIRouter()


# --- Dependencies ---
def get_answer_key(request: Request) -> AnswerKey:
    return request.app.state.answer_key


# --- Routes ---
@router.post(
    "/api/get-correct-answer",
    response_model=CorrectAnswerResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_correct_answer(
    payload: CorrectAnswerRequest,
    answer_key: AnswerKey = Depends(get_answer_key),
):
    try:
        correct_answer = answer_key.lookup(payload.question_id)
    except InvalidQuestionId as e:
        logger.info(f"Rejected lookup: {e}")
        return JSONResponse({"error": INVALID_QUESTION_ID_MESSAGE}, status_code=400)
    except Exception:
        logger.exception("Server error during answer lookup")
        return JSONResponse({"error": INTERNAL_ERROR_MESSAGE}, status_code=500)

    return CorrectAnswerResponse(correct_answer=correct_answer)


async def invalid_request_handler(request: Request, exc: Exception) -> JSONResponse:
    """Malformed or missing bodies get the same 400 as a bad id."""
    logger.info(f"Rejected malformed request to {request.url.path}")
    return JSONResponse({"error": INVALID_QUESTION_ID_MESSAGE}, status_code=400)
