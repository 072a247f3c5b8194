import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .answer_key import AnswerKey
from .config import settings
from .models import Question
from .oracle import invalid_request_handler
from .oracle import router as oracle_router
from .oracle_client import OracleClient
from .questions import QuestionBank
from .web import router as web_router


# --- Logging Setup ---
def setup_logging():
    logger = logging.getLogger("quizapp")
    logger.setLevel(settings.LOG_LEVEL)
    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def oracle_lifespan(app: FastAPI):
    if app.state.answer_key is None:
        app.state.answer_key = AnswerKey.load(settings.ANSWER_KEY_FILE)
    yield


@asynccontextmanager
async def client_lifespan(app: FastAPI):
    if app.state.questions is None:
        app.state.questions = QuestionBank(settings.QUESTIONS_FILE).get_questions()
    owns_client = app.state.oracle_client is None
    if owns_client:
        app.state.oracle_client = OracleClient(
            settings.ORACLE_URL, settings.ORACLE_TIMEOUT_SECONDS
        )
    yield
    if owns_client:
        await app.state.oracle_client.aclose()


# --- App Factories ---
def create_oracle_app(answer_key: Optional[AnswerKey] = None) -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=f"{settings.PROJECT_NAME} oracle",
        debug=settings.DEBUG,
        lifespan=oracle_lifespan,
        root_path=settings.ROOT_PATH,
    )
    app.state.answer_key = answer_key

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, invalid_request_handler)

    app.include_router(oracle_router)

    return app


def create_client_app(
    questions: Optional[Sequence[Question]] = None,
    oracle_client: Optional[OracleClient] = None,
) -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=client_lifespan,
        root_path=settings.ROOT_PATH,
    )
    app.state.questions = tuple(questions) if questions is not None else None
    app.state.oracle_client = oracle_client
    app.state.quizzes = {}

    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

    app.include_router(web_router)

    return app
