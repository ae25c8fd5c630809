"""Main FastAPI application with modularized routes."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quiz_api.config import (
    CASE_STUDIES_PATH,
    PROGRESS_DIR,
    PROGRESS_STORAGE_KEY,
    QUESTIONS_PATH,
)
from quiz_api.database import SessionLocal
from quiz_api.dependencies import session_lock
from quiz_api.errors import (
    EmptyResultError,
    InvalidSelectionError,
    LoadError,
    SessionStateError,
)
from quiz_api.logging_setup import setup_console_logging
from quiz_api.routes import questions, session
from quiz_api.services.progress_service import ProgressStore
from quiz_api.services.question_service import (
    DatabaseQuestionSource,
    LocalQuestionSource,
    QuestionStore,
)
from quiz_api.services.session_service import SessionController

logger = logging.getLogger(__name__)


def build_question_store() -> QuestionStore:
    """Question store from configuration; the database is used when configured."""
    local = LocalQuestionSource(QUESTIONS_PATH, CASE_STUDIES_PATH)
    remote = DatabaseQuestionSource(SessionLocal) if SessionLocal is not None else None
    return QuestionStore(local, remote)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LoadError)
    def handle_load_error(request: Request, exc: LoadError) -> JSONResponse:
        logger.error(f"Question load failed: {exc}")
        return JSONResponse(
            status_code=503,
            content={
                "detail": "Failed to load question database. Reload to try again.",
                "error": str(exc),
            },
        )

    @app.exception_handler(EmptyResultError)
    def handle_empty_result(request: Request, exc: EmptyResultError) -> JSONResponse:
        # Not a failure: clients render the empty state with a clear-filters action
        controller: SessionController = request.app.state.session_controller
        with session_lock:
            view = controller.view()
        return JSONResponse(status_code=200, content=view)

    @app.exception_handler(SessionStateError)
    def handle_session_state(request: Request, exc: SessionStateError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidSelectionError)
    def handle_invalid_selection(
        request: Request, exc: InvalidSelectionError
    ) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app(
    question_store: QuestionStore | None = None,
    progress_store: ProgressStore | None = None,
) -> FastAPI:
    """Build the API around one session controller (single local user)."""
    setup_console_logging()

    app = FastAPI(title="Exam Prep Quiz API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    question_store = question_store or build_question_store()
    progress_store = progress_store or ProgressStore(PROGRESS_DIR, PROGRESS_STORAGE_KEY)
    app.state.question_store = question_store
    app.state.session_controller = SessionController(question_store, progress_store)

    register_error_handlers(app)

    app.include_router(questions.router)
    app.include_router(session.router)
    return app
