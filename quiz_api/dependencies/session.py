"""Session dependencies for FastAPI."""
import threading

from fastapi import Request

from quiz_api.services.question_service import QuestionStore
from quiz_api.services.session_service import SessionController

# Sync endpoints run in a threadpool; session mutations go through this lock
session_lock = threading.Lock()


def get_question_store(request: Request) -> QuestionStore:
    return request.app.state.question_store


def get_session_controller(request: Request) -> SessionController:
    return request.app.state.session_controller
