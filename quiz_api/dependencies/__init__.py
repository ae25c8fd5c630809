"""FastAPI dependencies."""
from quiz_api.dependencies.session import (
    get_question_store,
    get_session_controller,
    session_lock,
)

__all__ = ["get_question_store", "get_session_controller", "session_lock"]
