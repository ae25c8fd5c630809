"""API route modules."""
from quiz_api.routes import questions, session

__all__ = ["questions", "session"]
