"""Pydantic models and session state."""
from quiz_api.models.progress import AnswerRecord, ProgressSnapshot
from quiz_api.models.questions import (
    AreaQuestion,
    ChoiceQuestion,
    FillQuestion,
    MatchingQuestion,
    Question,
    parse_questions,
)
from quiz_api.models.session import (
    AnswerSubmission,
    QuestionFilter,
    SessionStartRequest,
    SessionState,
)

__all__ = [
    "AnswerRecord",
    "AnswerSubmission",
    "AreaQuestion",
    "ChoiceQuestion",
    "FillQuestion",
    "MatchingQuestion",
    "ProgressSnapshot",
    "Question",
    "QuestionFilter",
    "SessionStartRequest",
    "SessionState",
    "parse_questions",
]
