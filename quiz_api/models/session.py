"""Session state and session request models."""
from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel

from quiz_api.config import ALL_FILTER
from quiz_api.models.progress import AnswerRecord


@dataclass
class SessionState:
    position: int = 0
    # True once the last question has been passed (results view)
    complete: bool = False
    answers: dict[int, AnswerRecord] = field(default_factory=dict)
    bookmarks: set[int] = field(default_factory=set)


class QuestionFilter(BaseModel):
    """Question selection filters; ``"All"`` disables a tag filter."""

    domain: str | None = ALL_FILTER
    caseStudy: str | None = ALL_FILTER
    shuffle: bool = False


class SessionStartRequest(QuestionFilter):
    """Start (or restart) a session over a filtered question set."""

    shuffle: bool = True
    bookmarkedOnly: bool = False


class AnswerSubmission(BaseModel):
    """Selected ids (choice, hotspot) or id-to-id mapping (drag-and-drop, dropdown)."""

    selection: dict[str, str] | list[str]
