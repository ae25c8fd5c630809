"""Answer record and persisted progress snapshot models."""
from pydantic import BaseModel, ConfigDict, Field


class AnswerRecord(BaseModel):
    """Recorded answer for one question.

    The selection lives in the field matching the question variant:
    ``selectedOptionIds`` for choice, ``selectedAreaIds`` for hotspot and
    ``dragDropMapping`` for drag-and-drop and dropdown questions.
    """

    model_config = ConfigDict(frozen=True)

    questionId: int
    selectedOptionIds: list[str] = Field(default_factory=list)
    dragDropMapping: dict[str, str] | None = None
    selectedAreaIds: list[str] | None = None
    isCorrect: bool
    timestamp: int


class ProgressSnapshot(BaseModel):
    """Serialized session progress.

    ``answers`` holds at most one record per question id. ``score`` and
    ``isReviewMode`` are informational; both are recomputed on load.
    """

    answers: dict[int, AnswerRecord] = Field(default_factory=dict)
    score: int = 0
    bookmarkedQuestionIds: list[int] = Field(default_factory=list)
    isReviewMode: bool = False
