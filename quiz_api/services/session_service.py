"""Quiz session controller.

The session is either answering question ``position`` or complete (results
view). Every mutation is followed by a best-effort progress save.
"""
import logging
import math
from typing import Any

from quiz_api.config import POINTS_PER_CORRECT
from quiz_api.errors import EmptyResultError, InvalidSelectionError, SessionStateError
from quiz_api.models.progress import AnswerRecord, ProgressSnapshot
from quiz_api.models.questions import AreaQuestion, Question
from quiz_api.models.session import QuestionFilter, SessionState
from quiz_api.services.evaluation_service import (
    Submission,
    accepts_mapping,
    evaluate,
    is_id_mapping,
    is_id_selection,
)
from quiz_api.services.progress_service import ProgressStore
from quiz_api.services.question_service import QuestionStore
from quiz_api.utils import epoch_ms

logger = logging.getLogger(__name__)

STATUS_ANSWERING = "answering"
STATUS_COMPLETE = "complete"
STATUS_EMPTY = "empty"


def build_answer_record(
    question: Question, selection: Submission, is_correct: bool
) -> AnswerRecord:
    """Store the selection in the field that matches the question variant."""
    if accepts_mapping(question):
        return AnswerRecord(
            questionId=question.id,
            dragDropMapping=dict(selection),
            isCorrect=is_correct,
            timestamp=epoch_ms(),
        )
    if isinstance(question, AreaQuestion):
        return AnswerRecord(
            questionId=question.id,
            selectedAreaIds=list(selection),
            isCorrect=is_correct,
            timestamp=epoch_ms(),
        )
    return AnswerRecord(
        questionId=question.id,
        selectedOptionIds=list(selection),
        isCorrect=is_correct,
        timestamp=epoch_ms(),
    )


class SessionController:
    """Owns the session state for one user."""

    def __init__(
        self,
        question_store: QuestionStore,
        progress_store: ProgressStore,
        points_per_correct: int = POINTS_PER_CORRECT,
    ):
        self.question_store = question_store
        self.progress_store = progress_store
        self.points_per_correct = points_per_correct

        self.questions: list[Question] = []
        self.state = SessionState()
        self.filters = QuestionFilter()
        self.bookmarked_only = False
        self.loaded = False

    # -- loading ----------------------------------------------------------

    def load(
        self, filters: QuestionFilter | None = None, bookmarked_only: bool = False
    ) -> None:
        """
        Fetch questions and position the session.

        The first load merges the persisted snapshot; later loads (filter
        changes) keep the in-memory answers and bookmarks. If every loaded
        question is answered the session starts complete, otherwise at the
        first unanswered question. ``LoadError`` leaves the state untouched.
        """
        filters = filters or QuestionFilter()
        questions = self.question_store.fetch(
            domain=filters.domain,
            case_study=filters.caseStudy,
            shuffle=filters.shuffle,
        )

        if self.loaded:
            answers = dict(self.state.answers)
            bookmarks = set(self.state.bookmarks)
        else:
            snapshot = self.progress_store.load()
            answers = dict(snapshot.answers) if snapshot else {}
            bookmarks = set(snapshot.bookmarkedQuestionIds) if snapshot else set()

        if bookmarked_only:
            questions = [q for q in questions if q.id in bookmarks]

        state = SessionState(answers=answers, bookmarks=bookmarks)
        if not bookmarked_only and questions:
            if all(q.id in answers for q in questions):
                state.complete = True
            else:
                state.position = next(
                    (i for i, q in enumerate(questions) if q.id not in answers), 0
                )

        self.questions = questions
        self.state = state
        self.filters = filters
        self.bookmarked_only = bookmarked_only
        self.loaded = True
        logger.info(
            f"Session loaded: {len(questions)} questions, {len(answers)} answers, "
            f"status={self.status}, position={state.position}"
        )

    # -- derived values ---------------------------------------------------

    @property
    def status(self) -> str:
        if not self.questions:
            return STATUS_EMPTY
        if self.state.complete:
            return STATUS_COMPLETE
        return STATUS_ANSWERING

    def current_question(self) -> Question:
        if not self.questions:
            raise EmptyResultError("No questions match the current filters")
        return self.questions[self.state.position]

    def answer_for(self, question_id: int) -> AnswerRecord | None:
        return self.state.answers.get(question_id)

    def answered_count(self) -> int:
        return sum(1 for q in self.questions if q.id in self.state.answers)

    def correct_count(self) -> int:
        return sum(
            1
            for q in self.questions
            if q.id in self.state.answers and self.state.answers[q.id].isCorrect
        )

    def score(self) -> int:
        """Points for correct answers among the loaded questions."""
        return self.correct_count() * self.points_per_correct

    def max_score(self) -> int:
        return len(self.questions) * self.points_per_correct

    def percentage(self) -> int:
        max_score = self.max_score()
        if max_score <= 0:
            return 0
        return math.floor(self.score() * 100 / max_score + 0.5)

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            answers=dict(self.state.answers),
            score=self.score(),
            bookmarkedQuestionIds=sorted(self.state.bookmarks),
            isReviewMode=self.state.complete,
        )

    # -- transitions ------------------------------------------------------

    def _require_answering(self) -> Question:
        question = self.current_question()
        if self.state.complete:
            raise SessionStateError("Session is complete; review again or reset")
        return question

    def _persist(self) -> None:
        # status ignored: the session carries on in memory
        self.progress_store.save(self.snapshot())

    def submit(self, selection: Submission) -> AnswerRecord:
        """Evaluate and record an answer for the current question.

        Does not advance. An answered question is locked until reset.
        """
        question = self._require_answering()
        if question.id in self.state.answers:
            raise SessionStateError(f"Question {question.id} is already answered")
        if accepts_mapping(question):
            if not is_id_mapping(selection):
                raise InvalidSelectionError(
                    f"Question {question.id} expects an id mapping"
                )
        elif not is_id_selection(selection):
            raise InvalidSelectionError(f"Question {question.id} expects a list of ids")

        is_correct = evaluate(question, selection)
        record = build_answer_record(question, selection, is_correct)
        self.state.answers[question.id] = record
        self._persist()
        logger.debug(f"Answer recorded: question={question.id} correct={is_correct}")
        return record

    def advance(self) -> None:
        self._require_answering()
        if self.state.position < len(self.questions) - 1:
            self.state.position += 1
        else:
            self.state.complete = True
            logger.info(
                f"Session complete: score={self.score()}/{self.max_score()} "
                f"({self.percentage()}%)"
            )
        self._persist()

    def retreat(self) -> None:
        self._require_answering()
        if self.state.position > 0:
            self.state.position -= 1
            self._persist()

    def review_again(self) -> None:
        if not self.state.complete:
            raise SessionStateError("Session is not complete")
        self.state.complete = False
        self.state.position = 0
        self._persist()

    def reset(self) -> None:
        """Drop all answers and bookmarks and start over at the first question."""
        self.state = SessionState()
        self.progress_store.clear()
        if self.bookmarked_only:
            # bookmarks are gone, so the bookmark-only view would be empty
            self.load(self.filters, bookmarked_only=False)
        logger.info("Session progress reset")

    def toggle_bookmark(self, question_id: int) -> bool:
        """Flip the bookmark for any question in the bank; returns the new flag."""
        if not any(q.id == question_id for q in self.questions):
            # outside the current filters: check the full bank
            if not any(q.id == question_id for q in self.question_store.load_all()):
                raise LookupError(f"Question {question_id} not found")
        bookmarks = self.state.bookmarks
        if question_id in bookmarks:
            bookmarks.discard(question_id)
        else:
            bookmarks.add(question_id)
        self._persist()
        return question_id in bookmarks

    # -- presentation -----------------------------------------------------

    def view(self) -> dict[str, Any]:
        """JSON-ready view of the session for the presentation layer."""
        view: dict[str, Any] = {
            "status": self.status,
            "filters": {
                "domain": self.filters.domain,
                "caseStudy": self.filters.caseStudy,
                "shuffle": self.filters.shuffle,
                "bookmarkedOnly": self.bookmarked_only,
            },
            "total": len(self.questions),
            "position": self.state.position,
            "answeredCount": self.answered_count(),
            "correctCount": self.correct_count(),
            "score": self.score(),
            "maxScore": self.max_score(),
            "percentage": self.percentage(),
            "bookmarkedQuestionIds": sorted(self.state.bookmarks),
            "question": None,
            "answer": None,
            "isBookmarked": False,
        }
        if self.questions:
            question = self.current_question()
            answer = self.answer_for(question.id)
            view["question"] = question.model_dump(mode="json")
            view["answer"] = answer.model_dump(mode="json") if answer else None
            view["isBookmarked"] = question.id in self.state.bookmarks
        return view
