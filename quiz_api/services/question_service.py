"""Service layer for the question bank.

Questions come from the relational backend when one is configured and
reachable, otherwise from the local JSON bank.
"""
import logging
import random
from collections.abc import Sequence
from pathlib import Path
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload, sessionmaker

from quiz_api.config import ALL_FILTER
from quiz_api.errors import LoadError
from quiz_api.models.db.question import CaseStudyRow, QuestionRow
from quiz_api.models.questions import (
    AREA_TYPE,
    CHOICE_TYPE,
    FILL_TYPE,
    MATCHING_TYPE,
    Question,
    parse_questions,
)
from quiz_api.utils import json_load, read_json_file

logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffle_questions(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates shuffle into a new list."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _matches(value: str | None, wanted: str | None) -> bool:
    if wanted is None or wanted == ALL_FILTER:
        return True
    return value == wanted


class LocalQuestionSource:
    """Question bank stored as a JSON array on disk."""

    def __init__(self, questions_path: Path, case_studies_path: Path | None = None):
        self.questions_path = questions_path
        self.case_studies_path = case_studies_path

    def load_questions(self) -> list[Question]:
        try:
            raw = json_load(self.questions_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise LoadError(f"Question bank not found: {self.questions_path}") from e
        except OSError as e:
            raise LoadError(f"Cannot read question bank: {e}") from e
        except ValueError as e:
            raise LoadError(f"Question bank is not valid JSON: {e}") from e

        try:
            return parse_questions(raw)
        except ValueError as e:
            raise LoadError(f"Malformed question bank: {e}") from e

    def load_case_studies(self) -> dict[str, dict[str, str]]:
        """Map of case study ref -> {"title", "content"}."""
        if self.case_studies_path is None:
            return {}
        try:
            raw = read_json_file(self.case_studies_path, {})
        except (OSError, ValueError) as e:
            raise LoadError(f"Cannot read case studies: {e}") from e
        if not isinstance(raw, dict):
            raise LoadError("Case studies file must be a JSON object")

        studies = {}
        for ref, value in raw.items():
            if isinstance(value, str):
                studies[ref] = {"title": ref, "content": value}
            elif isinstance(value, dict):
                studies[ref] = {
                    "title": str(value.get("title") or ref),
                    "content": str(value.get("content", "")),
                }
        return studies


def question_row_to_payload(row: QuestionRow) -> dict[str, Any]:
    """Shape a ``questions`` row and its detail rows like a JSON bank record."""
    payload: dict[str, Any] = {
        "id": row.id,
        "type": row.type,
        "text": row.text,
        "domain": row.domain,
        "explanation": row.explanation or "",
        "detailedExplanation": row.detailed_explanation,
        "exhibitUrl": row.exhibit_url,
        "codeSnippet": row.code_snippet,
        "caseStudyRef": row.case_study.title if row.case_study else None,
    }

    if row.type == CHOICE_TYPE:
        payload["options"] = [{"id": o.option_key, "text": o.text} for o in row.options]
        payload["correctOptionIds"] = [o.option_key for o in row.options if o.is_correct]
    elif row.type == MATCHING_TYPE:
        payload["items"] = [{"id": i.id, "content": i.content} for i in row.dragdrop_items]
        payload["targets"] = [{"id": t.id, "label": t.label} for t in row.dragdrop_targets]
        payload["correctMapping"] = {m.item_id: m.target_id for m in row.dragdrop_mappings}
    elif row.type == AREA_TYPE:
        payload["imageUrl"] = row.image_url
        payload["areas"] = [
            {
                "id": a.id,
                "x": a.x,
                "y": a.y,
                "width": a.width,
                "height": a.height,
                "label": a.label,
            }
            for a in row.hotspot_areas
        ]
        payload["correctAreaIds"] = [a.id for a in row.hotspot_areas if a.is_correct]
    elif row.type == FILL_TYPE:
        menus = []
        correct: dict[str, str] = {}
        for menu in row.dropdown_menus:
            options = [o for o in row.dropdown_options if o.menu_id == menu.id]
            menus.append(
                {
                    "id": menu.id,
                    "label": menu.label,
                    "options": [{"id": o.option_id, "text": o.text} for o in options],
                }
            )
            for option in options:
                if option.is_correct:
                    correct[menu.id] = option.option_id
        payload["menus"] = menus
        payload["correctMapping"] = correct
    return payload


class DatabaseQuestionSource:
    """Question bank stored in the relational tables of ``models.db``."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load_questions(self) -> list[Question]:
        """Raises ``SQLAlchemyError`` when the backend is unreachable."""
        db = self.session_factory()
        try:
            rows = db.execute(
                select(QuestionRow)
                .options(
                    selectinload(QuestionRow.case_study),
                    selectinload(QuestionRow.options),
                    selectinload(QuestionRow.dragdrop_items),
                    selectinload(QuestionRow.dragdrop_targets),
                    selectinload(QuestionRow.dragdrop_mappings),
                    selectinload(QuestionRow.hotspot_areas),
                    selectinload(QuestionRow.dropdown_menus),
                    selectinload(QuestionRow.dropdown_options),
                )
                .order_by(QuestionRow.id)
            ).scalars().all()
            payload = [question_row_to_payload(row) for row in rows]
        finally:
            db.close()

        try:
            return parse_questions(payload)
        except ValueError as e:
            raise LoadError(f"Malformed question rows: {e}") from e

    def load_case_studies(self) -> dict[str, dict[str, str]]:
        db = self.session_factory()
        try:
            rows = db.execute(select(CaseStudyRow)).scalars().all()
            return {
                row.title: {"title": row.title, "content": row.content_markdown}
                for row in rows
            }
        finally:
            db.close()


class QuestionStore:
    """Filtered, optionally shuffled access to the question bank."""

    def __init__(
        self,
        local: LocalQuestionSource,
        remote: DatabaseQuestionSource | None = None,
        rng: random.Random | None = None,
    ):
        self.local = local
        self.remote = remote
        self.rng = rng or random.Random()

    def load_all(self) -> list[Question]:
        """Full collection; falls back to the local bank if the backend fails."""
        if self.remote is not None:
            try:
                questions = self.remote.load_questions()
            except SQLAlchemyError as e:
                logger.warning(f"Question backend unavailable, using local bank: {e}")
            else:
                logger.info(f"Loaded {len(questions)} questions from database")
                return questions

        questions = self.local.load_questions()
        logger.info(f"Loaded {len(questions)} questions from {self.local.questions_path}")
        return questions

    def fetch(
        self,
        domain: str | None = None,
        case_study: str | None = None,
        shuffle: bool = False,
    ) -> list[Question]:
        """
        Questions matching the domain and case study tags.

        ``None`` or ``"All"`` disables a filter. Returns a random permutation
        when ``shuffle`` is set, otherwise ascending id order. Raises
        ``LoadError`` if the bank cannot be loaded.
        """
        questions = [
            q
            for q in self.load_all()
            if _matches(q.domain, domain) and _matches(q.caseStudyRef, case_study)
        ]
        if shuffle:
            return shuffle_questions(questions, self.rng)
        return sorted(questions, key=lambda q: q.id)

    def domains(self) -> list[str]:
        return sorted({q.domain for q in self.load_all() if q.domain})

    def case_study_refs(self) -> list[str]:
        return sorted({q.caseStudyRef for q in self.load_all() if q.caseStudyRef})

    def case_studies(self) -> dict[str, dict[str, str]]:
        if self.remote is not None:
            try:
                return self.remote.load_case_studies()
            except SQLAlchemyError as e:
                logger.warning(f"Question backend unavailable, using local case studies: {e}")
        return self.local.load_case_studies()

    def case_study(self, ref: str) -> dict[str, str]:
        """Reference text for one case study; ``LookupError`` if unknown."""
        study = self.case_studies().get(ref)
        if study is None:
            raise LookupError(f"Unknown case study: {ref}")
        return {"ref": ref, **study}
