import json
import random
from pathlib import Path
from typing import Callable

import pytest

from quiz_api.services.progress_service import ProgressStore
from quiz_api.services.question_service import LocalQuestionSource, QuestionStore
from quiz_api.services.session_service import SessionController


def choice_question(question_id: int, correct: list[str] | None = None, **extra) -> dict:
    question = {
        "id": question_id,
        "type": "MultipleChoice",
        "text": f"Question {question_id}?",
        "options": [
            {"id": "a", "text": "Alpha"},
            {"id": "b", "text": "Beta"},
            {"id": "c", "text": "Gamma"},
            {"id": "d", "text": "Delta"},
        ],
        "correctOptionIds": correct or ["a"],
        "explanation": "Because.",
    }
    question.update(extra)
    return question


SAMPLE_BANK = [
    choice_question(1, ["a"], domain="Maintain", caseStudyRef="Contoso"),
    choice_question(2, ["a", "b"], domain="Prepare"),
    {
        "id": 3,
        "type": "DragDrop",
        "domain": "Model",
        "text": "Match storage modes.",
        "items": [
            {"id": "import", "content": "Import"},
            {"id": "dq", "content": "DirectQuery"},
            {"id": "dl", "content": "Direct Lake"},
        ],
        "targets": [
            {"id": "cache", "label": "Cached"},
            {"id": "source", "label": "Source"},
            {"id": "delta", "label": "Delta"},
        ],
        "correctMapping": {"import": "cache", "dq": "source", "dl": "delta"},
        "explanation": "Storage modes.",
    },
    {
        "id": 4,
        "type": "Hotspot",
        "domain": "Analyze",
        "text": "Select the filter line.",
        "areas": [
            {"id": "l1", "x": 0, "y": 0, "width": 100, "height": 50},
            {"id": "l2", "x": 0, "y": 50, "width": 100, "height": 50, "label": "Line 2"},
        ],
        "correctAreaIds": ["l2"],
        "explanation": "Line 2 filters.",
    },
    {
        "id": 5,
        "type": "Dropdown",
        "domain": "Prepare",
        "caseStudyRef": "Litware",
        "text": "Complete the statement.",
        "menus": [
            {"id": "box1", "options": [{"id": "append", "text": "append"}, {"id": "overwrite", "text": "overwrite"}]},
            {"id": "box2", "options": [{"id": "delta", "text": "delta"}, {"id": "csv", "text": "csv"}]},
        ],
        "correctMapping": {"box1": "append", "box2": "delta"},
        "explanation": "Append to delta.",
    },
]


@pytest.fixture
def write_bank(tmp_path: Path) -> Callable[[object], Path]:
    def _write(questions: object, name: str = "questions.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(questions), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def bank_path(write_bank) -> Path:
    return write_bank(SAMPLE_BANK)


@pytest.fixture
def case_studies_path(tmp_path: Path) -> Path:
    path = tmp_path / "case_studies.json"
    path.write_text(
        json.dumps(
            {
                "Contoso": {"title": "Contoso, Ltd.", "content": "# Contoso"},
                "Litware": "# Litware",
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def question_store(bank_path: Path, case_studies_path: Path) -> QuestionStore:
    return QuestionStore(
        LocalQuestionSource(bank_path, case_studies_path), rng=random.Random(7)
    )


@pytest.fixture
def progress_store(tmp_path: Path) -> ProgressStore:
    return ProgressStore(tmp_path / "progress", "test_progress_v1")


@pytest.fixture
def controller(question_store: QuestionStore, progress_store: ProgressStore) -> SessionController:
    return SessionController(question_store, progress_store, points_per_correct=10)


@pytest.fixture
def make_choice() -> Callable[..., dict]:
    return choice_question


@pytest.fixture
def sample_bank() -> list[dict]:
    return json.loads(json.dumps(SAMPLE_BANK))
