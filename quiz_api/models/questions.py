"""Question bank Pydantic models.

A question is a tagged union over the ``type`` field. Field names follow the
JSON question bank format, so payloads validate without aliasing.
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


CHOICE_TYPE = "MultipleChoice"
MATCHING_TYPE = "DragDrop"
AREA_TYPE = "Hotspot"
FILL_TYPE = "Dropdown"

QUESTION_TYPES = (CHOICE_TYPE, MATCHING_TYPE, AREA_TYPE, FILL_TYPE)


class Option(BaseModel):
    """Selectable option (choice answers and dropdown entries)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    text: str


class DragDropItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    content: str


class DragDropTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str


class HotspotArea(BaseModel):
    """Rectangular region in normalized image coordinates."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    x: float = Field(..., ge=0)
    y: float = Field(..., ge=0)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    label: str | None = None


class DropdownMenu(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str | None = None
    options: list[Option] = Field(..., min_length=1)


class QuestionBase(BaseModel):
    """Fields shared by every question variant."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    text: str
    codeSnippet: str | None = None
    exhibitUrl: str | None = None
    domain: str | None = None
    caseStudyRef: str | None = None
    explanation: str = ""
    detailedExplanation: str | None = None


def _unknown_ids(referenced, known) -> list[str]:
    return sorted(set(referenced) - set(known))


class ChoiceQuestion(QuestionBase):
    """Multiple-choice question; more than one correct id means multi-select."""

    type: Literal["MultipleChoice"]
    selectionType: Literal["Single", "Multiple"] | None = None
    options: list[Option] = Field(..., min_length=1)
    correctOptionIds: list[str] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_correct_ids(self) -> "ChoiceQuestion":
        unknown = _unknown_ids(self.correctOptionIds, (o.id for o in self.options))
        if unknown:
            raise ValueError(f"question {self.id}: unknown correct option ids {unknown}")
        return self

    @property
    def is_multi_select(self) -> bool:
        if self.selectionType is not None:
            return self.selectionType == "Multiple"
        return len(set(self.correctOptionIds)) > 1


class MatchingQuestion(QuestionBase):
    """Drag-and-drop question: each item belongs on exactly one target."""

    type: Literal["DragDrop"]
    items: list[DragDropItem] = Field(..., min_length=1)
    targets: list[DragDropTarget] = Field(..., min_length=1)
    correctMapping: dict[str, str]

    @model_validator(mode="after")
    def _check_mapping(self) -> "MatchingQuestion":
        item_ids = {item.id for item in self.items}
        unknown_items = _unknown_ids(self.correctMapping, item_ids)
        if unknown_items:
            raise ValueError(f"question {self.id}: unknown items {unknown_items}")
        unmapped = _unknown_ids(item_ids, self.correctMapping)
        if unmapped:
            raise ValueError(f"question {self.id}: items without a target {unmapped}")
        unknown_targets = _unknown_ids(
            self.correctMapping.values(), (t.id for t in self.targets)
        )
        if unknown_targets:
            raise ValueError(f"question {self.id}: unknown targets {unknown_targets}")
        return self


class AreaQuestion(QuestionBase):
    """Hotspot question: select regions on an exhibit image or code listing."""

    type: Literal["Hotspot"]
    imageUrl: str | None = None
    areas: list[HotspotArea] = Field(..., min_length=1)
    correctAreaIds: list[str] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_correct_ids(self) -> "AreaQuestion":
        unknown = _unknown_ids(self.correctAreaIds, (a.id for a in self.areas))
        if unknown:
            raise ValueError(f"question {self.id}: unknown correct areas {unknown}")
        return self


class FillQuestion(QuestionBase):
    """Dropdown fill-in question with independent menus."""

    type: Literal["Dropdown"]
    menus: list[DropdownMenu] = Field(..., min_length=1)
    correctMapping: dict[str, str]

    @model_validator(mode="after")
    def _check_mapping(self) -> "FillQuestion":
        menus = {menu.id: menu for menu in self.menus}
        unknown = _unknown_ids(self.correctMapping, menus)
        if unknown:
            raise ValueError(f"question {self.id}: unknown menus {unknown}")
        for menu_id, menu in menus.items():
            option_id = self.correctMapping.get(menu_id)
            if option_id is None:
                raise ValueError(f"question {self.id}: menu {menu_id} has no answer")
            if option_id not in {o.id for o in menu.options}:
                raise ValueError(
                    f"question {self.id}: menu {menu_id} has unknown option {option_id}"
                )
        return self


Question = Annotated[
    Union[ChoiceQuestion, MatchingQuestion, AreaQuestion, FillQuestion],
    Field(discriminator="type"),
]

_QUESTION_LIST = TypeAdapter(list[Question])


def parse_questions(raw: object) -> list[Question]:
    """Validate a question bank document.

    Records without ``type`` are legacy multiple-choice questions. Raises
    ``ValueError`` (including pydantic's ``ValidationError``) for malformed
    documents and duplicate ids.
    """
    if not isinstance(raw, list):
        raise ValueError("question bank must be a JSON array")

    records = []
    for record in raw:
        if isinstance(record, dict) and "type" not in record:
            record = {**record, "type": CHOICE_TYPE}
        records.append(record)

    questions = _QUESTION_LIST.validate_python(records)

    seen: set[int] = set()
    for question in questions:
        if question.id in seen:
            raise ValueError(f"duplicate question id {question.id}")
        seen.add(question.id)
    return questions
