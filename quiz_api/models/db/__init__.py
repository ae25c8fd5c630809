"""Database models."""
from quiz_api.models.db.question import (
    CaseStudyRow,
    DragDropItemRow,
    DragDropMappingRow,
    DragDropTargetRow,
    DropdownMenuRow,
    DropdownOptionRow,
    HotspotAreaRow,
    QuestionOptionRow,
    QuestionRow,
)

__all__ = [
    "CaseStudyRow",
    "DragDropItemRow",
    "DragDropMappingRow",
    "DragDropTargetRow",
    "DropdownMenuRow",
    "DropdownOptionRow",
    "HotspotAreaRow",
    "QuestionOptionRow",
    "QuestionRow",
]
