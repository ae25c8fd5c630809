"""
Question bank tables.

One ``questions`` row per question plus one child table per variant detail.
Child rows carry a ``position`` so option order survives the round trip.
"""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quiz_api.database import Base


class CaseStudyRow(Base):
    """Case study reference text shown next to its questions."""

    __tablename__ = "case_studies"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Short reference used by questions, e.g. "Contoso"
    title: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    content_markdown: Mapped[str] = mapped_column(Text, default="", nullable=False)

    questions: Mapped[list["QuestionRow"]] = relationship(
        "QuestionRow", back_populates="case_study"
    )


class QuestionRow(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    domain: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    explanation: Mapped[str] = mapped_column(Text, default="", nullable=False)
    detailed_explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    exhibit_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    code_snippet: Mapped[str | None] = mapped_column(Text, nullable=True)
    case_study_id: Mapped[int | None] = mapped_column(
        ForeignKey("case_studies.id", ondelete="SET NULL"), nullable=True
    )

    case_study: Mapped["CaseStudyRow | None"] = relationship(
        "CaseStudyRow", back_populates="questions"
    )
    options: Mapped[list["QuestionOptionRow"]] = relationship(
        "QuestionOptionRow",
        cascade="all, delete-orphan",
        order_by="QuestionOptionRow.position",
    )
    dragdrop_items: Mapped[list["DragDropItemRow"]] = relationship(
        "DragDropItemRow",
        cascade="all, delete-orphan",
        order_by="DragDropItemRow.position",
    )
    dragdrop_targets: Mapped[list["DragDropTargetRow"]] = relationship(
        "DragDropTargetRow",
        cascade="all, delete-orphan",
        order_by="DragDropTargetRow.position",
    )
    dragdrop_mappings: Mapped[list["DragDropMappingRow"]] = relationship(
        "DragDropMappingRow", cascade="all, delete-orphan"
    )
    hotspot_areas: Mapped[list["HotspotAreaRow"]] = relationship(
        "HotspotAreaRow",
        cascade="all, delete-orphan",
        order_by="HotspotAreaRow.position",
    )
    dropdown_menus: Mapped[list["DropdownMenuRow"]] = relationship(
        "DropdownMenuRow",
        cascade="all, delete-orphan",
        order_by="DropdownMenuRow.position",
    )
    dropdown_options: Mapped[list["DropdownOptionRow"]] = relationship(
        "DropdownOptionRow",
        cascade="all, delete-orphan",
        order_by="DropdownOptionRow.position",
    )


class QuestionOptionRow(Base):
    __tablename__ = "question_options"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    option_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_correct: Mapped[bool] = mapped_column(default=False, nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)


class DragDropItemRow(Base):
    __tablename__ = "dragdrop_items"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)


class DragDropTargetRow(Base):
    __tablename__ = "dragdrop_targets"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    label: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)


class DragDropMappingRow(Base):
    """Correct target for one drag-and-drop item."""

    __tablename__ = "dragdrop_mappings"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)


class HotspotAreaRow(Base):
    __tablename__ = "hotspot_areas"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    x: Mapped[float] = mapped_column(Float, nullable=False)
    y: Mapped[float] = mapped_column(Float, nullable=False)
    width: Mapped[float] = mapped_column(Float, nullable=False)
    height: Mapped[float] = mapped_column(Float, nullable=False)
    label: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_correct: Mapped[bool] = mapped_column(default=False, nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)


class DropdownMenuRow(Base):
    __tablename__ = "dropdown_menus"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    label: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(default=0, nullable=False)


class DropdownOptionRow(Base):
    """
    Dropdown option. ``id`` is the composite ``<menu>_<option>`` key, since
    menus of the same question may reuse option ids.
    """

    __tablename__ = "dropdown_options"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    id: Mapped[str] = mapped_column(String(130), primary_key=True)
    menu_id: Mapped[str] = mapped_column(String(64), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_correct: Mapped[bool] = mapped_column(default=False, nullable=False)
    position: Mapped[int] = mapped_column(default=0, nullable=False)

    @property
    def option_id(self) -> str:
        """Option id within its menu (composite prefix stripped)."""
        prefix = f"{self.menu_id}_"
        if self.id.startswith(prefix):
            return self.id[len(prefix):]
        return self.id
