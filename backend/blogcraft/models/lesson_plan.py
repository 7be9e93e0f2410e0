"""Lesson plan model."""

import uuid
from typing import Any

from sqlalchemy import JSON, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from blogcraft.models.base import BaseModel


class LessonPlan(BaseModel):
    """5E lesson plan owned by the teacher who wrote it."""

    __tablename__ = "lesson_plans"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    teacher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    topic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    standards: Mapped[str | None] = mapped_column(Text, nullable=True)
    i_can_statements: Mapped[str | None] = mapped_column(Text, nullable=True)
    academic_vocabulary: Mapped[str | None] = mapped_column(Text, nullable=True)
    dok_questions: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Lesson phases: {timeAllotted, teacherWill, studentsWill, instructionTypes}
    warm_up: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    explore: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    explain: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    elaborate: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    evaluate: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    total_time: Mapped[str | None] = mapped_column(String(64), nullable=True)
    evaluation: Mapped[str | None] = mapped_column(Text, nullable=True)
    reflection: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<LessonPlan {self.title}>"
