"""Text quiz and grade models."""

import uuid
from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from blogcraft.models.base import BaseModel, BaseModelNoUpdate


class TextQuiz(BaseModel):
    """Multiple-choice quiz.

    questions holds dicts of {question, options, correctAnswer}.
    """

    __tablename__ = "text_quizzes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    questions: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<TextQuiz {self.title}>"


class QuizGrade(BaseModelNoUpdate):
    """Graded attempt at a text quiz. Outlives the quiz it was taken on."""

    __tablename__ = "quiz_grades"

    quiz_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("text_quizzes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    quiz_title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    # question index (as string) -> chosen option index
    user_answers: Mapped[dict[str, int]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    correct_answers: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    total_questions: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    score: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    passed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<QuizGrade {self.score}% on {self.quiz_id}>"
