"""Text quiz and grade schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from blogcraft.schemas.common import BaseSchema, text_field


class QuizQuestionPublic(BaseSchema):
    """Question as shown to students (no answer key)."""

    question: text_field(1, 1000)
    options: list[text_field(1, 500)] = Field(min_length=2, max_length=6)


class QuizQuestion(QuizQuestionPublic):
    """Question with its answer key."""

    correct_answer: int = Field(ge=0)

    @model_validator(mode="after")
    def answer_within_options(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError("correctAnswer must be the index of one of the options")
        return self


class TextQuizCreate(BaseSchema):
    """Quiz creation request."""

    title: text_field(1, 200)
    description: str | None = None
    questions: list[QuizQuestion] = Field(min_length=1)


class TextQuizUpdate(BaseSchema):
    """Quiz update request."""

    title: text_field(1, 200) | None = None
    description: str | None = None
    questions: list[QuizQuestion] | None = Field(default=None, min_length=1)


class TextQuizPublicResponse(BaseSchema):
    """Quiz as served to students."""

    id: UUID
    title: str
    description: str | None = None
    questions: list[QuizQuestionPublic]
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class TextQuizResponse(TextQuizPublicResponse):
    """Quiz with answer key, served to staff."""

    questions: list[QuizQuestion]


class GradeSubmit(BaseSchema):
    """A student's answers: question index -> chosen option index."""

    quiz_id: UUID
    user_answers: dict[int, int] = Field(default_factory=dict)


class QuizGradeResponse(BaseSchema):
    """Graded attempt."""

    id: UUID
    quiz_id: UUID | None = None
    quiz_title: str
    user_id: UUID
    user_name: str
    user_answers: dict[str, int]
    correct_answers: int
    total_questions: int
    score: int
    passed: bool
    created_at: datetime
