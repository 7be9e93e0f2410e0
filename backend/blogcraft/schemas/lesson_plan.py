"""Lesson plan schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from blogcraft.schemas.common import BaseSchema, text_field

InstructionType = Literal[
    "Teacher Directed Instruction",
    "Guided Practice",
    "Independent Practice/Learning Tasks",
    "Collaborative learning",
    "Student Discourse",
]


class LessonPhase(BaseSchema):
    """One phase of a 5E lesson."""

    time_allotted: str = ""
    teacher_will: str = ""
    students_will: str = ""
    instruction_types: list[InstructionType] = Field(default_factory=list)


class LessonPlanBase(BaseSchema):
    """Fields shared by lesson plan requests and responses."""

    teacher: str | None = None
    date: str | None = None
    subject: str | None = None
    topic: str | None = None
    standards: str | None = None
    i_can_statements: str | None = None
    academic_vocabulary: str | None = None
    dok_questions: str | None = None
    total_time: str | None = "90 mins"
    evaluation: str | None = None
    reflection: str | None = None


class LessonPlanCreate(LessonPlanBase):
    """Lesson plan creation request."""

    title: text_field(1, 200)
    warm_up: LessonPhase = Field(default_factory=LessonPhase)
    explore: LessonPhase = Field(default_factory=LessonPhase)
    explain: LessonPhase = Field(default_factory=LessonPhase)
    elaborate: LessonPhase = Field(default_factory=LessonPhase)
    evaluate: LessonPhase = Field(default_factory=LessonPhase)


class LessonPlanUpdate(BaseSchema):
    """Partial lesson plan update."""

    title: text_field(1, 200) | None = None
    teacher: str | None = None
    date: str | None = None
    subject: str | None = None
    topic: str | None = None
    standards: str | None = None
    i_can_statements: str | None = None
    academic_vocabulary: str | None = None
    dok_questions: str | None = None
    warm_up: LessonPhase | None = None
    explore: LessonPhase | None = None
    explain: LessonPhase | None = None
    elaborate: LessonPhase | None = None
    evaluate: LessonPhase | None = None
    total_time: str | None = None
    evaluation: str | None = None
    reflection: str | None = None


class LessonPlanResponse(LessonPlanBase):
    """Lesson plan response."""

    id: UUID
    owner_id: UUID
    title: str
    warm_up: LessonPhase
    explore: LessonPhase
    explain: LessonPhase
    elaborate: LessonPhase
    evaluate: LessonPhase
    created_at: datetime
    updated_at: datetime


LESSON_PHASES = ("warm_up", "explore", "explain", "elaborate", "evaluate")
