"""Text quiz and grade endpoints.

Students never receive the answer key; grading happens on the server.
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.sql import Select

from blogcraft.api.deps import CurrentUser, DbSession, StaffUser
from blogcraft.models.quiz import QuizGrade, TextQuiz
from blogcraft.models.user import User
from blogcraft.schemas.common import MessageResponse
from blogcraft.schemas.quiz import (
    GradeSubmit,
    QuizGradeResponse,
    TextQuizCreate,
    TextQuizPublicResponse,
    TextQuizResponse,
    TextQuizUpdate,
)
from blogcraft.services.grading import grade_answers

logger = logging.getLogger(__name__)

router = APIRouter()


def _quiz_for(user: User, quiz: TextQuiz) -> TextQuizResponse | TextQuizPublicResponse:
    if user.is_staff:
        return TextQuizResponse.model_validate(quiz)
    return TextQuizPublicResponse.model_validate(quiz)


async def _get_quiz_or_404(db, quiz_id: UUID) -> TextQuiz:
    quiz = await db.get(TextQuiz, quiz_id)
    if quiz is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Quiz not found",
        )
    return quiz


# =============================================================================
# Quizzes
# =============================================================================


@router.get("/text-quizzes", response_model=None)
async def list_quizzes(
    current_user: CurrentUser,
    db: DbSession,
) -> list[TextQuizResponse | TextQuizPublicResponse]:
    """List quizzes newest first."""
    result = await db.execute(select(TextQuiz).order_by(TextQuiz.created_at.desc()))
    return [_quiz_for(current_user, quiz) for quiz in result.scalars().all()]


@router.get("/text-quizzes/{quiz_id}", response_model=None)
async def get_quiz(
    quiz_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> TextQuizResponse | TextQuizPublicResponse:
    return _quiz_for(current_user, await _get_quiz_or_404(db, quiz_id))


@router.post("/text-quizzes", response_model=TextQuizResponse)
async def create_quiz(
    data: TextQuizCreate,
    staff: StaffUser,
    db: DbSession,
) -> TextQuiz:
    quiz = TextQuiz(
        title=data.title,
        description=data.description,
        questions=[question.model_dump(by_alias=True) for question in data.questions],
        created_by=staff.id,
    )
    db.add(quiz)
    await db.flush()
    logger.info(f"Created quiz {quiz.title} with {len(quiz.questions)} questions")
    return quiz


@router.put("/text-quizzes/{quiz_id}", response_model=TextQuizResponse)
async def update_quiz(
    quiz_id: UUID,
    data: TextQuizUpdate,
    staff: StaffUser,
    db: DbSession,
) -> TextQuiz:
    quiz = await _get_quiz_or_404(db, quiz_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("title"):
        quiz.title = data.title
    if "description" in changes:
        quiz.description = data.description
    if data.questions:
        quiz.questions = [question.model_dump(by_alias=True) for question in data.questions]

    await db.flush()
    return quiz


@router.delete("/text-quizzes/{quiz_id}", response_model=MessageResponse)
async def delete_quiz(
    quiz_id: UUID,
    staff: StaffUser,
    db: DbSession,
) -> MessageResponse:
    """Delete a quiz. Grades taken on it are kept."""
    quiz = await _get_quiz_or_404(db, quiz_id)
    await db.delete(quiz)
    await db.flush()
    return MessageResponse(message="Quiz deleted successfully")


# =============================================================================
# Grades
# =============================================================================


def _visible_grades(query: Select, user: User) -> Select:
    """Students see their own grades, teachers their students' and their own."""
    if user.is_admin:
        return query
    if user.is_staff:
        students = select(User.id).where(User.teacher_id == user.id)
        return query.where(
            (QuizGrade.user_id == user.id) | QuizGrade.user_id.in_(students)
        )
    return query.where(QuizGrade.user_id == user.id)


@router.post("/text-quiz-grades", response_model=QuizGradeResponse)
async def submit_grade(
    data: GradeSubmit,
    current_user: CurrentUser,
    db: DbSession,
) -> QuizGrade:
    """Grade a submitted attempt and record it."""
    quiz = await _get_quiz_or_404(db, data.quiz_id)
    result = grade_answers(quiz.questions, data.user_answers)

    grade = QuizGrade(
        quiz_id=quiz.id,
        quiz_title=quiz.title,
        user_id=current_user.id,
        user_name=current_user.name,
        user_answers={str(index): answer for index, answer in data.user_answers.items()},
        correct_answers=result.correct_answers,
        total_questions=result.total_questions,
        score=result.score,
        passed=result.passed,
    )
    db.add(grade)
    await db.flush()
    logger.info(
        f"Graded {current_user.username} on quiz {quiz.id}: "
        f"{result.correct_answers}/{result.total_questions} ({result.score}%)"
    )
    return grade


@router.get("/text-quiz-grades", response_model=list[QuizGradeResponse])
async def list_grades(
    current_user: CurrentUser,
    db: DbSession,
    user_id: Annotated[UUID | None, Query(alias="userId")] = None,
    quiz_id: Annotated[UUID | None, Query(alias="quizId")] = None,
) -> list[QuizGrade]:
    query = _visible_grades(select(QuizGrade), current_user)
    if user_id is not None:
        query = query.where(QuizGrade.user_id == user_id)
    if quiz_id is not None:
        query = query.where(QuizGrade.quiz_id == quiz_id)

    result = await db.execute(query.order_by(QuizGrade.created_at.desc()))
    return list(result.scalars().all())


@router.delete("/text-quiz-grades/{grade_id}", response_model=MessageResponse)
async def delete_grade(
    grade_id: UUID,
    staff: StaffUser,
    db: DbSession,
) -> MessageResponse:
    result = await db.execute(
        _visible_grades(select(QuizGrade).where(QuizGrade.id == grade_id), staff)
    )
    grade = result.scalar_one_or_none()
    if grade is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grade not found",
        )
    await db.delete(grade)
    await db.flush()
    return MessageResponse(message="Grade deleted successfully")
