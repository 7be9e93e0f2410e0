"""Server-side grading of text quizzes."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from blogcraft.core.config import settings


@dataclass(frozen=True)
class GradeResult:
    correct_answers: int
    total_questions: int
    score: int
    passed: bool


def percentage(correct: int, total: int) -> int:
    """100 * correct / total rounded half up, in integer arithmetic."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def grade_answers(
    questions: Sequence[Mapping[str, Any]],
    user_answers: Mapping[int, int],
    pass_mark: int | None = None,
) -> GradeResult:
    """Grade answers keyed by question index against each question's correctAnswer.

    Unanswered questions and answers to indexes outside the quiz count as wrong.
    """
    if pass_mark is None:
        pass_mark = settings.quiz_pass_mark

    correct = sum(
        1
        for index, question in enumerate(questions)
        if index in user_answers and user_answers[index] == question.get("correctAnswer")
    )
    total = len(questions)
    score = percentage(correct, total)
    return GradeResult(
        correct_answers=correct,
        total_questions=total,
        score=score,
        passed=score >= pass_mark,
    )
