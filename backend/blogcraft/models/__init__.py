"""SQLAlchemy models."""

from blogcraft.models.category import Category
from blogcraft.models.chatroom import AccessCode, Chatroom
from blogcraft.models.comment import Comment, CommentStatus
from blogcraft.models.lesson_plan import LessonPlan
from blogcraft.models.post import BlogPost, PostStatus
from blogcraft.models.quiz import QuizGrade, TextQuiz
from blogcraft.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "Category",
    "BlogPost",
    "PostStatus",
    "Comment",
    "CommentStatus",
    "Chatroom",
    "AccessCode",
    "TextQuiz",
    "QuizGrade",
    "LessonPlan",
]
