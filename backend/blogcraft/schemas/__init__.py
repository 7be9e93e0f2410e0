"""Pydantic schemas for request/response validation."""

from blogcraft.schemas.admin import AdminStats
from blogcraft.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from blogcraft.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from blogcraft.schemas.chatroom import (
    AccessCodeCreate,
    AccessCodeResponse,
    AccessCodeUpdate,
    ChatroomCreate,
    ChatroomResponse,
    ChatroomUpdate,
    RedeemRequest,
    RedeemResponse,
)
from blogcraft.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentStatusUpdate,
    CommentUpdate,
    CommentWithPost,
    PublicCommentResponse,
)
from blogcraft.schemas.common import ErrorDetail, ErrorResponse, MessageResponse
from blogcraft.schemas.lesson_plan import (
    LessonPlanCreate,
    LessonPlanResponse,
    LessonPlanUpdate,
)
from blogcraft.schemas.post import PostCreate, PostResponse, PostSummary, PostUpdate
from blogcraft.schemas.quiz import (
    GradeSubmit,
    QuizGradeResponse,
    TextQuizCreate,
    TextQuizPublicResponse,
    TextQuizResponse,
    TextQuizUpdate,
)
from blogcraft.schemas.user import (
    ApprovalUpdate,
    AuthorSummary,
    RoleUpdate,
    TeacherAssignment,
    UserResponse,
)

__all__ = [
    # Common
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    # User
    "UserResponse",
    "AuthorSummary",
    "RoleUpdate",
    "ApprovalUpdate",
    "TeacherAssignment",
    # Category
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    # Post
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostSummary",
    # Comment
    "CommentCreate",
    "CommentUpdate",
    "CommentStatusUpdate",
    "CommentResponse",
    "CommentWithPost",
    "PublicCommentResponse",
    # Chatroom
    "ChatroomCreate",
    "ChatroomUpdate",
    "ChatroomResponse",
    "AccessCodeCreate",
    "AccessCodeUpdate",
    "AccessCodeResponse",
    "RedeemRequest",
    "RedeemResponse",
    # Quiz
    "TextQuizCreate",
    "TextQuizUpdate",
    "TextQuizResponse",
    "TextQuizPublicResponse",
    "GradeSubmit",
    "QuizGradeResponse",
    # Lesson plan
    "LessonPlanCreate",
    "LessonPlanUpdate",
    "LessonPlanResponse",
    # Admin
    "AdminStats",
]
