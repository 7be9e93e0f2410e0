"""Business logic services."""

from blogcraft.services.access_codes import AccessCodeService
from blogcraft.services.blog import BlogService, slugify
from blogcraft.services.chat_hub import ChatConnection, ChatHub, get_chat_hub
from blogcraft.services.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
)
from blogcraft.services.grading import GradeResult, grade_answers

__all__ = [
    "AccessCodeService",
    "BlogService",
    "ChatConnection",
    "ChatHub",
    "ConflictError",
    "GradeResult",
    "NotFoundError",
    "PermissionDeniedError",
    "ServiceError",
    "get_chat_hub",
    "grade_answers",
    "slugify",
]
