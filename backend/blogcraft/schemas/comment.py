"""Comment schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import EmailStr, Field

from blogcraft.models.comment import CommentStatus
from blogcraft.schemas.common import BaseSchema, plain_text_field
from blogcraft.schemas.post import PostSummary


class CommentCreate(BaseSchema):
    """Comment creation request.

    Author fields may be omitted by signed-in users.
    """

    author_name: plain_text_field(1, 100) | None = None
    author_email: Annotated[EmailStr, Field(max_length=100)] | None = None
    content: plain_text_field(1, 1000)


class CommentUpdate(BaseSchema):
    """Moderator edit of a comment."""

    content: plain_text_field(1, 1000) | None = None
    status: CommentStatus | None = None


class CommentStatusUpdate(BaseSchema):
    """Moderation decision."""

    status: CommentStatus


class PublicCommentResponse(BaseSchema):
    """Approved comment as shown to readers."""

    id: UUID
    post_id: UUID
    author_name: str
    content: str
    likes: int
    created_at: datetime


class CommentResponse(PublicCommentResponse):
    """Comment as seen by moderators."""

    author_email: str
    status: CommentStatus
    updated_at: datetime


class CommentWithPost(CommentResponse):
    """Moderation queue entry."""

    post: PostSummary | None = None
