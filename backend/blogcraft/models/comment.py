"""Comment model."""

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogcraft.models.base import BaseModel

if TYPE_CHECKING:
    from blogcraft.models.post import BlogPost


class CommentStatus(str, enum.Enum):
    """Moderation status of a comment."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Comment(BaseModel):
    """Reader comment on a blog post. New comments wait for moderation."""

    __tablename__ = "comments"

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("blog_posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    author_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(32),
        default=CommentStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    likes: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    # Relationships
    post: Mapped["BlogPost"] = relationship(
        "BlogPost",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Comment {self.status} on {self.post_id}>"
