"""Blog post model."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogcraft.models.base import BaseModel, UTCDateTime

if TYPE_CHECKING:
    from blogcraft.models.category import Category
    from blogcraft.models.user import User


class PostStatus(str, enum.Enum):
    """Publication status of a post."""

    DRAFT = "draft"
    PUBLISHED = "published"


class BlogPost(BaseModel):
    """Blog post model."""

    __tablename__ = "blog_posts"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    excerpt: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    category_name: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    author_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(32),
        default=PostStatus.DRAFT.value,
        nullable=False,
        index=True,
    )
    featured: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    allow_comments: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    tags: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )
    featured_image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    meta_title: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    meta_description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    view_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    published_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
    )

    # Relationships
    category: Mapped["Category | None"] = relationship(
        "Category",
        lazy="selectin",
    )
    author: Mapped["User | None"] = relationship(
        "User",
        lazy="selectin",
    )

    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED.value

    def __repr__(self) -> str:
        return f"<BlogPost {self.slug}>"
