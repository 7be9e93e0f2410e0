"""Blog post schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from blogcraft.models.post import PostStatus
from blogcraft.schemas.category import CategoryResponse
from blogcraft.schemas.common import BaseSchema, text_field
from blogcraft.schemas.user import AuthorSummary


class PostCreate(BaseSchema):
    """Post creation request."""

    title: text_field(3, 200)
    content: text_field(10, 50000)
    slug: text_field(1, 200) | None = None
    excerpt: str | None = None
    category_id: UUID | None = None
    status: PostStatus = PostStatus.DRAFT
    featured: bool = False
    allow_comments: bool = True
    tags: list[str] = Field(default_factory=list)
    featured_image: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None


class PostUpdate(BaseSchema):
    """Partial post update. Only fields present in the body are applied."""

    title: text_field(3, 200) | None = None
    content: text_field(10, 50000) | None = None
    slug: text_field(1, 200) | None = None
    excerpt: str | None = None
    category_id: UUID | None = None
    status: PostStatus | None = None
    featured: bool | None = None
    allow_comments: bool | None = None
    tags: list[str] | None = None
    featured_image: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None


class PostResponse(BaseSchema):
    """Post with its category and author embedded."""

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    category_id: UUID | None = None
    category_name: str | None = None
    author_id: UUID | None = None
    status: PostStatus
    featured: bool
    allow_comments: bool
    tags: list[str] = []
    featured_image: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    view_count: int
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    category: CategoryResponse | None = None
    author: AuthorSummary | None = None


class PostSummary(BaseSchema):
    """Minimal post reference."""

    id: UUID
    title: str
    slug: str
