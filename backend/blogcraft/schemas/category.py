"""Category schemas."""

from datetime import datetime
from uuid import UUID

from blogcraft.schemas.common import BaseSchema, text_field


class CategoryCreate(BaseSchema):
    """Category creation request."""

    name: text_field(2, 50)
    slug: text_field(1, 120) | None = None
    description: str | None = None


class CategoryUpdate(BaseSchema):
    """Category update request."""

    name: text_field(2, 50) | None = None
    slug: text_field(1, 120) | None = None
    description: str | None = None


class CategoryResponse(BaseSchema):
    """Category response."""

    id: UUID
    name: str
    slug: str
    description: str | None = None
    post_count: int
    created_at: datetime
    updated_at: datetime
