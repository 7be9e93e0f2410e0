"""Category endpoints."""

from uuid import UUID

from fastapi import APIRouter

from blogcraft.api.deps import AdminUser, BlogServiceDep, DbSession
from blogcraft.models.category import Category
from blogcraft.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from blogcraft.schemas.common import MessageResponse

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: DbSession, blog: BlogServiceDep) -> list[Category]:
    """List categories by name."""
    return await blog.list_categories(db)


@router.get("/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, db: DbSession, blog: BlogServiceDep) -> Category:
    return await blog.get_category_by_slug(db, slug)


@router.post("", response_model=CategoryResponse)
async def create_category(
    data: CategoryCreate,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> Category:
    """Create a category. The slug is derived from the name when omitted."""
    return await blog.create_category(db, data)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> Category:
    category = await blog.get_category(db, category_id)
    return await blog.update_category(db, category, data)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: UUID,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> MessageResponse:
    """Delete a category; its posts become uncategorized."""
    category = await blog.get_category(db, category_id)
    await blog.delete_category(db, category)
    return MessageResponse(message="Category deleted successfully")
