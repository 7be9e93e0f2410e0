"""Blog post endpoints."""

import logging
from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from blogcraft.api.deps import AdminUser, BlogServiceDep, DbSession, OptionalUser
from blogcraft.models.post import BlogPost, PostStatus
from blogcraft.models.user import User
from blogcraft.schemas.common import MessageResponse
from blogcraft.schemas.post import PostCreate, PostResponse, PostUpdate
from blogcraft.services.blog import BlogService

logger = logging.getLogger(__name__)

router = APIRouter()

StatusFilter = Literal["published", "draft", "all"]


@router.get("", response_model=list[PostResponse])
async def list_posts(
    db: DbSession,
    blog: BlogServiceDep,
    current_user: OptionalUser,
    status_filter: Annotated[StatusFilter, Query(alias="status")] = "published",
    category_id: Annotated[UUID | None, Query(alias="categoryId")] = None,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
    offset: Annotated[int | None, Query(ge=0)] = None,
    search: str | None = None,
) -> list[BlogPost]:
    """List posts newest first.

    Only admins may list drafts (``status=draft``) or everything
    (``status=all``); everyone else always gets published posts.
    """
    if search:
        posts = await blog.search_posts(db, search)
        if category_id is not None:
            posts = [post for post in posts if post.category_id == category_id]
        start = offset or 0
        return posts[start : start + limit] if limit else posts[start:]

    is_admin = current_user is not None and current_user.is_admin
    if not is_admin or status_filter == "published":
        post_status: PostStatus | None = PostStatus.PUBLISHED
    elif status_filter == "draft":
        post_status = PostStatus.DRAFT
    else:
        post_status = None

    return await blog.list_posts(
        db,
        status=post_status,
        category_id=category_id,
        limit=limit,
        offset=offset,
    )


async def _view_post(
    value: str,
    db: DbSession,
    blog: BlogService,
    current_user: User | None,
) -> BlogPost:
    post = await blog.get_post_by_slug_or_id(db, value)
    if not post.is_published and not (current_user is not None and current_user.is_admin):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    await blog.increment_view_count(db, post)
    return post


@router.get("/slug/{slug}", response_model=PostResponse)
async def get_post_by_slug(
    slug: str,
    db: DbSession,
    blog: BlogServiceDep,
    current_user: OptionalUser,
) -> BlogPost:
    """Get a post by slug and count the view."""
    return await _view_post(slug, db, blog, current_user)


@router.get("/{slug_or_id}", response_model=PostResponse)
async def get_post(
    slug_or_id: str,
    db: DbSession,
    blog: BlogServiceDep,
    current_user: OptionalUser,
) -> BlogPost:
    """Get a post by slug or id and count the view."""
    return await _view_post(slug_or_id, db, blog, current_user)


@router.post("", response_model=PostResponse)
async def create_post(
    data: PostCreate,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> BlogPost:
    """Create a post authored by the caller."""
    return await blog.create_post(db, data, admin)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    data: PostUpdate,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> BlogPost:
    """Update the fields present in the body."""
    post = await blog.get_post(db, post_id)
    return await blog.update_post(db, post, data.model_dump(exclude_unset=True))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: UUID,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> MessageResponse:
    """Delete a post with its comments."""
    post = await blog.get_post(db, post_id)
    await blog.delete_post(db, post)
    return MessageResponse(message="Post deleted successfully")
