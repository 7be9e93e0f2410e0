"""Comment endpoints: public thread and moderation queue."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request, status

from blogcraft.api.deps import AdminUser, BlogServiceDep, DbSession, OptionalUser
from blogcraft.core.rate_limit import limit_comment_submissions
from blogcraft.models.comment import Comment, CommentStatus
from blogcraft.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentStatusUpdate,
    CommentUpdate,
    CommentWithPost,
    PublicCommentResponse,
)
from blogcraft.schemas.common import MessageResponse

router = APIRouter()


@router.get("/posts/{post_id}/comments", response_model=list[PublicCommentResponse])
async def list_post_comments(
    post_id: UUID,
    db: DbSession,
    blog: BlogServiceDep,
) -> list[Comment]:
    """Approved comments of a post, oldest first."""
    return await blog.list_approved_comments(db, post_id)


@router.post("/posts/{post_id}/comments", response_model=CommentResponse)
async def create_comment(
    post_id: UUID,
    data: CommentCreate,
    request: Request,
    db: DbSession,
    blog: BlogServiceDep,
    current_user: OptionalUser,
) -> Comment:
    """Submit a comment for moderation.

    Signed-in users may omit the author fields; they default to the account.
    """
    limit_comment_submissions(request, str(current_user.id) if current_user else None)

    post = await blog.get_post(db, post_id)
    return await blog.create_comment(db, post, data, current_user)


@router.get("/comments", response_model=list[CommentWithPost])
async def list_comments(
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
    status_filter: Annotated[CommentStatus | None, Query(alias="status")] = None,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
) -> list[Comment]:
    """Moderation queue, newest first."""
    return await blog.list_comments(db, status=status_filter, limit=limit)


@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: UUID,
    data: CommentUpdate,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> Comment:
    comment = await blog.get_comment(db, comment_id)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to update",
        )
    return await blog.update_comment(db, comment, changes)


@router.patch("/comments/{comment_id}/status", response_model=CommentResponse)
async def moderate_comment(
    comment_id: UUID,
    data: CommentStatusUpdate,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> Comment:
    """Approve, reject or re-queue a comment."""
    comment = await blog.get_comment(db, comment_id)
    return await blog.update_comment(db, comment, {"status": data.status})


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: UUID,
    admin: AdminUser,
    db: DbSession,
    blog: BlogServiceDep,
) -> MessageResponse:
    comment = await blog.get_comment(db, comment_id)
    await blog.delete_comment(db, comment)
    return MessageResponse(message="Comment deleted successfully")
