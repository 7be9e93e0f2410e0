"""Blog service.

Owns every mutation of posts, categories and comments so the denormalized
fields stay consistent:

- ``Category.post_count`` counts published posts only.
- ``BlogPost.category_name`` mirrors the category's name.
- ``BlogPost.published_at`` is stamped the first time a post goes live.
"""

import logging
import re
import unicodedata
import uuid
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from blogcraft.models.base import utcnow
from blogcraft.models.category import Category
from blogcraft.models.comment import Comment, CommentStatus
from blogcraft.models.post import BlogPost, PostStatus
from blogcraft.models.user import User
from blogcraft.schemas.category import CategoryCreate, CategoryUpdate
from blogcraft.schemas.comment import CommentCreate
from blogcraft.schemas.post import PostCreate
from blogcraft.services.errors import ConflictError, NotFoundError, ServiceError

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "post") -> str:
    """Lower-case ASCII slug with single hyphens between words."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode()
    slug = _SLUG_STRIP.sub("-", normalized.lower()).strip("-")
    return slug or fallback


def _parse_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(value)
    except (TypeError, ValueError):
        return None


class BlogService:
    """Posts, categories and comments with referential bookkeeping."""

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self, db: AsyncSession) -> list[Category]:
        result = await db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, db: AsyncSession, category_id: uuid.UUID) -> Category:
        category = await db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def get_category_by_slug(self, db: AsyncSession, slug: str) -> Category:
        result = await db.execute(select(Category).where(Category.slug == slug))
        category = result.scalar_one_or_none()
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def _ensure_category_slug_free(
        self,
        db: AsyncSession,
        slug: str,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        query = select(Category.id).where(Category.slug == slug)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        if (await db.execute(query)).first() is not None:
            raise ConflictError("Category slug already exists")

    async def create_category(self, db: AsyncSession, data: CategoryCreate) -> Category:
        slug = slugify(data.slug or data.name, fallback="category")
        await self._ensure_category_slug_free(db, slug)

        category = Category(
            name=data.name,
            slug=slug,
            description=data.description,
            post_count=0,
        )
        db.add(category)
        await db.flush()
        logger.info(f"Created category {category.slug}")
        return category

    async def update_category(
        self,
        db: AsyncSession,
        category: Category,
        data: CategoryUpdate,
    ) -> Category:
        changes = data.model_dump(exclude_unset=True)

        if changes.get("slug"):
            slug = slugify(changes["slug"], fallback="category")
            await self._ensure_category_slug_free(db, slug, exclude_id=category.id)
            category.slug = slug

        if changes.get("name") and changes["name"] != category.name:
            category.name = changes["name"]
            await db.execute(
                update(BlogPost)
                .where(BlogPost.category_id == category.id)
                .values(category_name=category.name)
                .execution_options(synchronize_session="fetch")
            )

        if "description" in changes:
            category.description = changes["description"]

        await db.flush()
        return category

    async def delete_category(self, db: AsyncSession, category: Category) -> None:
        """Delete a category and detach its posts."""
        await db.execute(
            update(BlogPost)
            .where(BlogPost.category_id == category.id)
            .values(category_id=None, category_name=None)
            .execution_options(synchronize_session="fetch")
        )
        await db.delete(category)
        await db.flush()
        logger.info(f"Deleted category {category.slug}")

    async def _adjust_post_count(
        self,
        db: AsyncSession,
        category_id: uuid.UUID | None,
        delta: int,
    ) -> None:
        if category_id is None:
            return
        category = await db.get(Category, category_id)
        if category is None:
            return
        category.post_count = max(0, (category.post_count or 0) + delta)

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def list_posts(
        self,
        db: AsyncSession,
        *,
        status: PostStatus | None = PostStatus.PUBLISHED,
        category_id: uuid.UUID | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[BlogPost]:
        """List posts newest first. ``status=None`` lists every post."""
        query = select(BlogPost)
        if status is not None:
            query = query.where(BlogPost.status == status.value)
        if category_id is not None:
            query = query.where(BlogPost.category_id == category_id)

        query = query.order_by(BlogPost.created_at.desc())
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def search_posts(self, db: AsyncSession, term: str) -> list[BlogPost]:
        """Case-insensitive match on title, excerpt, content or any tag of published posts."""
        needle = term.strip().lower()
        posts = await self.list_posts(db, status=PostStatus.PUBLISHED)
        if not needle:
            return posts

        def matches(post: BlogPost) -> bool:
            return (
                needle in post.title.lower()
                or needle in (post.excerpt or "").lower()
                or needle in post.content.lower()
                or any(needle in tag.lower() for tag in post.tags or [])
            )

        return [post for post in posts if matches(post)]

    async def get_post(self, db: AsyncSession, post_id: uuid.UUID) -> BlogPost:
        post = await db.get(BlogPost, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def get_post_by_slug_or_id(self, db: AsyncSession, value: str) -> BlogPost:
        """Look a post up by slug first, then by id."""
        result = await db.execute(select(BlogPost).where(BlogPost.slug == value))
        post = result.scalar_one_or_none()
        if post is None:
            post_id = _parse_uuid(value)
            if post_id is not None:
                post = await db.get(BlogPost, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def _unique_post_slug(
        self,
        db: AsyncSession,
        base: str,
        exclude_id: uuid.UUID | None = None,
    ) -> str:
        query = select(BlogPost.slug).where(
            (BlogPost.slug == base) | BlogPost.slug.like(f"{base}-%")
        )
        if exclude_id is not None:
            query = query.where(BlogPost.id != exclude_id)
        taken = set((await db.execute(query)).scalars().all())

        if base not in taken:
            return base
        suffix = 2
        while f"{base}-{suffix}" in taken:
            suffix += 1
        return f"{base}-{suffix}"

    async def _resolve_category(
        self,
        db: AsyncSession,
        category_id: uuid.UUID | None,
    ) -> Category | None:
        if category_id is None:
            return None
        category = await db.get(Category, category_id)
        if category is None:
            raise ServiceError("Category does not exist")
        return category

    async def create_post(
        self,
        db: AsyncSession,
        data: PostCreate,
        author: User | None,
    ) -> BlogPost:
        category = await self._resolve_category(db, data.category_id)
        slug = await self._unique_post_slug(db, slugify(data.slug or data.title))
        now = utcnow()

        post = BlogPost(
            title=data.title,
            slug=slug,
            content=data.content,
            excerpt=data.excerpt,
            category_id=category.id if category else None,
            category_name=category.name if category else None,
            author_id=author.id if author else None,
            status=data.status.value,
            featured=data.featured,
            allow_comments=data.allow_comments,
            tags=list(data.tags),
            featured_image=data.featured_image,
            meta_title=data.meta_title,
            meta_description=data.meta_description,
            view_count=0,
            created_at=now,
            updated_at=now,
            published_at=now if data.status == PostStatus.PUBLISHED else None,
        )
        db.add(post)

        if post.is_published and category is not None:
            category.post_count = (category.post_count or 0) + 1

        await db.flush()
        await db.refresh(post, attribute_names=["category", "author"])
        logger.info(f"Created post {post.slug} ({post.status})")
        return post

    async def update_post(
        self,
        db: AsyncSession,
        post: BlogPost,
        changes: dict[str, Any],
    ) -> BlogPost:
        """Apply a partial update; ``changes`` holds only fields the client sent."""
        was_published = post.is_published
        old_category_id = post.category_id

        if "category_id" in changes:
            category = await self._resolve_category(db, changes.pop("category_id"))
            post.category_id = category.id if category else None
            post.category_name = category.name if category else None

        # The slug only changes on request so existing links keep working
        requested_slug = changes.pop("slug", None)
        if requested_slug:
            post.slug = await self._unique_post_slug(
                db, slugify(requested_slug), exclude_id=post.id
            )

        status = changes.pop("status", None)
        if status is not None:
            post.status = PostStatus(status).value

        for field, value in changes.items():
            if value is None and field in {"title", "content", "featured", "allow_comments", "tags"}:
                continue
            setattr(post, field, list(value) if field == "tags" else value)

        if post.is_published and post.published_at is None:
            post.published_at = utcnow()
        post.updated_at = utcnow()

        # Published posts count toward their category; move the count with them
        if was_published:
            await self._adjust_post_count(db, old_category_id, -1)
        if post.is_published:
            await self._adjust_post_count(db, post.category_id, +1)

        await db.flush()
        await db.refresh(post, attribute_names=["category", "author"])
        return post

    async def delete_post(self, db: AsyncSession, post: BlogPost) -> None:
        if post.is_published:
            await self._adjust_post_count(db, post.category_id, -1)
        await db.execute(delete(Comment).where(Comment.post_id == post.id))
        await db.delete(post)
        await db.flush()
        logger.info(f"Deleted post {post.slug}")

    async def increment_view_count(self, db: AsyncSession, post: BlogPost) -> None:
        """Count a view without touching updated_at."""
        await db.execute(
            update(BlogPost)
            .where(BlogPost.id == post.id)
            .values(view_count=BlogPost.view_count + 1, updated_at=BlogPost.updated_at)
            .execution_options(synchronize_session=False)
        )
        set_committed_value(post, "view_count", (post.view_count or 0) + 1)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def list_approved_comments(
        self,
        db: AsyncSession,
        post_id: uuid.UUID,
    ) -> list[Comment]:
        """Approved comments of a post, oldest first."""
        result = await db.execute(
            select(Comment)
            .where(
                Comment.post_id == post_id,
                Comment.status == CommentStatus.APPROVED.value,
            )
            .order_by(Comment.created_at.asc())
        )
        return list(result.scalars().all())

    async def list_comments(
        self,
        db: AsyncSession,
        *,
        status: CommentStatus | None = None,
        limit: int | None = None,
    ) -> list[Comment]:
        """Moderation queue, newest first."""
        query = select(Comment)
        if status is not None:
            query = query.where(Comment.status == status.value)
        query = query.order_by(Comment.created_at.desc())
        if limit:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_comment(self, db: AsyncSession, comment_id: uuid.UUID) -> Comment:
        comment = await db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def create_comment(
        self,
        db: AsyncSession,
        post: BlogPost,
        data: CommentCreate,
        user: User | None,
    ) -> Comment:
        if not post.is_published:
            raise NotFoundError("Post not found")
        if not post.allow_comments:
            raise ServiceError("Comments are disabled for this post")

        author_name = data.author_name or (user.name if user else None)
        author_email = data.author_email or (user.email if user else None)
        if not author_name or not author_email:
            raise ServiceError("authorName and authorEmail are required")

        comment = Comment(
            post_id=post.id,
            author_name=author_name,
            author_email=str(author_email),
            content=data.content,
            status=CommentStatus.PENDING.value,
            likes=0,
        )
        db.add(comment)
        await db.flush()
        await db.refresh(comment, attribute_names=["post"])
        return comment

    async def update_comment(
        self,
        db: AsyncSession,
        comment: Comment,
        changes: dict[str, Any],
    ) -> Comment:
        if changes.get("content") is not None:
            comment.content = changes["content"]
        if changes.get("status") is not None:
            comment.status = CommentStatus(changes["status"]).value
        comment.updated_at = utcnow()
        await db.flush()
        return comment

    async def delete_comment(self, db: AsyncSession, comment: Comment) -> None:
        await db.delete(comment)
        await db.flush()

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    async def post_stats(self, db: AsyncSession) -> dict[str, int]:
        published = BlogPost.status == PostStatus.PUBLISHED.value
        total_posts = await db.scalar(select(func.count()).select_from(BlogPost).where(published))
        all_posts = await db.scalar(select(func.count()).select_from(BlogPost))
        total_views = await db.scalar(
            select(func.coalesce(func.sum(BlogPost.view_count), 0)).where(published)
        )
        total_comments = await db.scalar(select(func.count()).select_from(Comment))
        pending_comments = await db.scalar(
            select(func.count())
            .select_from(Comment)
            .where(Comment.status == CommentStatus.PENDING.value)
        )
        total_categories = await db.scalar(select(func.count()).select_from(Category))

        return {
            "total_posts": total_posts or 0,
            "draft_posts": (all_posts or 0) - (total_posts or 0),
            "total_views": int(total_views or 0),
            "total_comments": total_comments or 0,
            "pending_comments": pending_comments or 0,
            "total_categories": total_categories or 0,
        }
