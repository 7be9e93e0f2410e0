"""Startup data: admin account, default categories and sample posts."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogcraft.core.config import settings
from blogcraft.core.security import get_password_hash
from blogcraft.models.category import Category
from blogcraft.models.post import BlogPost, PostStatus
from blogcraft.models.user import User, UserRole
from blogcraft.schemas.category import CategoryCreate
from blogcraft.schemas.post import PostCreate
from blogcraft.services.blog import BlogService

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Technology", "technology", "Articles about technology and development"),
    ("Design", "design", "UI/UX design and creative content"),
    ("Business", "business", "Business strategy and entrepreneurship"),
]

SAMPLE_POSTS = [
    {
        "category": "technology",
        "title": "The Future of Web Development: Trends to Watch in 2024",
        "slug": "future-of-web-development-2024",
        "excerpt": (
            "Explore the cutting-edge technologies and methodologies that are shaping "
            "the future of web development, from AI integration to progressive web apps."
        ),
        "content": (
            "<p>Web development continues to evolve at a rapid pace, with new technologies "
            "and methodologies emerging constantly.</p>\n"
            "<h2>AI Integration in Development</h2>\n"
            "<p>From code generation tools to intelligent testing frameworks, AI is becoming "
            "an integral part of the development workflow.</p>\n"
            "<h2>Progressive Web Apps (PWAs) Going Mainstream</h2>\n"
            "<p>Progressive Web Apps continue to bridge the gap between web and native "
            "applications.</p>\n"
            "<h2>WebAssembly Performance Gains</h2>\n"
            "<p>WebAssembly is enabling high-performance applications that were previously "
            "impossible in the browser.</p>"
        ),
        "featured_image": (
            "https://images.unsplash.com/photo-1486312338219-ce68d2c6f44d"
            "?ixlib=rb-4.0.3&auto=format&fit=crop&w=1200&h=600"
        ),
        "meta_description": (
            "Explore the cutting-edge technologies and methodologies shaping web development in 2024."
        ),
        "tags": ["web development", "technology", "AI", "PWA", "WebAssembly"],
        "view_count": 156,
        "date": datetime(2024, 3, 15, tzinfo=UTC),
    },
    {
        "category": "design",
        "title": "Designing for Accessibility: A Complete Guide",
        "slug": "designing-for-accessibility-guide",
        "excerpt": (
            "Learn how to create inclusive web experiences that work for everyone, "
            "with practical tips and real-world examples."
        ),
        "content": (
            "<p>Accessibility in web design isn't just about compliance. It's about creating "
            "inclusive experiences that work for everyone.</p>\n"
            "<h2>Understanding Web Accessibility</h2>\n"
            "<p>Web accessibility means ensuring that websites can be used by people with "
            "disabilities, including those who rely on assistive technologies.</p>\n"
            "<h2>Practical Implementation Tips</h2>\n"
            "<p>Start with semantic HTML, provide meaningful alt text for images, ensure "
            "sufficient color contrast, and make your site keyboard navigable.</p>"
        ),
        "featured_image": (
            "https://images.unsplash.com/photo-1616628188859-7a11abb6fcc9"
            "?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=400"
        ),
        "meta_description": (
            "Learn how to create inclusive web experiences with practical accessibility tips and techniques."
        ),
        "tags": ["accessibility", "design", "UX", "inclusive design"],
        "view_count": 89,
        "date": datetime(2024, 3, 14, tzinfo=UTC),
    },
]


async def ensure_admin(db: AsyncSession) -> User:
    """Create the admin account unless a user with its email exists."""
    result = await db.execute(select(User).where(User.email == settings.admin_email))
    admin = result.scalar_one_or_none()
    if admin is not None:
        return admin

    admin = User(
        email=settings.admin_email,
        username="admin",
        name="Admin User",
        password_hash=get_password_hash(settings.admin_password),
        is_admin=True,
        role=UserRole.TEACHER.value,
        approved=True,
    )
    db.add(admin)
    await db.flush()
    logger.info(f"Seeded admin account {admin.email}")
    return admin


async def seed_sample_data(db: AsyncSession) -> None:
    """Seed categories and sample posts into an empty blog."""
    if await db.scalar(select(func.count()).select_from(Category)):
        return

    admin = await ensure_admin(db)
    blog = BlogService()

    categories: dict[str, Category] = {}
    for name, slug, description in DEFAULT_CATEGORIES:
        categories[slug] = await blog.create_category(
            db, CategoryCreate(name=name, slug=slug, description=description)
        )

    if await db.scalar(select(func.count()).select_from(BlogPost)):
        return

    for sample in SAMPLE_POSTS:
        post = await blog.create_post(
            db,
            PostCreate(
                title=sample["title"],
                slug=sample["slug"],
                content=sample["content"],
                excerpt=sample["excerpt"],
                category_id=categories[sample["category"]].id,
                status=PostStatus.PUBLISHED,
                tags=sample["tags"],
                featured_image=sample["featured_image"],
                meta_title=sample["title"],
                meta_description=sample["meta_description"],
            ),
            admin,
        )
        post.view_count = sample["view_count"]
        post.created_at = post.updated_at = post.published_at = sample["date"]

    await db.flush()
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} categories and {len(SAMPLE_POSTS)} posts")


async def seed_database(db: AsyncSession) -> None:
    """Seed the admin account, plus sample content when enabled."""
    await ensure_admin(db)
    if settings.seed_sample_data:
        await seed_sample_data(db)
