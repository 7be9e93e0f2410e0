"""API v1 module."""

from fastapi import APIRouter

from blogcraft.api.v1 import (
    admin,
    auth,
    categories,
    chatrooms,
    comments,
    health,
    lesson_plans,
    posts,
    quizzes,
    users,
)

router = APIRouter()

router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, tags=["users"])
router.include_router(categories.router, prefix="/categories", tags=["categories"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(comments.router, tags=["comments"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(chatrooms.router, prefix="/chatrooms", tags=["chatrooms"])
router.include_router(quizzes.router, tags=["quizzes"])
router.include_router(lesson_plans.router, prefix="/lesson-plans", tags=["lesson-plans"])
