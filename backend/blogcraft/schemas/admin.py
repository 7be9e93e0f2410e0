"""Admin dashboard schemas."""

from blogcraft.schemas.common import BaseSchema


class AdminStats(BaseSchema):
    """Dashboard counters."""

    total_posts: int
    draft_posts: int
    total_comments: int
    pending_comments: int
    total_views: int
    total_users: int
    pending_users: int
    total_categories: int
    active_chatrooms: int
    online_chat_users: int
