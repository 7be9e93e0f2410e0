"""In-memory fixed-window rate limiting.

Windows live in process memory, which matches the single-process deployment
of the platform; restarting the server resets them. Clients are keyed by
user id when signed in, otherwise by IP.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from fastapi import HTTPException, Request, status

from blogcraft.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started_at: float
    hits: int = 1


@dataclass
class FixedWindowLimiter:
    """Counts hits per key in windows of ``window_seconds``."""

    windows: dict[tuple[str, int], _Window] = field(default_factory=dict)
    prune_interval: float = 60.0
    pruned_at: float = 0.0

    def prune(self, now: float) -> None:
        """Drop windows that have run out."""
        expired = [
            slot for slot, window in self.windows.items() if now - window.started_at >= slot[1]
        ]
        for slot in expired:
            del self.windows[slot]
        self.pruned_at = now

    def hit(self, key: str, limit: int, window_seconds: int, now: float | None = None) -> int | None:
        """Record a hit. Returns seconds until the window resets when over the limit."""
        now = time.time() if now is None else now
        if now - self.pruned_at >= self.prune_interval:
            self.prune(now)
        slot = (key, window_seconds)
        window = self.windows.get(slot)

        if window is None or now - window.started_at >= window_seconds:
            self.windows[slot] = _Window(started_at=now)
            return None
        if window.hits >= limit:
            return max(1, int(window_seconds - (now - window.started_at)))

        window.hits += 1
        return None

    def reset(self) -> None:
        self.windows.clear()


_limiter = FixedWindowLimiter()


def client_key(request: Request, user_id: str | None = None) -> str:
    if user_id:
        return f"user:{user_id}"
    # First X-Forwarded-For hop when running behind a proxy
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def reset_rate_limits() -> None:
    """Forget every window."""
    _limiter.reset()


def enforce_rate_limit(
    request: Request,
    *,
    scope: str,
    limit: int,
    window_seconds: int,
    user_id: str | None = None,
) -> None:
    """Count one request against ``scope``.

    Raises:
        HTTPException(429) with Retry-After once the window is used up.
    """
    if not settings.rate_limit_enabled:
        return

    key = f"{scope}:{client_key(request, user_id)}"
    retry_after = _limiter.hit(key, limit, window_seconds)
    if retry_after is None:
        return

    logger.warning(f"Rate limit exceeded for {key}")
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests, please try again later.",
        headers={"Retry-After": str(retry_after)},
    )


def limit_auth_attempts(request: Request) -> None:
    """Count a register or login attempt from this client."""
    enforce_rate_limit(
        request,
        scope="auth",
        limit=settings.auth_rate_limit,
        window_seconds=settings.auth_rate_window_seconds,
    )


def limit_comment_submissions(request: Request, user_id: str | None) -> None:
    enforce_rate_limit(
        request,
        scope="comments",
        limit=settings.comment_rate_limit,
        window_seconds=settings.comment_rate_window_seconds,
        user_id=user_id,
    )
