"""
security/rate_limiter.py
-------------------------
Rate limiting middleware to prevent API abuse.
Limits the number of updates a user can send within a time window.
"""

import time
from functools import wraps
from typing import Callable, Optional

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)

RATE_LIMIT_NOTICE = "⚠️ Too many requests. Please wait a moment and try again."


class RateLimiter:
    """Sliding-window counter of update timestamps per user."""

    def __init__(self, max_events: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_events = max_events
        self.window_seconds = window_seconds
        self.clock = clock
        # {user_id: [timestamp1, timestamp2, ...]}, only users seen within the window
        self._timestamps: dict[int, list[float]] = {}
        self._last_sweep = self.clock()

    def _cleanup(self, user_id: int, now: float) -> list[float]:
        """Remove expired timestamps for a user and return the ones left."""
        cutoff = now - self.window_seconds
        recent = [t for t in self._timestamps.get(user_id, ()) if t > cutoff]
        if recent:
            self._timestamps[user_id] = recent
        else:
            self._timestamps.pop(user_id, None)
        return recent

    def _sweep(self, now: float) -> None:
        """Forget users with no timestamps inside the window. Runs once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        cutoff = now - self.window_seconds
        for user_id in [uid for uid, ts in self._timestamps.items() if ts[-1] <= cutoff]:
            del self._timestamps[user_id]
        self._last_sweep = now

    def tracked_users(self) -> int:
        return len(self._timestamps)

    def allow(self, user_id: int) -> bool:
        """Record an event for ``user_id`` and return False if over the limit."""
        now = self.clock()
        self._sweep(now)
        recent = self._cleanup(user_id, now)
        if len(recent) >= self.max_events:
            return False
        self._timestamps[user_id] = recent + [now]
        return True


_limiter = RateLimiter(RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS)


async def _notify_limited(update: Update) -> None:
    if update.callback_query is not None:
        await update.callback_query.answer(RATE_LIMIT_NOTICE)
    elif update.effective_message is not None:
        await update.effective_message.reply_text(RATE_LIMIT_NOTICE)
    # inline queries are simply dropped


def rate_limited(func: Optional[Callable] = None, *, limiter: Optional[RateLimiter] = None):
    """
    Decorator that enforces rate limiting per user.

    Usage:
        @rate_limited
        async def my_handler(update, context):
            ...

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max updates per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).

    Behavior:
        - Tracks update timestamps per user.
        - If exceeded, tells the user (callback notice or reply) and skips the handler.
    """
    def decorator(handler: Callable):
        @wraps(handler)
        async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
            user = update.effective_user
            if not user:
                return

            if not (limiter or _limiter).allow(user.id):
                logger.warning(f"⚠️ Rate limit hit for user {user.id}")
                await _notify_limited(update)
                return

            return await handler(update, context, *args, **kwargs)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
