"""
Shared slowapi rate limiter.

One instance for the whole app so every route counts against the same
in-memory store. The default limit applies to all routes through
SlowAPIMiddleware (mounted in tasktrack.main).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from tasktrack.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    storage_uri="memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)
