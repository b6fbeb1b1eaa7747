# aspas/core/ratelimit.py
"""
Login attempt limiting.

Attempts are counted in fixed windows keyed by identity (client IP, normalized
email). Counters live behind ``RateLimitStore`` so a single process can use the
in-memory store while multi-instance deployments point ``RATE_LIMIT_REDIS_URL``
at a shared Redis.
"""
import logging
import math
import time
from typing import Optional

from fastapi import Depends, Request
from redis.asyncio import Redis

from aspas.config import settings
from aspas.core.errors import AppError, ErrorKind

logger = logging.getLogger("uvicorn.error")


class RateLimitStore:
    """Counter store interface."""

    async def hit(self, key: str, window_seconds: int) -> tuple[int, int]:
        """
        Count one attempt for ``key``.

        Returns:
            (attempts in the current window, seconds until the window resets)
        """
        raise NotImplementedError

    async def reset(self, key: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        return None


class MemoryRateLimitStore(RateLimitStore):
    """
    Process-local store.

    Expired windows are swept on every hit, so keys for identities that stop
    trying do not accumulate.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}  # key -> (count, reset_at)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, reset_at) in self._windows.items() if reset_at <= now]
        for k in expired:
            del self._windows[k]

    async def hit(self, key: str, window_seconds: int) -> tuple[int, int]:
        now = self._clock()
        self._sweep(now)
        count, reset_at = self._windows.get(key, (0, now + window_seconds))
        count += 1
        self._windows[key] = (count, reset_at)
        return count, max(1, math.ceil(reset_at - now))

    async def reset(self, key: str) -> None:
        self._windows.pop(key, None)

    def __len__(self) -> int:
        return len(self._windows)


class RedisRateLimitStore(RateLimitStore):
    """Shared store: INCR + EXPIRE on first hit, TTL drives the reset time."""

    def __init__(self, redis: Redis, namespace: str = "aspas:ratelimit"):
        self.redis = redis
        self.namespace = namespace

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimitStore":
        return cls(Redis.from_url(url, decode_responses=True))

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def hit(self, key: str, window_seconds: int) -> tuple[int, int]:
        name = self._key(key)
        pipe = self.redis.pipeline()
        pipe.incr(name)
        pipe.ttl(name)
        count, ttl = await pipe.execute()
        if ttl is None or int(ttl) < 0:
            # First hit of the window (or a key that lost its expiry)
            await self.redis.expire(name, window_seconds)
            ttl = window_seconds
        return int(count), max(1, int(ttl))

    async def reset(self, key: str) -> None:
        await self.redis.delete(self._key(key))

    async def close(self) -> None:
        await self.redis.aclose()


def build_rate_limit_store() -> RateLimitStore:
    if settings.rate_limit_redis_url:
        logger.info("[ratelimit] Using Redis store at %s", settings.rate_limit_redis_url)
        return RedisRateLimitStore.from_url(settings.rate_limit_redis_url)
    return MemoryRateLimitStore()


def get_rate_limit_store(request: Request) -> RateLimitStore:
    """FastAPI dependency: the store attached to the running application."""
    return request.app.state.rate_limit_store


def client_ip(request: Request) -> str:
    # Real client IP even behind a proxy / load balancer
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not isinstance(email, str):
        return None
    return email.strip().lower() or None


def _email_key(email: str) -> str:
    return f"login:email:{email}"


def _too_many(kind: ErrorKind, message: str, retry_after_s: int) -> AppError:
    minutes = max(1, math.ceil(retry_after_s / 60))
    return AppError(
        kind,
        message=f"{message} Please try again in {minutes} minutes.",
        extra={"retryAfter": f"{minutes} minutes"},
        headers={"Retry-After": str(retry_after_s)},
    )


async def login_rate_limit(request: Request, store: RateLimitStore = Depends(get_rate_limit_store)) -> None:
    """
    Guard for the login route: per-IP limit, then per-email limit.

    The email is read from the raw body before schema validation; requests without
    one only count against the IP.
    """
    if not settings.rate_limit_enabled:
        return

    ip_count, ip_retry = await store.hit(
        f"login:ip:{client_ip(request)}", settings.login_window_ms // 1000
    )
    if ip_count > settings.login_max_attempts_ip:
        raise _too_many(ErrorKind.TOO_MANY_LOGIN_ATTEMPTS, "Too many login attempts.", ip_retry)

    try:
        body = await request.json()
    except ValueError:
        body = None
    email = normalize_email(body.get("email") if isinstance(body, dict) else None)
    if not email:
        return

    email_count, email_retry = await store.hit(_email_key(email), settings.login_email_window_ms // 1000)
    if email_count > settings.login_max_attempts_email:
        raise _too_many(
            ErrorKind.TOO_MANY_LOGIN_ATTEMPTS_EMAIL, "Too many login attempts for this email.", email_retry
        )


async def reset_login_attempts(store: RateLimitStore, email: str) -> None:
    """Forget the per-email counter (called after a successful login)."""
    normalized = normalize_email(email)
    if normalized:
        await store.reset(_email_key(normalized))
