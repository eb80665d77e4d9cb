"""
Rate limiting for the public auth endpoints (register, login)

Counters live in process memory and are pushed to Redis every few seconds, so
several workers converge on a shared count without a Redis round trip per
request. While Redis is unreachable the limiter keeps counting in memory.
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

from .config import RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

REDIS_SYNC_INTERVAL = 10  # seconds between pushes of a counter to Redis
CLEANUP_INTERVAL = 60  # seconds between sweeps of expired counters
REDIS_RETRY_INTERVAL = 60  # seconds to wait before reconnecting after a failure

_redis_client: Optional[redis.Redis] = None
_redis_retry_after = 0.0

# key -> {"count": int, "reset_time": int, "last_redis_sync": int}
_counters: dict[str, dict] = {}
_counters_lock = Lock()
_last_cleanup = 0


def get_redis_client() -> redis.Redis:
    """
    Connected Redis client, created on first use.

    Configured by REDIS_URL, or REDIS_HOST / REDIS_PORT / REDIS_PASSWORD /
    REDIS_DB / REDIS_SSL. Raises if the server does not answer a ping.
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    options = {
        "decode_responses": True,
        "socket_connect_timeout": 5,
        "socket_timeout": 5,
        "retry_on_timeout": True,
        "health_check_interval": 30,
    }
    redis_url = os.getenv("REDIS_URL")
    if redis_url:
        client = redis.from_url(redis_url, **options)
    else:
        client = redis.Redis(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            password=os.getenv("REDIS_PASSWORD") or None,
            db=int(os.getenv("REDIS_DB", "0")),
            ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
            **options,
        )

    try:
        client.ping()
    except redis.RedisError as e:
        logger.error(f"❌ Failed to connect to Redis: {e}")
        raise

    logger.info("Redis connected successfully")
    _redis_client = client
    return client


def _redis_or_none() -> Optional[redis.Redis]:
    global _redis_retry_after

    if time.time() < _redis_retry_after:
        return None
    try:
        return get_redis_client()
    except (redis.RedisError, ValueError) as e:
        _redis_retry_after = time.time() + REDIS_RETRY_INTERVAL
        logger.warning(f"⚠️ Redis unavailable, rate limiting from process memory only: {e}")
        return None


def _drop_expired_counters(now: int) -> None:
    global _last_cleanup

    if now - _last_cleanup < CLEANUP_INTERVAL:
        return

    with _counters_lock:
        expired = [key for key, entry in _counters.items() if now >= entry["reset_time"]]
        for key in expired:
            del _counters[key]

    if expired:
        logger.debug(f"🧹 Dropped {len(expired)} expired rate limit counters")
    _last_cleanup = now


def _new_counter(key: str, now: int, window_seconds: int, client: Optional[redis.Redis]) -> dict:
    """Start a counter, picking up a window another worker already opened in Redis"""
    entry = {"count": 0, "reset_time": now + window_seconds, "last_redis_sync": now}
    if client is None:
        return entry

    try:
        shared_count = client.get(key)
        shared_ttl = client.ttl(key)
    except redis.RedisError as e:
        logger.warning(f"⚠️ Could not read rate limit counter {key} from Redis: {e}")
        return entry

    if shared_count and shared_ttl > 0:
        entry["count"] = int(shared_count)
        entry["reset_time"] = now + shared_ttl
    return entry


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """
    Count one request against `key`.

    Args:
        key: Counter key, e.g. "login:203.0.113.7"
        limit: Requests allowed per window
        window_seconds: Window length
        client: Redis client to share counts through, or None for memory only

    Returns:
        (allowed, requests counted in this window, seconds until the window resets)
    """
    now = int(time.time())
    _drop_expired_counters(now)

    with _counters_lock:
        entry = _counters.get(key)
        if entry is None:
            entry = _counters[key] = _new_counter(key, now, window_seconds, client)

        if now >= entry["reset_time"]:
            entry.update(count=0, reset_time=now + window_seconds, last_redis_sync=0)

        allowed = entry["count"] < limit
        if allowed:
            entry["count"] += 1

        if client is not None and now - entry["last_redis_sync"] >= REDIS_SYNC_INTERVAL:
            try:
                client.set(key, entry["count"], ex=window_seconds)
                entry["last_redis_sync"] = now
            except redis.RedisError as e:
                logger.warning(f"⚠️ Failed to sync rate limit counter {key} to Redis: {e}")

        return allowed, entry["count"], max(0, entry["reset_time"] - now)


def _client_key(request: Request, key_prefix: str, use_ip: bool) -> str:
    if not use_ip:
        return f"{key_prefix}:global"

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else "unknown"
    return f"{key_prefix}:{ip}"


def create_rate_limiter(
    limit: int, window_seconds: int, key_prefix: str = "rate_limit", use_ip: bool = True
):
    """
    Build a FastAPI dependency enforcing `limit` requests per `window_seconds`

    Example:
        rate_limit_login = create_rate_limiter(limit=20, window_seconds=300, key_prefix="login")

        @router.post("/login")
        async def login(data: UserLogin, _: None = Depends(rate_limit_login)):
            ...
    """

    async def rate_limiter(request: Request) -> None:
        if not RATE_LIMIT_ENABLED:
            return

        key = _client_key(request, key_prefix, use_ip)
        allowed, count, retry_after = check_rate_limit(key, limit, window_seconds, _redis_or_none())
        if allowed:
            return

        logger.warning(f"🚫 Rate limit exceeded for {key} ({count}/{limit})")
        raise HTTPException(
            status_code=429,
            detail={
                "message": f"Too many requests. Try again in {retry_after} seconds.",
                "retry_after": retry_after,
                "limit": limit,
                "window_seconds": window_seconds,
            },
            headers={"Retry-After": str(retry_after)},
        )

    return rate_limiter
