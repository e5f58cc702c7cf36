from __future__ import annotations
import time
from dataclasses import dataclass

import redis.asyncio as redis
from fastapi import Depends, HTTPException, Request

from app.core.config import settings

@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_seconds: int

class TokenRateLimiter:
    def __init__(self, redis_url: str):
        self.r = redis.from_url(redis_url, decode_responses=True)

    async def allow(self, *, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        now = int(time.time())
        window = now // window_seconds
        rkey = f"rl:{key}:{window}"

        # INCR with expiry
        val = await self.r.incr(rkey)
        if val == 1:
            await self.r.expire(rkey, window_seconds)

        remaining = max(0, limit - val)
        reset = window_seconds - (now % window_seconds)
        return RateLimitResult(allowed=val <= limit, remaining=remaining, reset_seconds=reset)


_limiter: TokenRateLimiter | None = None


def get_rate_limiter() -> TokenRateLimiter:
    global _limiter
    if _limiter is None:
        _limiter = TokenRateLimiter(settings.redis_url)
    return _limiter


async def limit_auth_requests(request: Request, limiter: TokenRateLimiter = Depends(get_rate_limiter)) -> None:
    """Login and register share one per-IP budget."""
    if not settings.auth_rate_limit_enabled:
        return

    client_ip = request.client.host if request.client else "unknown"
    res = await limiter.allow(
        key=f"auth:{client_ip}",
        limit=settings.auth_rate_limit,
        window_seconds=settings.auth_rate_window_seconds,
    )
    if not res.allowed:
        raise HTTPException(
            status_code=429,
            detail="Too many requests, try again later",
            headers={"Retry-After": str(res.reset_seconds)},
        )
