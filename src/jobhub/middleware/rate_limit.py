"""Rate limiting middleware — Redis fixed-window counters.

Learn: One counter per IP per minute, stored in Redis with a short TTL:
"jobhub:rl:{ip}:{bucket}:{minute}". Writes (POST/PUT/DELETE — comments,
like toggles, applications) get their own, stricter bucket so a spammy
client can't flood a job's comment thread.

Gracefully skips rate limiting if Redis is unavailable (e.g., in tests).
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Redis-based rate limiting per IP per minute."""

    def __init__(self, app, default_rpm: int = 100, write_rpm: int = 30):
        super().__init__(app)
        self.default_rpm = default_rpm
        self.write_rpm = write_rpm

    async def dispatch(self, request: Request, call_next) -> Response:
        from jobhub.realtime.pubsub import get_redis

        try:
            redis = get_redis()
        except RuntimeError:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        is_write = request.method in WRITE_METHODS
        rpm = self.write_rpm if is_write else self.default_rpm
        bucket = "write" if is_write else "read"
        key = f"jobhub:rl:{client_ip}:{bucket}:{int(time.time() // 60)}"

        try:
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, 120)
        except Exception as e:
            logger.warning("ratelimit.redis_error", error=str(e))
            return await call_next(request)

        if count > rpm:
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Try again later."},
                headers={"Retry-After": "60"},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(rpm)
        response.headers["X-RateLimit-Remaining"] = str(max(0, rpm - count))
        return response
