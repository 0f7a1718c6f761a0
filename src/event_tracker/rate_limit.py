"""Rate limiting for the login and register endpoints.

Sliding window per client key. State lives in Redis when REDIS_URL is set so
every worker shares one counter; otherwise each process keeps its own
in-memory counters, which multiplies the effective limit by the number of
workers.

We use threading.Lock rather than asyncio.Lock because the critical section
is a handful of dict operations.
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock

import redis

from event_tracker.config import settings
from event_tracker.utils.exceptions import RateLimited

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    max_requests: int = 5  # Maximum requests in window
    window_seconds: int = 60  # Time window in seconds
    block_seconds: int = 300  # Block duration after exceeding limit


@dataclass
class RateLimitState:
    """State for a single key (in-memory fallback)."""

    requests: list[float] = field(default_factory=list)
    blocked_until: float = 0.0


class RateLimiter:
    """Rate limiter with Redis support and in-memory fallback."""

    def __init__(
        self,
        name: str,
        config: RateLimitConfig | None = None,
        redis_url: str | None = None,
    ) -> None:
        self.name = name
        self.config = config or RateLimitConfig()
        self._local_state: dict[str, RateLimitState] = defaultdict(RateLimitState)
        self._lock = Lock()
        self._redis_url = redis_url
        self._redis: redis.Redis | None = None
        self._redis_checked = False

    def _client(self) -> redis.Redis | None:
        if self._redis_checked:
            return self._redis
        self._redis_checked = True
        if not self._redis_url:
            return None
        try:
            client = redis.from_url(self._redis_url, decode_responses=True)
            client.ping()
            self._redis = client
        except redis.RedisError as exc:
            logger.warning("Redis unavailable for %s rate limiter, using local memory: %s", self.name, exc)
            self._redis = None
        return self._redis

    def _keys(self, key: str) -> tuple[str, str]:
        return f"rl:{self.name}:{key}", f"rl_block:{self.name}:{key}"

    def is_allowed(self, key: str) -> tuple[bool, int]:
        """Record a request for ``key``; returns (allowed, retry_after_seconds)."""
        client = self._client()
        if client is not None:
            return self._is_allowed_redis(client, key)
        return self._is_allowed_local(key)

    def check(self, key: str, message: str) -> None:
        """Raise RateLimited when ``key`` has exhausted its window."""
        allowed, retry_after = self.is_allowed(key)
        if not allowed:
            logger.warning("Rate limit exceeded for %s", self.name)
            raise RateLimited(message, retry_after=retry_after)

    def _is_allowed_redis(self, client: redis.Redis, key: str) -> tuple[bool, int]:
        now = time.time()
        rl_key, block_key = self._keys(key)

        try:
            blocked_until = client.get(block_key)
            if blocked_until:
                remaining = int(float(blocked_until) - now)
                if remaining > 0:
                    return False, remaining

            pipe = client.pipeline()
            pipe.zadd(rl_key, {str(now): now})
            pipe.zremrangebyscore(rl_key, 0, now - self.config.window_seconds)
            pipe.zcard(rl_key)
            pipe.expire(rl_key, self.config.window_seconds * 2)
            results = pipe.execute()

            if results[2] > self.config.max_requests:
                client.setex(block_key, self.config.block_seconds, str(now + self.config.block_seconds))
                return False, self.config.block_seconds

            return True, 0
        except redis.RedisError as exc:
            logger.warning("Redis error during rate limiting, falling back to local: %s", exc)
            return self._is_allowed_local(key)

    def _is_allowed_local(self, key: str) -> tuple[bool, int]:
        now = time.time()
        with self._lock:
            state = self._local_state[key]
            if state.blocked_until > now:
                return False, max(1, int(state.blocked_until - now))

            window_start = now - self.config.window_seconds
            state.requests = [ts for ts in state.requests if ts >= window_start]

            if len(state.requests) >= self.config.max_requests:
                state.blocked_until = now + self.config.block_seconds
                return False, self.config.block_seconds

            state.requests.append(now)
            return True, 0

    def reset(self, key: str) -> None:
        """Forget all state for ``key`` (e.g. after a successful login)."""
        client = self._client()
        if client is not None:
            try:
                client.delete(*self._keys(key))
            except redis.RedisError as exc:
                logger.warning("Redis error during reset, ignoring: %s", exc)

        with self._lock:
            self._local_state.pop(key, None)

    def close(self) -> None:
        if self._redis is not None:
            self._redis.close()
            self._redis = None
        self._redis_checked = False


auth_rate_limiter = RateLimiter(
    "login",
    RateLimitConfig(
        max_requests=settings.auth_rate_limit_max_requests,
        window_seconds=settings.auth_rate_limit_window_seconds,
        block_seconds=settings.auth_rate_limit_block_seconds,
    ),
    redis_url=settings.redis_url,
)

register_rate_limiter = RateLimiter(
    "register",
    RateLimitConfig(
        max_requests=settings.auth_rate_limit_max_requests,
        window_seconds=settings.auth_rate_limit_window_seconds * 60,
        block_seconds=settings.auth_rate_limit_block_seconds * 12,
    ),
    redis_url=settings.redis_url,
)
