"""In-memory sliding-window rate limiting for public endpoints."""

import time
import logging
from threading import Lock
from typing import Callable, Dict, List, Optional

from fastapi import Request

from journal.shared.errors import ApiError, ErrorKind


def get_client_ip(request: Request) -> str:
    """Get client IP address for rate limiting."""
    # Check for forwarded IP (from proxy/load balancer)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain
        return forwarded.split(",")[0].strip()
    # Fallback to direct connection
    return request.client.host if request.client else "unknown"


class SlidingWindowRateLimiter:
    """
    Per-key sliding window limiter.

    Keeps, for every key, the timestamps of previously allowed calls. A call is
    denied (and not recorded) once ``max_requests`` timestamps fall inside the
    trailing ``window_seconds``. State is process-local: every instance behind a
    load balancer enforces its own, smaller, limit.

    Keys whose timestamps have all expired are swept at most once per window so
    the key set does not grow for the lifetime of the process.
    """

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.time):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, List[float]] = {}
        self._lock = Lock()
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        """Record a call for ``key`` and return True, or return False if over quota."""
        now = self._clock()
        cutoff = now - self.window_seconds

        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._evict_expired(cutoff)
                self._last_sweep = now

            timestamps = [t for t in self._hits.get(key, []) if t > cutoff]
            if len(timestamps) >= self.max_requests:
                self._hits[key] = timestamps
                return False

            timestamps.append(now)
            self._hits[key] = timestamps
            return True

    def remaining(self, key: str) -> int:
        """Calls still allowed for ``key`` in the current window."""
        cutoff = self._clock() - self.window_seconds
        with self._lock:
            recent = [t for t in self._hits.get(key, []) if t > cutoff]
        return max(0, self.max_requests - len(recent))

    def retry_after(self, key: str) -> int:
        """Seconds until the oldest counted call for ``key`` leaves the window."""
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            recent = [t for t in self._hits.get(key, []) if t > cutoff]
        if len(recent) < self.max_requests:
            return 0
        return max(1, int(recent[0] + self.window_seconds - now) + 1)

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_sweep = self._clock()

    def _evict_expired(self, cutoff: float) -> None:
        stale = [key for key, stamps in self._hits.items() if not stamps or stamps[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        if stale:
            logging.debug(f"Evicted {len(stale)} expired rate limit keys")


# Per-action limiters for check_rate_limit(), created on first use
_action_limiters: Dict[str, SlidingWindowRateLimiter] = {}
_action_limiters_lock = Lock()


def _limiter_for(action: str, max_requests: int, window_seconds: int) -> SlidingWindowRateLimiter:
    with _action_limiters_lock:
        limiter = _action_limiters.get(action)
        if limiter is None or limiter.max_requests != max_requests or limiter.window_seconds != window_seconds:
            limiter = SlidingWindowRateLimiter(max_requests, window_seconds)
            _action_limiters[action] = limiter
        return limiter


def check_rate_limit(
    client_ip: str,
    action: str,
    max_requests: int,
    window_seconds: int,
    message: Optional[str] = None,
) -> None:
    """
    Raise a 429 ApiError if ``client_ip`` exceeded the quota for ``action``.

    Args:
        client_ip: Client identity (usually from get_client_ip)
        action: Bucket name, e.g. "admin-login"
        max_requests: Calls allowed per window
        window_seconds: Window length
        message: Optional override for the error message
    """
    limiter = _limiter_for(action, max_requests, window_seconds)
    if not limiter.allow(client_ip):
        logging.warning(f"Rate limit exceeded for {action} from {client_ip}")
        raise ApiError(
            ErrorKind.RATE_LIMITED,
            message or "Too many requests. Please try again later.",
            headers={"Retry-After": str(limiter.retry_after(client_ip))},
        )


def reset_action_limiters() -> None:
    with _action_limiters_lock:
        _action_limiters.clear()
