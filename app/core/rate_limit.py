"""
Simple in-memory rate limiter for API endpoints.

One limiter is built per app from Settings and kept on `app.state`.
Requests are counted per client IP. `X-Forwarded-For` is only honoured when
the direct peer is one of the configured trusted proxies.
"""
import logging
import threading
import time
from typing import Callable, Dict, Iterable, List
from fastapi import Request, HTTPException, status

logger = logging.getLogger(__name__)


def get_client_ip(request: Request, trusted_proxies: Iterable[str] = ()) -> str:
    """Extract client IP address from request."""
    peer = request.client.host if request.client else "unknown"

    # Forwarded IP (from proxy/load balancer) is client-controlled unless
    # the request really came through one of our proxies
    if peer in trusted_proxies:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take the first IP in the chain
            return forwarded.split(",")[0].strip() or peer

    return peer


class RateLimiter:
    """Sliding-window request counter keyed by client IP."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
        trusted_proxies: Iterable[str] = (),
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.trusted_proxies = frozenset(trusted_proxies)
        self._clock = clock
        self._hits: Dict[str, List[float]] = {}
        self._lock = threading.Lock()
        self._next_sweep = clock() + window_seconds

    @property
    def tracked_keys(self) -> int:
        return len(self._hits)

    def _sweep(self, cutoff: float) -> None:
        """Forget keys whose last request has left the window. Caller holds the lock."""
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]

    def hit(self, key: str) -> bool:
        """Record a request for `key`. False when the window is already full."""
        now = self._clock()
        cutoff = now - self.window_seconds

        with self._lock:
            if now >= self._next_sweep:
                self._sweep(cutoff)
                self._next_sweep = now + self.window_seconds

            # Clean old entries (older than window)
            recent = [t for t in self._hits.get(key, ()) if t > cutoff]
            if len(recent) >= self.max_requests:
                self._hits[key] = recent
                return False
            recent.append(now)
            self._hits[key] = recent
            return True

    def check(self, request: Request) -> None:
        """
        Raises:
            HTTPException: 429 if rate limit exceeded
        """
        ip = get_client_ip(request, self.trusted_proxies)
        if not self.hit(ip):
            logger.warning(f"Rate limit exceeded for IP: {ip} ({self.max_requests} requests in {self.window_seconds}s)")
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail={
                    "code": "rate_limited",
                    "message": "Too many requests from this IP, please try again later.",
                },
            )


def enforce_rate_limit(request: Request) -> None:
    """Router-level dependency applying the app's limiter."""
    request.app.state.rate_limiter.check(request)
