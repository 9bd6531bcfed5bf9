"""
Mini Notes Backend — Auth Rate Limiting Middleware
====================================================

What:  Per-IP sliding window limit on the credential endpoints.
Why:   bcrypt makes each password guess cost ~250ms of server CPU; without
       a cap, /api/auth/login is both a brute-force target and an easy way
       to pin the CPU.
How:   Keeps each IP's request timestamps inside the window and rejects with
       429 once the window holds `max_requests` of them.

Algorithm: Sliding Window Log
    1. Drop the IP's timestamps older than `window` seconds
    2. If `max_requests` remain, reject; Retry-After is when the oldest
       one leaves the window
    3. Otherwise record now and pass through

Scope:
    Only paths under `path_prefix` (default /api/auth/) are counted. Note
    traffic is already gated by a valid token.

Limitations:
    Counters live in this process. Behind several workers each has its own
    window, and behind a proxy every client shares the proxy's IP unless
    uvicorn is started with --proxy-headers.
"""

import logging
import time
from collections import defaultdict
from typing import Callable, Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from mininotes.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int = 30,
        window: int = 60,
        path_prefix: str = "/api/auth/",
        allow_origin: str = "*",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.window = window
        self.path_prefix = path_prefix
        self.allow_origin = allow_origin
        self._clock = clock
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Pre-flight requests never reach a handler; don't count them
        if request.method == "OPTIONS" or not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = self._clock()
        window_start = now - self.window

        recent = [ts for ts in self._requests[client_ip] if ts > window_start]
        if len(recent) >= self.max_requests:
            self._requests[client_ip] = recent
            retry_after = int(recent[0] + self.window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(recent),
                self.window,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.message},
                headers={
                    "Retry-After": str(retry_after),
                    "Access-Control-Allow-Origin": self.allow_origin,
                },
            )

        recent.append(now)
        self._requests[client_ip] = recent
        self._forget_idle(window_start)
        return await call_next(request)

    def _forget_idle(self, window_start: float) -> None:
        """Drop IPs whose newest request has left the window."""
        idle = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in idle:
            del self._requests[ip]
