"""
Mini Notes Backend — HTTP Path Router
=======================================

What:  Minimal method + path router with `:param` segments, mounted as an
       ASGI app under FastAPI.
Why:   The API surface is a handful of routes. A flat, ordered table keeps
       matching rules explicit: first registered match wins, no scoring.
How:   dispatch() answers pre-flight OPTIONS itself, scans the table, puts
       the extracted params on `request.path_params`, awaits the handler and
       converts any exception into a status code.

Matching (segment-wise):
    pattern  /api/notes/:id      path  /api/notes/abc        → {"id": "abc"}
    pattern  /api/notes/:id      path  /api/notes            → no match
    pattern  /api/notes/:id      path  /api/notes/abc/extra  → no match

    Both sides are split on "/" with empty segments dropped, so
    "/api/notes/" and "/api/notes" are the same path.

Error classification (the only place status codes are chosen for errors):
    MiniNotesError subclasses  → exc.status_code, body {"error": exc.message}
    InternalError / StorageError → 500, body {"error": "Internal server error"}
    any other exception         → 500, same generic body, stack trace logged
                                  with the route's method and pattern

Every response leaving the router carries Access-Control-Allow-Origin.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.types import Receive, Scope, Send

from mininotes.exceptions import InternalError, MiniNotesError

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[Response]]

PARAM_MARKER = ":"
PREFLIGHT_METHOD = "OPTIONS"
ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
GENERIC_ERROR = "Internal server error"


@dataclass(frozen=True)
class Route:
    method: str
    pattern: str
    handler: Handler


def _segments(path: str) -> List[str]:
    return [part for part in path.split("/") if part]


def match_path(pattern: str, path: str) -> bool:
    """True when `path` has the same segment count as `pattern` and every
    literal segment is equal."""
    pattern_parts = _segments(pattern)
    path_parts = _segments(path)
    if len(pattern_parts) != len(path_parts):
        return False
    return all(
        p.startswith(PARAM_MARKER) or p == actual
        for p, actual in zip(pattern_parts, path_parts)
    )


def get_path_params(pattern: str, path: str) -> Dict[str, str]:
    """
    Map each `:name` segment of `pattern` to the value at the same position
    in `path`. Only meaningful when match_path(pattern, path) is True.
    """
    return {
        p[len(PARAM_MARKER):]: actual
        for p, actual in zip(_segments(pattern), _segments(path))
        if p.startswith(PARAM_MARKER)
    }


class Router:
    """
    Ordered route table and ASGI entry point.

    Args:
        allow_origin: value of Access-Control-Allow-Origin on every response
    """

    def __init__(self, allow_origin: str = "*") -> None:
        self.allow_origin = allow_origin
        self.routes: List[Route] = []

    # ── Registration ──────────────────────────────────────────────────────

    def register(self, method: str, pattern: str, handler: Handler) -> None:
        self.routes.append(Route(method=method.upper(), pattern=pattern, handler=handler))

    def get(self, pattern: str, handler: Handler) -> None:
        self.register("GET", pattern, handler)

    def post(self, pattern: str, handler: Handler) -> None:
        self.register("POST", pattern, handler)

    def put(self, pattern: str, handler: Handler) -> None:
        self.register("PUT", pattern, handler)

    def delete(self, pattern: str, handler: Handler) -> None:
        self.register("DELETE", pattern, handler)

    # ── Dispatch ──────────────────────────────────────────────────────────

    def find(self, method: str, path: str) -> Optional[Route]:
        for route in self.routes:
            if route.method == method and match_path(route.pattern, path):
                return route
        return None

    async def dispatch(self, request: Request) -> Response:
        if request.method == PREFLIGHT_METHOD:
            return Response(status_code=204, headers=self.preflight_headers())

        path = request.url.path
        route = self.find(request.method, path)
        if route is None:
            return PlainTextResponse(
                "Not found",
                status_code=404,
                headers={"Access-Control-Allow-Origin": self.allow_origin},
            )

        request.scope["path_params"] = get_path_params(route.pattern, path)
        try:
            response = await route.handler(request)
        except MiniNotesError as exc:
            response = self._error_response(route, exc)
        except Exception:
            logger.exception("Unhandled error in route %s %s", route.method, route.pattern)
            response = self.json({"error": GENERIC_ERROR}, status_code=500)

        response.headers.setdefault("Access-Control-Allow-Origin", self.allow_origin)
        return response

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return
        response = await self.dispatch(Request(scope, receive))
        await response(scope, receive, send)

    # ── Responses ─────────────────────────────────────────────────────────

    def preflight_headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }

    def json(self, content: Any, status_code: int = 200) -> JSONResponse:
        return JSONResponse(
            content,
            status_code=status_code,
            headers={"Access-Control-Allow-Origin": self.allow_origin},
        )

    def _error_response(self, route: Route, exc: MiniNotesError) -> JSONResponse:
        if isinstance(exc, InternalError) or exc.status_code >= 500:
            logger.error(
                "Internal error in route %s %s: %s | Context: %s",
                route.method,
                route.pattern,
                exc.message,
                exc.context,
            )
            return self.json({"error": GENERIC_ERROR}, status_code=500)

        logger.info(
            "%s %s rejected with %d: %s",
            route.method,
            route.pattern,
            exc.status_code,
            exc.message,
        )
        return self.json({"error": exc.message}, status_code=exc.status_code)
