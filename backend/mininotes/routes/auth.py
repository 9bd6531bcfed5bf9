"""
Mini Notes Backend — Auth Route Handlers
==========================================

What:  POST /api/auth/register, POST /api/auth/login, POST /api/auth/logout.
How:   Parse the body, call AuthService, serialize the result. Every failure
       is an exception the router turns into a status code.

Responses:
    register → 201 {"token": "...", "user": {"id", "username", "createdAt"}}
    login    → 200 same shape
    logout   → 200 {"message": "Logged out"}
"""

from starlette.requests import Request
from starlette.responses import Response

from mininotes.router import Router
from mininotes.routes.body import read_json_body
from mininotes.schemas.auth import Credentials
from mininotes.services.auth_service import AuthService


def register_auth_routes(router: Router, auth_service: AuthService) -> None:

    async def register(request: Request) -> Response:
        body = await read_json_body(request, Credentials)
        result = await auth_service.register(body.username, body.password)
        return router.json(result.model_dump(mode="json", by_alias=True), status_code=201)

    async def login(request: Request) -> Response:
        body = await read_json_body(request, Credentials)
        result = await auth_service.login(body.username, body.password)
        return router.json(result.model_dump(mode="json", by_alias=True))

    async def logout(request: Request) -> Response:
        await auth_service.logout(request)
        return router.json({"message": "Logged out"})

    router.post("/api/auth/login", login)
    router.post("/api/auth/register", register)
    router.post("/api/auth/logout", logout)
