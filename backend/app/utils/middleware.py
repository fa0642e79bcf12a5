from __future__ import annotations

from urllib.parse import parse_qs

from starlette.types import ASGIApp, Receive, Scope, Send

OVERRIDABLE_METHODS = {"PUT", "PATCH", "DELETE"}


class MethodOverrideMiddleware:
    """Dispatch ``POST ...?_method=PUT`` as ``PUT``; HTML forms only send GET/POST."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            query = parse_qs(scope.get("query_string", b"").decode("latin-1"))
            override = query.get("_method", [""])[0].upper()
            if override in OVERRIDABLE_METHODS:
                scope = dict(scope, method=override)
        await self.app(scope, receive, send)
