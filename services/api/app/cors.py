"""CORS helpers.

Every endpoint answers OPTIONS with 204 and no body. Browser preflights
(Origin + Access-Control-Request-Method) for known endpoints are answered by
the middleware with that endpoint's own method list; plain OPTIONS requests
reach the route handlers.
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from app.settings import get_settings

ALLOW_HEADERS = "Content-Type"


def cors_headers(allowed_methods: str, origin: str | None = None) -> dict[str, str]:
    """CORS headers for one endpoint (e.g. allowed_methods="GET, OPTIONS")."""
    origins = get_settings().cors_origins
    headers = {
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Methods": allowed_methods,
    }
    if "*" in origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


def preflight_response(allowed_methods: str, origin: str | None = None) -> Response:
    return Response(status_code=204, headers=cors_headers(allowed_methods, origin))


class NoContentCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that answers preflights with 204 instead of 200 "OK".

    endpoint_methods maps a path (e.g. "/price-reports") to the methods that
    endpoint allows; preflights for those paths advertise exactly that list.
    """

    def __init__(self, app: ASGIApp, *, endpoint_methods: dict[str, str] | None = None, **kwargs):
        super().__init__(app, **kwargs)
        self.endpoint_methods = endpoint_methods or {}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "OPTIONS":
            headers = Headers(scope=scope)
            methods = self.endpoint_methods.get(scope["path"].rstrip("/") or "/")
            if methods and "origin" in headers and "access-control-request-method" in headers:
                response = preflight_response(methods, headers["origin"])
                await response(scope, receive, send)
                return

        await super().__call__(scope, receive, send)

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)
