"""Response hardening for the credgate service."""

from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp hardening headers onto every response.

    Validation answers describe user secrets, so nothing may be cached or
    framed. HSTS is opt-in and only sent on requests that arrived over HTTPS.
    """

    HEADERS: dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store",
        "Referrer-Policy": "no-referrer",
    }

    HSTS_VALUE = "max-age=31536000; includeSubDomains"

    def __init__(self, app: Callable[..., Any], enable_hsts: bool = False) -> None:
        """
        Args:
            app: ASGI application instance.
            enable_hsts: Send Strict-Transport-Security on HTTPS requests.
                Enable only where TLS terminates in front of the service.
        """
        super().__init__(app)
        self._enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next: Callable[..., Any]) -> Response:
        response: Response = await call_next(request)
        response.headers.update(self.HEADERS)
        if self._enable_hsts and request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = self.HSTS_VALUE
        return response
