"""HTTP middleware: CORS, security headers and per-IP rate limiting.

Rate limiting keeps two sliding one-minute windows per client IP: a general
one for every request, and a tighter one for credential and ballot
submissions (login, self-registration, vote casting). Rejections use the
same JSON error shape as the exception handlers.
"""

import time
from collections import defaultdict, deque
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from ballot_api.core.config import Settings

_DEFAULT_TRUSTED_HEADERS = ("CF-Connecting-IP", "X-Forwarded-For", "X-Real-IP")

_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "no-referrer",
}

# POST paths (suffixes, after the API prefix) that count against the sensitive window.
SENSITIVE_POST_SUFFIXES = ("/auth/login", "/auth/register", "/auth/register/candidate", "/vote")

WINDOW_SECONDS = 60.0


def get_client_ip(request: Request, trusted_headers: list[str] | None = None) -> str:
    """Resolve the client IP, preferring trusted proxy headers in order.

    ``X-Forwarded-For`` contributes its leftmost address. Without a usable
    header the socket peer is used, and "unknown" when there is none.
    """
    for header in _DEFAULT_TRUSTED_HEADERS if trusted_headers is None else trusted_headers:
        value = request.headers.get(header, "").strip()
        if value:
            return value.split(",")[0].strip() if header.lower() == "x-forwarded-for" else value
    return request.client.host if request.client else "unknown"


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Add CORS middleware when origins or an origin regex are configured."""
    options: dict[str, Any] = {"allow_credentials": True, "allow_methods": ["*"], "allow_headers": ["*"]}
    if settings.cors_origin_list:
        options["allow_origins"] = settings.cors_origin_list
    if regex := settings.cors_origin_regex.strip():
        options["allow_origin_regex"] = regex
    app.add_middleware(CORSMiddleware, **options)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp the standard hardening headers on every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(_SECURITY_HEADERS)
        return response


class SlidingWindow:
    """Per-key request timestamps over the last :data:`WINDOW_SECONDS`.

    Args:
        limit: Maximum requests a key may make inside one window.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.hits: dict[str, deque[float]] = defaultdict(deque)

    def retry_after(self, key: str, now: float) -> int | None:
        """Seconds until ``key`` may retry, or None if it is under the limit.

        Expired timestamps are discarded; keys with none left are forgotten.
        """
        window_start = now - WINDOW_SECONDS
        stamps = self.hits.get(key)
        if stamps is None:
            return None
        while stamps and stamps[0] <= window_start:
            stamps.popleft()
        if not stamps:
            del self.hits[key]
            return None
        if len(stamps) >= self.limit:
            return max(1, int(stamps[0] - window_start) + 1)
        return None

    def record(self, key: str, now: float) -> None:
        self.hits[key].append(now)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory per-IP rate limiting.

    Args:
        app: The wrapped ASGI app.
        requests_per_minute: General limit for any request.
        sensitive_requests_per_minute: Limit for login, registration and
            vote submissions. None disables the extra window.
        trusted_proxy_headers: Headers consulted for the client IP, in order.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: int = 60,
        sensitive_requests_per_minute: int | None = None,
        trusted_proxy_headers: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.trusted_proxy_headers = trusted_proxy_headers
        self.general = SlidingWindow(requests_per_minute)
        self.sensitive = SlidingWindow(sensitive_requests_per_minute) if sensitive_requests_per_minute else None

    def _windows_for(self, request: Request) -> list[SlidingWindow]:
        windows = [self.general]
        if (
            self.sensitive is not None
            and request.method == "POST"
            and request.url.path.rstrip("/").endswith(SENSITIVE_POST_SUFFIXES)
        ):
            windows.append(self.sensitive)
        return windows

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        client_ip = get_client_ip(request, self.trusted_proxy_headers)
        now = time.time()
        windows = self._windows_for(request)

        waits = [w for w in (window.retry_after(client_ip, now) for window in windows) if w is not None]
        if waits:
            return JSONResponse(
                status_code=429,
                content={"message": "Rate limit exceeded. Try again later.", "code": "rate_limited", "errors": None},
                headers={"Retry-After": str(max(waits))},
            )

        for window in windows:
            window.record(client_ip, now)
        return await call_next(request)
