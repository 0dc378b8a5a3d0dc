"""Security headers middleware.

Adds hardening headers to every response and forbids caching of auth
responses, which carry access and refresh tokens. Raw ASGI.
"""

from typing import Callable

DEFAULT_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}
NO_STORE_PREFIX = "/api/v1/auth"


def SecurityHeadersMiddleware(
    app: Callable,
    headers: dict[str, str] | None = None,
    no_store_prefix: str = NO_STORE_PREFIX,
) -> Callable:
    """Set security headers (without overriding ones the route already set)."""
    base = [(k.lower().encode(), v.encode()) for k, v in (headers or DEFAULT_HEADERS).items()]
    no_store = [(b"cache-control", b"no-store"), (b"pragma", b"no-cache")]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = base + no_store if scope.get("path", "").startswith(no_store_prefix) else base

        async def send_with_headers(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                current.extend((n, v) for n, v in extra if n not in present)
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_with_headers)

    return asgi_app
