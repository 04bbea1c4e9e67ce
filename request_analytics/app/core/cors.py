"""
CORS handling.

Browsers on the analytics dashboards call the read endpoints directly,
so every response carries the CORS headers and an ``OPTIONS`` request
on any path is answered as a preflight without reaching the router.

With an empty allow‑list the allowed origin is ``*``.  Once
``ALLOWED_ORIGINS`` is configured the list is enforced: a listed
``Origin`` is echoed back and any other origin gets no
``Access-Control-Allow-Origin`` header at all.
"""

from typing import Dict, Optional, Sequence

from fastapi import FastAPI, Request, Response

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
PREFLIGHT_MAX_AGE = "86400"


def allowed_origin(origin: Optional[str], allowed_origins: Sequence[str]) -> Optional[str]:
    """Return the value for ``Access-Control-Allow-Origin``, if any."""
    if not allowed_origins:
        return "*"
    if origin and origin in allowed_origins:
        return origin
    return None


def cors_headers(origin: Optional[str], allowed_origins: Sequence[str]) -> Dict[str, str]:
    headers = {
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }
    allow_origin = allowed_origin(origin, allowed_origins)
    if allow_origin:
        headers["Access-Control-Allow-Origin"] = allow_origin
        if allow_origin != "*":
            headers["Vary"] = "Origin"
    return headers


def install_cors(app: FastAPI, allowed_origins: Sequence[str]) -> None:
    """Attach the CORS middleware to ``app``."""

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        headers = cors_headers(request.headers.get("Origin"), allowed_origins)
        if request.method == "OPTIONS":
            headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
            return Response(status_code=200, headers=headers)
        response = await call_next(request)
        response.headers.update(headers)
        return response
