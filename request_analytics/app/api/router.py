"""
Top‑level router.

Aggregates the endpoint routers under their URL prefixes.  The
analytics routes are mounted at ``/requests`` to keep the paths used
by existing tracking snippets.
"""

from fastapi import APIRouter

from .endpoints import requests

router = APIRouter()

router.include_router(requests.router, prefix="/requests", tags=["requests"])
