"""
FastAPI dependencies exposing the objects built by ``create_app``.

Settings, the record store and the country resolver are stored on
``app.state`` at startup and reached through the request here.
"""

from fastapi import Request

from .config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request):
    return request.app.state.store


def get_country_resolver(request: Request):
    return request.app.state.country_resolver
