"""
Request-scoped access to application state.

The catalog and session store are attached to `app.state` during startup
and injected into endpoints with `Depends`, so tests can override them.
"""

from fastapi import Request

from talingchan.config import Settings, settings
from talingchan.services.catalog import CardCatalog
from talingchan.services.session_store import SessionStore


def get_catalog(request: Request) -> CardCatalog:
    return request.app.state.catalog


def get_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_settings() -> Settings:
    return settings
