"""
Store factory and request-scoped context dependencies.

settings.STORE_BACKEND picks where both stores live: PostgreSQL, or memory
(admin rows start empty, security rows are the built-in reference data).
Every request opens its own unit of work on the admin store.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterator

from adminapi_core.config import StoreBackend, settings
from adminapi_core.domain.interfaces import AdminContext, SecurityContext
from adminapi_core.infrastructure.memory import InMemoryAdminStore, InMemorySecurityStore
from adminapi_core.infrastructure.postgres import PostgresAdminStore, PostgresSecurityContext
from adminapi_core.infrastructure.seed import build_security_store


@lru_cache()
def get_admin_store() -> InMemoryAdminStore | PostgresAdminStore:
    """Get the admin store instance."""
    if settings.STORE_BACKEND == StoreBackend.POSTGRES:
        return PostgresAdminStore(settings.ADMIN_DSN)
    return InMemoryAdminStore()


@lru_cache()
def get_security_store() -> InMemorySecurityStore:
    """Get the in-memory security store with default reference data."""
    return build_security_store()


def get_admin_context() -> Iterator[AdminContext]:
    """Open a unit of work for one request. Uncommitted changes are dropped."""
    yield get_admin_store().context()


def get_security_context() -> SecurityContext:
    """Take a fresh snapshot of the security store for one request."""
    if settings.STORE_BACKEND == StoreBackend.POSTGRES:
        return PostgresSecurityContext(settings.SECURITY_DSN)
    return get_security_store().context()
