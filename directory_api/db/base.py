"""ArangoDB client and database handle helpers."""

from __future__ import annotations

from functools import lru_cache

from arango import ArangoClient
from arango.database import StandardDatabase
from fastapi import Depends

from directory_api.core.config import Settings
from directory_api.core.config import get_settings


@lru_cache(maxsize=4)
def get_arango_client(url: str) -> ArangoClient:
    """Return the process-wide client for ``url``; it owns the HTTP connection pool."""
    return ArangoClient(hosts=url)


def connect(settings: Settings) -> StandardDatabase:
    """Open a database handle with the configured credentials."""
    client = get_arango_client(settings.arango_url)
    return client.db(
        settings.arango_database,
        username=settings.arango_username,
        password=settings.arango_password,
    )


def get_database(settings: Settings = Depends(get_settings)) -> StandardDatabase:
    """Provide a database handle for dependency injection."""
    return connect(settings)
