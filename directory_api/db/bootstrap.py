"""Create the collections and indexes the API expects."""

from __future__ import annotations

import logging

from arango.database import StandardDatabase

from directory_api.core.config import configure_logging
from directory_api.core.config import get_settings
from directory_api.db.base import connect

logger = logging.getLogger(__name__)

COMPANIES = "companies"
USERS = "users"


def ensure_collections(db: StandardDatabase) -> None:
    """Create missing collections and the unique user email index; safe to re-run."""
    for name in (COMPANIES, USERS):
        if not db.has_collection(name):
            db.create_collection(name)
            logger.info("Created collection %s", name)
    db.collection(USERS).add_index({"type": "persistent", "fields": ["email"], "unique": True})


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    logger.info("Preparing database with settings=%s", settings.safe_for_logging())
    ensure_collections(connect(settings))


if __name__ == "__main__":
    main()
