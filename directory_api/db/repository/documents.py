"""Repository primitives shared by the company and user collections."""

from __future__ import annotations

from typing import Any

from arango.database import StandardDatabase

from directory_api.db.query import build_find_query
from directory_api.schemas.find import FindRequest

Document = dict[str, Any]


def find_documents(db: StandardDatabase, collection: str, request: FindRequest) -> list[Document]:
    """Run the parameterized list query for ``collection``."""
    find = build_find_query(collection, request)
    cursor = db.aql.execute(find.query, bind_vars=find.bind_vars)
    return list(cursor)


def get_document(db: StandardDatabase, collection: str, key: str) -> Document | None:
    """Fetch a document by key."""
    return db.collection(collection).get(key)


def insert_document(db: StandardDatabase, collection: str, fields: Document) -> Document:
    """Insert and return the stored document."""
    result = db.collection(collection).insert(fields, return_new=True)
    return result["new"]


def update_document(db: StandardDatabase, collection: str, key: str, fields: Document) -> Document:
    """Merge ``fields`` into an existing document and return the new revision."""
    result = db.collection(collection).update({"_key": key, **fields}, return_new=True)
    return result["new"]


def delete_document(db: StandardDatabase, collection: str, key: str) -> None:
    """Remove a document by key."""
    db.collection(collection).delete(key)
