"""Shared pytest fixtures for directory API test suites."""

from collections.abc import Generator
from pathlib import Path
import sys
from typing import Any

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from directory_api.ingestion.storage import FileStorage  # noqa: E402


class FakeCollection:
    """In-memory stand-in for a python-arango collection."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: dict[str, dict[str, Any]] = {}
        self._next_key = 1

    def get(self, key: str) -> dict[str, Any] | None:
        doc = self.docs.get(key)
        return dict(doc) if doc is not None else None

    def insert(self, document: dict[str, Any], return_new: bool = False) -> dict[str, Any]:
        key = str(self._next_key)
        self._next_key += 1
        doc = {**document, "_key": key, "_id": f"{self.name}/{key}", "_rev": "1"}
        self.docs[key] = doc
        return {"_key": key, "_id": doc["_id"], "_rev": "1", "new": dict(doc)}

    def update(self, document: dict[str, Any], return_new: bool = False) -> dict[str, Any]:
        doc = self.docs[document["_key"]]
        doc.update(document)
        return {"_key": doc["_key"], "_id": doc["_id"], "_rev": "2", "new": dict(doc)}

    def delete(self, key: str) -> bool:
        del self.docs[key]
        return True


class FakeAQL:
    """Evaluates list queries from their bind variables and records every call."""

    def __init__(self, db: "FakeDatabase") -> None:
        self._db = db
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def execute(self, query: str, bind_vars: dict[str, Any] | None = None):
        bind_vars = bind_vars or {}
        self.calls.append((query, bind_vars))
        docs = list(self._db.collection(bind_vars["@collection"]).docs.values())
        if "search" in bind_vars:
            docs = [doc for doc in docs if bind_vars["search"] in str(doc.get(bind_vars["search_field"], ""))]
        if "sort_by" in bind_vars:
            docs.sort(key=lambda doc: doc.get(bind_vars["sort_by"]))
        if "limit" in bind_vars:
            docs = docs[: bind_vars["limit"]]
        return iter([dict(doc) for doc in docs])


class FakeDatabase:
    """Just enough of ``StandardDatabase`` for the repository layer."""

    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}
        self.aql = FakeAQL(self)

    def collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def file_storage(tmp_path: Path) -> FileStorage:
    return FileStorage(directory=tmp_path / "storage")


@pytest.fixture
def client(fake_db: FakeDatabase, file_storage: FileStorage) -> Generator[TestClient, None, None]:
    """Provide an API test client backed by the in-memory database and a temp storage dir."""
    from directory_api.db.base import get_database
    from directory_api.ingestion.storage import get_file_storage
    from directory_api.main import app

    app.dependency_overrides[get_database] = lambda: fake_db
    app.dependency_overrides[get_file_storage] = lambda: file_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}
