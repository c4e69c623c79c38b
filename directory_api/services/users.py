"""Service helpers for user API operations."""

from __future__ import annotations

import logging

from arango.database import StandardDatabase
from arango.exceptions import DocumentInsertError
from arango.exceptions import DocumentUpdateError

from directory_api.core.errors import NotFoundError
from directory_api.core.errors import ValidationError
from directory_api.core.security import get_password_hash
from directory_api.db.bootstrap import USERS
from directory_api.db.repository.documents import Document
from directory_api.db.repository.documents import find_documents
from directory_api.db.repository.documents import get_document
from directory_api.db.repository.documents import insert_document
from directory_api.db.repository.documents import update_document
from directory_api.schemas.find import FindRequest
from directory_api.schemas.user import UserCreate
from directory_api.schemas.user import UserUpdate

logger = logging.getLogger(__name__)

UNIQUE_CONSTRAINT_VIOLATED = 1210


def _raise_if_duplicate_email(exc: DocumentInsertError | DocumentUpdateError) -> None:
    if exc.error_code == UNIQUE_CONSTRAINT_VIOLATED:
        raise ValidationError({"email": ["Email is already taken"]}) from exc


def _user_fields(payload: UserCreate | UserUpdate) -> Document:
    fields = payload.model_dump(exclude_none=True, exclude={"password", "password_confirmation"})
    if "name" in fields:
        fields["name"] = fields["name"].strip()
    if payload.password is not None:
        fields["password_hash"] = get_password_hash(payload.password)
    return fields


def list_users_service(db: StandardDatabase, request: FindRequest) -> list[Document]:
    """List users matching the normalized query."""
    return find_documents(db, USERS, request)


def get_user_service(db: StandardDatabase, key: str) -> Document:
    """Fetch a user or raise not found."""
    user = get_document(db, USERS, key)
    if user is None:
        raise NotFoundError(message="User not found")
    return user


def create_user_service(db: StandardDatabase, payload: UserCreate) -> Document:
    """Create a user with a hashed password."""
    try:
        user = insert_document(db, USERS, _user_fields(payload))
    except DocumentInsertError as exc:
        _raise_if_duplicate_email(exc)
        raise
    logger.info("Created user %s", user["_key"])
    return user


def update_user_service(db: StandardDatabase, key: str, payload: UserUpdate) -> Document:
    """Update the supplied user fields, rehashing a new password."""
    user = get_user_service(db, key)
    fields = _user_fields(payload)
    if not fields:
        return user
    try:
        return update_document(db, USERS, key, fields)
    except DocumentUpdateError as exc:
        _raise_if_duplicate_email(exc)
        raise
