"""User API routes."""

from __future__ import annotations

from arango.database import StandardDatabase
from fastapi import APIRouter
from fastapi import Depends

from directory_api.db.base import get_database
from directory_api.ingestion.multipart import multipart_body
from directory_api.ingestion.query import find_request
from directory_api.schemas.find import FindRequest
from directory_api.schemas.find import UserSortField
from directory_api.schemas.user import USER_FORM_FIELDS
from directory_api.schemas.user import User
from directory_api.schemas.user import UserCreate
from directory_api.schemas.user import UserListResponse
from directory_api.schemas.user import UserUpdate
from directory_api.services.users import create_user_service
from directory_api.services.users import get_user_service
from directory_api.services.users import list_users_service
from directory_api.services.users import update_user_service

router = APIRouter(tags=["users"])


@router.get("/users", response_model=UserListResponse)
def list_users_endpoint(
    query: FindRequest = Depends(find_request(UserSortField)),
    db: StandardDatabase = Depends(get_database),
) -> UserListResponse:
    """List users, optionally filtered by name, sorted and limited."""
    users = list_users_service(db, query)
    return UserListResponse(items=[User.model_validate(user) for user in users])


@router.get("/users/{key}", response_model=User)
def get_user_endpoint(
    key: str,
    db: StandardDatabase = Depends(get_database),
) -> User:
    """Get a single user by key."""
    return User.model_validate(get_user_service(db, key))


@router.post("/users", response_model=User, status_code=201)
def create_user_endpoint(
    payload: UserCreate = Depends(multipart_body(UserCreate, USER_FORM_FIELDS)),
    db: StandardDatabase = Depends(get_database),
) -> User:
    """Create a user from a multipart form with an optional avatar image."""
    return User.model_validate(create_user_service(db, payload))


@router.put("/users/{key}", response_model=User)
def update_user_endpoint(
    key: str,
    payload: UserUpdate = Depends(multipart_body(UserUpdate, USER_FORM_FIELDS)),
    db: StandardDatabase = Depends(get_database),
) -> User:
    """Update a user from a multipart form."""
    return User.model_validate(update_user_service(db, key, payload))
