"""Service helpers for company API operations."""

from __future__ import annotations

import logging

from arango.database import StandardDatabase

from directory_api.core.errors import NotFoundError
from directory_api.core.errors import ValidationError
from directory_api.db.bootstrap import COMPANIES
from directory_api.db.repository.documents import Document
from directory_api.db.repository.documents import delete_document
from directory_api.db.repository.documents import find_documents
from directory_api.db.repository.documents import get_document
from directory_api.db.repository.documents import insert_document
from directory_api.db.repository.documents import update_document
from directory_api.schemas.company import CompanyCreate
from directory_api.schemas.company import CompanyDelete
from directory_api.schemas.company import CompanyUpdate
from directory_api.schemas.find import FindRequest

logger = logging.getLogger(__name__)


def _company_fields(payload: CompanyCreate | CompanyUpdate) -> Document:
    fields = payload.model_dump(exclude_none=True)
    if "name" in fields:
        fields["name"] = fields["name"].strip()
    return fields


def list_companies_service(db: StandardDatabase, request: FindRequest) -> list[Document]:
    """List companies matching the normalized query."""
    return find_documents(db, COMPANIES, request)


def get_company_service(db: StandardDatabase, key: str) -> Document:
    """Fetch a company or raise not found."""
    company = get_document(db, COMPANIES, key)
    if company is None:
        raise NotFoundError(message="Company not found")
    return company


def create_company_service(db: StandardDatabase, payload: CompanyCreate) -> Document:
    """Create and persist a new company."""
    company = insert_document(db, COMPANIES, _company_fields(payload))
    logger.info("Created company %s", company["_key"])
    return company


def update_company_service(db: StandardDatabase, key: str, payload: CompanyUpdate) -> Document:
    """Update the supplied company fields."""
    company = get_company_service(db, key)
    fields = _company_fields(payload)
    if not fields:
        return company
    return update_document(db, COMPANIES, key, fields)


def delete_company_service(db: StandardDatabase, key: str, payload: CompanyDelete) -> None:
    """Delete a company once the confirmation name matches the stored one."""
    company = get_company_service(db, key)
    if payload.name.strip() != company["name"]:
        raise ValidationError({"name": ["Must match the name of the company being deleted"]})
    delete_document(db, COMPANIES, key)
    logger.info("Deleted company %s", key)
