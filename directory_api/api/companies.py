"""Company API routes."""

from __future__ import annotations

from arango.database import StandardDatabase
from fastapi import APIRouter
from fastapi import Depends
from fastapi import Response

from directory_api.db.base import get_database
from directory_api.ingestion.decoder import json_body
from directory_api.ingestion.query import find_request
from directory_api.schemas.company import Company
from directory_api.schemas.company import CompanyCreate
from directory_api.schemas.company import CompanyDelete
from directory_api.schemas.company import CompanyListResponse
from directory_api.schemas.company import CompanyUpdate
from directory_api.schemas.find import CompanySortField
from directory_api.schemas.find import FindRequest
from directory_api.services.companies import create_company_service
from directory_api.services.companies import delete_company_service
from directory_api.services.companies import get_company_service
from directory_api.services.companies import list_companies_service
from directory_api.services.companies import update_company_service

router = APIRouter(tags=["companies"])


@router.get("/companies", response_model=CompanyListResponse)
def list_companies_endpoint(
    query: FindRequest = Depends(find_request(CompanySortField)),
    db: StandardDatabase = Depends(get_database),
) -> CompanyListResponse:
    """List companies, optionally filtered by name, sorted and limited."""
    companies = list_companies_service(db, query)
    return CompanyListResponse(items=[Company.model_validate(company) for company in companies])


@router.get("/companies/{key}", response_model=Company)
def get_company_endpoint(
    key: str,
    db: StandardDatabase = Depends(get_database),
) -> Company:
    """Get a single company by key."""
    return Company.model_validate(get_company_service(db, key))


@router.post("/companies", response_model=Company, status_code=201)
def create_company_endpoint(
    payload: CompanyCreate = Depends(json_body(CompanyCreate)),
    db: StandardDatabase = Depends(get_database),
) -> Company:
    """Create a company from a JSON body."""
    return Company.model_validate(create_company_service(db, payload))


@router.put("/companies/{key}", response_model=Company)
def update_company_endpoint(
    key: str,
    payload: CompanyUpdate = Depends(json_body(CompanyUpdate)),
    db: StandardDatabase = Depends(get_database),
) -> Company:
    """Update a company from a JSON body."""
    return Company.model_validate(update_company_service(db, key, payload))


@router.delete("/companies/{key}", status_code=204)
def delete_company_endpoint(
    key: str,
    payload: CompanyDelete = Depends(json_body(CompanyDelete)),
    db: StandardDatabase = Depends(get_database),
) -> Response:
    """Delete a company; the body must repeat its name."""
    delete_company_service(db, key, payload)
    return Response(status_code=204)
