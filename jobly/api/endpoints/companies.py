import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import TokenUser, get_admin_user
from jobly.core.sql import filter_bag
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyEnvelope,
    CompanyDetailEnvelope,
    CompanyListEnvelope,
    CompanyDeletedResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=CompanyEnvelope)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """Create a company. Admin only."""
    company = company_crud.create(db, request.model_dump(by_alias=True))
    return {"company": company}


@router.get("/", response_model=CompanyListEnvelope)
def list_companies(request: Request, db: Session = Depends(get_db)):
    """
    List companies, ordered by name.

    Optional query filters:
    - name: case-insensitive substring of the company name
    - minEmployees / maxEmployees: employee count bounds (inclusive)

    Unknown or repeated filters, and minEmployees > maxEmployees, are a 400.
    """
    companies = company_crud.find_all(db, filter_bag(request.query_params))
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Get a company and its jobs."""
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", response_model=CompanyEnvelope)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """
    Partially update a company. Admin only.

    Fields can be: {name, description, numEmployees, logoUrl}
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return {"company": company_crud.update(db, handle, data)}


@router.delete("/{handle}", response_model=CompanyDeletedResponse)
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """Delete a company and its jobs. Admin only."""
    company_crud.remove(db, handle)
    return {"deleted": handle}
