import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import TokenUser, get_admin_user
from jobly.core.sql import filter_bag
from jobly.crud import job as job_crud
from jobly.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobEnvelope,
    JobListEnvelope,
    JobDeletedResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """
    Create a job posting. Admin only.

    companyHandle must name an existing company.
    """
    job = job_crud.create(db, request.model_dump(by_alias=True))
    return {"job": job}


@router.get("/", response_model=JobListEnvelope)
def list_jobs(request: Request, db: Session = Depends(get_db)):
    """
    List jobs, most recent first.

    Optional query filters:
    - title: case-insensitive substring of the job title
    - minSalary: minimum salary
    - hasEquity: "true" to list only jobs offering equity
    """
    jobs = job_crud.find_all(db, filter_bag(request.query_params))
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job by ID."""
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """
    Partially update a job. Admin only.

    Fields can be: {title, salary, equity}
    """
    data = request.model_dump(exclude_unset=True)
    return {"job": job_crud.update(db, job_id, data)}


@router.delete("/{job_id}", response_model=JobDeletedResponse)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin: TokenUser = Depends(get_admin_user),
):
    """Delete a job by ID. Admin only."""
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
