from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal


class JobCreateRequest(BaseModel):
    """Schema for creating a new job; salary and equity are optional"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1.0)
    company_handle: str = Field(..., min_length=1, max_length=25, alias="companyHandle")

    class Config:
        populate_by_name = True
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    A job cannot be moved to another company, so companyHandle is not accepted.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1.0)

    class Config:
        extra = "forbid"


class JobResponse(BaseModel):
    """
    Schema for job response.

    equity comes back from NUMERIC as Decimal and is serialized as a string.
    """
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company_handle: str = Field(..., alias="companyHandle")

    class Config:
        populate_by_name = True


class JobEnvelope(BaseModel):
    job: JobResponse


class JobListEnvelope(BaseModel):
    jobs: List[JobResponse]


class JobDeletedResponse(BaseModel):
    deleted: int
