from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"


class CompanyUpdateRequest(BaseModel):
    """
    Schema for a partial company update.

    Only fields the client actually sent are applied; the handle is immutable.
    """
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True


class CompanyJob(BaseModel):
    """A job as listed on its company's detail page"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None


class CompanyDetailResponse(CompanyResponse):
    """Company with its jobs, newest first"""
    jobs: List[CompanyJob] = []


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetailResponse


class CompanyListEnvelope(BaseModel):
    companies: List[CompanyResponse]


class CompanyDeletedResponse(BaseModel):
    deleted: str
