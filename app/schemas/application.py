"""
Pydantic schemas for job applications.
"""
from typing import Dict, List, Optional
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from app.db.models.job_application import ApplicationStatus


class ApplicationCreate(BaseModel):
    offer_id: Optional[int] = Field(None, description="Offer being applied to")
    position: str = Field(..., min_length=1, max_length=100)
    experience: int = Field(..., ge=0, description="Years of experience")
    education: str = Field(..., min_length=1)
    motivation: str = Field(..., min_length=1)
    availability: date
    desired_salary: Optional[Decimal] = Field(None, ge=0)
    cv_url: Optional[str] = Field(None, max_length=500, description="Uploaded CV location")


class ApplicationResponse(BaseModel):
    id: int
    user_id: int
    offer_id: Optional[int] = None
    position: str
    experience: int
    education: str
    motivation: str
    availability: date
    desired_salary: Optional[Decimal] = None
    cv_url: Optional[str] = None
    status: ApplicationStatus
    admin_comment: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PaginatedApplicationsResponse(BaseModel):
    applications: List[ApplicationResponse]
    pagination: Pagination


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    comment: Optional[str] = Field(None, description="Reviewer comment")


class PositionCount(BaseModel):
    position: str
    count: int


class RecruitmentStatsResponse(BaseModel):
    total: int
    by_status: Dict[str, int]
    unique_candidates: int
    top_positions: List[PositionCount]
