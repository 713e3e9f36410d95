"""
Pydantic schemas for admin endpoints.
"""
from typing import Dict, List, Optional
from decimal import Decimal
from pydantic import BaseModel

from app.core.roles import Role, AccountStatus
from app.schemas.auth import AccountResponse
from app.schemas.application import ApplicationResponse, Pagination
from app.schemas.service import QuoteResponse


class UserListResponse(BaseModel):
    users: List[AccountResponse]
    pagination: Pagination


class UserStatusUpdate(BaseModel):
    status: AccountStatus
    role: Optional[Role] = None


class DashboardResponse(BaseModel):
    users: Dict[str, int]
    applications: Dict[str, int]
    subscriptions: Dict[str, int]
    offers: int


class ApplicationsReport(BaseModel):
    applications: List[ApplicationResponse]
    total: int


class QuotesReport(BaseModel):
    quotes: List[QuoteResponse]
    total: int
    revenue_total: Decimal
