"""
Admin endpoints: dashboard figures, account management and reports.
"""
import logging
import math
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.auth_dependency import require_admin
from app.core.roles import Role, AccountStatus
from app.db.models.job_application import ApplicationStatus, JobApplication
from app.db.models.offer import Offer
from app.db.models.quote import Quote, QuoteStatus
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.admin import (
    ApplicationsReport,
    DashboardResponse,
    QuotesReport,
    UserListResponse,
    UserStatusUpdate,
)
from app.schemas.application import ApplicationResponse, Pagination
from app.schemas.auth import AccountResponse
from app.schemas.service import quote_response
from app.services import account_service, quote_service, subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _count_by(db: Session, column, members) -> dict:
    counts = {m.value: 0 for m in members}
    for value, count in db.query(column, func.count()).group_by(column).all():
        counts[value.value if hasattr(value, "value") else value] = count
    return counts


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users = _count_by(db, User.role, Role)
    users.update(_count_by(db, User.status, AccountStatus))
    users["total"] = db.query(func.count(User.id)).scalar() or 0

    applications = _count_by(db, JobApplication.status, ApplicationStatus)
    applications["total"] = sum(applications.values())

    premium = subscription_service.latest_premium_by_account(db)
    subscriptions = {
        "total": len(subscription_service.list_subscriptions(db)),
        "premium_accounts": len(premium),
    }

    return DashboardResponse(
        users=users,
        applications=applications,
        subscriptions=subscriptions,
        offers=db.query(func.count(Offer.id)).scalar() or 0,
    )


@router.get("/users", response_model=UserListResponse)
def list_users(
    role: Optional[Role] = Query(None, description="Filter by role"),
    status_filter: Optional[AccountStatus] = Query(None, alias="status", description="Filter by status"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if status_filter:
        query = query.filter(User.status == status_filter)

    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return UserListResponse(
        users=[AccountResponse.model_validate(u) for u in users],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.put("/users/{user_id}/status", response_model=AccountResponse)
def update_user_status(
    user_id: int,
    payload: UserStatusUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Change an account's status and optionally its role."""
    target = account_service.find_account_by_id(db, user_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        target = account_service.update_status_and_role(db, target, payload.status, payload.role)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update user: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user"
        )

    return AccountResponse.model_validate(target)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    target = account_service.find_account_by_id(db, user_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        account_service.delete_account(db, target)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete user: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user"
        )

    return {"message": "User deleted"}


# ✅ REPORTS

def check_date_range(date_from: Optional[date], date_to: Optional[date]) -> None:
    if date_from and date_to and date_to < date_from:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="date_to must not be before date_from"
        )


@router.get("/reports/applications", response_model=ApplicationsReport)
def applications_report(
    date_from: Optional[date] = Query(None, description="First day included (UTC)"),
    date_to: Optional[date] = Query(None, description="Last day included (UTC)"),
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Applications submitted in the date range, newest first."""
    check_date_range(date_from, date_to)
    query = quote_service.created_between(db.query(JobApplication), JobApplication.created_at, date_from, date_to)
    applications = query.order_by(JobApplication.created_at.desc(), JobApplication.id.desc()).all()

    return ApplicationsReport(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        total=len(applications),
    )


@router.get("/reports/quotes", response_model=QuotesReport)
def quotes_report(
    date_from: Optional[date] = Query(None, description="First day included (UTC)"),
    date_to: Optional[date] = Query(None, description="Last day included (UTC)"),
    status_filter: Optional[QuoteStatus] = Query(None, alias="status", description="Filter by status"),
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Quotes requested in the date range with the summed quoted amount."""
    check_date_range(date_from, date_to)
    query = quote_service.created_between(db.query(Quote), Quote.created_at, date_from, date_to)
    if status_filter:
        query = query.filter(Quote.status == status_filter)
    quotes = query.order_by(Quote.created_at.desc(), Quote.id.desc()).all()

    return QuotesReport(
        quotes=[quote_response(q) for q in quotes],
        total=len(quotes),
        revenue_total=quote_service.revenue_total(quotes),
    )
