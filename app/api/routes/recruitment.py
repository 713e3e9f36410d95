"""
Recruitment endpoints.

Candidates submit job applications (premium subscription required for
applicant roles); admins and moderators review them.
"""
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, require_admin_or_moderator, require_roles
from app.core.gate import is_staff
from app.db.models.job_application import ApplicationStatus, JobApplication
from app.db.models.offer import Offer
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.application import (
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusUpdate,
    PaginatedApplicationsResponse,
    Pagination,
    PositionCount,
    RecruitmentStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recruitment", tags=["Recruitment"])

require_applicant = require_roles(subscription=True)


def get_application_or_404(application_id: int, db: Session) -> JobApplication:
    application = db.query(JobApplication).filter(JobApplication.id == application_id).first()
    if not application:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found"
        )
    return application


@router.post("/applications", status_code=status.HTTP_201_CREATED, response_model=ApplicationResponse)
def submit_application(
    payload: ApplicationCreate,
    user: User = Depends(require_applicant),
    db: Session = Depends(get_db),
):
    if payload.offer_id is not None:
        if not db.query(Offer.id).filter(Offer.id == payload.offer_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Offer not found")

    try:
        application = JobApplication(user_id=user.id, **payload.model_dump())
        db.add(application)
        db.commit()
        db.refresh(application)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to submit application: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit application"
        )

    logger.info(f"Application submitted: application_id={application.id}, user_id={user.id}")
    return ApplicationResponse.model_validate(application)


@router.get("/applications/mine", response_model=ApplicationListResponse)
def list_my_applications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    applications = (
        db.query(JobApplication)
        .filter(JobApplication.user_id == user.id)
        .order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
        .all()
    )
    return ApplicationListResponse(applications=[ApplicationResponse.model_validate(a) for a in applications])


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Visible to its author and to admins/moderators."""
    application = get_application_or_404(application_id, db)
    if application.user_id != user.id and not is_staff(user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return ApplicationResponse.model_validate(application)


# ✅ ADMIN / MODERATOR

@router.get("/admin/applications", response_model=PaginatedApplicationsResponse)
def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status", description="Filter by status"),
    position: Optional[str] = Query(None, description="Filter by position (partial match)"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    query = db.query(JobApplication)
    if status_filter:
        query = query.filter(JobApplication.status == status_filter)
    if position:
        query = query.filter(JobApplication.position.ilike(f"%{position}%"))

    total = query.count()
    applications = (
        query.order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedApplicationsResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.put("/admin/applications/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: int,
    payload: ApplicationStatusUpdate,
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    application = get_application_or_404(application_id, db)
    previous = application.status

    try:
        application.status = payload.status
        application.admin_comment = payload.comment
        db.commit()
        db.refresh(application)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update application status: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update application status"
        )

    logger.info(
        f"Application status: application_id={application.id}, "
        f"{previous.value}->{application.status.value}, by user_id={user.id}"
    )
    return ApplicationResponse.model_validate(application)


@router.delete("/admin/applications/{application_id}")
def delete_application(
    application_id: int,
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    application = get_application_or_404(application_id, db)
    try:
        db.delete(application)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete application: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete application"
        )

    logger.info(f"Application deleted: application_id={application_id}, by user_id={user.id}")
    return {"message": "Application deleted"}


@router.get("/admin/stats", response_model=RecruitmentStatsResponse)
def recruitment_stats(
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    by_status = {s.value: 0 for s in ApplicationStatus}
    for app_status, count in (
        db.query(JobApplication.status, func.count(JobApplication.id))
        .group_by(JobApplication.status)
        .all()
    ):
        by_status[ApplicationStatus(app_status).value] = count

    unique_candidates = db.query(func.count(func.distinct(JobApplication.user_id))).scalar() or 0

    count_col = func.count(JobApplication.id).label("count")
    top_positions = (
        db.query(JobApplication.position, count_col)
        .group_by(JobApplication.position)
        .order_by(count_col.desc(), JobApplication.position)
        .limit(10)
        .all()
    )

    return RecruitmentStatsResponse(
        total=sum(by_status.values()),
        by_status=by_status,
        unique_candidates=unique_candidates,
        top_positions=[PositionCount(position=p, count=c) for p, c in top_positions],
    )
