"""
Subscription endpoints.

Buying, reading and cancelling the caller's subscription, plus listings for
admins and partners.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, require_admin_or_partner
from app.core.roles import Role
from app.db.models.job_application import JobApplication
from app.db.models.offer import Offer
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.subscription import (
    SubscribeRequest,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionStateResponse,
)
from app.services import subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("/subscribe", status_code=status.HTTP_201_CREATED, response_model=SubscriptionResponse)
def subscribe(
    payload: SubscribeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        subscription = subscription_service.subscribe(db, user.id, payload.plan)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create subscription: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create subscription"
        )
    return SubscriptionResponse.model_validate(subscription)


@router.get("/me", response_model=SubscriptionStateResponse)
def my_subscription(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    latest = subscription_service.find_latest_subscription(db, user.id)
    state = subscription_service.effective_state(latest)
    if latest is None:
        return SubscriptionStateResponse(status=state.value)
    return SubscriptionStateResponse(status=state.value, starts_at=latest.starts_at, ends_at=latest.ends_at)


@router.post("/cancel", status_code=status.HTTP_204_NO_CONTENT)
def cancel(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        subscription_service.cancel_active(db, user.id)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to cancel subscription: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to cancel subscription"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=SubscriptionListResponse)
def list_subscriptions(
    user: User = Depends(require_admin_or_partner),
    db: Session = Depends(get_db),
):
    """Admins see every subscription, partners only their own."""
    owner_id = None if user.role is Role.ADMIN else user.id
    rows = subscription_service.list_subscriptions(db, account_id=owner_id)
    return SubscriptionListResponse(subscriptions=[SubscriptionResponse.model_validate(s) for s in rows])


@router.get("/subscribers", response_model=SubscriptionListResponse)
def list_subscribers(
    user: User = Depends(require_admin_or_partner),
    db: Session = Depends(get_db),
):
    """
    Premium subscriptions.

    Admins get every premium account; partners only those who applied to
    one of their offers.
    """
    if user.role is Role.ADMIN:
        premium = subscription_service.latest_premium_by_account(db)
    else:
        applicant_ids = [
            row.user_id
            for row in db.query(JobApplication.user_id)
            .join(Offer, JobApplication.offer_id == Offer.id)
            .filter(Offer.user_id == user.id)
            .distinct()
            .all()
        ]
        premium = subscription_service.latest_premium_by_account(db, applicant_ids)

    return SubscriptionListResponse(
        subscriptions=[SubscriptionResponse.model_validate(s) for s in premium.values()]
    )
