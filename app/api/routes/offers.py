"""
Job offer endpoints.

Partners publish offers; only the owner (or an admin) can read, edit or
delete a given offer.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, require_admin_or_partner
from app.core.gate import owns_or_admin
from app.db.models.job_application import JobApplication
from app.db.models.offer import Offer
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.offer import (
    OfferCreate,
    OfferListResponse,
    OfferResponse,
    OfferSubscriber,
    OfferSubscribersResponse,
    OfferUpdate,
)
from app.schemas.subscription import SubscriptionResponse
from app.services import subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/offers", tags=["Offers"])


def get_owned_offer(offer_id: int, user: User, db: Session) -> Offer:
    """Fetch an offer the caller owns; 404 otherwise so foreign ids are not revealed."""
    offer = db.query(Offer).filter(Offer.id == offer_id).first()
    if not offer or not owns_or_admin(user, offer.user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Offer not found"
        )
    return offer


@router.post("", status_code=status.HTTP_201_CREATED, response_model=OfferResponse)
def create_offer(
    payload: OfferCreate,
    user: User = Depends(require_admin_or_partner),
    db: Session = Depends(get_db),
):
    try:
        offer = Offer(user_id=user.id, **payload.model_dump())
        db.add(offer)
        db.commit()
        db.refresh(offer)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create offer: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create offer"
        )

    logger.info(f"Offer created: offer_id={offer.id}, user_id={user.id}")
    return OfferResponse.model_validate(offer)


@router.get("", response_model=OfferListResponse)
def list_my_offers(
    user: User = Depends(require_admin_or_partner),
    db: Session = Depends(get_db),
):
    offers = (
        db.query(Offer)
        .filter(Offer.user_id == user.id)
        .order_by(Offer.created_at.desc())
        .all()
    )
    return OfferListResponse(offers=[OfferResponse.model_validate(o) for o in offers])


@router.get("/{offer_id}", response_model=OfferResponse)
def get_offer(
    offer_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return OfferResponse.model_validate(get_owned_offer(offer_id, user, db))


@router.put("/{offer_id}", response_model=OfferResponse)
def update_offer(
    offer_id: int,
    payload: OfferUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    offer = get_owned_offer(offer_id, user, db)
    changes = payload.model_dump(exclude_none=True)

    starts_on = changes.get("starts_on", offer.starts_on)
    ends_on = changes.get("ends_on", offer.ends_on)
    if ends_on < starts_on:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="ends_on must not be before starts_on"
        )

    try:
        for field, value in changes.items():
            setattr(offer, field, value)
        db.commit()
        db.refresh(offer)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update offer: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update offer"
        )

    return OfferResponse.model_validate(offer)


@router.delete("/{offer_id}")
def delete_offer(
    offer_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    offer = get_owned_offer(offer_id, user, db)
    try:
        db.query(JobApplication).filter(JobApplication.offer_id == offer.id).update(
            {JobApplication.offer_id: None}, synchronize_session=False
        )
        db.delete(offer)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete offer: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete offer"
        )

    logger.info(f"Offer deleted: offer_id={offer_id}, by user_id={user.id}")
    return {"message": "Offer deleted"}


@router.get("/{offer_id}/subscribers", response_model=OfferSubscribersResponse)
def list_offer_subscribers(
    offer_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Applicants to an offer, each with their premium subscription or null."""
    offer = db.query(Offer).filter(Offer.id == offer_id).first()
    if not offer or not owns_or_admin(user, offer.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "forbidden", "message": "Access to this offer is denied"}
        )

    applications = (
        db.query(JobApplication)
        .filter(JobApplication.offer_id == offer.id)
        .order_by(JobApplication.created_at)
        .all()
    )
    premium = subscription_service.latest_premium_by_account(db, {a.user_id for a in applications})

    subscribers = []
    for application in applications:
        subscription = premium.get(application.user_id)
        subscribers.append(OfferSubscriber(
            candidate_id=application.user_id,
            application_id=application.id,
            subscription=SubscriptionResponse.model_validate(subscription) if subscription else None,
        ))

    return OfferSubscribersResponse(subscribers=subscribers)
