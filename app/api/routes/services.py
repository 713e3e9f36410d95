"""
Service catalog and quote requests.

The catalog is public to read and maintained by admins and moderators.
Clients request quotes for catalog services; staff review them.
"""
import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, require_admin_or_moderator, require_roles
from app.core.gate import is_staff
from app.core.roles import Role
from app.db.models.quote import Quote, QuoteLine, QuoteStatus, QuoteUrgency
from app.db.models.service import Service
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.application import Pagination
from app.schemas.service import (
    PaginatedQuotesResponse,
    QuoteCreate,
    QuoteListResponse,
    QuoteResponse,
    QuoteStatusUpdate,
    ServiceCreate,
    ServiceListResponse,
    ServiceResponse,
    ServiceUpdate,
    quote_response,
)
from app.services import quote_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["Services"])

require_client = require_roles(Role.CLIENT)


def get_service_or_404(service_id: int, db: Session) -> Service:
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return service


def get_quote_or_404(quote_id: int, db: Session) -> Quote:
    quote = db.query(Quote).filter(Quote.id == quote_id).first()
    if not quote:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
    return quote


# ✅ CATALOG

@router.post("/catalog", status_code=status.HTTP_201_CREATED, response_model=ServiceResponse)
def create_service(
    payload: ServiceCreate,
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    try:
        service = Service(**payload.model_dump())
        db.add(service)
        db.commit()
        db.refresh(service)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create service: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create service"
        )

    logger.info(f"Service created: service_id={service.id}, by user_id={user.id}")
    return ServiceResponse.model_validate(service)


@router.get("/catalog", response_model=ServiceListResponse)
def list_services(
    category: Optional[str] = Query(None, description="Filter by category"),
    available: Optional[bool] = Query(None, description="Filter by availability"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db),
):
    """Public catalog listing, sorted by name."""
    query = db.query(Service)
    if category:
        query = query.filter(Service.category == category)
    if available is not None:
        query = query.filter(Service.available == available)

    total = query.count()
    services = (
        query.order_by(Service.name, Service.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return ServiceListResponse(
        services=[ServiceResponse.model_validate(s) for s in services],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.get("/catalog/{service_id}", response_model=ServiceResponse)
def get_service(service_id: int, db: Session = Depends(get_db)):
    return ServiceResponse.model_validate(get_service_or_404(service_id, db))


@router.put("/catalog/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide at least one field to update"
        )

    service = get_service_or_404(service_id, db)
    try:
        for field, value in changes.items():
            setattr(service, field, value)
        db.commit()
        db.refresh(service)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update service: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update service"
        )

    return ServiceResponse.model_validate(service)


@router.delete("/catalog/{service_id}")
def delete_service(
    service_id: int,
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    """Services already quoted stay in the catalog; mark them unavailable instead."""
    service = get_service_or_404(service_id, db)
    if db.query(QuoteLine.id).filter(QuoteLine.service_id == service.id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Service is referenced by quotes, mark it unavailable instead"
        )

    try:
        db.delete(service)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete service: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete service"
        )

    logger.info(f"Service deleted: service_id={service_id}, by user_id={user.id}")
    return {"message": "Service deleted"}


# ✅ QUOTES

@router.post("/quotes", status_code=status.HTTP_201_CREATED, response_model=QuoteResponse)
def request_quote(
    payload: QuoteCreate,
    user: User = Depends(require_client),
    db: Session = Depends(get_db),
):
    try:
        quote = quote_service.create_quote(
            db,
            user.id,
            items=[(item.service_id, item.quantity) for item in payload.services],
            requested_date=payload.requested_date,
            site_address=payload.site_address,
            needs_description=payload.needs_description,
            urgency=payload.urgency,
        )
    except quote_service.UnknownServices as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown services: {', '.join(str(i) for i in e.service_ids)}"
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create quote: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create quote"
        )

    return quote_response(quote)


@router.get("/quotes/mine", response_model=QuoteListResponse)
def list_my_quotes(
    user: User = Depends(require_client),
    db: Session = Depends(get_db),
):
    quotes = (
        db.query(Quote)
        .filter(Quote.client_id == user.id)
        .order_by(Quote.created_at.desc(), Quote.id.desc())
        .all()
    )
    return QuoteListResponse(quotes=[quote_response(q) for q in quotes])


@router.get("/quotes/{quote_id}", response_model=QuoteResponse)
def get_quote(
    quote_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Visible to the requesting client and to admins/moderators."""
    quote = get_quote_or_404(quote_id, db)
    if quote.client_id != user.id and not is_staff(user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
    return quote_response(quote)


# ✅ ADMIN / MODERATOR

@router.get("/admin/quotes", response_model=PaginatedQuotesResponse)
def list_quotes(
    status_filter: Optional[QuoteStatus] = Query(None, alias="status", description="Filter by status"),
    urgency: Optional[QuoteUrgency] = Query(None, description="Filter by urgency"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    query = db.query(Quote)
    if status_filter:
        query = query.filter(Quote.status == status_filter)
    if urgency:
        query = query.filter(Quote.urgency == urgency)

    total = query.count()
    quotes = (
        query.order_by(Quote.created_at.desc(), Quote.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedQuotesResponse(
        quotes=[quote_response(q) for q in quotes],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.put("/admin/quotes/{quote_id}/status", response_model=QuoteResponse)
def update_quote_status(
    quote_id: int,
    payload: QuoteStatusUpdate,
    user: User = Depends(require_admin_or_moderator),
    db: Session = Depends(get_db),
):
    quote = get_quote_or_404(quote_id, db)
    previous = quote.status

    try:
        quote.status = payload.status
        quote.admin_comment = payload.comment
        if payload.final_price is not None:
            quote.final_price = payload.final_price
        db.commit()
        db.refresh(quote)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update quote status: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update quote status"
        )

    logger.info(
        f"Quote status: quote_id={quote.id}, "
        f"{previous.value}->{quote.status.value}, by user_id={user.id}"
    )
    return quote_response(quote)
