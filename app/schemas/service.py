"""
Pydantic schemas for the service catalog and quote requests.
"""
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator

from app.db.models.quote import QuoteStatus, QuoteUrgency
from app.schemas.application import Pagination


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    base_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    estimated_days: Optional[int] = Field(None, ge=1)
    available: bool = True

    @field_validator("name", "description", "category", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Dépannage électrique urgent",
                "description": "Intervention rapide pour résoudre les problèmes électriques urgents",
                "category": "Dépannage",
                "base_price": "120.00",
                "estimated_days": 1
            }
        }


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    estimated_days: Optional[int] = Field(None, ge=1)
    available: Optional[bool] = None

    @field_validator("name", "description", "category", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class ServiceResponse(BaseModel):
    id: int
    name: str
    description: str
    category: str
    base_price: Decimal
    estimated_days: Optional[int] = None
    available: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceListResponse(BaseModel):
    services: List[ServiceResponse]
    pagination: Pagination


class QuoteItem(BaseModel):
    service_id: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1)


class QuoteCreate(BaseModel):
    services: List[QuoteItem] = Field(..., min_length=1)
    requested_date: date
    site_address: str = Field(..., min_length=1)
    needs_description: Optional[str] = None
    urgency: QuoteUrgency = QuoteUrgency.NORMAL

    @field_validator("site_address", "needs_description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class QuoteLineResponse(BaseModel):
    service_id: int
    service_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    amount: Decimal


class QuoteResponse(BaseModel):
    id: int
    client_id: int
    requested_date: date
    site_address: str
    needs_description: Optional[str] = None
    urgency: QuoteUrgency
    total_amount: Decimal
    final_price: Optional[Decimal] = None
    status: QuoteStatus
    admin_comment: Optional[str] = None
    created_at: Optional[datetime] = None
    lines: List[QuoteLineResponse] = []


class QuoteListResponse(BaseModel):
    quotes: List[QuoteResponse]


class PaginatedQuotesResponse(BaseModel):
    quotes: List[QuoteResponse]
    pagination: Pagination


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
    comment: Optional[str] = Field(None, description="Reviewer comment")
    final_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


def quote_response(quote) -> QuoteResponse:
    """Build the response for a Quote row, naming each line's service."""
    return QuoteResponse(
        id=quote.id,
        client_id=quote.client_id,
        requested_date=quote.requested_date,
        site_address=quote.site_address,
        needs_description=quote.needs_description,
        urgency=quote.urgency,
        total_amount=quote.total_amount,
        final_price=quote.final_price,
        status=quote.status,
        admin_comment=quote.admin_comment,
        created_at=quote.created_at,
        lines=[
            QuoteLineResponse(
                service_id=line.service_id,
                service_name=line.service.name if line.service is not None else None,
                quantity=line.quantity,
                unit_price=line.unit_price,
                amount=line.amount,
            )
            for line in quote.lines
        ],
    )
