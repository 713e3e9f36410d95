"""
Pydantic schemas for job offers.
"""
from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator

from app.schemas.subscription import SubscriptionResponse


class OfferBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1, max_length=100, description="Contract type")
    starts_on: date
    ends_on: date


class OfferCreate(OfferBase):
    @model_validator(mode="after")
    def check_dates(self):
        if self.ends_on < self.starts_on:
            raise ValueError("ends_on must not be before starts_on")
        return self


class OfferUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    starts_on: Optional[date] = None
    ends_on: Optional[date] = None


class OfferResponse(OfferBase):
    id: int
    user_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OfferListResponse(BaseModel):
    offers: List[OfferResponse]


class OfferSubscriber(BaseModel):
    """An applicant to an offer with their premium subscription, if any."""
    candidate_id: int
    application_id: int
    subscription: Optional[SubscriptionResponse] = None


class OfferSubscribersResponse(BaseModel):
    subscribers: List[OfferSubscriber]

