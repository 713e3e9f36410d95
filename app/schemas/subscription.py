"""
Pydantic schemas for subscription endpoints.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from app.db.models.subscription import SubscriptionPlan, SubscriptionStatus


class SubscribeRequest(BaseModel):
    plan: SubscriptionPlan = Field(..., description="monthly (30 days) or quarterly (90 days)")


class SubscriptionResponse(BaseModel):
    id: int
    user_id: int
    plan: SubscriptionPlan
    status: SubscriptionStatus
    starts_at: datetime
    ends_at: datetime
    cancelled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubscriptionStateResponse(BaseModel):
    """Effective state of the caller's latest subscription."""
    status: str = Field(..., description="free, premium or expired")
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None


class SubscriptionListResponse(BaseModel):
    subscriptions: List[SubscriptionResponse]
