"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from app.db.models.user import User
from app.db.models.subscription import Subscription, SubscriptionPlan, SubscriptionStatus
from app.db.models.offer import Offer
from app.db.models.job_application import JobApplication, ApplicationStatus
from app.db.models.service import Service
from app.db.models.quote import Quote, QuoteLine, QuoteStatus, QuoteUrgency

__all__ = [
    "User",
    "Subscription",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "Offer",
    "JobApplication",
    "ApplicationStatus",
    "Service",
    "Quote",
    "QuoteLine",
    "QuoteStatus",
    "QuoteUrgency",
]
