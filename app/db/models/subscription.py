"""
Subscription history.

A user may hold many rows over time; the current one is the row with the
latest ends_at. Premium access is never read from `status` alone, see
app.services.subscription_service.effective_state.
"""
import enum
from datetime import timedelta
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, Enum
from sqlalchemy.sql import func
from app.db.base import Base
from app.db.models.user import _enum_values


class SubscriptionPlan(str, enum.Enum):
    """Purchasable plans."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"

    @property
    def duration(self) -> timedelta:
        return timedelta(days=30 if self is SubscriptionPlan.MONTHLY else 90)


class SubscriptionStatus(str, enum.Enum):
    """Stored subscription status."""
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    plan = Column(Enum(SubscriptionPlan, native_enum=False, length=20, values_callable=_enum_values), nullable=False)
    status = Column(
        Enum(SubscriptionStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )

    starts_at = Column(DateTime(timezone=True), nullable=False)
    ends_at = Column(DateTime(timezone=True), nullable=False)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_subscription_user_ends', 'user_id', 'ends_at'),
    )

    def __repr__(self):
        return f"<Subscription(id={self.id}, user_id={self.user_id}, status='{self.status}')>"
