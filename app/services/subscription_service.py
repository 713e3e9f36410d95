"""
Subscription store and effective subscription state.

Effective state is always derived from the latest row (by ends_at) and the
current time:

- no row                             -> free
- ends_at <= now                     -> expired, whatever the stored status
- status == active and ends_at > now -> premium
- anything else (cancelled early)    -> free

Every caller (profile, gate, subscriber listings) goes through
effective_state so the rule is applied the same way everywhere.
"""
import enum
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from app.db.models.subscription import Subscription, SubscriptionPlan, SubscriptionStatus
from app.util.time import as_utc, utcnow

logger = logging.getLogger(__name__)


class SubscriptionState(str, enum.Enum):
    """Derived subscription classification."""
    FREE = "free"
    PREMIUM = "premium"
    EXPIRED = "expired"


def find_latest_subscription(db: Session, account_id: int) -> Optional[Subscription]:
    """Most recent subscription by end date, or None."""
    return (
        db.query(Subscription)
        .filter(Subscription.user_id == account_id)
        .order_by(Subscription.ends_at.desc(), Subscription.id.desc())
        .first()
    )


def effective_state(subscription: Optional[Subscription], now: Optional[datetime] = None) -> SubscriptionState:
    if subscription is None:
        return SubscriptionState.FREE

    now = as_utc(now or utcnow())
    ends_at = as_utc(subscription.ends_at)

    if ends_at <= now:
        return SubscriptionState.EXPIRED
    if subscription.status == SubscriptionStatus.ACTIVE:
        return SubscriptionState.PREMIUM
    return SubscriptionState.FREE


def has_premium_access(db: Session, account_id: int, now: Optional[datetime] = None) -> bool:
    latest = find_latest_subscription(db, account_id)
    return effective_state(latest, now) is SubscriptionState.PREMIUM


def subscribe(
    db: Session,
    account_id: int,
    plan: SubscriptionPlan,
    now: Optional[datetime] = None,
) -> Subscription:
    """Start a new subscription period now. Earlier rows stay as history."""
    starts_at = now or utcnow()
    plan = SubscriptionPlan(plan)

    subscription = Subscription(
        user_id=account_id,
        plan=plan,
        status=SubscriptionStatus.ACTIVE,
        starts_at=starts_at,
        ends_at=starts_at + plan.duration,
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)

    logger.info(f"Subscription started: user_id={account_id}, plan={plan.value}, subscription_id={subscription.id}")
    return subscription


def cancel_active(db: Session, account_id: int, now: Optional[datetime] = None) -> int:
    """Mark every active row of the account cancelled. Returns the number of rows touched."""
    cancelled_at = now or utcnow()
    count = (
        db.query(Subscription)
        .filter(
            Subscription.user_id == account_id,
            Subscription.status == SubscriptionStatus.ACTIVE,
        )
        .update(
            {Subscription.status: SubscriptionStatus.CANCELLED, Subscription.cancelled_at: cancelled_at},
            synchronize_session=False,
        )
    )
    db.commit()

    logger.info(f"Subscription cancelled: user_id={account_id}, rows={count}")
    return count


def latest_premium_by_account(
    db: Session,
    account_ids: Optional[Iterable[int]] = None,
    now: Optional[datetime] = None,
) -> Dict[int, Subscription]:
    """
    Map account id -> latest subscription, keeping only premium ones.

    Restricted to `account_ids` when given.
    """
    query = db.query(Subscription)
    if account_ids is not None:
        ids = list(account_ids)
        if not ids:
            return {}
        query = query.filter(Subscription.user_id.in_(ids))

    latest: Dict[int, Subscription] = {}
    for sub in query.order_by(Subscription.user_id, Subscription.ends_at.desc(), Subscription.id.desc()).all():
        latest.setdefault(sub.user_id, sub)

    return {
        account_id: sub
        for account_id, sub in latest.items()
        if effective_state(sub, now) is SubscriptionState.PREMIUM
    }


def list_subscriptions(db: Session, account_id: Optional[int] = None) -> List[Subscription]:
    query = db.query(Subscription)
    if account_id is not None:
        query = query.filter(Subscription.user_id == account_id)
    return query.order_by(Subscription.ends_at.desc()).all()
