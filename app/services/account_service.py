"""
Account store.

Lookups used by the identity verifier plus the account mutations the auth
and admin routes need.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.roles import Role, AccountStatus
from app.core.security import hash_password
from app.db.models.user import User
from app.db.models.subscription import Subscription
from app.db.models.offer import Offer
from app.db.models.job_application import JobApplication
from app.db.models.quote import Quote, QuoteLine

logger = logging.getLogger(__name__)


class EmailAlreadyRegistered(Exception):
    """Raised when registering an email that already has an account."""


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_account_by_id(db: Session, account_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == account_id).first()


def find_account_by_email(db: Session, email: str) -> Optional[User]:
    normalized = normalize_email(email)
    if not normalized:
        return None
    return db.query(User).filter(User.email == normalized).first()


def create_account(
    db: Session,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Role = Role.CLIENT,
    status: AccountStatus = AccountStatus.PENDING,
    phone: Optional[str] = None,
    profession: Optional[str] = None,
    experience: Optional[int] = None,
    bcrypt_rounds: int = 12,
) -> User:
    """
    Insert a new account. New accounts wait in `pending` until an admin activates them.

    Raises:
        EmailAlreadyRegistered: the email is taken
    """
    normalized = normalize_email(email)
    if find_account_by_email(db, normalized) is not None:
        raise EmailAlreadyRegistered(normalized)

    user = User(
        email=normalized,
        password_hash=hash_password(password, rounds=bcrypt_rounds),
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        profession=profession,
        experience=experience,
        role=Role(role),
        status=AccountStatus(status),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Account created: user_id={user.id}, role={user.role.value}, status={user.status.value}")
    return user


def set_password(db: Session, user: User, new_password: str, bcrypt_rounds: int = 12) -> None:
    user.password_hash = hash_password(new_password, rounds=bcrypt_rounds)
    db.commit()
    logger.info(f"Password changed: user_id={user.id}")


def update_status_and_role(
    db: Session,
    user: User,
    status: AccountStatus,
    role: Optional[Role] = None,
) -> User:
    """Admin transition. Takes effect on the account's next request, whatever its token says."""
    previous = (user.status, user.role)
    user.status = AccountStatus(status)
    if role is not None:
        user.role = Role(role)
    db.commit()
    db.refresh(user)

    logger.info(
        f"Account updated: user_id={user.id}, status {previous[0].value}->{user.status.value}, "
        f"role {previous[1].value}->{user.role.value}"
    )
    return user


def delete_account(db: Session, user: User) -> None:
    """Delete an account together with everything it owns."""
    user_id = user.id
    offer_ids = [row.id for row in db.query(Offer.id).filter(Offer.user_id == user_id).all()]
    if offer_ids:
        db.query(JobApplication).filter(JobApplication.offer_id.in_(offer_ids)).update(
            {JobApplication.offer_id: None}, synchronize_session=False
        )
    db.query(JobApplication).filter(JobApplication.user_id == user_id).delete(synchronize_session=False)
    db.query(Offer).filter(Offer.user_id == user_id).delete(synchronize_session=False)
    quote_ids = [row.id for row in db.query(Quote.id).filter(Quote.client_id == user_id).all()]
    if quote_ids:
        db.query(QuoteLine).filter(QuoteLine.quote_id.in_(quote_ids)).delete(synchronize_session=False)
        db.query(Quote).filter(Quote.id.in_(quote_ids)).delete(synchronize_session=False)
    db.query(Subscription).filter(Subscription.user_id == user_id).delete(synchronize_session=False)
    db.delete(user)
    db.commit()

    logger.info(f"Account deleted: user_id={user_id}")
