import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_current_user, get_settings
from app.core.config import Settings
from app.core.identity import CredentialCheck, authenticate, issue_token
from app.core.security import verify_password
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.auth import (
    AccountResponse,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
)
from app.services import account_service, subscription_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ✅ REGISTER
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Create an account in `pending` status and return a token for it.

    The token only works once an admin has activated the account.
    """
    try:
        user = account_service.create_account(
            db,
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=payload.phone,
            profession=payload.profession,
            experience=payload.experience,
            role=payload.role,
            bcrypt_rounds=settings.bcrypt_rounds,
        )
    except account_service.EmailAlreadyRegistered:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    except Exception as e:
        db.rollback()
        logger.error(f"Registration failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account"
        )

    token = issue_token(settings, user.id, user.email, user.role)

    return AuthResponse(
        message="Account created successfully",
        user=AccountResponse.model_validate(user),
        access_token=token,
    )


# ✅ LOGIN
@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = authenticate(db, payload.email, payload.password)

    if result.outcome is CredentialCheck.ACCOUNT_DISABLED:
        logger.warning(f"Login refused for disabled account: user_id={result.account.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account disabled, please contact an administrator"
        )
    if result.outcome is not CredentialCheck.OK:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    user = result.account
    token = issue_token(settings, user.id, user.email, user.role)
    logger.info(f"Login: user_id={user.id}")

    return AuthResponse(
        message="Login successful",
        user=AccountResponse.model_validate(user),
        access_token=token,
    )


# ✅ PROFILE
@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Account details plus effective subscription status."""
    latest = subscription_service.find_latest_subscription(db, user.id)
    state = subscription_service.effective_state(latest)

    return ProfileResponse(
        **AccountResponse.model_validate(user).model_dump(),
        subscription_status=state.value,
        subscription_end_date=latest.ends_at if latest is not None else None,
    )


@router.put("/profile", response_model=AccountResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide at least one field to update"
        )

    try:
        for field, value in changes.items():
            setattr(user, field, value)
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update profile: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )

    logger.info(f"Profile updated: user_id={user.id}, fields={sorted(changes)}")
    return AccountResponse.model_validate(user)


@router.put("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not verify_password(payload.current_password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    try:
        account_service.set_password(db, user, payload.new_password, bcrypt_rounds=settings.bcrypt_rounds)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to change password: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to change password"
        )

    return {"message": "Password changed successfully"}


# Tokens are stateless; the client just drops its copy
@router.post("/logout")
def logout(user: User = Depends(get_current_user)):
    return {"message": "Logged out"}
