"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.roles import Role, AccountStatus, SELF_SERVICE_ROLES
from app.core.security import BCRYPT_MAX_BYTES

MIN_PASSWORD_LENGTH = 6


def _strip(v):
    """Trim surrounding whitespace before length checks run."""
    return v.strip() if isinstance(v, str) else v


def _check_password(v: str) -> str:
    """Validate password length in characters and bytes (bcrypt limit is 72 bytes)."""
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be {BCRYPT_MAX_BYTES} bytes or fewer")
    return v


class RegisterRequest(BaseModel):
    """Request schema for account registration."""
    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Password (6 characters to 72 bytes)")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    profession: Optional[str] = Field(None, max_length=100)
    experience: Optional[int] = Field(None, ge=0, description="Years of experience")
    role: Role = Field(Role.CLIENT, description="client, partner or candidate")

    @field_validator("first_name", "last_name", "phone", "profession", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Role) -> Role:
        if v not in SELF_SERVICE_ROLES:
            raise ValueError("Role must be one of: client, partner, candidate")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jean.dupont@example.com",
                "password": "SecurePass123",
                "first_name": "Jean",
                "last_name": "Dupont",
                "phone": "0612345678",
                "role": "candidate"
            }
        }


class LoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=1, description="Password")


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)

    @field_validator("first_name", "last_name", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _check_password(v)


class AccountResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    profession: Optional[str] = None
    experience: Optional[int] = None
    role: Role
    status: AccountStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileResponse(AccountResponse):
    subscription_status: str = Field(..., description="free, premium or expired")
    subscription_end_date: Optional[datetime] = None


class AuthResponse(BaseModel):
    """Returned by register and login."""
    message: str
    user: AccountResponse
    access_token: str
    token_type: str = "bearer"
