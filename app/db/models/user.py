from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from app.core.roles import Role, AccountStatus
from app.db.base import Base


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    """Registered account. Role and status only change through admin actions."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    profession = Column(String(100), nullable=True)
    experience = Column(Integer, nullable=True)  # years

    role = Column(
        Enum(Role, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=Role.CLIENT,
        index=True,
    )
    status = Column(
        Enum(AccountStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=AccountStatus.PENDING,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
