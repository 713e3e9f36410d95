"""
Quote requests.

A client picks services and quantities; each line freezes the unit price
at request time and the quote keeps the summed total. Staff move the quote
through its statuses and may set a final price.
"""
import enum
from sqlalchemy import Column, Integer, Text, Date, DateTime, Numeric, ForeignKey, Index, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base
from app.db.models.user import _enum_values


class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class QuoteUrgency(str, enum.Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    VERY_URGENT = "very_urgent"


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    requested_date = Column(Date, nullable=False)
    site_address = Column(Text, nullable=False)
    needs_description = Column(Text, nullable=True)
    urgency = Column(
        Enum(QuoteUrgency, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=QuoteUrgency.NORMAL,
    )

    total_amount = Column(Numeric(10, 2), nullable=False)
    final_price = Column(Numeric(10, 2), nullable=True)

    status = Column(
        Enum(QuoteStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=QuoteStatus.PENDING,
        index=True,
    )
    admin_comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    lines = relationship("QuoteLine", cascade="all, delete-orphan", order_by="QuoteLine.id")

    __table_args__ = (
        Index('idx_quote_client_created', 'client_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Quote(id={self.id}, client_id={self.client_id}, status='{self.status}')>"


class QuoteLine(Base):
    __tablename__ = "quote_lines"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)

    service = relationship("Service")
