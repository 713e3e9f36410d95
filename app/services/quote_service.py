"""
Quote pricing and reporting.

A quote total is the sum of `base_price * quantity` over its lines, priced
from the catalog at the moment the quote is requested. Later catalog price
changes do not touch existing quotes.
"""
import logging
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Query, Session

from app.db.models.quote import Quote, QuoteLine, QuoteStatus, QuoteUrgency
from app.db.models.service import Service

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class UnknownServices(Exception):
    """Raised when a quote references services missing from the catalog."""

    def __init__(self, service_ids: Sequence[int]):
        super().__init__(f"Unknown services: {sorted(service_ids)}")
        self.service_ids = sorted(service_ids)


def price_lines(db: Session, items: Iterable[Tuple[int, int]]) -> Tuple[List[QuoteLine], Decimal]:
    """
    Price (service_id, quantity) pairs against the catalog.

    Raises:
        UnknownServices: one or more ids are not in the catalog
    """
    items = list(items)
    wanted = {service_id for service_id, _ in items}
    catalog = {s.id: s for s in db.query(Service).filter(Service.id.in_(wanted)).all()} if wanted else {}

    missing = wanted - set(catalog)
    if missing:
        raise UnknownServices(list(missing))

    lines = []
    total = ZERO
    for service_id, quantity in items:
        unit_price = Decimal(catalog[service_id].base_price)
        amount = unit_price * quantity
        lines.append(QuoteLine(service_id=service_id, quantity=quantity, unit_price=unit_price, amount=amount))
        total += amount

    return lines, total


def create_quote(
    db: Session,
    client_id: int,
    *,
    items: Iterable[Tuple[int, int]],
    requested_date: date,
    site_address: str,
    needs_description: Optional[str] = None,
    urgency: QuoteUrgency = QuoteUrgency.NORMAL,
) -> Quote:
    lines, total = price_lines(db, items)

    quote = Quote(
        client_id=client_id,
        requested_date=requested_date,
        site_address=site_address,
        needs_description=needs_description,
        urgency=QuoteUrgency(urgency),
        total_amount=total,
        status=QuoteStatus.PENDING,
        lines=lines,
    )
    db.add(quote)
    db.commit()
    db.refresh(quote)

    logger.info(f"Quote requested: quote_id={quote.id}, client_id={client_id}, total={total}, lines={len(lines)}")
    return quote


def created_between(query: Query, column, date_from: Optional[date], date_to: Optional[date]) -> Query:
    """Restrict `column` to [date_from 00:00, date_to 24:00) UTC, either bound optional."""
    if date_from is not None:
        query = query.filter(column >= datetime.combine(date_from, time.min, tzinfo=timezone.utc))
    if date_to is not None:
        query = query.filter(column < datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=timezone.utc))
    return query


def revenue_total(quotes: Iterable[Quote]) -> Decimal:
    """Sum of quote totals, as the reports show it."""
    return sum((Decimal(q.total_amount or 0) for q in quotes), ZERO)
