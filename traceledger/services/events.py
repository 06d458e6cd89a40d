"""Ledger event log helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from ..models import LedgerEvent

ROLE_GRANTED = "role_granted"
ROLE_REVOKED = "role_revoked"
PRODUCT_REGISTERED = "product_registered"
STEP_ADDED = "step_added"
REPORT_ADDED = "report_added"


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def record_event(
    db: Session,
    *,
    action: str,
    actor: str,
    product_id: int | None = None,
    details: dict[str, Any] | None = None,
    at: datetime | None = None,
) -> LedgerEvent:
    event = LedgerEvent(
        action=action,
        actor=actor,
        product_id=product_id,
        details=details or {},
        created_at=at or now_utc(),
    )
    db.add(event)
    return event


def list_events(db: Session, *, product_id: int | None = None, limit: int = 200) -> list[LedgerEvent]:
    """Newest first."""
    query = db.query(LedgerEvent)
    if product_id is not None:
        query = query.filter(LedgerEvent.product_id == product_id)
    return query.order_by(LedgerEvent.id.desc()).limit(limit).all()
