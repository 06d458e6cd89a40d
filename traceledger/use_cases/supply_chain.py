"""SupplyChain use-cases: append-only tracking steps per product."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..domain_errors import InvalidInput
from ..models import SupplyStep
from ..services.events import STEP_ADDED, now_utc, record_event
from ..services.roles import ADD_STEP_ROLES
from ..services.stages import Stage, ensure_stage_order, is_forward_transition, parse_stage
from .product_registry import require_product
from .role_manager import require_any_role

logger = logging.getLogger(__name__)


def _last_step(db: Session, product_id: int) -> SupplyStep | None:
    return db.query(SupplyStep).filter(
        SupplyStep.product_id == product_id,
    ).order_by(SupplyStep.position.desc()).first()


def add_step_use_case(
    *,
    db: Session,
    product_id: int,
    stage: int | str | Stage,
    location: str,
    caller: str,
    enforce_stage_order: bool = False,
    at: datetime | None = None,
) -> SupplyStep:
    """Append a tracking step; stage order is advisory unless enforced."""
    actor = require_any_role(db, caller=caller, allowed=ADD_STEP_ROLES, action="addStep")
    require_product(db, product_id)

    try:
        parsed = parse_stage(stage)
    except ValueError as exc:
        raise InvalidInput(str(exc), details={"stage": str(stage)}) from exc
    clean_location = (location or "").strip()
    if not clean_location:
        raise InvalidInput("location must not be empty", details={"field": "location"})

    last = _last_step(db, product_id)
    current = Stage(last.stage) if last is not None else None
    if not is_forward_transition(current=current, nxt=parsed):
        if enforce_stage_order:
            try:
                ensure_stage_order(current=current, nxt=parsed)
            except ValueError as exc:
                raise InvalidInput(
                    str(exc),
                    details={"productId": product_id, "current": current.label, "next": parsed.label},
                ) from exc
        logger.warning(
            "Product %s moves backwards from %s to %s (accepted, order is advisory)",
            product_id,
            current.label,
            parsed.label,
        )

    step = SupplyStep(
        product_id=product_id,
        position=last.position + 1 if last is not None else 0,
        stage=int(parsed),
        location=clean_location,
        actor=actor,
        timestamp=at or now_utc(),
    )
    db.add(step)
    db.flush()

    record_event(
        db,
        action=STEP_ADDED,
        actor=actor,
        product_id=product_id,
        details={"stage": parsed.label, "location": clean_location, "position": step.position},
        at=at,
    )
    db.commit()
    logger.info("Product %s step %s: %s at %s by %s", product_id, step.position, parsed.label, clean_location, actor)
    return step


def get_steps(db: Session, product_id: int) -> list[SupplyStep]:
    """Steps in insertion order, oldest first."""
    return db.query(SupplyStep).filter(
        SupplyStep.product_id == product_id,
    ).order_by(SupplyStep.position.asc()).all()


def get_step_count(db: Session, product_id: int) -> int:
    return int(
        db.query(func.count(SupplyStep.id)).filter(SupplyStep.product_id == product_id).scalar() or 0
    )


def get_total_step_count(db: Session) -> int:
    return int(db.query(func.count(SupplyStep.id)).scalar() or 0)


def current_stage(db: Session, product_id: int) -> Stage | None:
    last = _last_step(db, product_id)
    return Stage(last.stage) if last is not None else None
