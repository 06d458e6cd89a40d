"""QualityControl use-cases: inspection reports and running pass/fail counters."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ..models import QualityCounters, QualityReport
from ..services.events import REPORT_ADDED, now_utc, record_event
from ..services.roles import ADD_REPORT_ROLES
from ..services.statistics import pass_rate
from .product_registry import require_product
from .role_manager import require_any_role

logger = logging.getLogger(__name__)

_COUNTERS_ID = 1


def _load_counters(db: Session) -> QualityCounters | None:
    return db.query(QualityCounters).filter(QualityCounters.id == _COUNTERS_ID).first()


def _counters_for_update(db: Session) -> QualityCounters:
    counters = _load_counters(db)
    if counters is None:
        counters = QualityCounters(id=_COUNTERS_ID, total_reports=0, passed_reports=0)
        db.add(counters)
    return counters


def add_report_use_case(
    *,
    db: Session,
    product_id: int,
    passed: bool,
    comments: str,
    caller: str,
    at: datetime | None = None,
) -> QualityReport:
    """Append an inspection report and bump the counters in the same commit."""
    inspector = require_any_role(db, caller=caller, allowed=ADD_REPORT_ROLES, action="addReport")
    require_product(db, product_id)

    report = QualityReport(
        product_id=product_id,
        inspector=inspector,
        passed=bool(passed),
        comments=(comments or "").strip(),
        timestamp=at or now_utc(),
    )
    db.add(report)

    counters = _counters_for_update(db)
    counters.total_reports = (counters.total_reports or 0) + 1
    if report.passed:
        counters.passed_reports = (counters.passed_reports or 0) + 1
    db.flush()

    record_event(
        db,
        action=REPORT_ADDED,
        actor=inspector,
        product_id=product_id,
        details={"passed": report.passed, "reportId": report.id},
        at=at,
    )
    db.commit()
    logger.info(
        "Product %s inspected by %s: %s",
        product_id,
        inspector,
        "passed" if report.passed else "failed",
    )
    return report


def get_reports(db: Session, product_id: int) -> list[QualityReport]:
    return db.query(QualityReport).filter(
        QualityReport.product_id == product_id,
    ).order_by(QualityReport.id.asc()).all()


def total_reports(db: Session) -> int:
    counters = _load_counters(db)
    return counters.total_reports if counters is not None else 0


def passed_reports(db: Session) -> int:
    counters = _load_counters(db)
    return counters.passed_reports if counters is not None else 0


def get_pass_rate(db: Session) -> int:
    """0-100, truncated; 0 when nothing has been inspected."""
    counters = _load_counters(db)
    if counters is None:
        return 0
    return pass_rate(total=counters.total_reports, passed=counters.passed_reports)
