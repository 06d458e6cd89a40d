"""Read-side aggregation across the four ledger components."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import LedgerEvent, QualityReport, SupplyStep
from ..services.events import list_events
from ..services.stages import Stage, out_of_order_positions
from .product_registry import ProductRecord, get_product_count, require_product
from .quality_control import get_pass_rate, get_reports, passed_reports, total_reports
from .role_manager import get_user_count
from .supply_chain import current_stage, get_steps, get_total_step_count


@dataclass(frozen=True)
class DashboardSummary:
    total_products: int
    total_steps: int
    total_reports: int
    passed_reports: int
    failed_reports: int
    pass_rate: int
    total_users: int
    awaiting_inspection: int


@dataclass(frozen=True)
class ProductTrace:
    product: ProductRecord
    steps: list[SupplyStep]
    reports: list[QualityReport]
    current_stage: Stage | None
    out_of_order_positions: list[int]


def _inspected_product_count(db: Session) -> int:
    return int(db.query(func.count(func.distinct(QualityReport.product_id))).scalar() or 0)


def dashboard_summary(db: Session) -> DashboardSummary:
    products = get_product_count(db)
    total = total_reports(db)
    passed = passed_reports(db)
    return DashboardSummary(
        total_products=products,
        total_steps=get_total_step_count(db),
        total_reports=total,
        passed_reports=passed,
        failed_reports=total - passed,
        pass_rate=get_pass_rate(db),
        total_users=get_user_count(db),
        awaiting_inspection=max(0, products - _inspected_product_count(db)),
    )


def product_trace(db: Session, product_id: int) -> ProductTrace:
    """Full lifecycle of one product; NotFound for unknown ids.

    ``out_of_order_positions`` lists the steps accepted while moving backwards
    (stage order is advisory unless enforced).
    """
    product = require_product(db, product_id)
    steps = get_steps(db, product_id)
    return ProductTrace(
        product=ProductRecord.from_model(product),
        steps=steps,
        reports=get_reports(db, product_id),
        current_stage=current_stage(db, product_id),
        out_of_order_positions=out_of_order_positions([Stage(step.stage) for step in steps]),
    )


def recent_activity(db: Session, *, limit: int = 10) -> list[LedgerEvent]:
    return list_events(db, limit=limit)
