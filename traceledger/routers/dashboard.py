"""Read-side aggregation endpoints: quality stats, dashboard and event log."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..ledger import Ledger, get_ledger
from ..schemas import DashboardResponse, DashboardSummaryOut, EventOut, QualityStatsResponse
from ..services.events import list_events
from ..use_cases.dashboard import dashboard_summary, recent_activity
from ..use_cases.quality_control import get_pass_rate, passed_reports, total_reports

router = APIRouter(tags=["dashboard"])


@router.get("/quality/stats", response_model=QualityStatsResponse)
def get_quality_stats(ledger: Ledger = Depends(get_ledger)):
    with ledger.session() as db:
        total = total_reports(db)
        passed = passed_reports(db)
        rate = get_pass_rate(db)
    return QualityStatsResponse(
        total_reports=total,
        passed_reports=passed,
        failed_reports=total - passed,
        pass_rate=rate,
    )


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    activity_limit: int = Query(10, ge=1, le=100),
    ledger: Ledger = Depends(get_ledger),
):
    """Counts across all components plus the latest ledger events."""
    with ledger.session() as db:
        return DashboardResponse(
            summary=DashboardSummaryOut.model_validate(dashboard_summary(db)),
            recent_activity=[EventOut.model_validate(event) for event in recent_activity(db, limit=activity_limit)],
        )


@router.get("/events", response_model=list[EventOut])
def get_events(
    product_id: Optional[int] = None,
    limit: int = Query(200, ge=1, le=1000),
    ledger: Ledger = Depends(get_ledger),
):
    """Ledger event log, newest first (optionally scoped to product)."""
    with ledger.session() as db:
        return [EventOut.model_validate(event) for event in list_events(db, product_id=product_id, limit=limit)]
