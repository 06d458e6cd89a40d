"""Product, supply-chain step and quality report endpoints."""
from fastapi import APIRouter, Depends, Query, status

from ..auth import get_current_identity
from ..config import settings
from ..ledger import Ledger, get_ledger
from ..schemas import (
    ProductCountResponse,
    ProductCreate,
    ProductCreated,
    ProductOut,
    ProductTraceResponse,
    ReportCreate,
    ReportOut,
    StepCreate,
    StepListResponse,
    StepOut,
)
from ..use_cases.dashboard import product_trace
from ..use_cases.product_registry import (
    get_product,
    get_product_count,
    list_products,
    register_product_use_case,
)
from ..use_cases.quality_control import add_report_use_case, get_reports
from ..use_cases.supply_chain import add_step_use_case, get_steps

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=ProductCreated, status_code=status.HTTP_201_CREATED)
def register_product(
    payload: ProductCreate,
    caller: str = Depends(get_current_identity),
    ledger: Ledger = Depends(get_ledger),
):
    with ledger.session() as db:
        product_id = register_product_use_case(db=db, name=payload.name, category=payload.category, caller=caller)
    return ProductCreated(id=product_id)


@router.get("", response_model=list[ProductOut])
def get_products(
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    ledger: Ledger = Depends(get_ledger),
):
    """Existing products, ascending by id."""
    with ledger.session() as db:
        return [ProductOut.model_validate(product) for product in list_products(db, offset=offset, limit=limit)]


@router.get("/count", response_model=ProductCountResponse)
def get_count(ledger: Ledger = Depends(get_ledger)):
    with ledger.session() as db:
        return ProductCountResponse(count=get_product_count(db))


@router.get("/{product_id}", response_model=ProductOut)
def get_single_product(product_id: int, ledger: Ledger = Depends(get_ledger)):
    """Unknown ids answer with exists=false rather than 404."""
    with ledger.session() as db:
        return ProductOut.model_validate(get_product(db, product_id))


@router.post("/{product_id}/steps", response_model=StepOut, status_code=status.HTTP_201_CREATED)
def add_step(
    product_id: int,
    payload: StepCreate,
    caller: str = Depends(get_current_identity),
    ledger: Ledger = Depends(get_ledger),
):
    with ledger.session() as db:
        step = add_step_use_case(
            db=db,
            product_id=product_id,
            stage=payload.stage,
            location=payload.location,
            caller=caller,
            enforce_stage_order=settings.ENFORCE_STAGE_ORDER,
        )
        return StepOut.from_model(step)


@router.get("/{product_id}/steps", response_model=StepListResponse)
def list_steps(product_id: int, ledger: Ledger = Depends(get_ledger)):
    with ledger.session() as db:
        steps = [StepOut.from_model(step) for step in get_steps(db, product_id)]
    return StepListResponse(product_id=product_id, count=len(steps), steps=steps)


@router.post("/{product_id}/reports", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def add_report(
    product_id: int,
    payload: ReportCreate,
    caller: str = Depends(get_current_identity),
    ledger: Ledger = Depends(get_ledger),
):
    with ledger.session() as db:
        report = add_report_use_case(
            db=db,
            product_id=product_id,
            passed=payload.passed,
            comments=payload.comments,
            caller=caller,
        )
        return ReportOut.model_validate(report)


@router.get("/{product_id}/reports", response_model=list[ReportOut])
def list_reports(product_id: int, ledger: Ledger = Depends(get_ledger)):
    with ledger.session() as db:
        return [ReportOut.model_validate(report) for report in get_reports(db, product_id)]


@router.get("/{product_id}/trace", response_model=ProductTraceResponse)
def get_trace(product_id: int, ledger: Ledger = Depends(get_ledger)):
    """Product with its full supply-chain and inspection history."""
    with ledger.session() as db:
        trace = product_trace(db, product_id)
        return ProductTraceResponse(
            product=ProductOut.model_validate(trace.product),
            current_stage=trace.current_stage.label if trace.current_stage is not None else None,
            steps=[StepOut.from_model(step) for step in trace.steps],
            reports=[ReportOut.model_validate(report) for report in trace.reports],
            out_of_order_positions=trace.out_of_order_positions,
        )
