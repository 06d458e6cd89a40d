#!/usr/bin/env python3
"""Sequential load test against a throwaway in-memory ledger."""
from __future__ import annotations

import argparse
import time

from traceledger.ledger import Ledger
from traceledger.services.roles import Role
from traceledger.services.stages import Stage
from traceledger.services.statistics import summarize_samples
from traceledger.use_cases.product_registry import register_product_use_case
from traceledger.use_cases.quality_control import add_report_use_case, get_pass_rate
from traceledger.use_cases.role_manager import grant_role_use_case
from traceledger.use_cases.supply_chain import add_step_use_case

ADMIN = "0xadmin"
MANUFACTURER = "0xmanufacturer"
INSPECTOR = "0xinspector"


def _timed(samples: list[float], fn, *args, **kwargs):
    started = time.perf_counter()
    result = fn(*args, **kwargs)
    samples.append((time.perf_counter() - started) * 1000)
    return result


def run(products: int, with_history: bool) -> dict[str, dict[str, float]]:
    ledger = Ledger("sqlite://")
    ledger.bootstrap(ADMIN)
    timings: dict[str, list[float]] = {"registerProduct": [], "addStep": [], "addReport": []}

    with ledger.session() as db:
        grant_role_use_case(db=db, role=Role.MANUFACTURER, identity=MANUFACTURER, caller=ADMIN)
        grant_role_use_case(db=db, role=Role.QUALITY_INSPECTOR, identity=INSPECTOR, caller=ADMIN)

        for index in range(products):
            product_id = _timed(
                timings["registerProduct"],
                register_product_use_case,
                db=db,
                name=f"Load product {index}",
                category=f"Category {index % 3}",
                caller=MANUFACTURER,
            )
            if not with_history:
                continue
            _timed(
                timings["addStep"],
                add_step_use_case,
                db=db,
                product_id=product_id,
                stage=Stage.MANUFACTURED,
                location=f"Factory {index}",
                caller=MANUFACTURER,
            )
            _timed(
                timings["addReport"],
                add_report_use_case,
                db=db,
                product_id=product_id,
                passed=index % 3 != 0,
                comments=f"Load report {index}",
                caller=INSPECTOR,
            )
        rate = get_pass_rate(db)

    ledger.dispose()
    summaries = {name: summarize_samples(samples) for name, samples in timings.items() if samples}
    print(f"Pass rate after run: {rate}%")
    return summaries


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--products", type=int, default=100)
    parser.add_argument("--with-history", action="store_true", help="also add one step and one report per product")
    args = parser.parse_args()

    started = time.perf_counter()
    summaries = run(args.products, args.with_history)
    elapsed = time.perf_counter() - started

    print(f"\n📊 Load test: {args.products} products in {elapsed:.2f}s")
    print(f"   Throughput: {args.products / elapsed:.2f} products/s")
    for name, summary in summaries.items():
        print(
            f"   {name}: avg {summary['avg']:.2f}ms, min {summary['min']:.2f}ms, "
            f"max {summary['max']:.2f}ms, p95 {summary['p95']:.2f}ms"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
