"""Aggregation helpers for dashboards and load-test summaries."""
from __future__ import annotations

import math
from typing import Sequence


def pass_rate(*, total: int, passed: int) -> int:
    """Truncated integer percentage; 0 when nothing was inspected."""
    if total <= 0:
        return 0
    return passed * 100 // total


def calculate_average(samples: Sequence[float]) -> float:
    if not samples:
        raise ValueError("Cannot average an empty sample")
    return sum(samples) / len(samples)


def calculate_percentile(samples: Sequence[float], percentile: float) -> float:
    """Nearest-rank percentile."""
    if not samples:
        raise ValueError("Cannot take a percentile of an empty sample")
    if not 0 < percentile <= 100:
        raise ValueError(f"Percentile must be in (0, 100], got {percentile}")
    ordered = sorted(samples)
    index = math.ceil(percentile / 100 * len(ordered)) - 1
    return ordered[index]


def summarize_samples(samples: Sequence[float]) -> dict[str, float]:
    return {
        "count": len(samples),
        "avg": calculate_average(samples),
        "min": min(samples),
        "max": max(samples),
        "p50": calculate_percentile(samples, 50),
        "p95": calculate_percentile(samples, 95),
    }
