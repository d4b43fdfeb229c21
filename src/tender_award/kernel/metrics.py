"""
Prometheus metrics for tender-award.

Observability only: nothing here feeds back into quantities, scores or awards.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram, start_http_server

# ============================================================================
# Plan Analysis Metrics
# ============================================================================

plans_analyzed_total = Counter(
    "tender_award_plans_analyzed_total",
    "Total number of plans turned into element catalogs",
    ["analysis_method"],  # analyzer, fallback
)

analyzer_fallbacks_total = Counter(
    "tender_award_analyzer_fallbacks_total",
    "Times the deterministic fallback generator replaced the plan analyzer",
    ["reason"],  # missing, timeout, error, cancelled
)

malformed_elements_total = Counter(
    "tender_award_malformed_elements_total",
    "Plans rejected because an analyzed element lacked required fields",
)

# ============================================================================
# Quantity & Pricing Metrics
# ============================================================================

unknown_price_lookups_total = Counter(
    "tender_award_unknown_price_lookups_total",
    "BoQ line items priced with the default unit price",
    ["category"],
)

boq_line_items_total = Counter(
    "tender_award_boq_line_items_total",
    "BoQ line items built",
    ["category"],
)

# ============================================================================
# Bidding Metrics
# ============================================================================

bids_generated_total = Counter(
    "tender_award_bids_generated_total",
    "Contractor bids generated",
    ["compliant"],  # "true", "false"
)

bids_rejected_total = Counter(
    "tender_award_bids_rejected_total",
    "Bids rejected by the compliance filter",
    ["legal_basis"],
)

evaluation_size = Histogram(
    "tender_award_evaluation_size",
    "Number of compliant bids entering the evaluation matrix",
    buckets=(0, 1, 2, 3, 5, 7, 10, 20, 50),
)

empty_bid_sets_total = Counter(
    "tender_award_empty_bid_sets_total",
    "Evaluations aborted because no compliant bid was left",
)

# ============================================================================
# Pipeline Metrics
# ============================================================================

stage_duration_seconds = Histogram(
    "tender_award_stage_duration_seconds",
    "Duration of one pipeline stage in seconds",
    ["stage"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0, 60.0),
)

# Stage labels used by TenderPipeline, in run order
PIPELINE_STAGES = ("catalogs", "din277", "boq", "bids", "compliance", "evaluate", "award")

pipeline_runs_total = Counter(
    "tender_award_pipeline_runs_total",
    "Complete pipeline runs",
    ["status"],  # success, failure
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_stage_duration(stage: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator recording a stage's wall time in stage_duration_seconds.

    Args:
        stage: Stage label (e.g. "din277", "evaluate")
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                stage_duration_seconds.labels(stage=stage).observe(
                    time.perf_counter() - start
                )

        return wrapper

    return decorator


def start_metrics_server(port: int = 9090) -> None:
    """Expose all metrics at http://0.0.0.0:<port>/metrics."""
    start_http_server(port)


def initialize_stage_labels() -> None:
    """Create the stage histogram series so every stage is exported before its first run."""
    for stage in PIPELINE_STAGES:
        stage_duration_seconds.labels(stage=stage)
