"""
Element Catalog - turning plans into building elements

The external plan analyzer is tried first. It gets a bounded timeout and a
retry on transient errors; if it is missing, fails, times out or is cancelled,
the deterministic fallback generator produces the plan's elements instead.

Elements the analyzer does return are validated strictly: one without a type
or category rejects the whole plan with MalformedElementError.

Plans are independent of each other, so a batch is analysed on a bounded
thread pool and fanned in before any aggregation starts.
"""

import asyncio
import contextvars
import os
from concurrent.futures import CancelledError, ThreadPoolExecutor
from typing import Any, Protocol

from pydantic import ValidationError

from tender_award.kernel.errors import AnalysisUnavailable, MalformedElementError
from tender_award.kernel.logging import get_logger
from tender_award.kernel.metrics import (
    analyzer_fallbacks_total,
    malformed_elements_total,
    plans_analyzed_total,
)
from tender_award.kernel.policy import EvaluationPolicy, default_policy
from tender_award.kernel.retry import retry_on_transient_error
from tender_award.kernel.timeout import TimeoutError, call_with_timeout
from tender_award.plans.fallback import generate_fallback_catalog
from tender_award.plans.models import (
    AnalysisMethod,
    Element,
    Plan,
    PlanCatalog,
    summarize_measurements,
)

logger = get_logger(__name__)

DEFAULT_ANALYZER_CONFIDENCE = 0.95


class PlanAnalyzer(Protocol):
    """
    External plan analysis service (vision model, CAD parser, ...)

    analyze() returns {"elements": [...], "measurements": {...}, "confidence": float}
    where each element is a dict with at least "type" and "category".
    """

    def analyze(self, plan_path: str) -> dict[str, Any]:
        ...


def parse_analyzed_elements(plan: Plan, raw_elements: list[Any]) -> list[Element]:
    """
    Validate analyzer output into Element models

    Args:
        plan: Plan the elements belong to (sets plan_id and floor)
        raw_elements: Element dictionaries as returned by the analyzer

    Returns:
        Elements in analyzer order

    Raises:
        MalformedElementError: On the first element lacking type or category,
            or failing validation otherwise
    """
    elements: list[Element] = []

    for index, raw in enumerate(raw_elements):
        if not isinstance(raw, dict):
            raise MalformedElementError(
                plan.plan_id, index, f"expected a mapping, got {type(raw).__name__}"
            )
        if not raw.get("type"):
            raise MalformedElementError(plan.plan_id, index, "missing 'type'")
        if not raw.get("category"):
            raise MalformedElementError(plan.plan_id, index, "missing 'category'")

        subtype = raw.get("subtype") or ""
        try:
            element = Element(
                element_id=raw.get("id")
                or f"{raw['type']}_{subtype}_{plan.floor}_{index + 1}",
                plan_id=plan.plan_id,
                floor=plan.floor,
                element_type=raw["type"],
                subtype=subtype,
                category=raw["category"],
                quantity=raw.get("quantity"),
                area=raw.get("area"),
                material=raw.get("material"),
            )
        except ValidationError as exc:
            raise MalformedElementError(
                plan.plan_id, index, f"{exc.error_count()} validation error(s): {exc}"
            ) from exc

        elements.append(element)

    return elements


def run_analyzer(
    plan: Plan, analyzer: PlanAnalyzer | None, policy: EvaluationPolicy
) -> dict[str, Any]:
    """
    Call the analyzer for one plan with timeout and transient-error retry

    Raises:
        AnalysisUnavailable: For every way the analysis can fail to produce a
            usable result (no analyzer, timeout, error, cancellation)
    """
    if analyzer is None:
        raise AnalysisUnavailable(plan.plan_id, "no analyzer configured", reason="missing")

    plan_path = plan.file_path or plan.plan_id

    @retry_on_transient_error(max_attempts=policy.analyzer_max_attempts)
    def attempt() -> dict[str, Any]:
        return call_with_timeout(
            analyzer.analyze,
            plan_path,
            seconds=policy.analyzer_timeout_seconds,
            operation_name="analyze_plan",
        )

    try:
        result = attempt()
    except TimeoutError as exc:
        raise AnalysisUnavailable(plan.plan_id, str(exc), reason="timeout") from exc
    except (CancelledError, asyncio.CancelledError) as exc:
        # asyncio.CancelledError is a BaseException, not covered below
        raise AnalysisUnavailable(plan.plan_id, "analysis cancelled", reason="cancelled") from exc
    except Exception as exc:
        raise AnalysisUnavailable(plan.plan_id, repr(exc), reason="error") from exc

    if not isinstance(result, dict) or not isinstance(result.get("elements", []), list):
        raise AnalysisUnavailable(
            plan.plan_id, "analyzer returned an unexpected payload", reason="error"
        )

    return result


def build_catalog(
    plan: Plan,
    analyzer: PlanAnalyzer | None = None,
    policy: EvaluationPolicy = default_policy,
) -> PlanCatalog:
    """
    Build the element catalog of one plan

    Args:
        plan: Plan to analyse
        analyzer: Optional external analyzer
        policy: Timeout and retry settings

    Returns:
        PlanCatalog from the analyzer, or from the fallback generator

    Raises:
        MalformedElementError: If the analyzer returned an invalid element
    """
    try:
        result = run_analyzer(plan, analyzer, policy)
    except AnalysisUnavailable as exc:
        logger.warning(
            "Plan analysis unavailable, using fallback generator",
            plan_id=plan.plan_id,
            reason=exc.reason,
            cause=exc.cause,
        )
        analyzer_fallbacks_total.labels(reason=exc.reason).inc()
        plans_analyzed_total.labels(analysis_method=AnalysisMethod.FALLBACK.value).inc()
        return generate_fallback_catalog(plan)

    try:
        elements = parse_analyzed_elements(plan, result.get("elements") or [])
    except MalformedElementError:
        malformed_elements_total.inc()
        logger.error("Analyzer returned a malformed element", plan_id=plan.plan_id)
        raise

    confidence = result.get("confidence") or DEFAULT_ANALYZER_CONFIDENCE
    plans_analyzed_total.labels(analysis_method=AnalysisMethod.ANALYZER.value).inc()

    return PlanCatalog(
        plan=plan,
        elements=elements,
        measurements=result.get("measurements") or summarize_measurements(elements),
        confidence=min(1.0, max(0.0, float(confidence))),
        analysis_method=AnalysisMethod.ANALYZER,
    )


def build_catalogs(
    plans: list[Plan],
    analyzer: PlanAnalyzer | None = None,
    policy: EvaluationPolicy = default_policy,
) -> list[PlanCatalog]:
    """
    Build catalogs for all plans concurrently

    Uses a bounded worker pool (policy.max_workers, else CPU count). Waits for
    every plan before returning, so callers always see a complete element set.

    Args:
        plans: Plans to analyse
        analyzer: Optional external analyzer shared by all workers
        policy: Pool size, timeout and retry settings

    Returns:
        Catalogs in the same order as plans

    Raises:
        MalformedElementError: The first malformed plan in input order, after
            all other plans have finished
    """
    if not plans:
        return []

    workers = min(policy.max_workers or os.cpu_count() or 1, len(plans))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="plan-analysis") as pool:
        # Copy the context per task so the run id follows each plan into its thread
        futures = [
            pool.submit(contextvars.copy_context().run, build_catalog, plan, analyzer, policy)
            for plan in plans
        ]

    catalogs: list[PlanCatalog] = []
    failures: list[MalformedElementError] = []
    for future in futures:
        try:
            catalogs.append(future.result())
        except MalformedElementError as exc:
            failures.append(exc)

    if failures:
        logger.error(
            "Element catalog build failed",
            failed_plans=[f.plan_id for f in failures],
            total_plans=len(plans),
        )
        raise failures[0]

    return catalogs


def collect_elements(catalogs: list[PlanCatalog]) -> list[Element]:
    """Flatten catalogs into one element list (plan order preserved)"""
    return [element for catalog in catalogs for element in catalog.elements]
