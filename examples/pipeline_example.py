#!/usr/bin/env python3
"""
tender-award - Procurement Pipeline Examples

Scenarios:
- Scenario 1: Full run on the placeholder plan set (fallback catalogs)
- Scenario 2: Same seed, same award - reproducible bid simulation
- Scenario 3: External analyzer with one unreachable plan (fallback per plan)
- Scenario 4: Custom evaluation policy (price-only scoring)

Each scenario is self-contained and prints the stage results it is about.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from tender_award import TenderPipeline
from tender_award.kernel.logging import configure_logging
from tender_award.kernel.policy import EvaluationPolicy
from tender_award.kernel.randomness import SeededRandomSource
from tender_award.kernel.time import FixedTimeProvider
from tender_award.plans import placeholder_plans


def print_section(title: str) -> None:
    """Print a formatted section header"""
    print(f"\n{'=' * 80}")
    print(f"  {title}")
    print('=' * 80)


def print_subsection(title: str) -> None:
    """Print a formatted subsection header"""
    print(f"\n--- {title} ---")


# ==============================================================================
# Scenario 1: Full run
# ==============================================================================
def scenario_1_full_run() -> None:
    """
    Runs every stage on the eight placeholder sheets.

    Flow:
    1. Element catalogs (fallback generator, no analyzer configured)
    2. DIN 277 quantities and the bill of quantities
    3. Reference price = BoQ total + 17.5 % overhead
    4. Ten simulated bids, formal check, evaluation matrix
    5. Price mirror and award recommendation
    """
    print_section("Scenario 1: Full run on the placeholder plans")

    pipeline = TenderPipeline(
        time_provider=FixedTimeProvider(datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)),
        random_source=SeededRandomSource("example"),
    )
    report = pipeline.run(placeholder_plans())

    print_subsection("Quantities")
    q = report.quantities
    print(f"BGF {q.bgf} m², NGF {q.ngf} m², BRI {q.bri} m³ over {q.floor_count} floors")
    print(f"BoQ net total: €{report.boq.net_total:,.2f}")
    print(f"Reference price: €{report.base_price:,.2f}")

    print_subsection("Formal check")
    for rejection in report.rejections:
        print(f"✗ {rejection.contractor_name}: {rejection.legal_basis_text}")

    print_subsection("Evaluation matrix")
    for entry in report.evaluation:
        print(
            f"{entry.rank}. {entry.contractor_name:<35} €{entry.price:>12,.0f}  "
            f"price {entry.price_score:>3}  total {entry.total_score:>6.2f}  "
            f"{entry.recommendation.value}"
        )

    print_subsection("Award")
    print(f"Winner: {report.award.winner.contractor_name}")
    print(f"Alternates: {', '.join(a.contractor_name for a in report.award.alternates)}")
    print(report.award.justification)

    if report.rejections:
        print_subsection("First rejection letter")
        print(report.rejections[0].letter_text)


# ==============================================================================
# Scenario 2: Reproducibility
# ==============================================================================
def scenario_2_reproducibility() -> None:
    """Two runs with the same seed award the same contractor at the same price."""
    print_section("Scenario 2: Same seed, same award")

    awards = []
    for _ in range(2):
        pipeline = TenderPipeline(random_source=SeededRandomSource("tender-2024"))
        awards.append(pipeline.run(placeholder_plans()).award)

    for i, award in enumerate(awards, start=1):
        print(f"Run {i}: {award.winner.contractor_name} at €{award.award_value:,.0f}")
    print(f"Identical: {awards[0] == awards[1]}")


# ==============================================================================
# Scenario 3: Analyzer with partial outage
# ==============================================================================
class BasementOnlyAnalyzer:
    """Answers for the basement sheet only; every other call fails"""

    def analyze(self, plan_path: str) -> dict[str, Any]:
        if "GR00" not in plan_path:
            raise ConnectionError("analysis service unreachable")
        return {
            "elements": [
                {"type": "room", "subtype": "storage", "category": "spatial", "area": 120},
                {"type": "room", "subtype": "technical_room", "category": "spatial", "area": 60},
                {"type": "wall", "subtype": "exterior_wall", "category": "structural", "quantity": 80},
            ],
            "confidence": 0.91,
        }


def scenario_3_partial_outage() -> None:
    """The analyzed plan keeps its elements; the others fall back one by one."""
    print_section("Scenario 3: Analyzer with partial outage")

    policy = EvaluationPolicy(analyzer_timeout_seconds=5, analyzer_max_attempts=1)
    pipeline = TenderPipeline(policy=policy, analyzer=BasementOnlyAnalyzer())
    catalogs = pipeline.build_catalogs(placeholder_plans())

    for catalog in catalogs:
        print(
            f"{catalog.plan.plan_id:<30} {catalog.analysis_method.value:<9} "
            f"{len(catalog.elements):>3} elements (confidence {catalog.confidence:.2f})"
        )


# ==============================================================================
# Scenario 4: Custom policy
# ==============================================================================
def scenario_4_price_only_policy() -> None:
    """With all weight on price, the cheapest compliant bid always wins."""
    print_section("Scenario 4: Price-only scoring")

    policy = EvaluationPolicy(
        price_weight=Decimal("1"),
        quality_weight=Decimal("0"),
        timeline_weight=Decimal("0"),
    )
    report = TenderPipeline(policy=policy, random_source=SeededRandomSource("example")).run(
        placeholder_plans()
    )

    cheapest = min(report.evaluation, key=lambda e: e.price)
    print(f"Winner: {report.award.winner.contractor_name} at €{report.award.award_value:,.0f}")
    print(f"Cheapest compliant bid: {cheapest.contractor_name} at €{cheapest.price:,.0f}")


if __name__ == "__main__":
    configure_logging(json_output=False, log_level="WARNING")

    scenario_1_full_run()
    scenario_2_reproducibility()
    scenario_3_partial_outage()
    scenario_4_price_only_policy()
