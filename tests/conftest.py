"""
Pytest configuration and shared fixtures

Fun fact: The name "conftest" comes from pytest's configuration testing
framework. Files named conftest.py are automatically discovered and their
fixtures are available to all tests in the same directory and subdirectories!
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from tender_award.bidding.contractors import reference_contractors
from tender_award.bidding.models import Contractor, FinancialStability
from tender_award.kernel.policy import EvaluationPolicy
from tender_award.kernel.randomness import SeededRandomSource
from tender_award.kernel.time import FixedTimeProvider
from tender_award.plans.models import Plan


@pytest.fixture
def test_time() -> FixedTimeProvider:
    """
    Provide a pinned clock for deterministic tests

    Default time: 2025-03-14 09:30:00 UTC, so rejection letters read
    "vom 14.03.2025" - day and month are easy to tell apart.
    """
    return FixedTimeProvider(datetime(2025, 3, 14, 9, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def random_source() -> SeededRandomSource:
    """Seeded random source - same seed, same bids"""
    return SeededRandomSource("test-seed")


@pytest.fixture
def policy() -> EvaluationPolicy:
    """
    Provide the default evaluation policy

    Weights 60 / 25 / 15, thresholds 85 / 75, overhead 17.5 %.
    """
    return EvaluationPolicy()


@pytest.fixture
def contractors() -> list[Contractor]:
    """The ten-company reference roster"""
    return reference_contractors()


@pytest.fixture
def small_roster() -> list[Contractor]:
    """
    Three contractors with round numbers for hand-checked ratings

    Fun fact: Three bidders is the usual minimum for a restricted tender
    under VOB/A - fewer and the price comparison means little!
    """
    return [
        Contractor(
            contractor_id=1,
            name="Alpha Bau GmbH",
            contractor_type="Generalunternehmer",
            location="München",
            year_established=1990,
            employees=100,
            annual_revenue=Decimal("20000000"),
            reputation=Decimal("0.90"),
            certifications=["ISO 9001", "SCC"],
            previous_projects=5,
            financial_stability=FinancialStability.GOOD,
        ),
        Contractor(
            contractor_id=2,
            name="Beta Hochbau KG",
            contractor_type="Bauunternehmen",
            location="Augsburg",
            year_established=2001,
            employees=300,
            annual_revenue=Decimal("40000000"),
            reputation=Decimal("0.80"),
            certifications=[],
            previous_projects=3,
            financial_stability=FinancialStability.SATISFACTORY,
        ),
        Contractor(
            contractor_id=3,
            name="Gamma Projektbau AG",
            contractor_type="Generalunternehmer",
            location="Nürnberg",
            year_established=1980,
            employees=50,
            annual_revenue=Decimal("9000000"),
            reputation=Decimal("0.70"),
            certifications=["ISO 9001"],
            previous_projects=2,
            financial_stability=FinancialStability.WEAK,
        ),
    ]


@pytest.fixture
def ground_floor_plan() -> Plan:
    """Plan sheet for floor 1 (ground floor)"""
    return Plan(plan_id="FB_AUS A_GR01_A_Test", floor=1, plan_type="Ground Floor Plan")
