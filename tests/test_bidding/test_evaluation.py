"""
Tests for the evaluation matrix

Fun fact: Weighted scoring goes back to Benjamin Franklin's "moral algebra" -
pros and cons with weights, struck out pairwise until a decision remained!
"""

from decimal import Decimal

import pytest

from tender_award.bidding.evaluation import evaluate, price_score, recommendation_tier
from tender_award.bidding.models import RecommendationTier, RejectionReason
from tender_award.kernel.policy import EvaluationPolicy
from tests.helpers import make_bid


@pytest.fixture
def scenario_b() -> list:
    """A: 100 / .90 / .85, B: 120 / .80 / .90, C: 90 / .95 / .80"""
    return [
        make_bid(1, 100, quality="0.90", timeline="0.85", contractor_name="A"),
        make_bid(2, 120, quality="0.80", timeline="0.90", contractor_name="B"),
        make_bid(3, 90, quality="0.95", timeline="0.80", contractor_name="C"),
    ]


def test_scenario_b_scores(scenario_b: list) -> None:
    """Test price scores 87 / 60 / 100 and exact weighted totals"""
    entries = {e.contractor_name: e for e in evaluate(scenario_b)}

    assert entries["A"].price_score == 87
    assert entries["B"].price_score == 60
    assert entries["C"].price_score == 100
    assert entries["A"].total_score == Decimal("87.45")
    assert entries["B"].total_score == Decimal("69.5")
    assert entries["C"].total_score == Decimal("95.75")
    assert entries["A"].quality_score == Decimal("90")
    assert entries["B"].timeline_score == Decimal("90")


def test_scenario_b_ranking(scenario_b: list) -> None:
    """Test order C, A, B with ranks 1..3 and tiers"""
    entries = evaluate(scenario_b)

    assert [e.contractor_name for e in entries] == ["C", "A", "B"]
    assert [e.rank for e in entries] == [1, 2, 3]
    assert [e.recommendation for e in entries] == [
        RecommendationTier.HIGHLY_RECOMMENDED,
        RecommendationTier.HIGHLY_RECOMMENDED,
        RecommendationTier.CONDITIONAL,
    ]


def test_ranking_independent_of_input_order(scenario_b: list) -> None:
    forward = evaluate(scenario_b)
    backward = evaluate(list(reversed(scenario_b)))

    assert forward == backward


def test_equal_total_lower_price_wins() -> None:
    """Test X (100, 20 %) and Y (200, 80 %) both total 68 - X ranks first"""
    # X: 0.6 x 100 + 0.25 x 20 + 0.15 x 20 = 68
    # Y: 0.6 x 60 + 0.25 x 80 + 0.15 x 80 = 68
    bids = [
        make_bid(2, 200, quality="0.8", timeline="0.8", contractor_name="Y"),
        make_bid(1, 100, quality="0.2", timeline="0.2", contractor_name="X"),
    ]

    entries = evaluate(bids)

    assert entries[0].total_score == entries[1].total_score == Decimal("68")
    assert [e.contractor_name for e in entries] == ["X", "Y"]


def test_equal_total_and_price_lower_id_wins() -> None:
    bids = [make_bid(7, 100), make_bid(3, 100)]

    entries = evaluate(bids)

    assert [e.contractor_id for e in entries] == [3, 7]
    assert [e.rank for e in entries] == [1, 2]


def test_equal_prices_all_score_100() -> None:
    bids = [make_bid(1, 100), make_bid(2, 100), make_bid(3, 100)]

    assert {e.price_score for e in evaluate(bids)} == {100}


def test_single_bid_scores_100() -> None:
    (entry,) = evaluate([make_bid(1, 12345)])

    assert entry.price_score == 100
    assert entry.rank == 1


@pytest.mark.parametrize(
    ("price", "expected"),
    [("90", 100), ("120", 60), ("100", 87), ("105", 80)],
)
def test_price_score(price: str, expected: int) -> None:
    assert price_score(Decimal(price), Decimal("90"), Decimal("120")) == expected


def test_price_score_custom_floor() -> None:
    assert price_score(Decimal("120"), Decimal("90"), Decimal("120"), floor=0) == 0


@pytest.mark.parametrize(
    ("total", "tier"),
    [
        ("85", RecommendationTier.HIGHLY_RECOMMENDED),
        ("84.99", RecommendationTier.RECOMMENDED),
        ("75", RecommendationTier.RECOMMENDED),
        ("74.99", RecommendationTier.CONDITIONAL),
    ],
)
def test_tier_thresholds_inclusive(total: str, tier: RecommendationTier) -> None:
    assert recommendation_tier(Decimal(total)) == tier


def test_custom_weights() -> None:
    """Test a price-only policy ranks purely by price"""
    policy = EvaluationPolicy(
        price_weight=Decimal("1"), quality_weight=Decimal("0"), timeline_weight=Decimal("0")
    )
    bids = [make_bid(1, 120, quality="1.0"), make_bid(2, 90, quality="0.1")]

    entries = evaluate(bids, policy)

    assert [e.contractor_id for e in entries] == [2, 1]
    assert entries[0].total_score == Decimal("100")


def test_empty_input_gives_empty_matrix() -> None:
    assert evaluate([]) == []


def test_non_compliant_bid_rejected() -> None:
    bids = [make_bid(1, 100), make_bid(2, 90, rejection_reason=RejectionReason.PRICE_DEVIATION)]

    with pytest.raises(ValueError, match="not compliant"):
        evaluate(bids)
