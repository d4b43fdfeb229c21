"""
Evaluation Matrix - weighted scoring of compliant bids

Three criteria, weights from the policy (default 60 / 25 / 15):
- price: cheapest bid 100, most expensive 60, linear in between
- quality: quality rating x 100
- timeline: timeline rating x 100

Ranking is total score descending; ties go to the lower price, then to the
lower contractor id, so the order never depends on input order.

Fun fact: § 16d VOB/A lets the client award on price alone - but "the
cheapest bid wins" has built so many leaky roofs that weighted criteria
became the norm!
"""

from collections.abc import Sequence
from decimal import Decimal

from tender_award.bidding.models import Bid, EvaluationEntry, RecommendationTier
from tender_award.kernel.decimals import round_half_up
from tender_award.kernel.logging import get_logger
from tender_award.kernel.metrics import evaluation_size
from tender_award.kernel.policy import EvaluationPolicy, default_policy

logger = get_logger(__name__)

_HUNDRED = Decimal("100")


def price_score(
    price: Decimal,
    min_price: Decimal,
    max_price: Decimal,
    floor: int = default_policy.price_score_floor,
) -> int:
    """
    Price score of one bid relative to the cheapest and dearest bid

    Args:
        price: The bid's price
        min_price: Lowest compliant price
        max_price: Highest compliant price
        floor: Score of the most expensive bid

    Returns:
        100 if all prices are equal, else
        round_half_up(floor + (max - price) / (max - min) x (100 - floor))

    Example:
        >>> price_score(Decimal("100"), Decimal("90"), Decimal("120"))
        87
    """
    if max_price == min_price:
        return 100
    ratio = (max_price - price) / (max_price - min_price)
    return round_half_up(Decimal(floor) + ratio * (_HUNDRED - Decimal(floor)))


def recommendation_tier(
    total_score: Decimal, policy: EvaluationPolicy = default_policy
) -> RecommendationTier:
    """Tier for a total score (thresholds are inclusive)"""
    if total_score >= policy.highly_recommended_threshold:
        return RecommendationTier.HIGHLY_RECOMMENDED
    if total_score >= policy.recommended_threshold:
        return RecommendationTier.RECOMMENDED
    return RecommendationTier.CONDITIONAL


def evaluate(
    compliant_bids: Sequence[Bid],
    policy: EvaluationPolicy = default_policy,
) -> list[EvaluationEntry]:
    """
    Score and rank compliant bids

    Args:
        compliant_bids: Bids that passed the formal check
        policy: Weights, price score floor and tier thresholds

    Returns:
        Entries sorted best first, ranks 1..n; empty input gives an empty list

    Raises:
        ValueError: If a non-compliant bid is passed in

    Example:
        prices A=100, B=120, C=90 → price scores 87, 60, 100;
        with quality .90/.80/.95 and timeline .85/.90/.80
        totals 87.45, 69.5, 95.75 → order C, A, B
    """
    for bid in compliant_bids:
        if not bid.compliant:
            raise ValueError(f"Bid {bid.bid_id} is not compliant and cannot be evaluated")

    evaluation_size.observe(len(compliant_bids))
    if not compliant_bids:
        return []

    prices = [bid.price for bid in compliant_bids]
    min_price, max_price = min(prices), max(prices)

    scored = []
    for bid in compliant_bids:
        p_score = price_score(bid.price, min_price, max_price, policy.price_score_floor)
        quality = bid.quality_rating * _HUNDRED
        timeline = bid.timeline_rating * _HUNDRED
        total = (
            policy.price_weight * p_score
            + policy.quality_weight * quality
            + policy.timeline_weight * timeline
        )
        scored.append((bid, p_score, quality, timeline, total))

    # Total desc, then price asc, then contractor id asc
    scored.sort(key=lambda row: (-row[4], row[0].price, row[0].contractor_id))

    entries = [
        EvaluationEntry(
            bid_id=bid.bid_id,
            contractor_id=bid.contractor_id,
            contractor_name=bid.contractor_name,
            price=bid.price,
            price_score=p_score,
            quality_score=quality,
            timeline_score=timeline,
            total_score=total,
            recommendation=recommendation_tier(total, policy),
            rank=rank,
        )
        for rank, (bid, p_score, quality, timeline, total) in enumerate(scored, start=1)
    ]

    logger.info(
        "Bids evaluated",
        entries=len(entries),
        top_bid=entries[0].bid_id,
        top_score=str(entries[0].total_score),
    )
    return entries
