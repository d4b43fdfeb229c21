"""
Award recommendation (Vergabevorschlag)

The best ranked entry wins; the next ones are kept as alternates in case the
winner withdraws. An empty evaluation never produces a decision.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from tender_award.bidding.models import AwardDecision, EvaluationEntry
from tender_award.kernel.errors import EmptyBidSetError
from tender_award.kernel.logging import get_logger
from tender_award.kernel.metrics import empty_bid_sets_total
from tender_award.kernel.policy import default_policy

logger = get_logger(__name__)

JUSTIFICATION_TEMPLATE = (
    "Award recommendation based on §§ 16, 25 VOB/A. "
    "Highest scoring bid ({score:.1f}/100) with optimal price-performance ratio."
)


def recommend(
    entries: Sequence[EvaluationEntry],
    alternates_count: int = default_policy.alternates_count,
) -> AwardDecision:
    """
    Award decision from ranked evaluation entries

    Args:
        entries: Evaluation entries, best first (as returned by evaluate)
        alternates_count: Runner-ups to list after the winner

    Returns:
        AwardDecision with winner = entries[0]

    Raises:
        EmptyBidSetError: If there is no entry to award
    """
    if not entries:
        empty_bid_sets_total.inc()
        logger.error("Award impossible - no compliant bids")
        raise EmptyBidSetError(stage="award")

    winner = entries[0]
    decision = AwardDecision(
        winner=winner,
        alternates=list(entries[1 : 1 + alternates_count]),
        justification=JUSTIFICATION_TEMPLATE.format(
            score=winner.total_score.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        ),
        award_value=winner.price,
    )

    logger.info(
        "Award recommended",
        bid_id=winner.bid_id,
        contractor_id=winner.contractor_id,
        total_score=str(winner.total_score),
        alternates=len(decision.alternates),
    )
    return decision
