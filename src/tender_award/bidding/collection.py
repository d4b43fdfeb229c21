"""
Bid Collection - simulated contractor offers around the reference price

Every contractor submits exactly one bid. A few bids fail the formal check
(missing documents, price far above market, too little experience, missing
certifications); the rest are priced around the reference price according to
the contractor's reputation.

All draws come from the injected RandomSource:
- "bid-collection:rejections" decides how many and which contractors fail
- "bid:<contractor_id>" drives that contractor's price noise or rejection
  template

Same seed + same contractors + same reference price = same bids, whatever
order the contractors are processed in.

Fun fact: Sealed-bid tendering is older than paper money in Europe - Venetian
shipyards let galley contracts through sealed offers in the 1400s!
"""

import random
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from tender_award.bidding.models import (
    REJECTION_TEMPLATES,
    Bid,
    Contractor,
    RejectionReason,
)
from tender_award.kernel.decimals import round_half_up, to_decimal
from tender_award.kernel.logging import get_logger
from tender_award.kernel.metrics import bids_generated_total
from tender_award.kernel.policy import EvaluationPolicy, default_policy
from tender_award.kernel.randomness import RandomSource, default_random_source
from tender_award.kernel.time import TimeProvider, default_time_provider

logger = get_logger(__name__)

REJECTIONS_CONTEXT = "bid-collection:rejections"

# Fixed part and reputation slope of the compliant price factor
PRICE_BASE_FACTOR = Decimal("0.85")
PRICE_REPUTATION_FACTOR = Decimal("0.3")


def rejected_bid_count(contractor_count: int, rng: random.Random) -> int:
    """
    Number of bids that fail the formal check

    - 0 or 1 contractors: nobody is rejected
    - 2..8 contractors: max(1, min(3, n // 4)), so both classes exist
    - 9+ contractors: 2 or 3, never leaving fewer than 7 compliant bids

    Example:
        >>> rejected_bid_count(4, random.Random(0))
        1
        >>> rejected_bid_count(9, random.Random(0))
        2
    """
    if contractor_count <= 1:
        return 0
    if contractor_count < 9:
        return max(1, min(3, contractor_count // 4))
    return rng.randint(2, min(3, contractor_count - 7))


def select_rejected_contractors(
    contractors: Sequence[Contractor], random_source: RandomSource
) -> set[int]:
    """
    Contractor ids whose bids fail the formal check

    Candidates are sorted by contractor id before sampling so the selection
    does not depend on input order.
    """
    rng = random_source.stream(REJECTIONS_CONTEXT)
    count = rejected_bid_count(len(contractors), rng)
    candidate_ids = sorted(c.contractor_id for c in contractors)
    return set(rng.sample(candidate_ids, count))


def _clamp_rating(value: Decimal, floor: Decimal = Decimal("0")) -> Decimal:
    """Rating limited to [floor, 1]"""
    return min(Decimal("1"), max(floor, value))


def _submitted_documents(
    contractor: Contractor, missing_document: str | None = None
) -> dict[str, object]:
    has_iso_9001 = "ISO 9001" in contractor.certifications
    return {
        "leistungsverzeichnis": "complete",
        "eignungsnachweise": (
            "incomplete" if missing_document == "eignungsnachweise" else "complete"
        ),
        "terminplan": "complete",
        "referenzen": "insufficient" if missing_document == "experience" else "complete",
        "gewaehrleistungserklaerung": "complete",
        "qualitaetsmanagementsystem": (
            False if missing_document == "certifications" else has_iso_9001
        ),
        "bonitaet": contractor.financial_stability.value,
    }


def compliant_bid(
    contractor: Contractor,
    base_price: Decimal,
    rng: random.Random,
    submitted_at: datetime,
    policy: EvaluationPolicy = default_policy,
) -> Bid:
    """
    Bid that passes the formal check

    price = base x (0.85 + reputation x 0.3 + noise), noise uniform in
    [-amplitude, +amplitude], rounded half-up to whole euros.
    """
    amplitude = policy.price_noise_amplitude
    noise = to_decimal(rng.uniform(-amplitude, amplitude))
    factor = PRICE_BASE_FACTOR + contractor.reputation * PRICE_REPUTATION_FACTOR + noise

    certification_bonus = Decimal("0.02") * len(contractor.certifications)
    return Bid(
        bid_id=f"BID-{contractor.contractor_id:03d}",
        contractor_id=contractor.contractor_id,
        contractor_name=contractor.name,
        submitted_at=submitted_at,
        price=Decimal(round_half_up(base_price * factor)),
        compliant=True,
        quality_rating=_clamp_rating(contractor.reputation + certification_bonus),
        timeline_rating=_clamp_rating(
            Decimal("0.8") + Decimal(contractor.employees) / Decimal("1000")
        ),
        technical_rating=_clamp_rating(contractor.reputation + Decimal("0.05")),
        documents=_submitted_documents(contractor),
    )


def rejected_bid(
    contractor: Contractor,
    base_price: Decimal,
    rng: random.Random,
    submitted_at: datetime,
) -> Bid:
    """
    Bid that fails the formal check

    The rejection template is drawn from the contractor's stream; it fixes the
    price multiplier and which document is missing.
    """
    reason = rng.choice(list(RejectionReason))
    template = REJECTION_TEMPLATES[reason]

    return Bid(
        bid_id=f"BID-{contractor.contractor_id:03d}",
        contractor_id=contractor.contractor_id,
        contractor_name=contractor.name,
        submitted_at=submitted_at,
        price=Decimal(round_half_up(base_price * template.price_multiplier)),
        compliant=False,
        quality_rating=_clamp_rating(contractor.reputation * Decimal("0.8"), Decimal("0.3")),
        timeline_rating=_clamp_rating(
            Decimal("0.6") + Decimal(contractor.employees) / Decimal("2000"), Decimal("0.4")
        ),
        technical_rating=_clamp_rating(contractor.reputation * Decimal("0.7"), Decimal("0.3")),
        documents=_submitted_documents(contractor, template.missing_document),
        rejection_reason=reason,
    )


def collect_bids(
    contractors: Sequence[Contractor],
    base_price: Decimal,
    random_source: RandomSource = default_random_source,
    time_provider: TimeProvider = default_time_provider,
    policy: EvaluationPolicy = default_policy,
) -> list[Bid]:
    """
    One bid per contractor, in contractor input order

    Args:
        contractors: Invited contractors (unique ids)
        base_price: Reference price of the project
        random_source: Source of all random draws
        time_provider: Clock for the submission timestamp
        policy: Price noise amplitude

    Returns:
        Bids; with 2+ contractors at least one is compliant and one rejected

    Raises:
        ValueError: If base_price is not positive or contractor ids repeat
    """
    if base_price <= 0:
        raise ValueError(f"Reference price must be positive, got {base_price}")

    ids = [c.contractor_id for c in contractors]
    if len(set(ids)) != len(ids):
        raise ValueError("Contractor ids must be unique")

    rejected_ids = select_rejected_contractors(contractors, random_source)
    submitted_at = time_provider.now()

    bids: list[Bid] = []
    for contractor in contractors:
        rng = random_source.stream(f"bid:{contractor.contractor_id}")
        if contractor.contractor_id in rejected_ids:
            bid = rejected_bid(contractor, base_price, rng, submitted_at)
        else:
            bid = compliant_bid(contractor, base_price, rng, submitted_at, policy)

        bids_generated_total.labels(compliant=str(bid.compliant).lower()).inc()
        logger.debug(
            "Bid generated",
            bid_id=bid.bid_id,
            contractor_id=contractor.contractor_id,
            compliant=bid.compliant,
        )
        bids.append(bid)

    logger.info(
        "Bids collected",
        total=len(bids),
        compliant=len(bids) - len(rejected_ids),
        rejected=len(rejected_ids),
    )
    return bids
