"""
Bidding Module

Contractor bids, the formal compliance check, weighted evaluation, the award
recommendation and the price mirror.
"""

from tender_award.bidding.award import recommend
from tender_award.bidding.collection import collect_bids
from tender_award.bidding.compliance import legal_basis_for, partition, rejection_letter
from tender_award.bidding.contractors import reference_contractors
from tender_award.bidding.evaluation import evaluate, price_score
from tender_award.bidding.models import (
    AwardDecision,
    Bid,
    ComplianceResult,
    Contractor,
    EvaluationEntry,
    FinancialStability,
    PriceMirror,
    RecommendationTier,
    RejectionReason,
    RejectionRecord,
)
from tender_award.bidding.price_mirror import build_price_mirror

__all__ = [
    # Models
    "Contractor",
    "FinancialStability",
    "Bid",
    "RejectionReason",
    "RejectionRecord",
    "ComplianceResult",
    "EvaluationEntry",
    "RecommendationTier",
    "AwardDecision",
    "PriceMirror",
    # Operations
    "reference_contractors",
    "collect_bids",
    "partition",
    "legal_basis_for",
    "rejection_letter",
    "price_score",
    "evaluate",
    "recommend",
    "build_price_mirror",
]
