"""
Bidding Domain Models

Contractors, their bids, the outcome of the formal compliance check and the
evaluation matrix that ranks the compliant bids.

Money is Decimal in whole euros; ratings are Decimal fractions in [0, 1] so
that weighted totals come out exact (87.45, not 87.44999999999999).

Fun fact: The German "Preisspiegel" (price mirror) is literally a mirror -
every bidder's price reflected side by side so nobody's number hides!
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, Field, model_validator


class FinancialStability(str, Enum):
    """Credit assessment of a contractor (Bonität)"""

    EXCELLENT = "excellent"
    GOOD = "good"
    SATISFACTORY = "satisfactory"
    WEAK = "weak"


class Contractor(BaseModel):
    """
    Construction company invited to bid

    reputation is a score in [0, 1] derived from previous projects.
    """

    contractor_id: int = Field(..., ge=1, description="Unique contractor identifier")
    name: str = Field(..., min_length=1, description="Company name")
    contractor_type: str = Field(
        ..., description="Generalunternehmer, Bauunternehmen, ..."
    )
    location: str
    year_established: int = Field(..., ge=1800)
    employees: int = Field(..., ge=0)
    annual_revenue: Decimal = Field(..., ge=0, description="EUR per year")
    specialties: list[str] = Field(default_factory=list)
    reputation: Decimal = Field(..., ge=0, le=1)
    certifications: list[str] = Field(default_factory=list)
    previous_projects: int = Field(default=0, ge=0)
    financial_stability: FinancialStability

    model_config = {"frozen": True}


class RejectionReason(str, Enum):
    """
    Grounds on which a bid fails the formal check

    Each reason has exactly one legal-basis code (see REJECTION_TEMPLATES).
    """

    INCOMPLETE_DOCUMENTATION = "incomplete_documentation"
    PRICE_DEVIATION = "price_deviation"
    INSUFFICIENT_EXPERIENCE = "insufficient_experience"
    MISSING_CERTIFICATIONS = "missing_certifications"


class RejectionTemplate(NamedTuple):
    """How a rejected bid looks: reason text, price, missing document, legal basis"""

    text: str
    price_multiplier: Decimal
    missing_document: str | None
    legal_basis: str
    legal_basis_text: str


REJECTION_TEMPLATES: dict[RejectionReason, RejectionTemplate] = {
    RejectionReason.INCOMPLETE_DOCUMENTATION: RejectionTemplate(
        text="Incomplete documentation - missing Eignungsnachweise",
        price_multiplier=Decimal("0.92"),
        missing_document="eignungsnachweise",
        legal_basis="§16-incomplete-docs",
        legal_basis_text="§ 16 VOB/A - Unvollständige Unterlagen",
    ),
    RejectionReason.PRICE_DEVIATION: RejectionTemplate(
        text="Price significantly above market (+18% deviation exceeds +15% threshold)",
        price_multiplier=Decimal("1.18"),
        missing_document=None,
        legal_basis="§25-uneconomical",
        legal_basis_text="§ 25 VOB/A - Unwirtschaftliches Angebot",
    ),
    RejectionReason.INSUFFICIENT_EXPERIENCE: RejectionTemplate(
        text="Technical non-compliance - insufficient previous project experience",
        price_multiplier=Decimal("0.89"),
        missing_document="experience",
        legal_basis="§6-insufficient-eligibility",
        legal_basis_text="§ 6 VOB/A - Mangelhafte Eignung",
    ),
    RejectionReason.MISSING_CERTIFICATIONS: RejectionTemplate(
        text="Missing required certifications (ISO 9001 mandatory)",
        price_multiplier=Decimal("0.91"),
        missing_document="certifications",
        legal_basis="§6-missing-proof",
        legal_basis_text="§ 6 VOB/A - Fehlende Nachweise",
    ),
}


class Bid(BaseModel):
    """
    One contractor's offer

    A bid is either compliant or carries a rejection reason, never both.
    """

    bid_id: str = Field(..., description="Unique bid identifier")
    contractor_id: int = Field(..., ge=1)
    contractor_name: str
    submitted_at: datetime = Field(..., description="Submission timestamp")
    price: Decimal = Field(..., gt=0, description="Bid price in whole EUR")
    compliant: bool
    quality_rating: Decimal = Field(..., ge=0, le=1)
    timeline_rating: Decimal = Field(..., ge=0, le=1)
    technical_rating: Decimal = Field(..., ge=0, le=1)
    documents: dict[str, Any] = Field(
        default_factory=dict, description="Submitted document status by document name"
    )
    rejection_reason: RejectionReason | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_compliance_state(self) -> "Bid":
        """Exactly one of: compliant, or a rejection reason"""
        if self.compliant and self.rejection_reason is not None:
            raise ValueError("A compliant bid cannot carry a rejection reason")
        if not self.compliant and self.rejection_reason is None:
            raise ValueError("A non-compliant bid requires a rejection reason")
        return self


class RejectionRecord(BaseModel):
    """Formal rejection of a bid, including the letter sent to the bidder"""

    bid_id: str
    contractor_id: int
    contractor_name: str
    reason: RejectionReason
    reason_text: str
    legal_basis: str = Field(..., description="Legal-basis code, e.g. §16-incomplete-docs")
    legal_basis_text: str
    letter_text: str
    rejected_at: datetime
    appeal_information: str


class ComplianceResult(BaseModel):
    """Bids split by the formal check, input order preserved on both sides"""

    compliant: list[Bid] = Field(default_factory=list)
    rejected: list[RejectionRecord] = Field(default_factory=list)


class RecommendationTier(str, Enum):
    """Award recommendation derived from the total score"""

    HIGHLY_RECOMMENDED = "HIGHLY_RECOMMENDED"  # total >= 85
    RECOMMENDED = "RECOMMENDED"  # total >= 75
    CONDITIONAL = "CONDITIONAL"  # below 75


class EvaluationEntry(BaseModel):
    """
    One row of the evaluation matrix

    Scores are on a 0..100 scale; total_score is the weighted sum of the
    price, quality and timeline scores.
    """

    bid_id: str
    contractor_id: int
    contractor_name: str
    price: Decimal
    price_score: int = Field(..., ge=0, le=100)
    quality_score: Decimal = Field(..., ge=0, le=100)
    timeline_score: Decimal = Field(..., ge=0, le=100)
    total_score: Decimal = Field(..., ge=0, le=100)
    recommendation: RecommendationTier
    rank: int = Field(..., ge=1, description="1-based position after ranking")

    model_config = {"frozen": True}


class AwardDecision(BaseModel):
    """Recommended winner with runner-up alternates (Vergabevorschlag)"""

    winner: EvaluationEntry
    alternates: list[EvaluationEntry] = Field(default_factory=list)
    justification: str
    award_value: Decimal = Field(..., gt=0, description="Winner's bid price")


class PriceMirror(BaseModel):
    """
    Price statistics over the compliant bids (Preisspiegel)

    deviation_percent compares the mean bid with the reference price.
    """

    bid_count: int = Field(..., ge=1)
    minimum: Decimal
    maximum: Decimal
    mean: Decimal
    median: Decimal
    spread: Decimal = Field(..., ge=0, description="maximum - minimum")
    reference_price: Decimal
    deviation_percent: Decimal
