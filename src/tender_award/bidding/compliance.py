"""
Formal compliance check (formale Angebotsprüfung)

Splits bids into compliant ones, which go on to evaluation, and rejected ones,
which get a legal-basis code and a formal rejection letter. Letters are plain
template substitution; nothing in them is generated freely.
"""

from collections.abc import Iterable

from tender_award.bidding.models import (
    REJECTION_TEMPLATES,
    Bid,
    ComplianceResult,
    RejectionReason,
    RejectionRecord,
)
from tender_award.kernel.logging import get_logger
from tender_award.kernel.metrics import bids_rejected_total
from tender_award.kernel.policy import default_policy
from tender_award.kernel.time import TimeProvider, default_time_provider, format_german_date

logger = get_logger(__name__)

APPEAL_INFORMATION = "Widerspruch innerhalb von 2 Wochen möglich gemäß VwGO"

REJECTION_LETTER_TEMPLATE = """ABLEHNUNGSSCHREIBEN

An: {contractor_name}
Betreff: Ablehnung Ihres Angebots - Projekt {project_name}

Sehr geehrte Damen und Herren,

wir bedanken uns für Ihr eingereichtes Angebot vom {submission_date}.

Nach eingehender Prüfung müssen wir Ihnen leider mitteilen, dass Ihr Angebot nicht berücksichtigt werden kann.

Grund der Ablehnung: {reason_text}

Diese Entscheidung basiert auf den Vergabebestimmungen der VOB/A und den ausgeschriebenen Eignungskriterien.

Mit freundlichen Grüßen
Vergabestelle"""


def legal_basis_for(reason: RejectionReason) -> str:
    """
    Legal-basis code of a rejection reason

    Example:
        >>> legal_basis_for(RejectionReason.PRICE_DEVIATION)
        '§25-uneconomical'
    """
    return REJECTION_TEMPLATES[reason].legal_basis


def rejection_letter(bid: Bid, project_name: str) -> str:
    """
    German rejection letter for a non-compliant bid

    Raises:
        ValueError: If the bid is compliant
    """
    if bid.rejection_reason is None:
        raise ValueError(f"Bid {bid.bid_id} is compliant - no rejection letter")

    return REJECTION_LETTER_TEMPLATE.format(
        contractor_name=bid.contractor_name,
        project_name=project_name,
        submission_date=format_german_date(bid.submitted_at),
        reason_text=REJECTION_TEMPLATES[bid.rejection_reason].text,
    )


def reject(bid: Bid, time_provider: TimeProvider, project_name: str) -> RejectionRecord:
    """Formal rejection record for one non-compliant bid"""
    if bid.rejection_reason is None:
        raise ValueError(f"Bid {bid.bid_id} is compliant - cannot reject")

    template = REJECTION_TEMPLATES[bid.rejection_reason]
    return RejectionRecord(
        bid_id=bid.bid_id,
        contractor_id=bid.contractor_id,
        contractor_name=bid.contractor_name,
        reason=bid.rejection_reason,
        reason_text=template.text,
        legal_basis=template.legal_basis,
        legal_basis_text=template.legal_basis_text,
        letter_text=rejection_letter(bid, project_name),
        rejected_at=time_provider.now(),
        appeal_information=APPEAL_INFORMATION,
    )


def partition(
    bids: Iterable[Bid],
    time_provider: TimeProvider = default_time_provider,
    project_name: str = default_policy.project_name,
) -> ComplianceResult:
    """
    Split bids into compliant bids and rejection records

    Args:
        bids: All submitted bids
        time_provider: Clock for the rejection timestamp
        project_name: Project named in the rejection letters

    Returns:
        ComplianceResult; every bid lands on exactly one side, in input order
    """
    compliant: list[Bid] = []
    rejected: list[RejectionRecord] = []

    for bid in bids:
        if bid.compliant:
            compliant.append(bid)
            continue

        record = reject(bid, time_provider, project_name)
        bids_rejected_total.labels(legal_basis=record.legal_basis).inc()
        logger.info(
            "Bid rejected",
            bid_id=bid.bid_id,
            contractor_id=bid.contractor_id,
            legal_basis=record.legal_basis,
        )
        rejected.append(record)

    return ComplianceResult(compliant=compliant, rejected=rejected)
