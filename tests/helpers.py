"""
Test Helper Functions - Builders

Reusable builders for elements and bids, so tests state only the fields they
care about.

Fun fact: The Builder pattern was formalized by the Gang of Four in 1994,
but test data builders were popularized by the growing programmer test
movement in the 2000s - we use them to keep tests readable and maintainable!
"""

from datetime import datetime, timezone
from decimal import Decimal

from tender_award.bidding.models import Bid, RejectionReason
from tender_award.plans.models import Element, ElementCategory


def make_element(
    element_type: str,
    subtype: str,
    category: ElementCategory | str,
    quantity: int | None = None,
    area: float | None = None,
    floor: int = 1,
    plan_id: str = "plan-1",
    material: str | None = None,
    element_id: str | None = None,
) -> Element:
    """
    Builder for elements

    Example:
        >>> room = make_element("room", "office", "spatial", area=100)
        >>> room.type_key
        'room_office'
    """
    return Element(
        element_id=element_id or f"{element_type}_{subtype}_{floor}_1",
        plan_id=plan_id,
        floor=floor,
        element_type=element_type,
        subtype=subtype,
        category=ElementCategory(category),
        quantity=quantity,
        area=area,
        material=material,
    )


def make_room(subtype: str, area: float, floor: int = 1) -> Element:
    """Builder for a spatial (room) element"""
    return make_element("room", subtype, ElementCategory.SPATIAL, quantity=1, area=area, floor=floor)


def make_bid(
    contractor_id: int,
    price: Decimal | int | str,
    quality: Decimal | str = "0.8",
    timeline: Decimal | str = "0.8",
    technical: Decimal | str = "0.8",
    rejection_reason: RejectionReason | None = None,
    contractor_name: str | None = None,
    submitted_at: datetime | None = None,
) -> Bid:
    """
    Builder for bids

    A bid with a rejection_reason is non-compliant, every other bid compliant.

    Example:
        >>> bid = make_bid(1, 100, quality="0.90", timeline="0.85")
        >>> bid.compliant
        True
    """
    return Bid(
        bid_id=f"BID-{contractor_id:03d}",
        contractor_id=contractor_id,
        contractor_name=contractor_name or f"Contractor {contractor_id}",
        submitted_at=submitted_at or datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc),
        price=Decimal(str(price)),
        compliant=rejection_reason is None,
        quality_rating=Decimal(str(quality)),
        timeline_rating=Decimal(str(timeline)),
        technical_rating=Decimal(str(technical)),
        rejection_reason=rejection_reason,
    )
