"""
DIN 277 Floor Area Accounting

Room areas are bucketed per floor by subtype keyword:
- corridor / lobby       → circulation
- technical / storage    → technical
- everything else        → rooms

BGF (gross floor area) counts all buckets and carries a 15 % surcharge for
structure and walls; NGF (net floor area) leaves technical areas out and is
not scaled; BRI (gross volume) is BGF times the average storey height.

The surcharge is applied once to the building-wide sum, never per floor, and
rounding happens only on the three final numbers.

Fun fact: DIN 277 was first published in 1934 - the Germans have been
arguing about what counts as a "floor area" for nearly a century!
"""

from collections.abc import Iterable
from decimal import Decimal

from tender_award.kernel.decimals import round_half_up, to_decimal
from tender_award.kernel.logging import get_logger
from tender_award.kernel.policy import EvaluationPolicy, default_policy
from tender_award.plans.models import Element, ElementCategory
from tender_award.quantities.models import DIN277Quantities, FloorAreaBucket

logger = get_logger(__name__)

CIRCULATION_KEYWORDS = ("corridor", "lobby")
TECHNICAL_KEYWORDS = ("technical", "storage")


def classify_subtype(subtype: str) -> str:
    """
    Bucket name for a room subtype

    Example:
        >>> classify_subtype("main_corridor")
        'circulation'
        >>> classify_subtype("office")
        'rooms'
    """
    if any(keyword in subtype for keyword in CIRCULATION_KEYWORDS):
        return "circulation"
    if any(keyword in subtype for keyword in TECHNICAL_KEYWORDS):
        return "technical"
    return "rooms"


def accumulate_floor_areas(elements: Iterable[Element]) -> dict[int, FloorAreaBucket]:
    """
    Sum spatial element areas into per-floor buckets

    Non-spatial elements and elements without area are ignored.

    Returns:
        Floor index → bucket, sorted by floor
    """
    raw: dict[int, dict[str, Decimal]] = {}

    for element in elements:
        if element.category != ElementCategory.SPATIAL or not element.area:
            continue
        bucket = raw.setdefault(
            element.floor,
            {"rooms": Decimal("0"), "circulation": Decimal("0"), "technical": Decimal("0")},
        )
        name = classify_subtype(element.subtype)
        bucket[name] += to_decimal(element.area)

    return {floor: FloorAreaBucket(**raw[floor]) for floor in sorted(raw)}


def quantities_from_floor_areas(
    floor_areas: dict[int, FloorAreaBucket],
    policy: EvaluationPolicy = default_policy,
) -> DIN277Quantities:
    """
    BGF / NGF / BRI from already bucketed floor areas

    Args:
        floor_areas: Floor index → area bucket
        policy: Gross building factor and storey height

    Returns:
        DIN277Quantities rounded half-up to whole m² / m³

    Example:
        floor 0 {rooms 100, circulation 20, technical 10},
        floor 1 {rooms 150, circulation 30}:
        BGF 310 x 1.15 = 356.5 → 357, NGF 300, BRI 356.5 x 3.5 = 1247.75 → 1248
    """
    raw_bgf = sum((bucket.gross for bucket in floor_areas.values()), to_decimal(0))
    raw_ngf = sum((bucket.net for bucket in floor_areas.values()), to_decimal(0))

    bgf = raw_bgf * policy.gross_building_factor
    bri = bgf * policy.average_floor_height

    return DIN277Quantities(
        bgf=round_half_up(bgf),
        ngf=round_half_up(raw_ngf),
        bri=round_half_up(bri),
        floor_areas=floor_areas,
        gross_building_factor=policy.gross_building_factor,
        average_floor_height=policy.average_floor_height,
    )


def compute_din277(
    elements: Iterable[Element],
    policy: EvaluationPolicy = default_policy,
) -> DIN277Quantities:
    """
    DIN 277 quantities for the complete element set of all plans

    Args:
        elements: Every element of every plan (the full fan-in)
        policy: Gross building factor and storey height

    Returns:
        DIN277Quantities with per-floor buckets
    """
    floor_areas = accumulate_floor_areas(elements)
    quantities = quantities_from_floor_areas(floor_areas, policy)

    logger.info(
        "DIN 277 quantities computed",
        floors=quantities.floor_count,
        bgf=quantities.bgf,
        ngf=quantities.ngf,
        bri=quantities.bri,
    )
    return quantities
