"""
Price mirror (Preisspiegel) over the compliant bids
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from tender_award.bidding.models import Bid, PriceMirror
from tender_award.kernel.errors import EmptyBidSetError

_CENT = Decimal("0.01")


def median(values: Sequence[Decimal]) -> Decimal:
    """
    Median; mean of the two middle values for an even count

    Example:
        >>> median([Decimal("3"), Decimal("1"), Decimal("2"), Decimal("10")])
        Decimal('2.5')
    """
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) / 2


def build_price_mirror(
    compliant_bids: Sequence[Bid], reference_price: Decimal
) -> PriceMirror:
    """
    Price statistics of the compliant bids

    Mean and deviation are rounded half-up to cents; deviation_percent is
    (mean - reference) / reference x 100.

    Raises:
        EmptyBidSetError: If there are no compliant bids
        ValueError: If reference_price is not positive
    """
    if not compliant_bids:
        raise EmptyBidSetError(stage="price mirror")
    if reference_price <= 0:
        raise ValueError(f"Reference price must be positive, got {reference_price}")

    prices = [bid.price for bid in compliant_bids]
    mean = sum(prices, Decimal("0")) / len(prices)
    deviation = (mean - reference_price) / reference_price * 100

    return PriceMirror(
        bid_count=len(prices),
        minimum=min(prices),
        maximum=max(prices),
        mean=mean.quantize(_CENT, rounding=ROUND_HALF_UP),
        median=median(prices),
        spread=max(prices) - min(prices),
        reference_price=reference_price.quantize(_CENT, rounding=ROUND_HALF_UP),
        deviation_percent=deviation.quantize(_CENT, rounding=ROUND_HALF_UP),
    )
