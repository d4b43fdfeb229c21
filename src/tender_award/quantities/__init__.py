"""
Quantities Module

DIN 277 floor areas, the bill of quantities and the reference price derived
from it.
"""

from tender_award.quantities.boq import (
    DEFAULT_PRICE_TABLE,
    build_boq,
    estimate_base_price,
    load_price_table,
)
from tender_award.quantities.din277 import compute_din277
from tender_award.quantities.models import (
    BillOfQuantities,
    BoQLineItem,
    CostGroup,
    DIN277Quantities,
    FloorAreaBucket,
)

__all__ = [
    # Models
    "CostGroup",
    "FloorAreaBucket",
    "DIN277Quantities",
    "BoQLineItem",
    "BillOfQuantities",
    # Operations
    "compute_din277",
    "build_boq",
    "estimate_base_price",
    "load_price_table",
    "DEFAULT_PRICE_TABLE",
]
