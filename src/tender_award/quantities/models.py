"""
Quantity Domain Models

DIN 277 floor areas and the bill of quantities (BoQ). Both are computed once
from the complete element set and are plain, serializable data.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, computed_field


class CostGroup(str, Enum):
    """
    DIN 276 cost groups used as BoQ categories

    SITE_WORKS stays empty: plan analysis covers the building only.
    """

    SHELL = "300"  # Rohbau - structure
    SERVICES = "400"  # Technik - building services
    FIT_OUT = "500"  # Ausbau - fit-out
    SITE_WORKS = "600"  # Außenanlagen


COST_GROUP_LABELS: dict[CostGroup, str] = {
    CostGroup.SHELL: "Rohbau",
    CostGroup.SERVICES: "Technik",
    CostGroup.FIT_OUT: "Ausbau",
    CostGroup.SITE_WORKS: "Außenanlagen",
}


class FloorAreaBucket(BaseModel):
    """Accumulated room areas of one floor (m²)"""

    rooms: Decimal = Field(default=Decimal("0"), ge=0)
    circulation: Decimal = Field(default=Decimal("0"), ge=0)
    technical: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def gross(self) -> Decimal:
        """All three buckets - this floor's contribution to BGF"""
        return self.rooms + self.circulation + self.technical

    @property
    def net(self) -> Decimal:
        """Rooms and circulation - this floor's contribution to NGF"""
        return self.rooms + self.circulation


class DIN277Quantities(BaseModel):
    """
    Building-level floor areas and volume

    bgf: gross floor area (m²), ngf: net floor area (m²), bri: gross volume (m³).
    Invariant: bgf >= ngf.
    """

    bgf: int = Field(..., ge=0, description="Brutto-Grundfläche, m²")
    ngf: int = Field(..., ge=0, description="Netto-Grundfläche, m²")
    bri: int = Field(..., ge=0, description="Brutto-Rauminhalt, m³")
    floor_areas: dict[int, FloorAreaBucket] = Field(default_factory=dict)
    gross_building_factor: Decimal
    average_floor_height: Decimal
    calculation_method: str = "DIN_277"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def floor_count(self) -> int:
        return len(self.floor_areas)


class BoQLineItem(BaseModel):
    """One position of the bill of quantities"""

    category: CostGroup
    type_key: str
    description: str
    unit: str
    quantity: int = Field(..., ge=0)
    unit_price: Decimal = Field(..., gt=0)
    total_price: Decimal = Field(..., ge=0)
    element_count: int = Field(..., ge=1)
    specification: str
    price_source: str = Field(
        default="table", description="'table' or 'default' (no price table entry)"
    )


class BillOfQuantities(BaseModel):
    """
    Line items grouped by cost group, then by type key

    All four cost groups are always present, possibly empty.
    """

    categories: dict[CostGroup, dict[str, BoQLineItem]]
    unknown_price_lookups: list[str] = Field(
        default_factory=list,
        description="Type keys priced with the default unit price (audit trail)",
    )

    def line_items(self) -> list[BoQLineItem]:
        """All line items, cost group order then insertion order"""
        return [item for group in self.categories.values() for item in group.values()]

    def category_total(self, category: CostGroup) -> Decimal:
        return sum(
            (item.total_price for item in self.categories.get(category, {}).values()),
            Decimal("0"),
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_total(self) -> Decimal:
        """Sum of all line totals (before overhead)"""
        return sum((item.total_price for item in self.line_items()), Decimal("0"))
