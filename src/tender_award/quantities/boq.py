"""
Bill of Quantities (Leistungsverzeichnis)

Billable elements are grouped by DIN 276 cost group and then by type key
("wall_exterior_wall"). Each group becomes one line item priced from the unit
price table. Rooms (spatial elements) are not billed; their areas feed the
DIN 277 quantities instead.

A type key without a table entry is priced with the policy's default unit
price. That is logged, counted and listed on the BoQ so an auditor sees every
position that was not priced from the table.
"""

import json
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path

from tender_award.kernel.decimals import to_decimal
from tender_award.kernel.errors import UnknownPriceLookup
from tender_award.kernel.logging import get_logger
from tender_award.kernel.metrics import boq_line_items_total, unknown_price_lookups_total
from tender_award.kernel.policy import EvaluationPolicy, default_policy
from tender_award.plans.models import Element, ElementCategory
from tender_award.quantities.models import BillOfQuantities, BoQLineItem, CostGroup

logger = get_logger(__name__)

CATEGORY_COST_GROUPS: dict[ElementCategory, CostGroup] = {
    ElementCategory.STRUCTURAL: CostGroup.SHELL,
    ElementCategory.MEP: CostGroup.SERVICES,
    ElementCategory.ARCHITECTURAL: CostGroup.FIT_OUT,
}

# Unit prices in EUR per unit (see unit_for)
DEFAULT_PRICE_TABLE: dict[str, Decimal] = {
    "wall_exterior_wall": Decimal("450"),
    "wall_interior_wall": Decimal("85"),
    "column_concrete_column": Decimal("850"),
    "beam_concrete_beam": Decimal("320"),
    "slab_floor_slab": Decimal("180"),
    "door_office_door": Decimal("680"),
    "door_fire_door": Decimal("1200"),
    "window_curtain_wall": Decimal("650"),
    "window_standard_window": Decimal("420"),
    "electrical_outlet": Decimal("125"),
    "electrical_light_fixture": Decimal("180"),
    "electrical_panel": Decimal("2200"),
    "plumbing_water_line": Decimal("45"),
    "plumbing_drain_line": Decimal("65"),
    "hvac_ductwork": Decimal("85"),
    "hvac_diffuser": Decimal("220"),
}

DESCRIPTIONS: dict[str, str] = {
    "wall_exterior_wall": "Außenwand, Stahlbeton, 25cm, gedämmt",
    "wall_interior_wall": "Innenwand, Trockenbau, Metallständer, 15cm",
    "column_concrete_column": "Stütze, Stahlbeton, Ø40cm, C25/30",
    "beam_concrete_beam": "Unterzug, Stahlbeton, 30/60cm, C25/30",
    "slab_floor_slab": "Decke, Stahlbeton, 25cm, C25/30",
    "door_office_door": "Bürotür, Holz/Glas, 90cm breit",
    "door_fire_door": "Feuerschutztür, Stahl, F30, 125cm breit",
    "window_curtain_wall": "Vorhangfassade, Aluminium/Glas",
    "window_standard_window": "Fenster, Aluminium, 3-fach Verglasung",
    "electrical_outlet": "Steckdose, 230V, Schutzkontakt",
    "electrical_light_fixture": "Leuchte, LED, dimmbar",
    "electrical_panel": "Elektro-Unterverteilung",
    "plumbing_water_line": "Trinkwasserleitung, Kupfer",
    "plumbing_drain_line": "Abwasserleitung, PVC",
    "hvac_ductwork": "Lüftungskanal, verzinktes Blech",
    "hvac_diffuser": "Luftauslass, Aluminium",
}

_AREA_UNIT_MARKERS = ("wall", "slab", "window_curtain")
_LENGTH_UNIT_MARKERS = ("beam", "line", "ductwork")


def unit_for(type_key: str) -> str:
    """
    Billing unit of a type key

    Example:
        >>> unit_for("wall_exterior_wall")
        'm²'
        >>> unit_for("plumbing_drain_line")
        'm'
        >>> unit_for("door_fire_door")
        'Stück'
    """
    if any(marker in type_key for marker in _AREA_UNIT_MARKERS):
        return "m²"
    if any(marker in type_key for marker in _LENGTH_UNIT_MARKERS):
        return "m"
    return "Stück"


def description_for(type_key: str, element_type: str) -> str:
    return DESCRIPTIONS.get(type_key, f"{element_type} - Standardausführung")


def specification_for(material: str | None) -> str:
    return f"Material: {material or 'Standard'}, Ausführung nach DIN und Herstellervorgaben"


def lookup_unit_price(type_key: str, table: Mapping[str, Decimal]) -> Decimal:
    """
    Unit price of a type key

    Raises:
        UnknownPriceLookup: If the table has no entry for type_key
    """
    try:
        return to_decimal(table[type_key])
    except KeyError:
        raise UnknownPriceLookup(type_key) from None


def build_boq(
    elements: Iterable[Element],
    price_table: Mapping[str, Decimal] | None = None,
    policy: EvaluationPolicy = default_policy,
) -> BillOfQuantities:
    """
    Group billable elements into priced line items

    Args:
        elements: Every element of every plan
        price_table: Unit price per type key (defaults to DEFAULT_PRICE_TABLE)
        policy: Supplies the default unit price for unknown type keys

    Returns:
        BillOfQuantities with all four cost groups present

    Quantity of a line item is the sum of element quantities, counting an
    element without quantity as one piece. The first element of a group
    supplies description and material.
    """
    table = DEFAULT_PRICE_TABLE if price_table is None else price_table

    grouped: dict[CostGroup, dict[str, list[Element]]] = {group: {} for group in CostGroup}
    for element in elements:
        group = CATEGORY_COST_GROUPS.get(element.category)
        if group is None:
            continue
        grouped[group].setdefault(element.type_key, []).append(element)

    categories: dict[CostGroup, dict[str, BoQLineItem]] = {group: {} for group in CostGroup}
    unknown: list[str] = []

    for group, by_type in grouped.items():
        for type_key, members in by_type.items():
            quantity = sum(
                element.quantity if element.quantity is not None else 1
                for element in members
            )

            try:
                unit_price = lookup_unit_price(type_key, table)
                price_source = "table"
            except UnknownPriceLookup as exc:
                unit_price = policy.default_unit_price
                price_source = "default"
                unknown.append(exc.type_key)
                unknown_price_lookups_total.labels(category=group.value).inc()
                logger.warning(
                    "No unit price for type key, using default",
                    type_key=exc.type_key,
                    category=group.value,
                    default_unit_price=str(unit_price),
                )

            first = members[0]
            categories[group][type_key] = BoQLineItem(
                category=group,
                type_key=type_key,
                description=description_for(type_key, first.element_type),
                unit=unit_for(type_key),
                quantity=quantity,
                unit_price=unit_price,
                total_price=unit_price * quantity,
                element_count=len(members),
                specification=specification_for(first.material),
                price_source=price_source,
            )
            boq_line_items_total.labels(category=group.value).inc()

    boq = BillOfQuantities(categories=categories, unknown_price_lookups=unknown)
    logger.info(
        "Bill of quantities built",
        line_items=len(boq.line_items()),
        unknown_price_lookups=len(unknown),
    )
    return boq


def estimate_base_price(
    boq: BillOfQuantities,
    policy: EvaluationPolicy = default_policy,
) -> Decimal:
    """
    Reference price of the project: BoQ net total plus overhead and profit

    Example:
        net total 10000, overhead 0.175 → 11750.000
    """
    return boq.net_total * (Decimal("1") + policy.overhead_fraction)


def load_price_table(path: str | Path) -> dict[str, Decimal]:
    """
    Read a unit price table from a JSON object of type key → price

    Raises:
        ValueError: If the file is not a JSON object, or a price is not a
            finite positive number
    """
    with open(path, encoding="utf-8") as handle:
        raw = json.load(handle)

    if not isinstance(raw, dict):
        raise ValueError(f"Price table {path} must be a JSON object")

    table: dict[str, Decimal] = {}
    for type_key, price in raw.items():
        try:
            value = to_decimal(price)
        except InvalidOperation:
            raise ValueError(f"Unit price for {type_key} is not a number, got {price!r}") from None
        if not value.is_finite():
            raise ValueError(f"Unit price for {type_key} must be finite, got {price!r}")
        if value <= 0:
            raise ValueError(f"Unit price for {type_key} must be positive, got {price}")
        table[str(type_key)] = value
    return table
