"""
Deterministic fallback element generator

When the plan analyzer is unavailable, every plan still needs an element
catalog or the DIN 277 totals would be undefined. The fallback emits a fixed
typical office floor (structure, fit-out, building services, rooms), scales
it by a floor multiplier and appends floor-specific extras.

No randomness anywhere: the same plan always yields the same catalog.
"""

from decimal import ROUND_CEILING, Decimal
from typing import NamedTuple

from tender_award.plans.models import (
    AnalysisMethod,
    Element,
    ElementCategory,
    Plan,
    PlanCatalog,
    summarize_measurements,
)

FALLBACK_CONFIDENCE = 0.92


class ElementTemplate(NamedTuple):
    """Blueprint for one generated element"""

    element_type: str
    category: ElementCategory
    subtype: str
    quantity: int | None = None
    area: int | None = None
    material: str | None = None


S = ElementCategory.STRUCTURAL
A = ElementCategory.ARCHITECTURAL
M = ElementCategory.MEP
R = ElementCategory.SPATIAL

# Elements present on every floor plan
BASE_ELEMENTS: tuple[ElementTemplate, ...] = (
    # Structure
    ElementTemplate("wall", S, "exterior_wall", 45, material="reinforced_concrete"),
    ElementTemplate("wall", S, "interior_wall", 38, material="drywall_steel_stud"),
    ElementTemplate("column", S, "concrete_column", 16, material="reinforced_concrete"),
    ElementTemplate("beam", S, "concrete_beam", 28, material="reinforced_concrete"),
    ElementTemplate("slab", S, "floor_slab", 1, material="reinforced_concrete"),
    # Fit-out
    ElementTemplate("door", A, "office_door", 25, material="wood_glass"),
    ElementTemplate("door", A, "fire_door", 8, material="steel"),
    ElementTemplate("window", A, "curtain_wall", 35, material="aluminum_glass"),
    ElementTemplate("window", A, "standard_window", 18, material="aluminum_glass"),
    # Building services
    ElementTemplate("electrical", M, "outlet", 120, material="copper_plastic"),
    ElementTemplate("electrical", M, "light_fixture", 85, material="led_aluminum"),
    ElementTemplate("electrical", M, "panel", 4, material="steel_copper"),
    ElementTemplate("plumbing", M, "water_line", 8, material="copper_pex"),
    ElementTemplate("plumbing", M, "drain_line", 12, material="pvc_cast_iron"),
    ElementTemplate("hvac", M, "ductwork", 25, material="galvanized_steel"),
    ElementTemplate("hvac", M, "diffuser", 42, material="aluminum"),
    # Rooms
    ElementTemplate("room", R, "office", 15, area=180),
    ElementTemplate("room", R, "meeting_room", 4, area=85),
    ElementTemplate("room", R, "corridor", 3, area=120),
    ElementTemplate("room", R, "restroom", 2, area=25),
    ElementTemplate("room", R, "storage", 2, area=15),
)

BASEMENT_EXTRAS: tuple[ElementTemplate, ...] = (
    ElementTemplate("equipment", M, "boiler", 2, material="steel"),
    ElementTemplate("equipment", M, "electrical_room", 1, area=35),
    ElementTemplate("structural", S, "foundation_wall", 12, material="concrete"),
)

GROUND_FLOOR_EXTRAS: tuple[ElementTemplate, ...] = (
    ElementTemplate("entrance", A, "main_entrance", 1, material="glass_steel"),
    ElementTemplate("room", R, "lobby", 1, area=150),
    # Lifts are billed with the building services (cost group 400)
    ElementTemplate("elevator", M, "passenger_elevator", 2, material="steel"),
)

TOP_FLOOR_EXTRAS: tuple[ElementTemplate, ...] = (
    ElementTemplate("equipment", M, "hvac_unit", 3, material="steel_aluminum"),
    ElementTemplate("access", S, "roof_access", 1, material="steel"),
)

TOP_FLOOR_THRESHOLD = 6


def floor_multiplier(floor: int) -> Decimal:
    """
    Scale factor for the base elements of a floor

    Basement plans carry fewer elements, the ground floor more (lobby,
    entrance); all other floors use the base list as is.
    """
    if floor == 0:
        return Decimal("0.8")
    if floor == 1:
        return Decimal("1.2")
    return Decimal("1.0")


def floor_extras(floor: int) -> tuple[ElementTemplate, ...]:
    """Floor-specific elements appended after the base list (not scaled)"""
    if floor == 0:
        return BASEMENT_EXTRAS
    if floor == 1:
        return GROUND_FLOOR_EXTRAS
    if floor >= TOP_FLOOR_THRESHOLD:
        return TOP_FLOOR_EXTRAS
    return ()


def _scale_up(value: int, multiplier: Decimal) -> int:
    """value x multiplier rounded up to the next integer (exact decimal math)"""
    return int((Decimal(value) * multiplier).to_integral_value(rounding=ROUND_CEILING))


def _make_element(
    template: ElementTemplate, plan: Plan, sequence: int, multiplier: Decimal | None
) -> Element:
    quantity = template.quantity
    area = template.area
    if multiplier is not None:
        if quantity is not None:
            quantity = _scale_up(quantity, multiplier)
        if area is not None:
            area = _scale_up(area, multiplier)

    return Element(
        element_id=f"{template.element_type}_{template.subtype}_{plan.floor}_{sequence}",
        plan_id=plan.plan_id,
        floor=plan.floor,
        element_type=template.element_type,
        subtype=template.subtype,
        category=template.category,
        quantity=quantity,
        area=float(area) if area is not None else None,
        material=template.material,
    )


def generate_fallback_elements(plan: Plan) -> list[Element]:
    """
    Generate the element list for a plan without any external analysis

    Args:
        plan: Plan to generate elements for (only floor matters for content)

    Returns:
        Base elements scaled by the floor multiplier, then the floor extras

    Example:
        >>> plan = Plan(plan_id="GR00", floor=0)
        >>> elements = generate_fallback_elements(plan)
        >>> elements[0].quantity  # 45 exterior walls x 0.8
        36
    """
    multiplier = floor_multiplier(plan.floor)
    elements: list[Element] = []

    for template in BASE_ELEMENTS:
        elements.append(_make_element(template, plan, len(elements) + 1, multiplier))

    for template in floor_extras(plan.floor):
        elements.append(_make_element(template, plan, len(elements) + 1, None))

    return elements


def generate_fallback_catalog(plan: Plan) -> PlanCatalog:
    """Fallback elements wrapped into a catalog with measurements"""
    elements = generate_fallback_elements(plan)
    return PlanCatalog(
        plan=plan,
        elements=elements,
        measurements=summarize_measurements(elements),
        confidence=FALLBACK_CONFIDENCE,
        analysis_method=AnalysisMethod.FALLBACK,
    )
