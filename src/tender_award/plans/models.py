"""
Plan & Element Domain Models

A plan is one drawing sheet (one floor, one revision). Analysing it yields
building elements: walls, doors, sockets, rooms. Elements are immutable once
produced - every later quantity is derived from them.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ElementCategory(str, Enum):
    """
    Construction category of an element

    STRUCTURAL, ARCHITECTURAL and MEP elements are billed; SPATIAL elements
    (rooms) carry the floor areas used for DIN 277 quantities.
    """

    STRUCTURAL = "structural"
    ARCHITECTURAL = "architectural"
    MEP = "mep"  # Mechanical, electrical, plumbing
    SPATIAL = "spatial"


class AnalysisMethod(str, Enum):
    """How a plan's elements were obtained"""

    ANALYZER = "analyzer"  # External plan analysis service
    FALLBACK = "fallback"  # Deterministic generator


class Plan(BaseModel):
    """
    One plan sheet of the project

    Floor 0 is the basement, floor 1 the ground floor.
    """

    plan_id: str = Field(..., description="Unique plan identifier (file stem)")
    floor: int = Field(..., ge=0, description="Floor index (0 = basement)")
    revision: str = Field(default="A", description="Revision tag")
    plan_type: str = Field(default="Floor Plan", description="Human-readable plan type")
    file_path: str | None = Field(default=None, description="Path of the plan file")

    model_config = {"frozen": True}

    @field_validator("plan_id")
    @classmethod
    def validate_plan_id(cls, v: str) -> str:
        """Validate plan id is non-empty"""
        if not v or not v.strip():
            raise ValueError("Plan id cannot be empty")
        return v.strip()


class Element(BaseModel):
    """
    Building element identified on a plan

    Either quantity (pieces, metres, m² depending on type) or area (rooms,
    m²) is set; some elements carry both. Grouped for the bill of quantities
    by type_key.
    """

    element_id: str = Field(..., description="Element identifier, unique within its plan")
    plan_id: str = Field(..., description="Plan the element was found on")
    floor: int = Field(..., ge=0, description="Floor index of the owning plan")
    element_type: str = Field(..., description="Element type: wall, door, room, ...")
    subtype: str = Field(default="", description="Element subtype: exterior_wall, ...")
    category: ElementCategory = Field(..., description="Construction category")
    quantity: int | None = Field(default=None, ge=0, description="Count or length")
    area: float | None = Field(default=None, ge=0.0, description="Area in m²")
    material: str | None = Field(default=None, description="Main material")

    model_config = {"frozen": True}

    @field_validator("element_type")
    @classmethod
    def validate_element_type(cls, v: str) -> str:
        """Validate element type is non-empty"""
        if not v or not v.strip():
            raise ValueError("Element type cannot be empty")
        return v.strip()

    @property
    def type_key(self) -> str:
        """Price table and BoQ grouping key, e.g. 'wall_exterior_wall'"""
        return f"{self.element_type}_{self.subtype}"


class PlanCatalog(BaseModel):
    """
    Element catalog of one analysed plan

    Produced once per plan, never mutated afterwards.
    """

    plan: Plan
    elements: list[Element] = Field(default_factory=list)
    measurements: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    analysis_method: AnalysisMethod

    model_config = {"frozen": True}


def summarize_measurements(elements: list[Element]) -> dict[str, Any]:
    """
    Per-plan measurement summary: element counts by category and room areas

    Example:
        >>> summarize_measurements([])["total_elements"]
        0
    """
    spatial = [
        e for e in elements if e.category == ElementCategory.SPATIAL and e.area
    ]
    return {
        "total_elements": len(elements),
        "structural_elements": sum(
            1 for e in elements if e.category == ElementCategory.STRUCTURAL
        ),
        "architectural_elements": sum(
            1 for e in elements if e.category == ElementCategory.ARCHITECTURAL
        ),
        "mep_elements": sum(1 for e in elements if e.category == ElementCategory.MEP),
        "spatial_elements": sum(
            1 for e in elements if e.category == ElementCategory.SPATIAL
        ),
        "total_floor_area": sum(e.area or 0.0 for e in spatial),
        "room_count": len(spatial),
    }
