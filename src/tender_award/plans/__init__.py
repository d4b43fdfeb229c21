"""
Plans Module

Plan sheets, the building elements found on them, and the catalog builder
that prefers an external analyzer and falls back to a deterministic generator.
"""

from tender_award.plans.catalog import (
    PlanAnalyzer,
    build_catalog,
    build_catalogs,
    collect_elements,
)
from tender_award.plans.fallback import generate_fallback_catalog, generate_fallback_elements
from tender_award.plans.ingest import load_plans, placeholder_plans
from tender_award.plans.models import (
    AnalysisMethod,
    Element,
    ElementCategory,
    Plan,
    PlanCatalog,
)

__all__ = [
    # Models
    "Plan",
    "Element",
    "ElementCategory",
    "PlanCatalog",
    "AnalysisMethod",
    # Catalog
    "PlanAnalyzer",
    "build_catalog",
    "build_catalogs",
    "collect_elements",
    "generate_fallback_elements",
    "generate_fallback_catalog",
    # Ingest
    "load_plans",
    "placeholder_plans",
]
