"""
Reference contractor roster

Ten Bavarian and Swabian construction companies used when a run is started
without an explicit contractor list.
"""

from decimal import Decimal

from tender_award.bidding.models import Contractor, FinancialStability


def _contractor(
    contractor_id: int,
    name: str,
    contractor_type: str,
    location: str,
    year_established: int,
    employees: int,
    revenue_millions: int,
    specialties: list[str],
    reputation: str,
    certifications: list[str],
    previous_projects: int,
    financial_stability: FinancialStability,
) -> Contractor:
    return Contractor(
        contractor_id=contractor_id,
        name=name,
        contractor_type=contractor_type,
        location=location,
        year_established=year_established,
        employees=employees,
        annual_revenue=Decimal(revenue_millions) * Decimal("1000000"),
        specialties=specialties,
        reputation=Decimal(reputation),
        certifications=certifications,
        previous_projects=previous_projects,
        financial_stability=financial_stability,
    )


REFERENCE_CONTRACTORS: tuple[Contractor, ...] = (
    _contractor(
        1, "Mueller Bau GmbH", "Generalunternehmer", "München", 1985, 250, 45,
        ["Bürobau", "Gewerbebau", "Stahlbetonbau"], "0.92",
        ["ISO 9001", "SCC", "OHSAS 18001"], 8, FinancialStability.EXCELLENT,
    ),
    _contractor(
        2, "Schmidt Construction AG", "Generalunternehmer", "Stuttgart", 1978, 180, 32,
        ["Hochbau", "Sanierung", "Schlüsselfertigbau"], "0.88",
        ["ISO 9001", "ISO 14001"], 6, FinancialStability.GOOD,
    ),
    _contractor(
        3, "Weber Bauunternehmung KG", "Bauunternehmen", "Augsburg", 1995, 120, 22,
        ["Rohbau", "Bürobau", "Industriebau"], "0.85",
        ["ISO 9001"], 5, FinancialStability.GOOD,
    ),
    _contractor(
        4, "Fischer Projektbau GmbH", "Generalunternehmer", "Nürnberg", 1990, 200, 38,
        ["Bürokomplexe", "Gewerbebau", "Projektentwicklung"], "0.90",
        ["ISO 9001", "SCC", "DGNB Partner"], 7, FinancialStability.EXCELLENT,
    ),
    _contractor(
        5, "Wagner Bau & Technik GmbH", "Bauunternehmen", "München", 2002, 95, 18,
        ["Technischer Ausbau", "Rohbau", "Sanierung"], "0.82",
        ["ISO 9001"], 4, FinancialStability.SATISFACTORY,
    ),
    _contractor(
        6, "Hoffmann Generalunternehmer", "Generalunternehmer", "Ingolstadt", 1972, 320, 55,
        ["Großprojekte", "Bürobau", "Industriebau"], "0.94",
        ["ISO 9001", "ISO 14001", "SCC", "OHSAS 18001"], 10, FinancialStability.EXCELLENT,
    ),
    _contractor(
        7, "Richter Bau GmbH", "Bauunternehmen", "Regensburg", 2005, 75, 15,
        ["Wohnungsbau", "Gewerbebau", "Rohbau"], "0.79",
        ["ISO 9001"], 3, FinancialStability.SATISFACTORY,
    ),
    _contractor(
        8, "Neumann Projektbau AG", "Generalunternehmer", "München", 1988, 280, 48,
        ["Bürokomplexe", "Mixed-Use", "Nachhaltiges Bauen"], "0.91",
        ["ISO 9001", "ISO 14001", "DGNB Partner", "SCC"], 9, FinancialStability.EXCELLENT,
    ),
    _contractor(
        9, "Klein & Partner Baugesellschaft", "Bauunternehmen", "Landshut", 2008, 60, 12,
        ["Gewerbebau", "Sanierung", "Rohbau"], "0.76",
        [], 2, FinancialStability.WEAK,
    ),
    _contractor(
        10, "Zimmermann Bau Excellence", "Generalunternehmer", "München", 1995, 220, 42,
        ["Premium Bürobau", "Technologiezentren", "Nachhaltigkeit"], "0.93",
        ["ISO 9001", "ISO 14001", "BREEAM", "LEED AP"], 8, FinancialStability.EXCELLENT,
    ),
)


def reference_contractors() -> list[Contractor]:
    """The reference roster as a fresh list"""
    return list(REFERENCE_CONTRACTORS)
