"""
Evaluation Policy - every tunable constant of the pipeline in one place

Area factors, overhead, scoring weights, tier thresholds and the analyzer
timeout. The defaults are the values the award rules are defined with;
changing them changes results, so a run reports the policy it used.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class EvaluationPolicy(BaseModel):
    """
    Pipeline parameters

    Money-like and area-like factors are Decimal so intermediate arithmetic
    stays exact; rounding happens only on terminal outputs.
    """

    policy_version: str = Field(
        default="1.0",
        description="Policy version, reported with every procurement report",
    )

    project_name: str = Field(
        default="FB_AUS A-Series Building Complex",
        description="Project name used in rejection letters and reports",
    )

    # DIN 277 quantities
    gross_building_factor: Decimal = Field(
        default=Decimal("1.15"),
        gt=0,
        description="Factor applied to summed floor areas for structure and walls (BGF)",
    )

    average_floor_height: Decimal = Field(
        default=Decimal("3.5"),
        gt=0,
        description="Average storey height in metres (BRI = BGF x height)",
    )

    # Pricing
    default_unit_price: Decimal = Field(
        default=Decimal("100"),
        gt=0,
        description="Unit price used when the price table has no entry",
    )

    overhead_fraction: Decimal = Field(
        default=Decimal("0.175"),
        ge=0,
        description="Overhead and profit added on top of the BoQ total",
    )

    # Bid simulation
    price_noise_amplitude: float = Field(
        default=0.15,
        ge=0.0,
        le=0.5,
        description="Compliant bid price noise is drawn from [-a, +a]",
    )

    # Scoring
    price_weight: Decimal = Field(default=Decimal("0.60"), ge=0, le=1)
    quality_weight: Decimal = Field(default=Decimal("0.25"), ge=0, le=1)
    timeline_weight: Decimal = Field(default=Decimal("0.15"), ge=0, le=1)

    price_score_floor: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Price score of the most expensive compliant bid",
    )

    highly_recommended_threshold: Decimal = Field(default=Decimal("85"))
    recommended_threshold: Decimal = Field(default=Decimal("75"))

    alternates_count: int = Field(
        default=2,
        ge=0,
        description="Number of runner-up bids listed in the award decision",
    )

    # Plan analysis
    analyzer_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for one external plan analyzer call",
    )

    analyzer_max_attempts: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Attempts per plan on transient analyzer errors before fallback",
    )

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Plan analysis worker pool size (None = CPU count)",
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "description": "Parameters of the procurement evaluation pipeline"
        },
    }

    @model_validator(mode="after")
    def validate_weights(self) -> "EvaluationPolicy":
        """Scoring weights must sum to exactly 1"""
        total = self.price_weight + self.quality_weight + self.timeline_weight
        if total != Decimal("1"):
            raise ValueError(f"Scoring weights must sum to 1, got {total}")
        if self.recommended_threshold > self.highly_recommended_threshold:
            raise ValueError(
                "recommended_threshold cannot exceed highly_recommended_threshold"
            )
        return self


default_policy = EvaluationPolicy()
