"""
TenderPipeline - main façade of tender-award

Runs the whole procurement evaluation, from plan sheets to the award
recommendation, and hides the stage wiring behind one call.

Example:
    >>> from tender_award import TenderPipeline
    >>> from tender_award.plans import placeholder_plans
    >>> pipeline = TenderPipeline()
    >>> report = pipeline.run(placeholder_plans())
    >>> winner = report.award.winner  # best ranked compliant bid
    >>> rejected = report.rejections  # formal letters for the others

Every stage is also available on its own (build_catalogs, compute_quantities,
build_boq, ...) for callers that want intermediate results.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from tender_award.bidding.award import recommend
from tender_award.bidding.collection import collect_bids
from tender_award.bidding.compliance import partition
from tender_award.bidding.contractors import reference_contractors
from tender_award.bidding.evaluation import evaluate
from tender_award.bidding.models import (
    AwardDecision,
    Bid,
    ComplianceResult,
    Contractor,
    EvaluationEntry,
    PriceMirror,
    RejectionRecord,
)
from tender_award.bidding.price_mirror import build_price_mirror
from tender_award.kernel.errors import InvalidReferencePrice
from tender_award.kernel.logging import LogOperation, generate_run_id, get_logger, set_run_id
from tender_award.kernel.metrics import pipeline_runs_total, track_stage_duration
from tender_award.kernel.policy import EvaluationPolicy
from tender_award.kernel.randomness import RandomSource, default_random_source
from tender_award.kernel.time import RealTimeProvider, TimeProvider
from tender_award.plans.catalog import PlanAnalyzer, build_catalogs, collect_elements
from tender_award.plans.models import AnalysisMethod, Element, Plan, PlanCatalog
from tender_award.quantities.boq import DEFAULT_PRICE_TABLE, build_boq, estimate_base_price
from tender_award.quantities.din277 import compute_din277
from tender_award.quantities.models import BillOfQuantities, DIN277Quantities

logger = get_logger(__name__)


class CatalogSummary(BaseModel):
    """Per-plan outcome of the element catalog stage"""

    plan_id: str
    floor: int
    element_count: int
    analysis_method: AnalysisMethod
    confidence: float


class ProcurementReport(BaseModel):
    """Everything one pipeline run produced, JSON serializable"""

    run_id: str
    policy_version: str
    project_name: str
    generated_at: datetime
    catalogs: list[CatalogSummary] = Field(default_factory=list)
    quantities: DIN277Quantities
    boq: BillOfQuantities
    base_price: Decimal
    bids: list[Bid] = Field(default_factory=list)
    rejections: list[RejectionRecord] = Field(default_factory=list)
    evaluation: list[EvaluationEntry] = Field(default_factory=list)
    price_mirror: PriceMirror
    award: AwardDecision


class TenderPipeline:
    """
    Procurement evaluation pipeline

    Stages, in order:
    - element catalogs per plan (analyzer or fallback, concurrent)
    - DIN 277 quantities and the bill of quantities
    - reference price
    - bid collection and formal compliance check
    - evaluation matrix, price mirror and award recommendation
    """

    def __init__(
        self,
        policy: EvaluationPolicy | None = None,
        analyzer: PlanAnalyzer | None = None,
        time_provider: TimeProvider | None = None,
        random_source: RandomSource | None = None,
        price_table: Mapping[str, Decimal] | None = None,
    ) -> None:
        """
        Initialize the pipeline

        Args:
            policy: Evaluation policy (uses defaults if None)
            analyzer: External plan analyzer (fallback generator only if None)
            time_provider: Time provider (uses real time if None)
            random_source: Random source for bid simulation (default seed if None)
            price_table: Unit prices by type key (built-in table if None)
        """
        self.policy = policy or EvaluationPolicy()
        self.analyzer = analyzer
        self.time_provider = time_provider or RealTimeProvider()
        self.random_source = random_source or default_random_source
        self.price_table = dict(price_table) if price_table is not None else dict(DEFAULT_PRICE_TABLE)

    # ==================================================================
    # Stages
    # ==================================================================

    @track_stage_duration("catalogs")
    def build_catalogs(self, plans: Sequence[Plan]) -> list[PlanCatalog]:
        """Element catalogs of all plans, in plan order"""
        with LogOperation(logger, "build_catalogs", plans=len(plans)):
            return build_catalogs(list(plans), self.analyzer, self.policy)

    @track_stage_duration("din277")
    def compute_quantities(self, elements: Sequence[Element]) -> DIN277Quantities:
        """DIN 277 quantities of the complete element set"""
        with LogOperation(logger, "compute_din277", elements=len(elements)):
            return compute_din277(elements, self.policy)

    @track_stage_duration("boq")
    def build_boq(self, elements: Sequence[Element]) -> BillOfQuantities:
        """Priced bill of quantities"""
        with LogOperation(logger, "build_boq", elements=len(elements)):
            return build_boq(elements, self.price_table, self.policy)

    def estimate_base_price(self, boq: BillOfQuantities) -> Decimal:
        """Reference price: BoQ total plus overhead"""
        return estimate_base_price(boq, self.policy)

    @track_stage_duration("bids")
    def collect_bids(
        self, contractors: Sequence[Contractor], base_price: Decimal
    ) -> list[Bid]:
        """One simulated bid per contractor"""
        with LogOperation(
            logger, "collect_bids", contractors=len(contractors), base_price=str(base_price)
        ):
            return collect_bids(
                contractors,
                base_price,
                self.random_source,
                self.time_provider,
                self.policy,
            )

    @track_stage_duration("compliance")
    def check_compliance(self, bids: Sequence[Bid]) -> ComplianceResult:
        """Formal check with rejection letters"""
        with LogOperation(logger, "check_compliance", bids=len(bids)):
            return partition(bids, self.time_provider, self.policy.project_name)

    @track_stage_duration("evaluate")
    def evaluate(self, compliant_bids: Sequence[Bid]) -> list[EvaluationEntry]:
        """Ranked evaluation matrix"""
        with LogOperation(logger, "evaluate", bids=len(compliant_bids)):
            return evaluate(compliant_bids, self.policy)

    @track_stage_duration("award")
    def recommend(self, entries: Sequence[EvaluationEntry]) -> AwardDecision:
        """Award recommendation; raises EmptyBidSetError without entries"""
        with LogOperation(logger, "recommend", entries=len(entries)):
            return recommend(entries, self.policy.alternates_count)

    # ==================================================================
    # Full run
    # ==================================================================

    def run(
        self,
        plans: Sequence[Plan],
        contractors: Sequence[Contractor] | None = None,
    ) -> ProcurementReport:
        """
        Run every stage and return the complete report

        Args:
            plans: Plan sheets of the project
            contractors: Invited contractors (reference roster if None)

        Returns:
            ProcurementReport

        Raises:
            MalformedElementError: If the analyzer returned an invalid element
            InvalidReferencePrice: If the BoQ has no priced positions
            EmptyBidSetError: If no bid passed the formal check
        """
        run_id = generate_run_id()
        set_run_id(run_id)
        invited = list(contractors) if contractors is not None else reference_contractors()

        try:
            with LogOperation(
                logger, "pipeline_run", plans=len(plans), contractors=len(invited)
            ):
                catalogs = self.build_catalogs(plans)
                elements = collect_elements(catalogs)

                quantities = self.compute_quantities(elements)
                boq = self.build_boq(elements)
                base_price = self.estimate_base_price(boq)
                if base_price <= 0:
                    logger.error(
                        "No positive reference price, cannot request bids",
                        line_items=len(boq.line_items()),
                        elements=len(elements),
                    )
                    raise InvalidReferencePrice(base_price, run_id)

                bids = self.collect_bids(invited, base_price)
                compliance = self.check_compliance(bids)
                entries = self.evaluate(compliance.compliant)
                award = self.recommend(entries)
                price_mirror = build_price_mirror(compliance.compliant, base_price)
        except Exception:
            pipeline_runs_total.labels(status="failure").inc()
            raise

        pipeline_runs_total.labels(status="success").inc()

        return ProcurementReport(
            run_id=run_id,
            policy_version=self.policy.policy_version,
            project_name=self.policy.project_name,
            generated_at=self.time_provider.now(),
            catalogs=[
                CatalogSummary(
                    plan_id=catalog.plan.plan_id,
                    floor=catalog.plan.floor,
                    element_count=len(catalog.elements),
                    analysis_method=catalog.analysis_method,
                    confidence=catalog.confidence,
                )
                for catalog in catalogs
            ],
            quantities=quantities,
            boq=boq,
            base_price=base_price,
            bids=bids,
            rejections=compliance.rejected,
            evaluation=entries,
            price_mirror=price_mirror,
            award=award,
        )
