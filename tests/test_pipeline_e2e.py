"""
End-to-end tests for the TenderPipeline façade

Runs the full chain on the placeholder plan set: catalogs, DIN 277,
bill of quantities, bids, compliance, evaluation, price mirror and award.

Fun fact: HOAI phases 6 and 7 - preparing and assisting the award - are
worth 10 % and 4 % of an architect's fee. Here they take a few milliseconds!
"""

import json
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import pytest

from tender_award import ProcurementReport, TenderPipeline
from tender_award.bidding.models import Contractor
from tender_award.kernel.errors import EvaluationError, InvalidReferencePrice, MalformedElementError
from tender_award.kernel.metrics import pipeline_runs_total
from tender_award.kernel.policy import EvaluationPolicy
from tender_award.kernel.randomness import SeededRandomSource
from tender_award.kernel.time import FixedTimeProvider
from tender_award.plans.ingest import placeholder_plans
from tender_award.plans.models import AnalysisMethod


class MalformedAnalyzer:
    """Returns an element without category for every plan"""

    def analyze(self, plan_path: str) -> dict[str, Any]:
        return {"elements": [{"type": "wall", "subtype": "exterior_wall", "quantity": 10}]}


class RoomsOnlyAnalyzer:
    """Returns rooms but no billable element"""

    def analyze(self, plan_path: str) -> dict[str, Any]:
        return {
            "elements": [
                {"type": "room", "subtype": "office", "category": "spatial", "area": 120},
                {"type": "room", "subtype": "corridor", "category": "spatial", "area": 40},
            ]
        }


@pytest.fixture
def pipeline(test_time: FixedTimeProvider) -> TenderPipeline:
    return TenderPipeline(time_provider=test_time, random_source=SeededRandomSource("e2e"))


@pytest.fixture
def report(pipeline: TenderPipeline) -> ProcurementReport:
    return pipeline.run(placeholder_plans())


def test_catalogs_use_fallback_without_analyzer(report: ProcurementReport) -> None:
    """Test every placeholder plan gets a fallback catalog"""
    assert len(report.catalogs) == 8
    assert all(c.analysis_method == AnalysisMethod.FALLBACK for c in report.catalogs)
    assert all(c.element_count > 0 for c in report.catalogs)


def test_quantities_and_price(report: ProcurementReport) -> None:
    """Test BGF >= NGF and reference price = BoQ total plus overhead"""
    assert report.quantities.bgf >= report.quantities.ngf > 0
    assert report.boq.net_total > 0
    assert report.base_price == report.boq.net_total * (1 + EvaluationPolicy().overhead_fraction)


def test_bid_split(report: ProcurementReport) -> None:
    """Test ten bids, each either evaluated or rejected"""
    assert len(report.bids) == 10
    assert len(report.rejections) + len(report.evaluation) == 10
    assert 2 <= len(report.rejections) <= 3

    evaluated = {e.bid_id for e in report.evaluation}
    rejected = {r.bid_id for r in report.rejections}
    assert evaluated.isdisjoint(rejected)


def test_evaluation_and_award(report: ProcurementReport) -> None:
    """Test ranks 1..n, winner is the top entry, alternates follow it"""
    assert [e.rank for e in report.evaluation] == list(range(1, len(report.evaluation) + 1))
    assert report.award.winner == report.evaluation[0]
    assert report.award.alternates == report.evaluation[1:3]
    assert report.award.award_value == report.evaluation[0].price


def test_price_mirror(report: ProcurementReport) -> None:
    mirror = report.price_mirror

    assert mirror.bid_count == len(report.evaluation)
    assert mirror.minimum == min(e.price for e in report.evaluation)
    assert mirror.maximum == max(e.price for e in report.evaluation)
    assert mirror.reference_price == report.base_price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def test_rejection_letters(report: ProcurementReport, test_time: FixedTimeProvider) -> None:
    for rejection in report.rejections:
        assert rejection.contractor_name in rejection.letter_text
        assert "14.03.2025" in rejection.letter_text
        assert rejection.rejected_at == test_time.now()


def test_report_metadata(report: ProcurementReport, test_time: FixedTimeProvider) -> None:
    assert report.run_id
    assert report.policy_version == "1.0"
    assert report.generated_at == test_time.now()


def test_same_seed_same_outcome(test_time: FixedTimeProvider) -> None:
    """Test reproducibility across runs"""
    first = TenderPipeline(time_provider=test_time, random_source=SeededRandomSource("r")).run(
        placeholder_plans()
    )
    second = TenderPipeline(time_provider=test_time, random_source=SeededRandomSource("r")).run(
        placeholder_plans()
    )

    assert first.bids == second.bids
    assert first.evaluation == second.evaluation
    assert first.award == second.award
    assert first.run_id != second.run_id


def test_report_serializes_to_json(report: ProcurementReport) -> None:
    data = json.loads(json.dumps(report.model_dump(mode="json"), default=str))

    assert data["award"]["winner"]["rank"] == 1
    assert set(data["boq"]["categories"]) == {"300", "400", "500", "600"}


def test_single_contractor_wins_without_alternates(
    pipeline: TenderPipeline, contractors: list[Contractor]
) -> None:
    """Test one invited contractor: compliant, awarded, no alternates"""
    report = pipeline.run(placeholder_plans(), contractors=contractors[:1])

    assert report.rejections == []
    assert report.award.winner.contractor_id == contractors[0].contractor_id
    assert report.award.alternates == []


def test_malformed_element_aborts_run(test_time: FixedTimeProvider) -> None:
    """Test a malformed analyzer element fails the run instead of being dropped"""
    pipeline = TenderPipeline(analyzer=MalformedAnalyzer(), time_provider=test_time)
    before = pipeline_runs_total.labels(status="failure")._value.get()

    with pytest.raises(MalformedElementError):
        pipeline.run(placeholder_plans())

    assert pipeline_runs_total.labels(status="failure")._value.get() == before + 1


def test_rooms_only_plans_fail_with_reference_price_error(test_time: FixedTimeProvider) -> None:
    """Test a BoQ without priced positions fails the run before bids are requested"""
    pipeline = TenderPipeline(analyzer=RoomsOnlyAnalyzer(), time_provider=test_time)
    before = pipeline_runs_total.labels(status="failure")._value.get()

    with pytest.raises(InvalidReferencePrice) as exc_info:
        pipeline.run(placeholder_plans())

    assert isinstance(exc_info.value, EvaluationError)
    assert exc_info.value.base_price == 0
    assert exc_info.value.run_id
    assert exc_info.value.run_id in str(exc_info.value)
    assert pipeline_runs_total.labels(status="failure")._value.get() == before + 1
