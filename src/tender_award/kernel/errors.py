"""
Custom exceptions for tender-award

A small, explicit hierarchy so callers can tell recoverable conditions
(analysis unavailable, unknown unit price) apart from fatal ones
(malformed plan elements, an empty bid set).

Fun fact: VOB/A, the German procurement code for construction works, dates
back to 1926 - almost a century of rules for rejecting incomplete bids!
"""


class TenderAwardError(Exception):
    """Base exception for all tender-award errors"""

    pass


# Plan analysis errors


class PlanAnalysisError(TenderAwardError):
    """Base class for errors raised while building element catalogs"""

    pass


class AnalysisUnavailable(PlanAnalysisError):
    """
    Raised when the external plan analyzer is missing, errors, or times out

    Recoverable: the catalog builder catches it and runs the deterministic
    fallback generator for the affected plan.
    """

    def __init__(self, plan_id: str, cause: str = "", reason: str = "error") -> None:
        self.plan_id = plan_id
        self.cause = cause
        self.reason = reason  # missing, timeout, error, cancelled
        super().__init__(
            f"Plan analysis unavailable for {plan_id}"
            + (f": {cause}" if cause else "")
        )


class MalformedElementError(PlanAnalysisError):
    """
    Raised when an analyzed element lacks required fields (type, category)

    Fatal for the affected plan. Dropping the element would corrupt the
    DIN 277 totals without anyone noticing.
    """

    def __init__(self, plan_id: str, index: int, detail: str) -> None:
        self.plan_id = plan_id
        self.index = index
        self.detail = detail
        super().__init__(
            f"Plan {plan_id}: element #{index} is malformed - {detail}"
        )


class PlanDirectoryNotFound(PlanAnalysisError):
    """Raised when the plan directory does not exist"""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(f"Plan directory {directory} not found")


# Pricing errors


class UnknownPriceLookup(TenderAwardError):
    """
    Raised when the unit price table has no entry for a type key

    Recoverable: build_boq catches it and prices the position with the
    policy's default unit price.
    """

    def __init__(self, type_key: str) -> None:
        self.type_key = type_key
        super().__init__(f"No unit price for {type_key}")


# Evaluation errors


class EvaluationError(TenderAwardError):
    """Base class for bid evaluation errors"""

    pass


class EmptyBidSetError(EvaluationError):
    """
    Raised when there are no compliant bids to evaluate or award

    Never silently defaulted to an empty award.
    """

    def __init__(self, stage: str = "award") -> None:
        self.stage = stage
        super().__init__(
            f"No compliant bids available for {stage} - cannot recommend an award"
        )


class InvalidReferencePrice(EvaluationError):
    """
    Raised when the BoQ yields no positive reference price for a run

    Happens when no plan produced a billable element (only rooms), so there
    is nothing to price bids against.
    """

    def __init__(self, base_price: object, run_id: str) -> None:
        self.base_price = base_price
        self.run_id = run_id
        super().__init__(
            f"Run {run_id}: reference price must be positive, got {base_price}"
            " - the bill of quantities has no priced positions"
        )
