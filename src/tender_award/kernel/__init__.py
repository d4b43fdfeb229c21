"""
Kernel - shared infrastructure for the pipeline stages

Errors, policy, injected time and randomness, logging, metrics, bounded calls.
"""

from tender_award.kernel.errors import (
    AnalysisUnavailable,
    EmptyBidSetError,
    InvalidReferencePrice,
    MalformedElementError,
    PlanDirectoryNotFound,
    TenderAwardError,
    UnknownPriceLookup,
)
from tender_award.kernel.policy import EvaluationPolicy, default_policy
from tender_award.kernel.randomness import RandomSource, SeededRandomSource
from tender_award.kernel.time import FixedTimeProvider, RealTimeProvider, TimeProvider

__all__ = [
    # Policy
    "EvaluationPolicy",
    "default_policy",
    # Time & randomness
    "TimeProvider",
    "RealTimeProvider",
    "FixedTimeProvider",
    "RandomSource",
    "SeededRandomSource",
    # Errors
    "TenderAwardError",
    "AnalysisUnavailable",
    "MalformedElementError",
    "PlanDirectoryNotFound",
    "UnknownPriceLookup",
    "EmptyBidSetError",
    "InvalidReferencePrice",
]
