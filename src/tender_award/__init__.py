"""
tender-award - Procurement evaluation from plan sheets to award recommendation

Plans are turned into building elements, elements into DIN 277 quantities and
a priced bill of quantities, and contractor bids are checked, scored and
ranked into an award recommendation. Every run is reproducible from its seed.

Fun fact: The first German public works tender rules (the VOB) were written in
1926 because contractors kept complaining that awards depended on who you knew!
"""

from tender_award.pipeline import ProcurementReport, TenderPipeline

__version__ = "0.1.0"
__all__ = ["TenderPipeline", "ProcurementReport", "__version__"]
