"""
Plan ingestion - discovering plan sheets and reading their metadata

Plan sheets follow the office naming scheme "FB_AUS A_GR01_C_231011.pdf":
GR<nn> is the floor (GR00 basement, GR01 ground floor), the single letter
between underscores is the revision.
"""

import re
from pathlib import Path

from tender_award.kernel.errors import PlanDirectoryNotFound
from tender_award.kernel.logging import get_logger
from tender_award.plans.models import Plan

logger = get_logger(__name__)

DEFAULT_PLAN_PATTERN = r"^FB_AUS A_GR"

_FLOOR_RE = re.compile(r"GR-?(\d+)")
_REVISION_RE = re.compile(r"_([A-C])_")

_ORDINALS = {2: "1st", 3: "2nd", 4: "3rd", 5: "4th", 6: "5th"}

# Demonstration set used when no plan directory is available
PLACEHOLDER_FILE_NAMES = (
    "FB_AUS A_GR-01_A_230828.pdf",
    "FB_AUS A_GR00_B_240529.pdf",
    "FB_AUS A_GR01_C_231011.pdf",
    "FB_AUS A_GR02_C_231011.pdf",
    "FB_AUS A_GR03_B_231011.pdf",
    "FB_AUS A_GR04_A_231011.pdf",
    "FB_AUS A_GR05_B_231011.pdf",
    "FB_AUS A_GR06_B_231011.pdf",
)


def extract_floor(file_name: str) -> int:
    """
    Floor index from a plan file name (0 when the name carries none)

    Example:
        >>> extract_floor("FB_AUS A_GR03_B_231011.pdf")
        3
    """
    match = _FLOOR_RE.search(file_name)
    return int(match.group(1)) if match else 0


def extract_revision(file_name: str) -> str:
    """Revision letter from a plan file name, "A" when absent"""
    match = _REVISION_RE.search(file_name)
    return match.group(1) if match else "A"


def plan_type_for_floor(floor: int) -> str:
    """Human-readable plan type for a floor index"""
    if floor == 0:
        return "Basement Plan"
    if floor == 1:
        return "Ground Floor Plan"
    if floor in _ORDINALS:
        return f"{_ORDINALS[floor]} Floor Plan"
    return "Floor Plan"


def plan_from_file_name(file_name: str, directory: Path | None = None) -> Plan:
    """Build a Plan from a file name, optionally anchored in a directory"""
    floor = extract_floor(file_name)
    file_path = str(directory / file_name) if directory is not None else file_name
    return Plan(
        plan_id=Path(file_name).stem,
        floor=floor,
        revision=extract_revision(file_name),
        plan_type=plan_type_for_floor(floor),
        file_path=file_path,
    )


def load_plans(directory: str | Path, pattern: str = DEFAULT_PLAN_PATTERN) -> list[Plan]:
    """
    Discover plan files in a directory

    Args:
        directory: Directory holding the plan sheets
        pattern: Regular expression file names must match (from the start)

    Returns:
        Plans sorted by file name

    Raises:
        PlanDirectoryNotFound: If the directory does not exist
    """
    root = Path(directory)
    if not root.is_dir():
        raise PlanDirectoryNotFound(str(root))

    name_re = re.compile(pattern)
    plans = [
        plan_from_file_name(path.name, root)
        for path in sorted(root.iterdir())
        if path.is_file() and name_re.match(path.name)
    ]

    logger.info("Plans discovered", directory=str(root), plan_count=len(plans))
    return plans


def placeholder_plans() -> list[Plan]:
    """The eight-sheet demonstration plan set (basement to 5th floor)"""
    return [plan_from_file_name(name) for name in PLACEHOLDER_FILE_NAMES]
