"""
Tests for DIN 277 floor area accounting

Fun fact: BGF always exceeds NGF - walls, shafts and columns take up floor
space that nobody can rent out!
"""

from decimal import Decimal

import pytest

from tender_award.kernel.policy import EvaluationPolicy
from tender_award.plans.fallback import generate_fallback_elements
from tender_award.plans.ingest import placeholder_plans
from tender_award.quantities.din277 import (
    accumulate_floor_areas,
    classify_subtype,
    compute_din277,
)
from tests.helpers import make_element, make_room


@pytest.fixture
def scenario_a_rooms() -> list:
    """Floor 0: rooms 100, circulation 20, technical 10; floor 1: rooms 150, circulation 30"""
    return [
        make_room("office", 100, floor=0),
        make_room("corridor", 20, floor=0),
        make_room("storage", 10, floor=0),
        make_room("office", 150, floor=1),
        make_room("lobby", 30, floor=1),
    ]


@pytest.mark.parametrize(
    ("subtype", "bucket"),
    [
        ("office", "rooms"),
        ("meeting_room", "rooms"),
        ("corridor", "circulation"),
        ("main_lobby", "circulation"),
        ("technical_room", "technical"),
        ("storage", "technical"),
    ],
)
def test_classify_subtype(subtype: str, bucket: str) -> None:
    assert classify_subtype(subtype) == bucket


def test_scenario_a(scenario_a_rooms: list) -> None:
    """Test 310 m² x 1.15 = 356.5 → 357; NGF 300; BRI 1247.75 → 1248"""
    quantities = compute_din277(scenario_a_rooms)

    assert quantities.bgf == 357
    assert quantities.ngf == 300
    assert quantities.bri == 1248
    assert quantities.floor_count == 2
    assert quantities.calculation_method == "DIN_277"


def test_floor_buckets(scenario_a_rooms: list) -> None:
    """Test per-floor buckets"""
    floors = accumulate_floor_areas(scenario_a_rooms)

    assert list(floors) == [0, 1]
    assert floors[0].rooms == Decimal("100")
    assert floors[0].circulation == Decimal("20")
    assert floors[0].technical == Decimal("10")
    assert floors[0].gross == Decimal("130")
    assert floors[0].net == Decimal("120")
    assert floors[1].technical == Decimal("0")


def test_non_spatial_and_arealess_elements_ignored(scenario_a_rooms: list) -> None:
    """Test only spatial elements with an area contribute"""
    extra = [
        make_element("equipment", "electrical_room", "mep", quantity=1, area=35, floor=0),
        make_element("room", "office", "spatial", quantity=1, area=None, floor=2),
        make_element("wall", "exterior_wall", "structural", quantity=45, floor=1),
    ]

    quantities = compute_din277(scenario_a_rooms + extra)

    assert quantities.bgf == 357
    assert quantities.floor_count == 2


def test_factor_applied_once_to_the_sum() -> None:
    """Test BRI is computed from the unrounded BGF"""
    # 3 floors of 10.5 m²: 31.5 x 1.15 = 36.225 → 36
    # BRI 36.225 x 3.5 = 126.7875 → 127, whereas 36 x 3.5 would give 126
    rooms = [make_room("office", 10.5, floor=f) for f in range(3)]

    quantities = compute_din277(rooms)

    assert quantities.bgf == 36
    assert quantities.bri == 127  # 36.225 x 3.5 = 126.7875


def test_empty_element_set() -> None:
    """Test no rooms gives zero quantities"""
    quantities = compute_din277([])

    assert (quantities.bgf, quantities.ngf, quantities.bri) == (0, 0, 0)
    assert quantities.floor_areas == {}


def test_policy_factors() -> None:
    """Test custom gross factor and floor height"""
    policy = EvaluationPolicy(gross_building_factor=Decimal("1.2"), average_floor_height=Decimal("3"))

    quantities = compute_din277([make_room("office", 100, floor=0)], policy)

    assert quantities.bgf == 120
    assert quantities.ngf == 100
    assert quantities.bri == 360


def test_bgf_never_below_ngf_for_placeholder_building() -> None:
    """Test BGF >= NGF for the complete placeholder building"""
    elements = [e for plan in placeholder_plans() for e in generate_fallback_elements(plan)]

    quantities = compute_din277(elements)

    assert quantities.bgf >= quantities.ngf
    assert quantities.bri > quantities.bgf


@pytest.mark.parametrize(
    "rooms",
    [
        pytest.param(
            [make_room("technical_room", 80, floor=0), make_room("storage", 15, floor=1)],
            id="all-technical",
        ),
        pytest.param(
            [make_room("corridor", 45, floor=0), make_room("lobby", 30, floor=1)],
            id="all-circulation",
        ),
        pytest.param(
            [make_room("office", 0.4, floor=0), make_room("meeting", 0.6, floor=0)],
            id="tiny-rooms",
        ),
        pytest.param(
            [
                make_room("office", 100, floor=0),
                make_room("storage", 500, floor=0),
                make_room("lobby", 3, floor=2),
            ],
            id="mixed-floors",
        ),
        pytest.param(
            [make_element("wall", "exterior_wall", "structural", quantity=40)],
            id="no-rooms",
        ),
        pytest.param([], id="empty"),
    ],
)
def test_bgf_never_below_ngf(rooms: list) -> None:
    """Test BGF >= NGF and BRI >= BGF whatever the mix of area buckets"""
    quantities = compute_din277(rooms)

    assert quantities.bgf >= quantities.ngf
    assert quantities.bri >= quantities.bgf
    assert quantities.ngf >= 0
