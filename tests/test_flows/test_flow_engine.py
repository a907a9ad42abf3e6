"""Tests for the flow detection engine."""

import pytest

from flowsight.engine.errors import CollectingErrorSink
from flowsight.engine.flows.engine import NO_FLOWS_RECOMMENDATIONS, FlowDetectionEngine, detect_flows
from flowsight.engine.flows.steps import flow_stage, flow_steps
from flowsight.engine.flows.strategies import FlowStrategy, NamingPatternStrategy
from flowsight.engine.screens import build_screens
from flowsight.engine.structures import (
    DEFAULT_ROLE_ID,
    DeviceType,
    FlowGroup,
    FlowType,
    NavigationPattern,
    RoleType,
    UserRole,
)
from tests.conftest import UNRELATED_FRAMES, node, screen


CUSTOMER = UserRole(id="role_customer", name="Customer", type=RoleType.CUSTOMER, confidence=0.8)


class FixedStrategy(FlowStrategy):
    """Returns pre-built groups."""

    name = "Fixed"

    def __init__(self, groups):
        super().__init__()
        self.groups = groups

    def detect(self, screens):
        return list(self.groups)


class BrokenStrategy(FlowStrategy):
    name = "Broken"

    def detect(self, screens):
        raise RuntimeError("strategy exploded")


def test_onboarding_flow(onboarding_doc):
    screens = build_screens([onboarding_doc])
    result = detect_flows(screens, [CUSTOMER])

    assert len(result.flows) == 1
    flow = result.flows[0]
    assert flow.flow_type is FlowType.ONBOARDING
    assert flow.sequence == 1
    assert [s.name for s in flow.screens] == ["Customer_Onboarding_1", "Customer_Onboarding_2"]
    assert flow.user_role is CUSTOMER
    assert flow.name == "Customer onboarding"
    assert flow.navigation_pattern is NavigationPattern.MODAL
    assert flow.device_targets == [DeviceType.MOBILE]
    assert flow.estimated_duration == 120
    assert flow.critical_path
    assert result.orphaned_screens == []
    assert result.role_distribution == {"customer": 1}
    assert result.flow_type_distribution == {"onboarding": 1}


def test_unrelated_screens_are_orphans(unrelated_frames):
    screens = build_screens(unrelated_frames)
    result = detect_flows(screens, [])

    assert result.flows == []
    assert len(result.orphaned_screens) == 10
    assert any("No naming patterns detected" in r for r in result.recommendations)
    assert "Consider organizing your screens into logical user flows" in result.recommendations
    assert result.detection_quality.total_screens == 10
    assert result.detection_quality.screens_in_flows == 0


def test_every_screen_in_one_flow_or_orphaned():
    screens = [
        screen("Checkout_1", page="Shop", x=0),
        screen("Checkout_2", page="Shop", x=150),
        screen("Settings_1", x=3000),
        screen("Settings_2", x=6000),
        screen("Lonely", x=9000, y=9000),
        screen("Gallery", page="Shop", x=300),
    ]
    result = detect_flows(screens, [])
    placed = [s.id for f in result.flows for s in f.screens] + [s.id for s in result.orphaned_screens]
    assert sorted(placed) == sorted(s.id for s in screens)
    assert [s.name for s in result.orphaned_screens] == ["Lonely"]


def test_detection_is_deterministic():
    screens = build_screens([node(f) for f in UNRELATED_FRAMES[:4]]) + [
        screen("Login_1"), screen("Login_2"), screen("Admin_Users_1"), screen("Admin_Users_2"),
    ]
    first = detect_flows(screens, [CUSTOMER])
    second = detect_flows(screens, [CUSTOMER])
    assert [(f.id, [s.id for s in f.screens]) for f in first.flows] == [
        (f.id, [s.id for s in f.screens]) for f in second.flows
    ]
    assert first.recommendations == second.recommendations


def test_low_confidence_groups_filtered_and_sorted():
    a, b, c, d, e = (screen(n) for n in "abcde")
    strategy = FixedStrategy([
        FlowGroup(id="weak", screens=[a, b], confidence=0.3, detection_method="fixed"),
        FlowGroup(id="mid", screens=[c, d], confidence=0.5, detection_method="fixed"),
        FlowGroup(id="strong", screens=[e], confidence=0.9, detection_method="fixed"),
    ])
    result = FlowDetectionEngine(strategies=[strategy]).detect([a, b, c, d, e], [])

    assert [(f.id, f.sequence) for f in result.flows] == [("strong", 1), ("mid", 2)]
    assert [s.id for s in result.orphaned_screens] == ["a", "b"]


def test_default_role_when_nothing_matches():
    a, b = screen("Login_1"), screen("Login_2")
    result = FlowDetectionEngine().detect([a, b], [])
    flow = result.flows[0]
    assert flow.user_role.id == DEFAULT_ROLE_ID
    assert flow.user_role.confidence == 0.5
    assert flow.flow_type is FlowType.AUTHENTICATION
    assert result.detection_quality.role_detection_accuracy == 0.0


def test_group_metadata_wins_over_inference():
    screens = [screen(f"s{i}") for i in range(7)]
    strategy = FixedStrategy([
        FlowGroup(id="g", screens=screens, confidence=0.8, detection_method="fixed",
                  flow_type="settings", navigation_pattern="drawer"),
    ])
    flow = FlowDetectionEngine(strategies=[strategy]).detect(screens, []).flows[0]
    assert flow.flow_type is FlowType.SETTINGS
    assert flow.navigation_pattern is NavigationPattern.DRAWER
    assert not flow.critical_path


@pytest.mark.parametrize("count,pattern", [
    (2, NavigationPattern.MODAL),
    (5, NavigationPattern.TAB),
    (6, NavigationPattern.STACK),
])
def test_navigation_by_flow_length(count, pattern):
    screens = [screen(f"s{i}") for i in range(count)]
    strategy = FixedStrategy([FlowGroup(id="g", screens=screens, confidence=0.8, detection_method="fixed")])
    flow = FlowDetectionEngine(strategies=[strategy]).detect(screens, []).flows[0]
    assert flow.navigation_pattern is pattern


def test_failing_strategy_is_skipped():
    screens = [screen("Checkout_1"), screen("Checkout_2")]
    engine = FlowDetectionEngine(strategies=[BrokenStrategy(), NamingPatternStrategy()])
    result = engine.detect(screens, [])
    assert len(result.flows) == 1
    assert result.flows[0].flow_type is FlowType.CHECKOUT


def test_engine_failure_goes_to_error_sink():
    class BrokenEngine(FlowDetectionEngine):
        def assign_roles(self, groups, roles):
            raise RuntimeError("roles exploded")

    sink = CollectingErrorSink()
    screens = [screen("Checkout_1"), screen("Checkout_2")]
    result = BrokenEngine(error_sink=sink).detect(screens, [CUSTOMER])

    assert result.flows == []
    assert [s.id for s in result.orphaned_screens] == [s.id for s in screens]
    assert result.recommendations == list(NO_FLOWS_RECOMMENDATIONS)
    assert len(sink.reports) == 1
    error, context = sink.reports[0]
    assert str(error) == "roles exploded"
    assert context["screens"] == 2


def test_roles_without_flows_recommended():
    admin = UserRole(id="role_admin", name="Admin", type=RoleType.ADMIN, confidence=0.9)
    result = detect_flows([screen("Customer_Cart_1"), screen("Customer_Cart_2")], [CUSTOMER, admin])
    assert result.flows[0].user_role is CUSTOMER
    assert "Consider creating flows for: Admin" in result.recommendations


def test_flow_steps(onboarding_doc):
    flow = detect_flows(build_screens([onboarding_doc]), [CUSTOMER]).flows[0]
    steps = flow_steps(flow)
    assert [(s.position, s.stage) for s in steps] == [(1, "entry"), (2, "exit")]
    assert steps[0].navigation_to == ["10:2"]
    assert steps[1].navigation_from == ["10:1"]
    assert steps[0].user_intent == "Learn and get started"


@pytest.mark.parametrize("index,total,stage", [
    (0, 1, "standalone"),
    (0, 3, "entry"),
    (1, 3, "middle"),
    (2, 3, "exit"),
])
def test_flow_stage(index, total, stage):
    assert flow_stage(index, total) == stage


def test_strategy_base_is_abstract():
    with pytest.raises(TypeError):
        FlowStrategy()

    class Incomplete(FlowStrategy):
        name = "Incomplete"

    with pytest.raises(TypeError):
        Incomplete()


def test_guest_screens_join_customer_flow():
    result = detect_flows([screen("Guest_Browse_1"), screen("Guest_Browse_2")], [CUSTOMER])
    assert result.flows[0].user_role is CUSTOMER


def test_role_detector_keeps_guest_separate():
    guest = UserRole(id="role_guest", name="Guest", type=RoleType.GUEST, confidence=0.7)
    result = detect_flows([screen("Guest_Browse_1"), screen("Guest_Browse_2")], [guest, CUSTOMER])
    assert result.flows[0].user_role is guest


def test_spatial_chain_becomes_one_flow():
    # Charlie is only near Bravo, which Alpha's cluster already holds
    screens = [screen("Alpha", x=0), screen("Bravo", x=150), screen("Charlie", x=300)]
    result = detect_flows(screens, [])
    assert len(result.flows) == 1
    assert [s.name for s in result.flows[0].screens] == ["Alpha", "Bravo", "Charlie"]
    assert result.orphaned_screens == []


def test_content_chain_becomes_one_flow():
    base = ("button", "input", "card")
    screens = [
        screen("Alpha", x=0, semantic_types=base),
        screen("Bravo", x=1000, semantic_types=(*base, "label")),
        screen("Charlie", x=2000, semantic_types=(*base, "label", "heading")),
    ]
    result = detect_flows(screens, [])
    assert len(result.flows) == 1
    assert {s.name for s in result.flows[0].screens} == {"Alpha", "Bravo", "Charlie"}
    assert result.orphaned_screens == []
