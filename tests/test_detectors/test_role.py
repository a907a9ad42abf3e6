"""Tests for role detection."""

import pytest

from flowsight.engine.detectors.role import RoleDetector, design_profile, detect_roles
from flowsight.engine.structures import RoleType, UserRole
from flowsight.models.nodes import FlatNode, iter_nodes
from tests.conftest import ONBOARDING_DOC, node


def _flat(name: str, ancestors: tuple[str, ...] = ()) -> FlatNode:
    return FlatNode(node=node({"name": name, "type": "FRAME"}), ancestors=ancestors, path="0")


@pytest.fixture
def detector() -> RoleDetector:
    return RoleDetector()


def test_weak_layer_ignored(detector):
    # flow-stage keyword alone scores 0.2
    assert detector.analyze_layer(_flat("Onboarding")) is None


def test_name_signals(detector):
    analysis = detector.analyze_layer(_flat("Admin Dashboard 2"))
    assert analysis.role_type == "admin"
    assert analysis.has_role_prefix
    assert analysis.has_flow_indicator
    assert analysis.has_sequence_number
    assert analysis.confidence == pytest.approx(0.8)
    assert analysis.source == "layer_name"


def test_role_from_parent_folder(detector):
    analysis = detector.analyze_layer(_flat("Checkout Step 2", ("Guest Flows",)))
    assert analysis.role_type == "guest"
    assert analysis.source == "folder_structure"
    assert analysis.has_parent_role
    assert analysis.confidence == pytest.approx(0.5)


def test_exact_threshold_is_not_enough(detector):
    # 0.4 name + 0.2 flow stage sits exactly on the role threshold
    assert detector.analyze_layer(_flat("Admin Dashboard")).confidence == 0.6
    assert detector.detect([_flat("Admin Dashboard")]) == []


def test_best_instance_per_type(detector):
    roles = detector.detect([
        _flat("Customer Login 1"),
        _flat("Admin Dashboard 2"),
        _flat("Customer Login Mobile 1", ("Customer",)),
    ])
    assert [r.id for r in roles] == ["role_customer", "role_admin"]
    customer = roles[0]
    assert customer.name == "Customer"
    assert customer.type is RoleType.CUSTOMER
    assert customer.confidence == pytest.approx(1.0)


def test_detect_roles_over_document():
    roles = detect_roles(iter_nodes([node(ONBOARDING_DOC)]))
    assert len(roles) == 1
    assert roles[0].id == "role_customer"
    assert roles[0].confidence == pytest.approx(0.8)


def test_role_confidence_clamped():
    role = UserRole(id="role_admin", name="Admin", type=RoleType.ADMIN, confidence=1.7)
    assert role.confidence == 1.0


def test_design_profile_falls_back_to_customer():
    moderator = UserRole(id="role_moderator", name="Moderator", type=RoleType.MODERATOR, confidence=0.7)
    admin = UserRole(id="role_admin", name="Admin", type=RoleType.ADMIN, confidence=0.7)
    assert design_profile(moderator)["typography_style"] == "friendly"
    assert design_profile(admin)["information_density"] == "high"


def test_detection_is_deterministic(detector):
    layers = [
        _flat("Customer Login 1"),
        _flat("Admin Dashboard 2"),
        _flat("Checkout Step 2", ("Guest Flows",)),
        _flat("Customer Login Mobile 1", ("Customer",)),
    ]
    assert detector.detect(layers) == RoleDetector().detect(list(layers))
