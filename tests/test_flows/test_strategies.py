"""Tests for the flow clustering strategies."""

import pytest

from flowsight.engine.flows.strategies import (
    MISC_KEY,
    ContentSimilarityStrategy,
    NamingPatternStrategy,
    PageStructureStrategy,
    PrototypeLinkStrategy,
    SpatialProximityStrategy,
    default_strategies,
)
from tests.conftest import screen


@pytest.fixture
def naming() -> NamingPatternStrategy:
    return NamingPatternStrategy()


@pytest.mark.parametrize("name,key", [
    ("Customer_Onboarding_1", "customer_onboarding"),
    ("admin-reports-3", "admin_reports"),
    ("Checkout-Step-2", "checkout"),
    ("settings_4", "settings"),
    ("Profile_Edit", "profile"),
    ("Login Screen", "authentication"),
    ("Alpha", MISC_KEY),
])
def test_group_key(naming, name, key):
    assert naming.group_key(name) == key


@pytest.mark.parametrize("name,number", [
    ("Customer_Onboarding_3", 3),
    ("checkout-step2-final", 2),
    ("2-of-5 review", 2),
    ("07-intro", 7),
    ("Welcome", 0),
])
def test_sequence_number(naming, name, number):
    assert naming.sequence_number(name) == number


def test_naming_groups_and_orders(naming):
    screens = [
        screen("Customer_Onboarding_3"),
        screen("Customer_Onboarding_1"),
        screen("Alpha"),
        screen("Customer_Onboarding_2"),
        screen("Settings_1"),
    ]
    groups = naming.detect(screens)
    assert len(groups) == 1
    group = groups[0]
    assert group.id == "naming_customer_onboarding"
    assert [s.name for s in group.screens] == [
        "Customer_Onboarding_1", "Customer_Onboarding_2", "Customer_Onboarding_3",
    ]
    assert group.detection_method == "naming_pattern"
    # base + sequence + role keyword + flow keyword
    assert group.confidence == pytest.approx(1.0)
    assert "Customer_Onboarding_1: _1" in group.evidence


def test_naming_equal_numbers_keep_document_order(naming):
    screens = [screen("Checkout_B", id="b"), screen("Checkout_A", id="a")]
    groups = naming.detect(screens)
    assert [s.id for s in groups[0].screens] == ["b", "a"]


def test_naming_never_groups_misc(naming):
    assert naming.detect([screen("Alpha"), screen("Bravo")]) == []


def test_page_structure():
    screens = [
        screen("A", page="Checkout Flow"),
        screen("B", page="Checkout Flow"),
        screen("C", page="Checkout Flow"),
        screen("D", page="Misc"),
        screen("E"),
    ]
    groups = PageStructureStrategy().detect(screens)
    assert len(groups) == 1
    group = groups[0]
    assert group.id == "page_checkout_flow"
    assert group.flow_type == "checkout"
    assert group.confidence == pytest.approx(0.9)
    assert group.evidence == ["page: Checkout Flow"]


def test_page_without_flow_keyword_leaves_type_open():
    groups = PageStructureStrategy().detect([screen("A", page="Page 1"), screen("B", page="Page 1")])
    assert groups[0].flow_type is None
    assert groups[0].confidence == pytest.approx(0.4)


def test_prototype_links_contribute_nothing():
    assert PrototypeLinkStrategy().detect([screen("A"), screen("B")]) == []


def test_spatial_proximity():
    screens = [
        screen("One", x=0, y=0),
        screen("Two", x=150, y=0),
        screen("Far", x=5000, y=5000),
        screen("Three", x=100, y=150),
    ]
    groups = SpatialProximityStrategy().detect(screens)
    assert len(groups) == 1
    group = groups[0]
    assert group.id == "spatial_one"
    assert [s.name for s in group.screens] == ["One", "Two", "Three"]
    assert group.navigation_pattern is None


def test_spatial_cluster_reaches_visited_screens():
    screens = [screen("Alpha", x=0), screen("Bravo", x=150), screen("Charlie", x=300)]
    groups = SpatialProximityStrategy().detect(screens)
    assert [g.id for g in groups] == ["spatial_alpha", "spatial_charlie"]
    assert [[s.name for s in g.screens] for g in groups] == [["Alpha", "Bravo"], ["Bravo", "Charlie"]]


def test_spatial_alignment_bonus():
    aligned = SpatialProximityStrategy().detect([screen("A", x=0, y=0), screen("B", x=150, y=0)])
    diagonal = SpatialProximityStrategy().detect([screen("A", x=0, y=0), screen("B", x=120, y=120)])
    assert aligned[0].confidence == pytest.approx(0.6)
    assert diagonal[0].confidence == pytest.approx(0.3)


def test_spatial_single_screen():
    assert SpatialProximityStrategy().detect([screen("A")]) == []


def test_content_similarity():
    screens = [
        screen("Login A", semantic_types=("button", "input")),
        screen("Login B", semantic_types=("input", "button", "button")),
        screen("Gallery", semantic_types=("card",)),
        screen("Blank"),
    ]
    groups = ContentSimilarityStrategy().detect(screens)
    assert len(groups) == 1
    group = groups[0]
    assert [s.name for s in group.screens] == ["Login A", "Login B"]
    assert group.confidence == pytest.approx(1.0)
    assert group.flow_type == "authentication"


def test_content_cluster_reaches_visited_screens():
    base = ("button", "input", "card")
    screens = [
        screen("Alpha", semantic_types=base),
        screen("Bravo", semantic_types=(*base, "label")),
        screen("Charlie", semantic_types=(*base, "label", "heading")),
    ]
    groups = ContentSimilarityStrategy().detect(screens)
    # Alpha and Charlie sit exactly on the 0.6 threshold
    assert [[s.name for s in g.screens] for g in groups] == [["Alpha", "Bravo"], ["Charlie", "Bravo"]]
    assert groups[1].confidence == pytest.approx(0.8)


def test_content_similarity_ignores_empty_screens():
    assert ContentSimilarityStrategy().detect([screen("A"), screen("B")]) == []


def test_default_strategy_order():
    names = [s.name for s in default_strategies()]
    assert names == ["NamingPattern", "PageStructure", "PrototypeLinks", "SpatialProximity", "ContentSimilarity"]
