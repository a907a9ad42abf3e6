"""Tests for the semantic component classifier."""

import pytest

from flowsight.engine.detectors.component import ComponentClassifier, classify_node
from tests.conftest import node, solid


@pytest.fixture
def classifier() -> ComponentClassifier:
    return ComponentClassifier()


def test_submit_button(classifier, submit_button):
    result = classifier.classify(submit_button)
    assert result.is_button
    assert result.detected == ["button"]
    assert result.semantic_type == "button"
    # name + size + styling, plus the input size reason that fell short of a verdict
    assert result.confidence == pytest.approx(1.0)
    assert len(result.reasons["button"]) == 3
    assert result.reasons["input"] == ["Input characteristics: appropriate dimensions"]


def test_button_by_shape_only(classifier):
    result = classifier.classify(node({
        "name": "Rectangle 12", "type": "RECTANGLE", "width": 160, "height": 48,
        "cornerRadius": 24, "fills": [solid(0, 0.5, 0)],
    }))
    assert result.is_button
    assert result.semantic_type == "button"


def test_hidden_fill_is_not_styling(classifier):
    result = classifier.classify(node({
        "name": "Rectangle 12", "type": "RECTANGLE", "width": 160, "height": 48,
        "cornerRadius": 24, "fills": [{**solid(0, 0.5, 0), "visible": False}],
    }))
    assert not result.is_button


def test_heading_from_font_size(classifier):
    result = classifier.classify(node({
        "name": "Welcome back", "type": "TEXT", "fontSize": 28, "width": 300, "height": 34,
    }))
    assert result.detected == ["heading"]
    assert result.semantic_type == "heading"
    assert result.heading_level == 2
    assert not result.is_label


def test_heading_requires_text_node(classifier):
    result = classifier.classify(node({"name": "Header", "type": "RECTANGLE", "fontSize": 40}))
    assert not result.is_heading


def test_label_small_text(classifier):
    result = classifier.classify(node({"name": "Caption", "type": "TEXT", "fontSize": 12}))
    assert result.detected == ["label"]
    assert result.heading_level == 0
    # name + small text, plus the input rule seeing text content
    assert result.confidence == pytest.approx(0.95)


def test_text_without_font_size_uses_default(classifier):
    # 16px default: neither large nor small
    result = classifier.classify(node({"name": "Body copy", "type": "TEXT"}))
    assert result.detected == []
    assert result.semantic_type is None


def test_input_needs_stroke_for_shape_rule(classifier):
    bordered = classifier.classify(node({
        "name": "Rectangle", "type": "FRAME", "width": 280, "height": 44,
        "strokes": [solid(0.8, 0.8, 0.8)],
    }))
    plain = classifier.classify(node({"name": "Rectangle", "type": "FRAME", "width": 280, "height": 44}))
    assert bordered.is_input
    assert not plain.is_input


def test_card_by_structure(classifier):
    result = classifier.classify(node({
        "name": "Frame 3", "type": "FRAME", "width": 320, "height": 200,
        "fills": [solid(1, 1, 1)], "effects": [{"type": "DROP_SHADOW"}],
        "children": [{"name": "a", "type": "TEXT"}, {"name": "b", "type": "TEXT"}],
    }))
    assert result.is_card


def test_navigation_by_shape(classifier):
    result = classifier.classify(node({
        "name": "Frame 9", "type": "FRAME", "width": 375, "height": 56, "layoutMode": "HORIZONTAL",
        "children": [{"name": "a"}, {"name": "b"}, {"name": "c"}],
    }))
    assert result.is_navigation
    assert "Navigation layout pattern" in result.reasons["navigation"]


def test_two_types_share_confidence(classifier):
    result = classifier.classify(node({"name": "Card Button", "type": "FRAME"}))
    assert result.detected == ["button", "card"]
    assert result.confidence == pytest.approx(0.6)
    # Priority order picks the first detected type
    assert result.semantic_type == "button"


def test_three_types_below_threshold(classifier):
    result = classifier.classify(node({"name": "Nav Card Button", "type": "FRAME"}))
    assert len(result.detected) == 3
    assert result.confidence == pytest.approx(0.5)
    assert result.semantic_type is None


def test_nothing_detected(classifier):
    result = classifier.classify(node({"type": "RECTANGLE", "width": 4, "height": 4}))
    assert result.detected == []
    assert result.confidence == 0.0
    assert result.semantic_type is None


@pytest.mark.parametrize("name,font_size,level", [
    ("page title", 16, 1),
    ("h2 section", 16, 2),
    ("heading", 16, 3),
    ("big", 32, 1),
    ("medium", 24, 2),
    ("small", 20, 3),
    ("body", 16, 0),
])
def test_heading_level(name, font_size, level):
    assert ComponentClassifier.heading_level(name, font_size) == level


def test_classify_node_helper(submit_button):
    assert classify_node(submit_button).semantic_type == "button"


def test_classification_is_deterministic(classifier, login_form):
    nodes = [login_form, *login_form.children]
    first = [classifier.classify(n) for n in nodes]
    second = [ComponentClassifier().classify(n) for n in nodes]
    assert [(r.detected, r.reasons, r.confidence, r.semantic_type) for r in first] == [
        (r.detected, r.reasons, r.confidence, r.semantic_type) for r in second
    ]
