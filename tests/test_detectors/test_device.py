"""Tests for device detection and responsive coverage."""

import pytest

from flowsight.engine.detectors.device import (
    detect_device,
    detect_device_type,
    orientation_for,
    responsive_coverage,
)
from flowsight.engine.structures import DeviceType


@pytest.mark.parametrize("width,height,expected", [
    (375, 812, DeviceType.MOBILE),
    (600, 600, DeviceType.TABLET),
    (768, 1024, DeviceType.TABLET),
    (1440, 900, DeviceType.DESKTOP),
    (1920, 1080, DeviceType.DESKTOP),
    (0, 0, DeviceType.MOBILE),
])
def test_detect_device_type(width, height, expected):
    assert detect_device_type(width, height) is expected


@pytest.mark.parametrize("aspect,expected", [
    (1.0, "square"),
    (1.05, "square"),
    (0.46, "portrait"),
    (1.6, "landscape"),
])
def test_orientation(aspect, expected):
    assert orientation_for(aspect) == expected


def test_standard_phone():
    det = detect_device(375, 667)
    assert det.device_type is DeviceType.MOBILE
    assert det.orientation == "portrait"
    assert det.confidence == pytest.approx(0.9)
    assert det.pixel_density == "@2x"
    assert det.category == "Standard Phone"
    assert "Use flexible layouts with proper touch targets" in det.recommendations


def test_missing_dimensions_use_default_artboard():
    det = detect_device(0, -5)
    assert (det.width, det.height) == (375, 667)


def test_confidence_floor():
    det = detect_device(8000, 1000)
    assert det.device_type is DeviceType.DESKTOP
    assert det.confidence == pytest.approx(0.3)
    assert "Very wide aspect ratio - consider side navigation" in det.recommendations


def test_responsive_coverage_partial():
    cov = responsive_coverage([detect_device(375, 812), detect_device(1440, 900)])
    assert cov.is_responsive
    assert cov.missing_device_types == ["tablet"]
    assert cov.coverage_score == 67
    assert cov.recommendations == ["Consider adding tablet layouts"]


def test_responsive_coverage_single_device():
    cov = responsive_coverage([detect_device(375, 812), detect_device(414, 896)])
    assert not cov.is_responsive
    assert cov.missing_device_types == ["tablet", "desktop"]
    assert cov.coverage_score == 33
    assert "Consider both portrait and landscape orientations" in cov.recommendations
