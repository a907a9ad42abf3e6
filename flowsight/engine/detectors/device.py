"""Device detection from frame dimensions.

Breakpoints come from ``DetectionConfig``: the widest side decides first,
aspect ratio separates tablet from desktop, and a width-only fallback covers
everything the breakpoint rules leave unclassified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.structures import DeviceDetection, DeviceType, ResponsiveCoverage
from flowsight.utils.math_helpers import clamp

logger = logging.getLogger(__name__)

# (width, height, device) of common artboard sizes
_STANDARD_RESOLUTIONS = (
    (375, 667, DeviceType.MOBILE),
    (414, 896, DeviceType.MOBILE),
    (360, 640, DeviceType.MOBILE),
    (768, 1024, DeviceType.TABLET),
    (1024, 768, DeviceType.TABLET),
    (1920, 1080, DeviceType.DESKTOP),
    (1440, 900, DeviceType.DESKTOP),
)

_EXPECTED_TYPES = (DeviceType.MOBILE, DeviceType.TABLET, DeviceType.DESKTOP)


def screen_dimensions(width: float, height: float, config: DetectionConfig = DEFAULT_CONFIG) -> tuple[float, float]:
    """Missing or non-positive dimensions fall back to the default phone artboard."""
    w = width if width > 0 else config.default_screen_width
    h = height if height > 0 else config.default_screen_height
    return w, h


def detect_device_type(width: float, height: float, config: DetectionConfig = DEFAULT_CONFIG) -> DeviceType:
    w, h = screen_dimensions(width, height, config)
    aspect = w / h
    widest = max(w, h)

    if widest <= config.mobile_max:
        return DeviceType.MOBILE
    if widest <= config.tablet_max and config.tablet_aspect_min <= aspect <= config.tablet_aspect_max:
        return DeviceType.TABLET
    if widest >= config.desktop_min and aspect >= config.desktop_aspect_min:
        return DeviceType.DESKTOP

    if w <= config.mobile_max:
        return DeviceType.MOBILE
    if w <= config.tablet_max:
        return DeviceType.TABLET
    return DeviceType.DESKTOP


def orientation_for(aspect: float) -> str:
    if abs(aspect - 1.0) < 0.1:
        return "square"
    return "portrait" if aspect < 1.0 else "landscape"


def _resolution_confidence(width: float, height: float, device: DeviceType) -> float:
    best = 0.0
    for std_w, std_h, std_type in _STANDARD_RESOLUTIONS:
        if std_type != device:
            continue
        similarity = 1.0 - (abs(width - std_w) / std_w + abs(height - std_h) / std_h) / 2.0
        best = max(best, similarity)
    return clamp(best, 0.3, 0.9)


def _pixel_density(width: float, height: float, device: DeviceType) -> str:
    if device is DeviceType.MOBILE:
        if width >= 400 or height >= 800:
            return "@3x"
        if width >= 350 or height >= 600:
            return "@2x"
    elif device is DeviceType.TABLET:
        if width >= 1000 or height >= 1200:
            return "@2x"
    elif device is DeviceType.DESKTOP:
        if width >= 2000 or height >= 1200:
            return "@2x"
    return "@1x"


def _category(width: float, height: float, device: DeviceType) -> str:
    if device is DeviceType.MOBILE:
        if height > 800:
            return "Large Phone"
        return "Compact Phone" if height < 600 else "Standard Phone"
    if device is DeviceType.TABLET:
        if width > 1000:
            return "Large Tablet"
        return "Small Tablet" if width < 800 else "Standard Tablet"
    if device is DeviceType.DESKTOP:
        if width > 1800:
            return "Large Desktop"
        return "Small Desktop" if width < 1200 else "Standard Desktop"
    return "Unknown Device"


def _recommendations(det: DeviceDetection) -> list[str]:
    recs: list[str] = []
    if det.device_type is DeviceType.MOBILE:
        recs.append("Use flexible layouts with proper touch targets")
        recs.append("Consider thumb-friendly navigation patterns")
        if det.orientation == "landscape":
            recs.append("Optimize for horizontal scrolling")
    elif det.device_type is DeviceType.TABLET:
        recs.append("Utilize larger screen space with multi-column layouts")
        recs.append("Consider adaptive UI that works in both orientations")
    elif det.device_type is DeviceType.DESKTOP:
        recs.append("Take advantage of larger viewport for complex layouts")
        recs.append("Consider hover states and keyboard navigation")

    if det.aspect_ratio > 2:
        recs.append("Very wide aspect ratio - consider side navigation")
    elif det.aspect_ratio < 0.5:
        recs.append("Very tall aspect ratio - consider vertical navigation")

    if det.width < 350:
        recs.append("Small width - prioritize essential content")
    if det.height < 500:
        recs.append("Limited height - use collapsible sections")
    return recs


def detect_device(width: float, height: float, config: DetectionConfig = DEFAULT_CONFIG) -> DeviceDetection:
    """Full device report for one artboard size."""
    w, h = screen_dimensions(width, height, config)
    aspect = w / h
    device = detect_device_type(w, h, config)
    det = DeviceDetection(
        device_type=device,
        orientation=orientation_for(aspect),
        confidence=_resolution_confidence(w, h, device),
        width=w,
        height=h,
        aspect_ratio=round(aspect, 2),
        pixel_density=_pixel_density(w, h, device),
        category=_category(w, h, device),
    )
    det.recommendations = _recommendations(det)
    logger.debug("Device %.0fx%.0f -> %s (%.2f)", w, h, device.value, det.confidence)
    return det


def responsive_coverage(detections: Iterable[DeviceDetection]) -> ResponsiveCoverage:
    """How well a set of screens covers mobile, tablet and desktop."""
    detections = list(detections)
    types = {d.device_type for d in detections}
    orientations = {d.orientation for d in detections}
    missing = [t.value for t in _EXPECTED_TYPES if t not in types]
    present = sum(1 for t in _EXPECTED_TYPES if t in types)

    recs: list[str] = []
    if missing:
        recs.append(f"Consider adding {' and '.join(missing)} layouts")
    if len(orientations) <= 1:
        recs.append("Consider both portrait and landscape orientations")

    return ResponsiveCoverage(
        is_responsive=len(types) > 1 and len(missing) <= 1,
        coverage_score=round(present / len(_EXPECTED_TYPES) * 100),
        missing_device_types=missing,
        recommendations=recs,
    )
