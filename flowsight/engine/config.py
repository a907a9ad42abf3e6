"""Detection configuration: every keyword table and threshold the engine reads."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from flowsight.engine import keywords


def _frozen(table: dict) -> Mapping:
    return MappingProxyType({k: tuple(v) if isinstance(v, (list, tuple)) else v for k, v in table.items()})


@dataclass(frozen=True)
class DetectionConfig:
    """Immutable tuning for one analysis run. Build a new one to override."""

    # Keyword tables
    component_keywords: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _frozen(keywords.COMPONENT_NAME_KEYWORDS)
    )
    role_keywords: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _frozen(keywords.ROLE_KEYWORDS)
    )
    flow_role_keywords: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _frozen(keywords.FLOW_ROLE_KEYWORDS)
    )
    flow_type_keywords: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _frozen(keywords.FLOW_TYPE_KEYWORDS)
    )
    flow_stage_keywords: tuple[str, ...] = keywords.FLOW_STAGE_KEYWORDS
    device_keywords: tuple[str, ...] = keywords.DEVICE_KEYWORDS
    role_sequence_patterns: tuple[re.Pattern, ...] = keywords.ROLE_SEQUENCE_PATTERNS
    sequence_indicators: tuple[re.Pattern, ...] = keywords.SEQUENCE_INDICATORS
    sequence_number_patterns: tuple[re.Pattern, ...] = keywords.SEQUENCE_NUMBER_PATTERNS

    # Device breakpoints
    mobile_max: float = 480.0
    tablet_max: float = 768.0
    tablet_aspect_min: float = 0.6
    tablet_aspect_max: float = 1.4
    desktop_min: float = 769.0
    desktop_aspect_min: float = 1.2
    default_screen_width: float = 375.0
    default_screen_height: float = 667.0

    # Layout inference: population std-dev threshold on child positions
    layout_variance_threshold: float = 50.0

    # Classifier
    default_font_size: float = 16.0
    heading_min_font_size: float = 20.0
    label_max_font_size: float = 14.0
    semantic_type_min_confidence: float = 0.6

    # Role detector weights
    role_name_weight: float = 0.4
    role_flow_stage_weight: float = 0.2
    role_sequence_weight: float = 0.2
    role_device_weight: float = 0.1
    role_parent_weight: float = 0.1
    role_min_layer_confidence: float = 0.3
    role_min_confidence: float = 0.6

    # Flow strategies
    spatial_threshold: float = 200.0
    spatial_alignment_tolerance: float = 50.0
    content_similarity_threshold: float = 0.6
    page_size_range: tuple[int, int] = (3, 8)
    min_flow_confidence: float = 0.4

    # Quality
    medium_role_confidence: float = 0.6
    min_average_flow_length: float = 2.0
    max_average_flow_length: float = 8.0

    # Pattern / consistency analysis
    spacing_grid: float = 8.0
    ideal_color_count: int = 10
    type_scale_range: tuple[float, float] = (1.1, 1.3)
    list_min_repeats: int = 3
    consistency_weights: tuple[float, float, float] = (0.3, 0.4, 0.3)
    low_complexity_max: tuple[int, int] = (10, 2)
    medium_complexity_max: tuple[int, int, int] = (30, 4, 8)

    def role_bucket(self, text: str) -> str | None:
        """First role type whose keywords appear in ``text`` (lowercase)."""
        for role_type, words in self.role_keywords.items():
            if any(w in text for w in words):
                return role_type
        return None

    def flow_type_for(self, text: str) -> str:
        """First flow type whose keywords appear in ``text`` (lowercase)."""
        for flow_type, words in self.flow_type_keywords.items():
            if any(w in text for w in words):
                return flow_type
        return "unknown"


DEFAULT_CONFIG = DetectionConfig()
