"""User-role detection from layer names and their ancestry."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.keywords import ROLE_DESIGN_PROFILES
from flowsight.engine.structures import RoleType, UserRole
from flowsight.models.nodes import FlatNode

logger = logging.getLogger(__name__)


@dataclass
class LayerAnalysis:
    """Role signals found on one layer."""

    layer_name: str
    parent_layers: tuple[str, ...]
    has_role_prefix: bool = False
    has_flow_indicator: bool = False
    has_sequence_number: bool = False
    has_device_indicator: bool = False
    has_parent_role: bool = False
    role_type: str | None = None
    source: str = "layer_name"
    confidence: float = 0.0
    signals: list[str] = field(default_factory=list)


class RoleDetector:
    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def analyze_layer(self, flat: FlatNode) -> LayerAnalysis | None:
        """Score one layer. Returns None when the summed score is too weak."""
        cfg = self.config
        name = flat.node.name.lower()
        analysis = LayerAnalysis(layer_name=flat.node.name or "unnamed", parent_layers=flat.ancestors)
        score = 0.0

        role_type = cfg.role_bucket(name)
        if role_type is not None:
            analysis.has_role_prefix = True
            analysis.role_type = role_type
            score += cfg.role_name_weight
        if any(k in name for k in cfg.flow_stage_keywords):
            analysis.has_flow_indicator = True
            score += cfg.role_flow_stage_weight
        if any(p.search(name) for p in cfg.role_sequence_patterns):
            analysis.has_sequence_number = True
            score += cfg.role_sequence_weight
        if any(k in name for k in cfg.device_keywords):
            analysis.has_device_indicator = True
            score += cfg.role_device_weight

        parent_type = cfg.role_bucket(" ".join(flat.ancestors).lower()) if flat.ancestors else None
        if parent_type is not None:
            analysis.has_parent_role = True
            score += cfg.role_parent_weight
            if analysis.role_type is None:
                analysis.role_type = parent_type
                analysis.source = "folder_structure"

        # Two decimals keep 0.4 + 0.2 at exactly 0.6
        analysis.confidence = round(score, 2)
        if analysis.confidence <= cfg.role_min_layer_confidence:
            return None
        return analysis

    def detect(self, nodes: Iterable[FlatNode]) -> list[UserRole]:
        """Best instance per role type, in order of first qualifying layer."""
        best: dict[str, UserRole] = {}
        analyzed = 0

        for flat in nodes:
            try:
                analysis = self.analyze_layer(flat)
            except Exception as e:
                logger.warning("Role analysis failed for %r: %s", flat.node.name, e)
                continue
            if analysis is None:
                continue
            analyzed += 1
            if analysis.role_type is None or analysis.confidence <= self.config.role_min_confidence:
                continue

            current = best.get(analysis.role_type)
            if current is None or current.confidence < analysis.confidence:
                best[analysis.role_type] = UserRole(
                    id=f"role_{analysis.role_type}",
                    name=analysis.role_type.capitalize(),
                    type=RoleType(analysis.role_type),
                    confidence=analysis.confidence,
                    detection_source=analysis.source,
                )

        roles = list(best.values())
        logger.info("Detected %d roles from %d candidate layers", len(roles), analyzed)
        return roles


def detect_roles(nodes: Iterable[FlatNode], config: DetectionConfig = DEFAULT_CONFIG) -> list[UserRole]:
    return RoleDetector(config).detect(nodes)


def design_profile(role: UserRole) -> dict[str, object]:
    """Static design preferences for a role; customer when the role has none."""
    return dict(ROLE_DESIGN_PROFILES.get(role.type.value, ROLE_DESIGN_PROFILES["customer"]))
