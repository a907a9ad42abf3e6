"""Flow Detection Engine: strategies → merge → filter → roles → sort → flows.

Every screen handed to ``detect`` ends up either in exactly one flow or in
the orphan list. A failing strategy is logged and contributes nothing; a
failure anywhere else goes to the error sink and is answered with the
canonical empty result.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.errors import ErrorSink, logging_error_sink
from flowsight.engine.flows.merge import merge_overlapping
from flowsight.engine.flows.strategies import FlowStrategy, NamingPatternStrategy, default_strategies
from flowsight.engine.keywords import CRITICAL_FLOW_TYPES, SECONDS_PER_SCREEN
from flowsight.engine.structures import (
    DetectionQuality,
    DeviceType,
    FlowDetectionResult,
    FlowGroup,
    FlowStructure,
    FlowType,
    NavigationPattern,
    ScreenStructure,
    UserRole,
    default_role,
)
from flowsight.utils.math_helpers import safe_mean

logger = logging.getLogger(__name__)

NO_FLOWS_RECOMMENDATIONS = (
    'No flows detected. Try using consistent naming conventions like "UserRole_FlowName_SequenceNumber"',
    "Organize related screens in folders or pages",
    "Use clear, descriptive names for your frames",
)

_FLOW_TYPES = {t.value for t in FlowType}
_NAV_PATTERNS = {p.value for p in NavigationPattern}


class FlowDetectionEngine:
    def __init__(
        self,
        config: DetectionConfig = DEFAULT_CONFIG,
        strategies: Sequence[FlowStrategy] | None = None,
        error_sink: ErrorSink | None = None,
    ) -> None:
        self.config = config
        self.strategies: tuple[FlowStrategy, ...] = (
            tuple(strategies) if strategies is not None else default_strategies(config)
        )
        self.error_sink: ErrorSink = error_sink or logging_error_sink

    # -- entry point ----------------------------------------------------------

    def detect(self, screens: Sequence[ScreenStructure], roles: Sequence[UserRole]) -> FlowDetectionResult:
        screens = list(screens)
        roles = list(roles)
        try:
            return self._detect(screens, roles)
        except Exception as e:
            self.error_sink(e, {
                "module": "FlowDetectionEngine",
                "operation": "flow detection",
                "screens": len(screens),
                "roles": len(roles),
            })
            return empty_result(screens)

    def _detect(self, screens: list[ScreenStructure], roles: list[UserRole]) -> FlowDetectionResult:
        logger.info("Detecting flows over %d screens with %d roles", len(screens), len(roles))

        candidates = self.run_strategies(screens)
        merged = merge_overlapping(candidates)
        kept = [g for g in merged if g.confidence >= self.config.min_flow_confidence]
        self.assign_roles(kept, roles)
        kept.sort(key=lambda g: g.confidence, reverse=True)

        flows = [self.materialize(group, rank) for rank, group in enumerate(kept, start=1)]
        in_flows = {s.id for f in flows for s in f.screens}
        orphans = [s for s in screens if s.id not in in_flows]

        result = FlowDetectionResult(
            flows=flows,
            orphaned_screens=orphans,
            role_distribution=dict(Counter(r.type.value for r in roles)),
            flow_type_distribution=dict(Counter(f.flow_type.value for f in flows)),
            detection_quality=self.quality(screens, flows),
            recommendations=self.recommendations(flows, orphans, candidates, roles),
        )
        logger.info(
            "Flow detection: %d candidates, %d merged, %d flows, %d orphans",
            len(candidates), len(merged), len(flows), len(orphans),
        )
        return result

    # -- pipeline steps -------------------------------------------------------

    def run_strategies(self, screens: Sequence[ScreenStructure]) -> list[FlowGroup]:
        candidates: list[FlowGroup] = []
        for strategy in self.strategies:
            try:
                groups = strategy.detect(screens)
            except Exception as e:
                logger.warning("Strategy %s failed: %s", strategy.name, e)
                continue
            logger.debug("Strategy %s proposed %d groups", strategy.name, len(groups))
            candidates.extend(groups)
        return candidates

    def assign_roles(self, groups: Sequence[FlowGroup], roles: Sequence[UserRole]) -> None:
        """First detected role whose keywords occur in the group's screen names."""
        for group in groups:
            if group.role is not None:
                continue
            names = " ".join(s.name.lower() for s in group.screens)
            for role in roles:
                words = self.config.flow_role_keywords.get(role.type.value, ())
                if any(w in names for w in words):
                    group.role = role
                    break

    def infer_flow_type(self, screens: Sequence[ScreenStructure]) -> FlowType:
        names = " ".join(s.name.lower() for s in screens)
        return FlowType(self.config.flow_type_for(names))

    def materialize(self, group: FlowGroup, sequence: int) -> FlowStructure:
        if group.flow_type in _FLOW_TYPES and group.flow_type != FlowType.UNKNOWN.value:
            flow_type = FlowType(group.flow_type)
        else:
            flow_type = self.infer_flow_type(group.screens)

        if group.navigation_pattern in _NAV_PATTERNS:
            navigation = NavigationPattern(group.navigation_pattern)
        elif len(group.screens) <= 2:
            navigation = NavigationPattern.MODAL
        elif len(group.screens) <= 5:
            navigation = NavigationPattern.TAB
        else:
            navigation = NavigationPattern.STACK

        devices: list[DeviceType] = []
        for screen in group.screens:
            if screen.device_type not in devices:
                devices.append(screen.device_type)

        role = group.role or default_role()
        return FlowStructure(
            id=group.id,
            name=f"{role.name} {flow_type.value}",
            user_role=role,
            screens=list(group.screens),
            flow_type=flow_type,
            navigation_pattern=navigation,
            device_targets=devices,
            sequence=sequence,
            confidence=group.confidence,
            detection_method=group.detection_method,
            estimated_duration=len(group.screens) * SECONDS_PER_SCREEN.get(flow_type.value, 60),
            critical_path=flow_type.value in CRITICAL_FLOW_TYPES,
        )

    def quality(self, screens: Sequence[ScreenStructure], flows: Sequence[FlowStructure]) -> DetectionQuality:
        in_flows = sum(len(f.screens) for f in flows)
        confident = sum(1 for f in flows if f.user_role.confidence > self.config.medium_role_confidence)
        return DetectionQuality(
            total_screens=len(screens),
            screens_in_flows=in_flows,
            average_flow_length=round(in_flows / len(flows), 1) if flows else 0.0,
            role_detection_accuracy=round(confident / max(len(flows), 1), 2),
            average_confidence=round(safe_mean([f.confidence for f in flows]), 2),
        )

    def recommendations(
        self,
        flows: Sequence[FlowStructure],
        orphans: Sequence[ScreenStructure],
        candidates: Sequence[FlowGroup],
        roles: Sequence[UserRole],
    ) -> list[str]:
        recs: list[str] = []
        naming_groups = sum(1 for g in candidates if g.detection_method == NamingPatternStrategy.method)
        if naming_groups == 0:
            recs.append(
                'No naming patterns detected. Use consistent naming like '
                '"UserType_FlowName_SequenceNumber" for better flow detection.'
            )
        if len(orphans) > len(flows):
            recs.append(
                f"{len(orphans)} screens are not grouped into flows. "
                "Consider organizing them into clear user journeys."
            )
        if flows:
            average = sum(len(f.screens) for f in flows) / len(flows)
            if average < self.config.min_average_flow_length:
                recs.append(
                    "Most flows have very few screens. "
                    "Consider grouping related screens into longer user journeys."
                )
            if average > self.config.max_average_flow_length:
                recs.append(
                    "Some flows are very long. "
                    "Consider breaking them into sub-flows for better user experience."
                )
        else:
            recs.append("Consider organizing your screens into logical user flows")

        covered = {f.user_role.type for f in flows}
        missing = [r.name for r in roles if r.type not in covered]
        if missing:
            recs.append(f"Consider creating flows for: {', '.join(missing)}")
        return recs


def empty_result(screens: Sequence[ScreenStructure]) -> FlowDetectionResult:
    """Canonical answer when detection cannot run: no flows, every screen orphaned."""
    return FlowDetectionResult(
        orphaned_screens=list(screens),
        detection_quality=DetectionQuality(total_screens=len(screens)),
        recommendations=list(NO_FLOWS_RECOMMENDATIONS),
    )


def detect_flows(
    screens: Sequence[ScreenStructure],
    roles: Sequence[UserRole],
    config: DetectionConfig = DEFAULT_CONFIG,
) -> FlowDetectionResult:
    return FlowDetectionEngine(config).detect(screens, roles)
