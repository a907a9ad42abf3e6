"""Flow clustering strategies.

Each strategy looks at the full screen list independently and proposes
candidate FlowGroups. Candidates may overlap, within one strategy or across
several; the merge step resolves that, so a strategy never needs to know what
the others found.
"""

from __future__ import annotations

import abc
import logging
import re
from collections.abc import Sequence

import numpy as np
from scipy.spatial.distance import cdist

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.keywords import FLOW_SEQUENCE_PREFIX, GENERIC_PREFIX, ROLE_FLOW_PREFIX
from flowsight.engine.structures import FlowGroup, ScreenStructure
from flowsight.utils.math_helpers import jaccard, safe_mean, span

logger = logging.getLogger(__name__)

MISC_KEY = "misc"


class FlowStrategy(abc.ABC):
    """Base for every clustering strategy: ``detect(screens) -> groups``."""

    name: str = "base"
    method: str = "base"

    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    @abc.abstractmethod
    def detect(self, screens: Sequence[ScreenStructure]) -> list[FlowGroup]:
        ...


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class NamingPatternStrategy(FlowStrategy):
    """Group screens whose names share a role/flow prefix or a flow keyword."""

    name = "NamingPattern"
    method = "naming_pattern"

    def group_key(self, screen_name: str) -> str:
        name = screen_name.lower()
        m = ROLE_FLOW_PREFIX.match(name)
        if m:
            return f"{m.group(1)}_{m.group(2)}"
        m = FLOW_SEQUENCE_PREFIX.match(name)
        if m:
            return m.group(1)
        m = GENERIC_PREFIX.match(name)
        if m:
            return m.group(1)
        flow_type = self.config.flow_type_for(name)
        return flow_type if flow_type != "unknown" else MISC_KEY

    def sequence_number(self, screen_name: str) -> int:
        name = screen_name.lower()
        for pattern in self.config.sequence_number_patterns:
            m = pattern.search(name)
            if m:
                return int(m.group(1))
        return 0

    def _sequence_evidence(self, screens: Sequence[ScreenStructure]) -> list[str]:
        evidence = []
        for screen in screens:
            name = screen.name.lower()
            for pattern in self.config.sequence_indicators:
                m = pattern.search(name)
                if m:
                    evidence.append(f"{screen.name}: {m.group(0)}")
        return evidence

    def confidence(self, key: str, screens: Sequence[ScreenStructure]) -> float:
        cfg = self.config
        score = 0.5
        if any(p.search(s.name) for s in screens for p in cfg.sequence_indicators):
            score += 0.2
        if any(w in key for words in cfg.flow_role_keywords.values() for w in words):
            score += 0.2
        if any(w in key for words in cfg.flow_type_keywords.values() for w in words):
            score += 0.1
        return min(round(score, 2), 1.0)

    def detect(self, screens: Sequence[ScreenStructure]) -> list[FlowGroup]:
        buckets: dict[str, list[ScreenStructure]] = {}
        for screen in screens:
            key = self.group_key(screen.name)
            if key == MISC_KEY:
                continue
            buckets.setdefault(key, []).append(screen)

        groups = []
        for key, members in buckets.items():
            if len(members) < 2:
                continue
            # sorted() is stable: equal sequence numbers keep document order
            ordered = sorted(members, key=lambda s: self.sequence_number(s.name))
            groups.append(
                FlowGroup(
                    id=f"naming_{key}",
                    screens=ordered,
                    confidence=self.confidence(key, ordered),
                    detection_method=self.method,
                    evidence=self._sequence_evidence(ordered),
                )
            )
        return groups


# ---------------------------------------------------------------------------
# Page / container
# ---------------------------------------------------------------------------


class PageStructureStrategy(FlowStrategy):
    """Screens that live on the same page or section form a candidate flow."""

    name = "PageStructure"
    method = "page_structure"

    def confidence(self, page_name: str, size: int) -> float:
        lo, hi = self.config.page_size_range
        score = 0.4
        if self.config.flow_type_for(page_name.lower()) != "unknown":
            score += 0.3
        if lo <= size <= hi:
            score += 0.2
        return min(round(score, 2), 1.0)

    def detect(self, screens: Sequence[ScreenStructure]) -> list[FlowGroup]:
        pages: dict[str, list[ScreenStructure]] = {}
        for screen in screens:
            if screen.page:
                pages.setdefault(screen.page, []).append(screen)

        groups = []
        for page_name, members in pages.items():
            if len(members) < 2:
                continue
            flow_type = self.config.flow_type_for(page_name.lower())
            slug = re.sub(r"\s+", "_", page_name).lower()
            groups.append(
                FlowGroup(
                    id=f"page_{slug}",
                    screens=list(members),
                    confidence=self.confidence(page_name, len(members)),
                    detection_method=self.method,
                    flow_type=flow_type if flow_type != "unknown" else None,
                    evidence=[f"page: {page_name}"],
                )
            )
        return groups


# ---------------------------------------------------------------------------
# Prototype links
# ---------------------------------------------------------------------------


class PrototypeLinkStrategy(FlowStrategy):
    """Placeholder: node input carries no prototype connections yet."""

    name = "PrototypeLinks"
    method = "prototype_analysis"

    def detect(self, screens: Sequence[ScreenStructure]) -> list[FlowGroup]:
        return []


# ---------------------------------------------------------------------------
# Spatial proximity
# ---------------------------------------------------------------------------


class SpatialProximityStrategy(FlowStrategy):
    """Cluster screens placed near each other on the canvas."""

    name = "SpatialProximity"
    method = "spatial_proximity"

    def confidence(self, members: Sequence[ScreenStructure]) -> float:
        tol = self.config.spatial_alignment_tolerance
        score = 0.3
        if span([s.x for s in members]) < tol or span([s.y for s in members]) < tol:
            score += 0.3
        return round(score, 2)

    def detect(self, screens: Sequence[ScreenStructure]) -> list[FlowGroup]:
        if len(screens) < 2:
            return []
        coords = np.array([[s.x, s.y] for s in screens], dtype=np.float64)
        distances = cdist(coords, coords)
        threshold = self.config.spatial_threshold

        visited: set[int] = set()
        groups = []
        for seed in range(len(screens)):
            if seed in visited:
                continue
            # Only the seed must be fresh; shared members are joined by the merge step
            members = [
                i for i in range(len(screens))
                if i == seed or distances[seed, i] <= threshold
            ]
            if len(members) < 2:
                continue
            visited.update(members)
            cluster = [screens[i] for i in members]
            groups.append(
                FlowGroup(
                    id=f"spatial_{screens[seed].id}",
                    screens=cluster,
                    confidence=self.confidence(cluster),
                    detection_method=self.method,
                    evidence=[f"{len(cluster)} screens within {threshold:g} units of {screens[seed].name}"],
                )
            )
        return groups


# ---------------------------------------------------------------------------
# Content similarity
# ---------------------------------------------------------------------------


class ContentSimilarityStrategy(FlowStrategy):
    """Cluster screens built from the same kinds of components."""

    name = "ContentSimilarity"
    method = "content_similarity"

    @staticmethod
    def confidence(signatures: Sequence[list[str]]) -> float:
        pairs = [
            jaccard(signatures[i], signatures[j])
            for i in range(len(signatures))
            for j in range(i + 1, len(signatures))
        ]
        return safe_mean(pairs)

    def detect(self, screens: Sequence[ScreenStructure]) -> list[FlowGroup]:
        signatures = [s.component_signature() for s in screens]
        threshold = self.config.content_similarity_threshold

        visited: set[int] = set()
        groups = []
        for seed in range(len(screens)):
            if seed in visited:
                continue
            members = [seed] + [
                i for i in range(len(screens))
                if i != seed and jaccard(signatures[seed], signatures[i]) > threshold
            ]
            if len(members) < 2:
                continue
            visited.update(members)
            cluster = [screens[i] for i in members]
            names = " ".join(s.name.lower() for s in cluster)
            flow_type = self.config.flow_type_for(names)
            groups.append(
                FlowGroup(
                    id=f"content_{screens[seed].id}",
                    screens=cluster,
                    confidence=self.confidence([signatures[i] for i in members]),
                    detection_method=self.method,
                    flow_type=flow_type if flow_type != "unknown" else None,
                    evidence=[f"shared components: {', '.join(sorted(set(signatures[seed])))}"],
                )
            )
        return groups


def default_strategies(config: DetectionConfig = DEFAULT_CONFIG) -> tuple[FlowStrategy, ...]:
    """The five strategies in the order the engine runs them."""
    return (
        NamingPatternStrategy(config),
        PageStructureStrategy(config),
        PrototypeLinkStrategy(config),
        SpatialProximityStrategy(config),
        ContentSimilarityStrategy(config),
    )
