"""Pattern/Consistency Analyzer.

Counts component categories across a component forest, evaluates ten UI
pattern predicates with 0-100 confidences, classifies overall complexity and
scores visual consistency (spacing grid, palette size, type scale).
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.screens import component_spacings
from flowsight.engine.structures import (
    ComponentStructure,
    ConsistencyScore,
    CrossFlowConsistency,
    DesignPattern,
    FlowStructure,
    PatternAnalysis,
    ScreenStructure,
)

logger = logging.getLogger(__name__)

_CONTAINER_TYPES = frozenset({"FRAME", "GROUP", "COMPONENT", "INSTANCE", "SECTION", "COMPONENT_SET"})
_ICON_TYPES = frozenset({"VECTOR", "BOOLEAN_OPERATION", "STAR", "LINE", "POLYGON"})

# Name hints counted alongside the primary category
_NAME_TAGS = {
    "overlay": ("overlay", "modal", "dialog", "popup"),
    "tab": ("tab",),
    "video": ("video", "player"),
    "search": ("search",),
}


def category_of(comp: ComponentStructure) -> str:
    """Semantic type when classified, else a coarse category from the raw tag."""
    if comp.semantic_type:
        return comp.semantic_type
    if comp.has_image_fill:
        return "image"
    if comp.type == "TEXT":
        return "text"
    if comp.type in _CONTAINER_TYPES:
        return "container"
    if comp.type in _ICON_TYPES:
        return "icon"
    return comp.type.lower() or "unknown"


def _walk(components: Iterable[ComponentStructure]) -> Iterable[ComponentStructure]:
    for comp in components:
        yield from comp.walk()


def type_counts(components: Sequence[ComponentStructure]) -> Counter:
    counts: Counter = Counter()
    for comp in _walk(components):
        counts[category_of(comp)] += 1
        name = comp.name.lower()
        for tag, words in _NAME_TAGS.items():
            if tag != category_of(comp) and any(w in name for w in words):
                counts[tag] += 1
    return counts


def structure_signature(comp: ComponentStructure) -> str:
    """``type:sorted-child-types`` used to spot repeated list items."""
    child_types = sorted(category_of(c) for c in comp.children)
    return f"{category_of(comp)}:{','.join(child_types)}"


def list_confidence(components: Sequence[ComponentStructure], min_repeats: int = 3) -> float:
    """Best share (0-100) of siblings whose structure repeats at least ``min_repeats`` times."""
    best = 0.0
    sibling_sets: list[Sequence[ComponentStructure]] = [components]
    sibling_sets.extend(c.children for c in _walk(components) if c.children)
    for siblings in sibling_sets:
        if len(siblings) < min_repeats:
            continue
        counts = Counter(structure_signature(c) for c in siblings)
        repeated = sum(n for n in counts.values() if n >= min_repeats)
        if repeated:
            best = max(best, repeated / len(siblings) * 100)
    return min(best, 100.0)


# ---------------------------------------------------------------------------
# Pattern predicates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _PatternRule:
    name: str
    components: tuple[str, ...]
    description: str
    recommendations: tuple[str, ...]
    present: Callable[[Counter], bool]
    confidence: Callable[[Counter], float]


def _score(*parts: tuple[bool, int]) -> float:
    return float(min(100, sum(weight for hit, weight in parts if hit)))


_RULES: tuple[_PatternRule, ...] = (
    _PatternRule(
        "Navigation Pattern",
        ("navigation", "button", "text"),
        "Top-level navigation structure with interactive elements",
        ("Ensure consistent navigation hierarchy", "Add accessibility labels"),
        lambda t: t["navigation"] > 0 and t["button"] > 1,
        lambda t: _score((t["navigation"] > 0, 40), (t["button"] > 1, 30), (t["text"] > 0, 20), (t["icon"] > 0, 10)),
    ),
    _PatternRule(
        "Form Pattern",
        ("input", "button", "label"),
        "Data input pattern with fields and submission elements",
        ("Add validation states", "Implement proper focus management"),
        lambda t: t["input"] > 0 and t["button"] > 0,
        lambda t: _score((t["input"] > 0, 50), (t["button"] > 0, 30), (t["label"] > 0, 20)),
    ),
    _PatternRule(
        "Card Layout Pattern",
        ("card", "heading", "text", "button"),
        "Content organization using card-based layout",
        ("Maintain consistent card spacing", "Add hover/focus states"),
        lambda t: t["card"] > 1 or (t["container"] > 2 and t["heading"] > 1),
        lambda t: _score((t["card"] > 1, 60), (t["heading"] > 0, 20), (t["text"] > 0, 10), (t["button"] > 0, 10)),
    ),
    _PatternRule(
        "Modal Pattern",
        ("overlay", "card", "button", "heading"),
        "Modal dialog for focused interactions",
        ("Add escape key handling", "Implement focus trapping"),
        lambda t: t["overlay"] > 0 or (t["card"] > 0 and t["button"] > 1 and t["heading"] > 0),
        lambda t: _score((t["overlay"] > 0, 70), (t["card"] > 0 and t["button"] > 0, 30)),
    ),
    _PatternRule(
        "Tab Pattern",
        ("navigation", "button", "container"),
        "Tabbed interface for content organization",
        ("Add keyboard navigation", "Implement active state indicators"),
        lambda t: t["tab"] > 2 or (t["button"] > 3 and t["navigation"] > 0),
        lambda t: _score((t["tab"] > 2, 80), (t["button"] > 3, 20)),
    ),
    _PatternRule(
        "Data Display Pattern",
        ("text", "heading", "container"),
        "Structured data presentation layout",
        ("Add responsive breakpoints", "Consider table alternatives"),
        lambda t: t["text"] > 5 and t["heading"] > 2,
        lambda t: _score((t["text"] > 5, 40), (t["heading"] > 2, 30), (t["container"] > 1, 30)),
    ),
    _PatternRule(
        "Action Pattern",
        ("button", "icon", "text"),
        "Interactive elements for user actions",
        ("Provide visual feedback", "Add loading states"),
        lambda t: t["button"] > 2,
        lambda t: _score((t["button"] > 2, 60), (t["icon"] > 0, 40)),
    ),
    _PatternRule(
        "Media Pattern",
        ("image", "video", "button", "container"),
        "Rich media content with controls",
        ("Optimize for different screen sizes", "Add accessibility alternatives"),
        lambda t: t["image"] > 0 or t["video"] > 0,
        lambda t: _score((t["image"] > 0, 70), (t["video"] > 0, 30)),
    ),
    _PatternRule(
        "Search Pattern",
        ("input", "button", "icon", "container"),
        "Search interface with input and results",
        ("Add autocomplete functionality", "Implement search history"),
        lambda t: t["input"] > 0 and t["search"] > 0,
        lambda t: _score((t["search"] > 0, 80), (t["input"] > 0, 20)),
    ),
)

_LIST_RULE = DesignPattern(
    name="List Pattern",
    confidence=0.0,
    components=["container", "text", "image"],
    description="Repeating list items with consistent structure",
    recommendations=["Implement virtual scrolling for large lists", "Add selection states"],
)
_BEFORE_LIST = frozenset(rule.name for rule in _RULES[:3])


def _list_position(patterns: Sequence[DesignPattern]) -> int:
    return sum(1 for p in patterns if p.name in _BEFORE_LIST)


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------


def spacing_consistency(spacings: Iterable[float], grid: float = 8.0) -> float:
    """Share of distinct spacing values on the base grid; 1.0 with no spacing."""
    unique = set(spacings)
    if not unique:
        return 1.0
    aligned = sum(1 for s in unique if s % grid == 0)
    return aligned / len(unique)


def color_consistency(colors: Iterable[str], ideal: int = 10) -> float:
    n = len(set(colors))
    return 1.0 if n <= ideal else ideal / n


def typography_consistency(font_sizes: Iterable[float], scale: tuple[float, float] = (1.1, 1.3)) -> float:
    """Share of adjacent distinct sizes whose ratio sits on a common type scale."""
    sizes = np.array(sorted({s for s in font_sizes if s > 0}), dtype=np.float64)
    if len(sizes) < 2:
        return 1.0
    ratios = sizes[1:] / sizes[:-1]
    lo, hi = scale
    return float(np.mean((ratios >= lo) & (ratios <= hi)))


class PatternAnalyzer:
    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def detect_patterns(self, components: Sequence[ComponentStructure], counts: Counter) -> list[DesignPattern]:
        patterns = [
            DesignPattern(
                name=rule.name,
                confidence=rule.confidence(counts),
                components=list(rule.components),
                description=rule.description,
                recommendations=list(rule.recommendations),
            )
            for rule in _RULES
            if rule.present(counts)
        ]
        list_conf = list_confidence(components, self.config.list_min_repeats)
        if list_conf > 0:
            # Reported right after the card layout slot
            at = _list_position(patterns)
            patterns.insert(
                at,
                DesignPattern(
                    name=_LIST_RULE.name,
                    confidence=list_conf,
                    components=list(_LIST_RULE.components),
                    description=_LIST_RULE.description,
                    recommendations=list(_LIST_RULE.recommendations),
                ),
            )
        return patterns

    def complexity(self, component_count: int, pattern_count: int, distinct_types: int) -> str:
        low_n, low_p = self.config.low_complexity_max
        med_n, med_p, med_t = self.config.medium_complexity_max
        if component_count < low_n and pattern_count < low_p:
            return "low"
        if component_count < med_n and pattern_count < med_p and distinct_types < med_t:
            return "medium"
        return "high"

    def consistency(self, components: Sequence[ComponentStructure]) -> ConsistencyScore:
        cfg = self.config
        spacings: list[float] = []
        colors: list[str] = []
        font_sizes: list[float] = []
        for comp in _walk(components):
            spacings.extend(component_spacings(comp))
            colors.extend(c for c in (comp.background_color, comp.text_color, comp.border_color) if c)
            if comp.font_size:
                font_sizes.append(comp.font_size)

        spacing = spacing_consistency(spacings, cfg.spacing_grid)
        color = color_consistency(colors, cfg.ideal_color_count)
        typography = typography_consistency(font_sizes, cfg.type_scale_range)
        w_spacing, w_color, w_type = cfg.consistency_weights
        return ConsistencyScore(
            overall=round(spacing * w_spacing + color * w_color + typography * w_type, 4),
            spacing=spacing,
            color=color,
            typography=typography,
        )

    @staticmethod
    def recommendations(patterns: Sequence[DesignPattern], complexity: str, consistency: float) -> list[str]:
        recs = []
        if complexity == "high":
            recs.append("Consider breaking down complex screens into smaller components")
            recs.append("Implement a consistent component library")
        if consistency < 0.7:
            recs.append("Standardize spacing values across components")
            recs.append("Create a unified color palette")
            recs.append("Establish consistent typography scale")
        if not patterns:
            recs.append("Consider implementing common UI patterns for better user experience")
        if len(patterns) > 5:
            recs.append("Review if all patterns are necessary - consider simplifying")
        recs.append("Add proper accessibility labels and focus management")
        recs.append("Ensure sufficient color contrast ratios")
        if complexity == "high":
            recs.append("Consider code splitting for better performance")
            recs.append("Implement lazy loading for heavy components")
        return recs

    def analyze(self, components: Sequence[ComponentStructure]) -> PatternAnalysis:
        counts = type_counts(components)
        patterns = self.detect_patterns(components, counts)
        component_count = sum(1 for _ in _walk(components))
        distinct = len({category_of(c) for c in _walk(components)})
        complexity = self.complexity(component_count, len(patterns), distinct)
        consistency = self.consistency(components)
        logger.debug(
            "Pattern analysis: %d components, %d patterns, complexity=%s, consistency=%.2f",
            component_count, len(patterns), complexity, consistency.overall,
        )
        return PatternAnalysis(
            patterns=patterns,
            complexity=complexity,
            consistency=consistency,
            type_counts=dict(counts),
            recommendations=self.recommendations(patterns, complexity, consistency.overall),
        )

    def analyze_screen(self, screen: ScreenStructure) -> PatternAnalysis:
        return self.analyze(screen.components)

    def analyze_flow(self, flow: FlowStructure) -> PatternAnalysis:
        return self.analyze([c for s in flow.screens for c in s.components])


def cross_flow_consistency(flows: Sequence[FlowStructure]) -> CrossFlowConsistency:
    """Shared semantic types, styling spread and navigation agreement across flows (0-100)."""
    if not flows:
        return CrossFlowConsistency()

    per_flow = [
        {c.semantic_type for s in f.screens for c in s.walk() if c.semantic_type}
        for f in flows
    ]
    all_types = set().union(*per_flow)
    shared = [t for t in all_types if sum(1 for types in per_flow if t in types) > 1]

    components = [c for f in flows for s in f.screens for c in s.walk()]
    n = max(len(components), 1)
    colors = {c.background_color for c in components if c.background_color}
    sizes = {c.font_size for c in components if c.font_size}
    styling = (max(0.0, 1 - len(colors) / n) + max(0.0, 1 - len(sizes) / n)) / 2 * 100

    patterns = {f.navigation_pattern for f in flows}
    navigation = max(0.0, 1 - len(patterns) / len(flows)) * 100

    return CrossFlowConsistency(
        shared_components=len(shared),
        consistent_styling=round(styling, 2),
        navigation_patterns=round(navigation, 2),
        overall_score=round(min(100.0, len(shared) / max(len(all_types), 1) * 100), 2),
    )


def analyze_components(
    components: Sequence[ComponentStructure], config: DetectionConfig = DEFAULT_CONFIG
) -> PatternAnalysis:
    return PatternAnalyzer(config).analyze(components)
