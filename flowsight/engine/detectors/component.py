"""Semantic component classifier.

Each semantic type has its own verdict rule combining four signals: name
keywords, geometry bounds, styling and content. The rules are deliberately
not unified; their OR/AND shapes differ per type.

    button      name OR (size AND fill+radius)
    input       name OR (size AND stroke)
    heading     TEXT AND (name OR font >= 20)
    label       TEXT AND (name OR font <= 14)
    card        name OR (size AND >1 child AND fill+(radius|effect))
    navigation  name OR (size AND >=2 children)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.keywords import SEMANTIC_TYPES
from flowsight.models.nodes import DesignNode

logger = logging.getLogger(__name__)


@dataclass
class ClassificationResult:
    """Verdicts for every semantic type plus the single best guess."""

    flags: dict[str, bool] = field(default_factory=lambda: dict.fromkeys(SEMANTIC_TYPES, False))
    reasons: dict[str, list[str]] = field(default_factory=dict)
    confidence: float = 0.0
    semantic_type: str | None = None
    heading_level: int = 0

    @property
    def detected(self) -> list[str]:
        return [t for t in SEMANTIC_TYPES if self.flags.get(t)]

    @property
    def is_button(self) -> bool:
        return self.flags["button"]

    @property
    def is_input(self) -> bool:
        return self.flags["input"]

    @property
    def is_heading(self) -> bool:
        return self.flags["heading"]

    @property
    def is_label(self) -> bool:
        return self.flags["label"]

    @property
    def is_card(self) -> bool:
        return self.flags["card"]

    @property
    def is_navigation(self) -> bool:
        return self.flags["navigation"]


class ComponentClassifier:
    """Pure per-node classifier. Holds nothing but its configuration."""

    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._rules: dict[str, Callable[[DesignNode, str, list[str]], bool]] = {
            "button": self._is_button,
            "input": self._is_input,
            "heading": self._is_heading,
            "label": self._is_label,
            "card": self._is_card,
            "navigation": self._is_navigation,
        }

    def classify(self, node: DesignNode) -> ClassificationResult:
        name = (node.name or "unnamed").lower()
        result = ClassificationResult()

        for semantic_type in SEMANTIC_TYPES:
            reasons: list[str] = []
            result.flags[semantic_type] = self._rules[semantic_type](node, name, reasons)
            result.reasons[semantic_type] = reasons

        result.heading_level = self.heading_level(name, self._font_size(node))
        result.confidence = self._confidence(result)
        detected = result.detected
        if detected and result.confidence >= self.config.semantic_type_min_confidence:
            result.semantic_type = detected[0]

        logger.debug(
            "Classified %r: detected=%s confidence=%.2f",
            node.name, detected, result.confidence,
        )
        return result

    # -- per-type rules -------------------------------------------------------

    def _name_match(self, semantic_type: str, name: str) -> bool:
        return any(word in name for word in self.config.component_keywords[semantic_type])

    def _font_size(self, node: DesignNode) -> float:
        return node.font_size if node.font_size is not None else self.config.default_font_size

    def _is_button(self, node: DesignNode, name: str, reasons: list[str]) -> bool:
        name_match = self._name_match("button", name)
        size = node.width > 60 and 30 < node.height < 80
        styling = node.has_fills and (node.corner_radius or 0.0) > 0
        interactive = node.has_fills and any(s in name for s in ("hover", "active", "pressed"))

        if name_match:
            reasons.append(f"Button name pattern: {name}")
        if size:
            reasons.append("Button characteristics: proper dimensions")
        if interactive:
            reasons.append("Interactive state variant detected")
        if styling:
            reasons.append("Button styling: background and border radius")
        return name_match or (size and styling)

    def _is_input(self, node: DesignNode, name: str, reasons: list[str]) -> bool:
        name_match = self._name_match("input", name)
        size = node.width > 100 and 30 < node.height < 60
        styling = node.has_strokes
        has_text = node.contains_text()

        if name_match:
            reasons.append(f"Input name pattern: {name}")
        if size:
            reasons.append("Input characteristics: appropriate dimensions")
        if has_text:
            reasons.append("Text content suggesting input field")
        if styling:
            reasons.append("Input styling: border")
        return name_match or (size and styling)

    def _is_heading(self, node: DesignNode, name: str, reasons: list[str]) -> bool:
        font_size = self._font_size(node)
        name_match = self._name_match("heading", name)
        large = font_size >= self.config.heading_min_font_size
        level = self.heading_level(name, font_size)

        if name_match:
            reasons.append(f"Heading name pattern: {name}")
        if node.is_text and large:
            reasons.append(f"Large text: {font_size:g}px font size")
        if level > 0:
            reasons.append(f"Heading level {level} detected")
        return node.is_text and (name_match or large)

    def _is_label(self, node: DesignNode, name: str, reasons: list[str]) -> bool:
        font_size = self._font_size(node)
        name_match = self._name_match("label", name)
        small = font_size <= self.config.label_max_font_size
        muted = node.opacity is not None and node.opacity < 1

        if name_match:
            reasons.append(f"Label name pattern: {name}")
        if node.is_text and small:
            reasons.append(f"Small text: {font_size:g}px font size")
        if muted:
            reasons.append("Label characteristics: reduced opacity")
        return node.is_text and (name_match or small)

    def _is_card(self, node: DesignNode, name: str, reasons: list[str]) -> bool:
        name_match = self._name_match("card", name)
        size = node.width > 200 and node.height > 100
        children = len(node.children) > 1
        styling = node.has_fills and ((node.corner_radius or 0.0) > 0 or node.has_effects)

        if name_match:
            reasons.append(f"Card name pattern: {name}")
        if size:
            reasons.append("Card characteristics: large container")
        if children:
            reasons.append("Multiple child elements")
        if styling:
            reasons.append("Card styling: background and radius or shadow")
        return name_match or (size and children and styling)

    def _is_navigation(self, node: DesignNode, name: str, reasons: list[str]) -> bool:
        name_match = self._name_match("navigation", name)
        size = node.width > 200 and 40 < node.height < 100
        items = len(node.children) >= 2
        horizontal = node.layout_mode == "HORIZONTAL"

        if name_match:
            reasons.append(f"Navigation name pattern: {name}")
        if size:
            reasons.append("Navigation characteristics: wide and short")
        if items:
            reasons.append("Navigation elements detected")
        if horizontal:
            reasons.append("Navigation layout pattern")
        return name_match or (size and items)

    # -- scoring --------------------------------------------------------------

    @staticmethod
    def heading_level(name: str, font_size: float) -> int:
        if "h1" in name or "title" in name:
            return 1
        if "h2" in name or "subtitle" in name:
            return 2
        if "h3" in name or "heading" in name:
            return 3
        if font_size >= 32:
            return 1
        if font_size >= 24:
            return 2
        if font_size >= 20:
            return 3
        return 0

    @staticmethod
    def _confidence(result: ClassificationResult) -> float:
        detected = result.detected
        if not detected:
            return 0.0
        if len(detected) == 1:
            # Every reason counts, including ones pushed by rules that fell short
            n_reasons = sum(len(r) for r in result.reasons.values())
            return min(1.0, 0.8 + 0.05 * n_reasons)
        return max(0.3, 0.8 - 0.1 * len(detected))


def classify_node(node: DesignNode, config: DetectionConfig = DEFAULT_CONFIG) -> ClassificationResult:
    return ComponentClassifier(config).classify(node)
