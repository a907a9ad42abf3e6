"""Screen Structure Builder: design-node subtrees → ScreenStructure trees.

Every component is classified as it is built. A node that fails to extract is
logged and dropped from its parent; a screen that fails as a whole becomes a
fallback ScreenStructure with default geometry and no components.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.detectors.component import ComponentClassifier
from flowsight.engine.detectors.device import detect_device_type
from flowsight.engine.structures import (
    ComponentStructure,
    DesignSystemStats,
    DeviceType,
    LayoutType,
    ScreenStructure,
)
from flowsight.models.nodes import DesignNode, iter_screen_nodes, node_key
from flowsight.utils.color import first_solid_hex, has_image_paint
from flowsight.utils.math_helpers import population_std

logger = logging.getLogger(__name__)


def infer_layout(node: DesignNode, config: DetectionConfig = DEFAULT_CONFIG) -> LayoutType:
    """Explicit auto-layout wins; otherwise compare the spread of child positions."""
    mode = (node.layout_mode or "").upper()
    if mode == "HORIZONTAL":
        return LayoutType.HORIZONTAL
    if mode == "VERTICAL":
        return LayoutType.VERTICAL
    if mode and mode != "NONE":
        return LayoutType.AUTO

    if len(node.children) < 2:
        return LayoutType.NONE

    threshold = config.layout_variance_threshold
    x_low = population_std([c.x for c in node.children]) < threshold
    y_low = population_std([c.y for c in node.children]) < threshold

    if y_low and not x_low:
        return LayoutType.HORIZONTAL
    if x_low and not y_low:
        return LayoutType.VERTICAL
    if x_low and y_low:
        return LayoutType.GRID
    return LayoutType.MIXED


class ScreenBuilder:
    """Builds ScreenStructure values; one classifier shared across a run."""

    def __init__(self, config: DetectionConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.classifier = ComponentClassifier(config)

    def build_component(self, node: DesignNode, path: str) -> ComponentStructure:
        verdict = self.classifier.classify(node)
        fill_hex = first_solid_hex(node.fills)
        font_weight = None
        if node.font_name is not None:
            font_weight = node.font_name.get("style") or None

        component = ComponentStructure(
            id=node_key(node, path),
            name=node.name,
            type=node.type,
            x=node.x,
            y=node.y,
            width=node.width,
            height=node.height,
            semantic_type=verdict.semantic_type,
            confidence=verdict.confidence,
            background_color=None if node.is_text else fill_hex,
            text_color=fill_hex if node.is_text else None,
            border_color=first_solid_hex(node.strokes),
            border_radius=node.corner_radius or 0.0,
            font_size=node.font_size if node.is_text else None,
            font_weight=font_weight,
            text_align=node.text_align_horizontal,
            text=node.characters,
            padding=node.padding,
            item_spacing=node.item_spacing,
            has_image_fill=has_image_paint(node.fills),
        )
        component.children = self._build_children(node, path)
        return component

    def _build_children(self, node: DesignNode, path: str) -> list[ComponentStructure]:
        children: list[ComponentStructure] = []
        for i, child in enumerate(node.children):
            child_path = f"{path}.{i}"
            try:
                children.append(self.build_component(child, child_path))
            except Exception as e:
                logger.warning("Dropping node %r at %s: %s", child.name, child_path, e)
        return children

    def build_screen(self, node: DesignNode, page: str | None = None, path: str = "0") -> ScreenStructure:
        screen_id = node_key(node, path)
        try:
            screen = ScreenStructure(
                id=screen_id,
                name=node.name,
                page=page,
                x=node.x,
                y=node.y,
                width=node.width,
                height=node.height,
                device_type=detect_device_type(node.width, node.height, self.config),
                layout_type=infer_layout(node, self.config),
                background_color=first_solid_hex(node.fills),
                components=self._build_children(node, path),
            )
            screen.design_system = design_system_stats(screen)
            return screen
        except Exception as e:
            logger.warning("Screen %r failed to build, using fallback: %s", node.name, e)
            return ScreenStructure(
                id=screen_id,
                name=node.name,
                page=page,
                width=self.config.default_screen_width,
                height=self.config.default_screen_height,
                device_type=DeviceType.UNKNOWN,
            )

    def build_all(self, roots: Iterable[DesignNode]) -> list[ScreenStructure]:
        """Discover every screen in a forest and build it, in document order."""
        screens = [
            self.build_screen(node, page, path)
            for node, page, path in iter_screen_nodes(list(roots))
        ]
        duplicates = [name for name, n in Counter(s.name for s in screens).items() if n > 1]
        if duplicates:
            logger.warning("Duplicate screen names (joined by id, not name): %s", duplicates)
        logger.info("Built %d screens", len(screens))
        return screens


def design_system_stats(screen: ScreenStructure) -> DesignSystemStats:
    colors: set[str] = set()
    font_sizes: set[float] = set()
    spacings: set[float] = set()
    types: list[str] = []

    if screen.background_color:
        colors.add(screen.background_color)
    for comp in screen.walk():
        for color in (comp.background_color, comp.text_color):
            if color:
                colors.add(color)
        if comp.font_size is not None:
            font_sizes.add(comp.font_size)
        spacings.update(component_spacings(comp))
        if comp.semantic_type and comp.semantic_type not in types:
            types.append(comp.semantic_type)

    return DesignSystemStats(
        unique_colors=len(colors),
        unique_font_sizes=len(font_sizes),
        unique_spacings=len(spacings),
        component_types=types,
    )


def component_spacings(comp: ComponentStructure) -> list[float]:
    """Positive padding and item-spacing values of one component."""
    values = list(comp.padding or ())
    if comp.item_spacing is not None:
        values.append(comp.item_spacing)
    return [v for v in values if v > 0]


def build_screens(roots: Iterable[DesignNode], config: DetectionConfig = DEFAULT_CONFIG) -> list[ScreenStructure]:
    return ScreenBuilder(config).build_all(roots)
