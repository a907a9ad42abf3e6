"""Design node input model: the one place host data gets normalized.

Hosts send camelCase JSON straight from the design tool. Geometry may be
missing, NaN, or a "mixed" sentinel; style facets may be absent or of the
wrong shape. The validators here substitute safe defaults once so the engine
never re-checks a property at the access site.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Node types that hold screens rather than being one.
DOCUMENT_TYPES = frozenset({"DOCUMENT"})
CONTAINER_TYPES = frozenset({"PAGE", "CANVAS", "SECTION"})
SCREEN_TYPES = frozenset({"FRAME", "COMPONENT"})
TEXT_TYPE = "TEXT"


def _finite(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip().removesuffix("px"))
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


class DesignNode(BaseModel):
    """One read-only layer node from the design tool."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: str | None = None
    name: str = ""
    type: str = "UNKNOWN"
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    visible: bool = True
    opacity: float | None = None
    fills: list[dict[str, Any]] = Field(default_factory=list)
    strokes: list[dict[str, Any]] = Field(default_factory=list)
    effects: list[dict[str, Any]] = Field(default_factory=list)
    corner_radius: float | None = None
    font_size: float | None = None
    font_name: dict[str, Any] | None = None
    characters: str | None = None
    layout_mode: str | None = None
    padding_top: float | None = None
    padding_right: float | None = None
    padding_bottom: float | None = None
    padding_left: float | None = None
    item_spacing: float | None = None
    text_align_horizontal: str | None = None
    children: list[DesignNode] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> str:
        return v.upper() if isinstance(v, str) and v else "UNKNOWN"

    @field_validator("x", "y", "width", "height", mode="before")
    @classmethod
    def _coerce_geometry(cls, v: Any) -> float:
        value = _finite(v)
        return 0.0 if value is None else value

    @field_validator(
        "opacity",
        "corner_radius",
        "font_size",
        "padding_top",
        "padding_right",
        "padding_bottom",
        "padding_left",
        "item_spacing",
        mode="before",
    )
    @classmethod
    def _coerce_optional_number(cls, v: Any) -> float | None:
        return _finite(v)

    @field_validator("visible", mode="before")
    @classmethod
    def _coerce_visible(cls, v: Any) -> bool:
        return v if isinstance(v, bool) else True

    @field_validator("fills", "strokes", "effects", mode="before")
    @classmethod
    def _coerce_paints(cls, v: Any) -> list[dict[str, Any]]:
        if not isinstance(v, list):
            return []
        return [p for p in v if isinstance(p, dict)]

    @field_validator("font_name", mode="before")
    @classmethod
    def _coerce_font_name(cls, v: Any) -> dict[str, Any] | None:
        return v if isinstance(v, dict) else None

    @field_validator("characters", "layout_mode", "text_align_horizontal", mode="before")
    @classmethod
    def _coerce_optional_str(cls, v: Any) -> str | None:
        return v if isinstance(v, str) and v else None

    @field_validator("children", mode="before")
    @classmethod
    def _coerce_children(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [c for c in v if isinstance(c, (dict, DesignNode))]

    @property
    def is_text(self) -> bool:
        return self.type == TEXT_TYPE

    @property
    def has_fills(self) -> bool:
        return any(p.get("visible", True) is not False for p in self.fills)

    @property
    def has_strokes(self) -> bool:
        return bool(self.strokes)

    @property
    def has_effects(self) -> bool:
        return bool(self.effects)

    @property
    def padding(self) -> tuple[float, float, float, float] | None:
        values = (self.padding_top, self.padding_right, self.padding_bottom, self.padding_left)
        if all(v is None for v in values):
            return None
        top, right, bottom, left = (v or 0.0 for v in values)
        return (top, right, bottom, left)

    def contains_text(self) -> bool:
        """True if this node or any descendant is a text node."""
        return self.is_text or any(child.contains_text() for child in self.children)


DesignNode.model_rebuild()


@dataclass(frozen=True)
class FlatNode:
    """A node plus the names of its ancestors, root first."""

    node: DesignNode
    ancestors: tuple[str, ...]
    path: str


def node_key(node: DesignNode, path: str) -> str:
    """Surrogate identity: the host id when present, else the index path."""
    return node.id or f"node:{path}"


def iter_nodes(roots: list[DesignNode]) -> Iterator[FlatNode]:
    """Pre-order walk of a forest. DOCUMENT nodes are transparent."""

    def _walk(node: DesignNode, ancestors: tuple[str, ...], path: str) -> Iterator[FlatNode]:
        if node.type in DOCUMENT_TYPES:
            for i, child in enumerate(node.children):
                yield from _walk(child, ancestors, f"{path}.{i}")
            return
        yield FlatNode(node=node, ancestors=ancestors, path=path)
        child_ancestors = ancestors + (node.name,) if node.name else ancestors
        for i, child in enumerate(node.children):
            yield from _walk(child, child_ancestors, f"{path}.{i}")

    for index, root in enumerate(roots):
        yield from _walk(root, (), str(index))


def iter_screen_nodes(roots: list[DesignNode]) -> Iterator[tuple[DesignNode, str | None, str]]:
    """Yield ``(screen_node, container_name, path)`` for every screen in a forest."""

    def _walk(node: DesignNode, path: str, top_level: bool) -> Iterator[tuple[DesignNode, str | None, str]]:
        if node.type in DOCUMENT_TYPES:
            for i, child in enumerate(node.children):
                yield from _walk(child, f"{path}.{i}", True)
        elif node.type in CONTAINER_TYPES:
            for i, child in enumerate(node.children):
                if child.type in SCREEN_TYPES:
                    yield child, node.name or None, f"{path}.{i}"
                elif child.type in CONTAINER_TYPES:
                    yield from _walk(child, f"{path}.{i}", False)
        elif top_level and node.type in SCREEN_TYPES:
            yield node, None, path

    for index, root in enumerate(roots):
        yield from _walk(root, str(index), True)
