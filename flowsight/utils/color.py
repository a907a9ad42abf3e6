"""Paint → hex helpers for design-tool fill/stroke dicts."""

from __future__ import annotations

from typing import Any


def _channel(value: Any) -> int:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0
    # Design tools send 0-1 floats; tolerate 0-255 ints too.
    if v <= 1.0:
        v *= 255.0
    return max(0, min(255, round(v)))


def paint_to_hex(paint: dict[str, Any]) -> str | None:
    """Hex colour of a SOLID paint, or None for gradients/images/hidden paints."""
    if paint.get("visible", True) is False:
        return None
    if paint.get("type", "SOLID") != "SOLID":
        return None
    color = paint.get("color")
    if not isinstance(color, dict):
        return None
    r, g, b = (_channel(color.get(k, 0)) for k in ("r", "g", "b"))
    return f"#{r:02x}{g:02x}{b:02x}"


def first_solid_hex(paints: list[dict[str, Any]]) -> str | None:
    for paint in paints:
        hex_value = paint_to_hex(paint)
        if hex_value is not None:
            return hex_value
    return None


def has_image_paint(paints: list[dict[str, Any]]) -> bool:
    return any(p.get("type") == "IMAGE" and p.get("visible", True) is not False for p in paints)
