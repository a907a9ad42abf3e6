"""Math helpers: spread, set similarity, clamping. No engine imports."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, float(value)))


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (ddof=0). 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64)))


def span(values: Sequence[float]) -> float:
    """max - min. Used for the axis-alignment bonus of spatial clustering."""
    if len(values) == 0:
        return 0.0
    return float(np.ptp(np.asarray(values, dtype=np.float64)))


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """|A ∩ B| / |A ∪ B| over the distinct members. 0.0 when both are empty."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def safe_mean(values: Sequence[float], default: float = 0.0) -> float:
    if len(values) == 0:
        return default
    return float(np.mean(np.asarray(values, dtype=np.float64)))
