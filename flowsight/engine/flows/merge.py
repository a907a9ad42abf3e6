"""Merge overlapping flow candidates.

Groups that share any screen (by ``ScreenStructure.id``) are merged
transitively: if A overlaps B and B overlaps C, all three become one group
even when A and C share nothing. Scalar metadata is first-wins in candidate
order; evidence is concatenated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from flowsight.engine.structures import FlowGroup, ScreenStructure

logger = logging.getLogger(__name__)


def _components(groups: Sequence[FlowGroup]) -> list[list[int]]:
    """Union-find over group indices, joined through shared screen ids."""
    parent = list(range(len(groups)))

    def find(i: int) -> int:
        while parent[i] != i:
            parent[i] = parent[parent[i]]
            i = parent[i]
        return i

    owner: dict[str, int] = {}
    for idx, group in enumerate(groups):
        for screen_id in group.screen_ids:
            if screen_id in owner:
                a, b = find(owner[screen_id]), find(idx)
                if a != b:
                    parent[max(a, b)] = min(a, b)
            else:
                owner[screen_id] = idx

    members: dict[int, list[int]] = {}
    for idx in range(len(groups)):
        members.setdefault(find(idx), []).append(idx)
    # Roots are the smallest index, so this is first-member order
    return [members[root] for root in sorted(members)]


def _first(values):
    return next((v for v in values if v is not None), None)


def merge_groups(groups: Sequence[FlowGroup]) -> FlowGroup:
    """Fold several overlapping groups into one, keeping the first group's identity."""
    first = groups[0]
    screens: list[ScreenStructure] = []
    seen: set[str] = set()
    for group in groups:
        for screen in group.screens:
            if screen.id not in seen:
                seen.add(screen.id)
                screens.append(screen)

    return FlowGroup(
        id=f"merged_{first.id}",
        screens=screens,
        confidence=max(g.confidence for g in groups),
        detection_method="merged",
        role=_first(g.role for g in groups),
        flow_type=_first(g.flow_type for g in groups),
        navigation_pattern=_first(g.navigation_pattern for g in groups),
        evidence=[e for g in groups for e in g.evidence],
    )


def merge_overlapping(groups: Sequence[FlowGroup]) -> list[FlowGroup]:
    """Merge every overlapping cluster; non-overlapping groups pass through untouched.

    Idempotent: the output has no two groups sharing a screen, so merging it
    again returns the same groups.
    """
    merged: list[FlowGroup] = []
    for component in _components(groups):
        if len(component) == 1:
            merged.append(groups[component[0]])
        else:
            merged.append(merge_groups([groups[i] for i in component]))
    logger.debug("Merged %d candidates into %d groups", len(groups), len(merged))
    return merged
