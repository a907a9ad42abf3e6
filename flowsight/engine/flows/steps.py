"""Per-screen view of a materialized flow."""

from __future__ import annotations

from flowsight.engine.keywords import USER_INTENTS
from flowsight.engine.structures import FlowStep, FlowStructure


def flow_stage(index: int, total: int) -> str:
    if total == 1:
        return "standalone"
    if index == 0:
        return "entry"
    if index == total - 1:
        return "exit"
    return "middle"


def flow_steps(flow: FlowStructure) -> list[FlowStep]:
    """Position, stage and linear neighbours of each screen, in flow order."""
    screens = flow.screens
    intent = USER_INTENTS.get(flow.flow_type.value, "Navigate and interact")
    steps = []
    for i, screen in enumerate(screens):
        steps.append(
            FlowStep(
                screen_id=screen.id,
                screen_name=screen.name,
                position=i + 1,
                stage=flow_stage(i, len(screens)),
                navigation_to=[screens[i + 1].id] if i + 1 < len(screens) else [],
                navigation_from=[screens[i - 1].id] if i > 0 else [],
                user_intent=intent,
                critical_path=flow.critical_path,
            )
        )
    return steps
