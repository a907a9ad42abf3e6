"""AnalysisContext → AnalysisOutput model and plain-text summary."""

from __future__ import annotations

from flowsight.engine.context import AnalysisContext
from flowsight.engine.detectors.device import detect_device, responsive_coverage
from flowsight.engine.flows.steps import flow_steps
from flowsight.engine.structures import (
    ComponentStructure,
    FlowStructure,
    PatternAnalysis,
    ScreenStructure,
    UserRole,
)
from flowsight.models.analysis import (
    AnalysisOutput,
    ComponentInfo,
    ConsistencyInfo,
    CrossFlowInfo,
    DesignSystemInfo,
    DetectionQualityInfo,
    FlowDetectionInfo,
    FlowInfo,
    FlowStepInfo,
    PatternAnalysisInfo,
    PatternInfo,
    ResponsiveInfo,
    RoleInfo,
    ScreenInfo,
)

# Summary text: at most this many recommendations per section
_MAX_RECOMMENDATIONS = 5


def component_info(comp: ComponentStructure) -> ComponentInfo:
    return ComponentInfo(
        id=comp.id,
        name=comp.name,
        type=comp.type,
        semantic_type=comp.semantic_type,
        confidence=round(comp.confidence, 2),
        x=comp.x,
        y=comp.y,
        width=comp.width,
        height=comp.height,
        background_color=comp.background_color,
        text_color=comp.text_color,
        border_color=comp.border_color,
        border_radius=comp.border_radius,
        font_size=comp.font_size,
        font_weight=comp.font_weight,
        text_align=comp.text_align,
        text=comp.text,
        padding=list(comp.padding) if comp.padding is not None else None,
        item_spacing=comp.item_spacing,
        children=[component_info(c) for c in comp.children],
    )


def screen_info(screen: ScreenStructure, include_components: bool = True) -> ScreenInfo:
    ds = screen.design_system
    return ScreenInfo(
        id=screen.id,
        name=screen.name,
        page=screen.page,
        x=screen.x,
        y=screen.y,
        width=screen.width,
        height=screen.height,
        device_type=screen.device_type.value,
        layout_type=screen.layout_type.value,
        background_color=screen.background_color,
        component_count=screen.component_count,
        design_system=DesignSystemInfo(
            unique_colors=ds.unique_colors,
            unique_font_sizes=ds.unique_font_sizes,
            unique_spacings=ds.unique_spacings,
            component_types=list(ds.component_types),
        ),
        components=[component_info(c) for c in screen.components] if include_components else [],
    )


def role_info(role: UserRole) -> RoleInfo:
    return RoleInfo(
        id=role.id,
        name=role.name,
        type=role.type.value,
        confidence=round(role.confidence, 2),
        detection_source=role.detection_source,
    )


def flow_info(flow: FlowStructure) -> FlowInfo:
    return FlowInfo(
        id=flow.id,
        name=flow.name,
        user_role=role_info(flow.user_role),
        screen_ids=[s.id for s in flow.screens],
        screen_names=[s.name for s in flow.screens],
        flow_type=flow.flow_type.value,
        navigation_pattern=flow.navigation_pattern.value,
        device_targets=[d.value for d in flow.device_targets],
        sequence=flow.sequence,
        confidence=round(flow.confidence, 2),
        detection_method=flow.detection_method,
        estimated_duration=flow.estimated_duration,
        critical_path=flow.critical_path,
        steps=[
            FlowStepInfo(
                screen_id=step.screen_id,
                screen_name=step.screen_name,
                position=step.position,
                stage=step.stage,
                navigation_to=step.navigation_to,
                navigation_from=step.navigation_from,
                user_intent=step.user_intent,
                critical_path=step.critical_path,
            )
            for step in flow_steps(flow)
        ],
    )


def pattern_info(analysis: PatternAnalysis) -> PatternAnalysisInfo:
    c = analysis.consistency
    return PatternAnalysisInfo(
        patterns=[
            PatternInfo(
                name=p.name,
                confidence=p.confidence,
                components=p.components,
                description=p.description,
                recommendations=p.recommendations,
            )
            for p in analysis.patterns
        ],
        complexity=analysis.complexity,
        consistency=ConsistencyInfo(
            overall=round(c.overall, 4),
            spacing=round(c.spacing, 4),
            color=round(c.color, 4),
            typography=round(c.typography, 4),
        ),
        type_counts=analysis.type_counts,
        recommendations=analysis.recommendations,
    )


def context_to_output(ctx: AnalysisContext) -> AnalysisOutput:
    """Convert a finished (possibly partial) AnalysisContext to AnalysisOutput."""
    flow_detection = FlowDetectionInfo()
    result = ctx.flow_result
    if result is not None:
        q = result.detection_quality
        flow_detection = FlowDetectionInfo(
            flows=[flow_info(f) for f in result.flows],
            orphaned_screen_ids=[s.id for s in result.orphaned_screens],
            role_distribution=result.role_distribution,
            flow_type_distribution=result.flow_type_distribution,
            detection_quality=DetectionQualityInfo(
                total_screens=q.total_screens,
                screens_in_flows=q.screens_in_flows,
                average_flow_length=q.average_flow_length,
                role_detection_accuracy=q.role_detection_accuracy,
                average_confidence=q.average_confidence,
            ),
            recommendations=result.recommendations,
        )

    responsive = None
    if ctx.screens:
        cov = responsive_coverage(detect_device(s.width, s.height, ctx.config) for s in ctx.screens)
        responsive = ResponsiveInfo(
            is_responsive=cov.is_responsive,
            coverage_score=cov.coverage_score,
            missing_device_types=cov.missing_device_types,
            recommendations=cov.recommendations,
        )

    cross = None
    if ctx.cross_flow is not None:
        cross = CrossFlowInfo(
            shared_components=ctx.cross_flow.shared_components,
            consistent_styling=ctx.cross_flow.consistent_styling,
            navigation_patterns=ctx.cross_flow.navigation_patterns,
            overall_score=ctx.cross_flow.overall_score,
        )

    return AnalysisOutput(
        screens=[screen_info(s) for s in ctx.screens],
        roles=[role_info(r) for r in ctx.roles],
        flow_detection=flow_detection,
        screen_patterns={k: pattern_info(v) for k, v in ctx.screen_patterns.items()},
        flow_patterns={k: pattern_info(v) for k, v in ctx.flow_patterns.items()},
        cross_flow=cross,
        responsive=responsive,
    )


def context_to_summary_text(ctx: AnalysisContext) -> str:
    """Readable report of screens, roles and flows for logs and hosts without a UI."""
    lines = ["=== FLOWSIGHT ANALYSIS ===", ""]
    lines.append(f"SCREENS: {len(ctx.screens)} | ROLES: {len(ctx.roles)}")

    if ctx.roles:
        lines.append(
            "ROLES: " + ", ".join(f"{r.name} ({r.confidence:.2f}, {r.detection_source})" for r in ctx.roles)
        )
    lines.append("")

    result = ctx.flow_result
    if result is None:
        lines.append("FLOWS: not analyzed")
    else:
        q = result.detection_quality
        lines.append(
            f"FLOWS: {len(result.flows)} | screens in flows {q.screens_in_flows}/{q.total_screens} | "
            f"avg length {q.average_flow_length:.1f} | avg confidence {q.average_confidence:.2f}"
        )
        for flow in result.flows:
            names = " -> ".join(s.name for s in flow.screens)
            critical = " [critical]" if flow.critical_path else ""
            lines.append(
                f"  {flow.sequence}. {flow.name} ({flow.navigation_pattern.value}, "
                f"{flow.confidence:.2f}, ~{flow.estimated_duration}s){critical}: {names}"
            )
        if result.orphaned_screens:
            lines.append("ORPHANS: " + ", ".join(s.name for s in result.orphaned_screens))
        if result.recommendations:
            lines.append("")
            lines.append("RECOMMENDATIONS:")
            lines.extend(f"  - {r}" for r in result.recommendations[:_MAX_RECOMMENDATIONS])

    if ctx.screen_patterns:
        lines.append("")
        lines.append("PATTERNS:")
        by_id = {s.id: s for s in ctx.screens}
        for screen_id, analysis in ctx.screen_patterns.items():
            screen = by_id.get(screen_id)
            label = screen.name if screen is not None else screen_id
            found = ", ".join(analysis.pattern_names) or "none"
            lines.append(
                f"  {label}: {found} | complexity {analysis.complexity} | "
                f"consistency {analysis.consistency.overall:.2f}"
            )

    if ctx.errors:
        lines.append("")
        lines.append("ERRORS: " + "; ".join(f"{k}: {v}" for k, v in ctx.errors.items()))
    return "\n".join(lines)
