"""Analysis output models: what the engine reports back to a host."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ComponentInfo(BaseModel):
    id: str
    name: str
    type: str
    semantic_type: str | None = None
    confidence: float = 0.0
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    background_color: str | None = None
    text_color: str | None = None
    border_color: str | None = None
    border_radius: float = 0.0
    font_size: float | None = None
    font_weight: str | None = None
    text_align: str | None = None
    text: str | None = None
    padding: list[float] | None = None
    item_spacing: float | None = None
    children: list[ComponentInfo] = Field(default_factory=list)


class DesignSystemInfo(BaseModel):
    unique_colors: int = 0
    unique_font_sizes: int = 0
    unique_spacings: int = 0
    component_types: list[str] = Field(default_factory=list)


class ScreenInfo(BaseModel):
    id: str
    name: str
    page: str | None = None
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    device_type: str = "unknown"
    layout_type: str = "none"
    background_color: str | None = None
    component_count: int = 0
    design_system: DesignSystemInfo = Field(default_factory=DesignSystemInfo)
    components: list[ComponentInfo] = Field(default_factory=list)


class RoleInfo(BaseModel):
    id: str
    name: str
    type: str
    confidence: float
    detection_source: str


class FlowStepInfo(BaseModel):
    screen_id: str
    screen_name: str
    position: int
    stage: str
    navigation_to: list[str] = Field(default_factory=list)
    navigation_from: list[str] = Field(default_factory=list)
    user_intent: str = ""
    critical_path: bool = False


class FlowInfo(BaseModel):
    id: str
    name: str
    user_role: RoleInfo
    screen_ids: list[str] = Field(default_factory=list)
    screen_names: list[str] = Field(default_factory=list)
    flow_type: str = "unknown"
    navigation_pattern: str = "stack"
    device_targets: list[str] = Field(default_factory=list)
    sequence: int = 1
    confidence: float = 0.0
    detection_method: str = ""
    estimated_duration: int = 0
    critical_path: bool = False
    steps: list[FlowStepInfo] = Field(default_factory=list)


class DetectionQualityInfo(BaseModel):
    total_screens: int = 0
    screens_in_flows: int = 0
    average_flow_length: float = 0.0
    role_detection_accuracy: float = 0.0
    average_confidence: float = 0.0


class FlowDetectionInfo(BaseModel):
    flows: list[FlowInfo] = Field(default_factory=list)
    orphaned_screen_ids: list[str] = Field(default_factory=list)
    role_distribution: dict[str, int] = Field(default_factory=dict)
    flow_type_distribution: dict[str, int] = Field(default_factory=dict)
    detection_quality: DetectionQualityInfo = Field(default_factory=DetectionQualityInfo)
    recommendations: list[str] = Field(default_factory=list)


class PatternInfo(BaseModel):
    name: str
    confidence: float
    components: list[str] = Field(default_factory=list)
    description: str = ""
    recommendations: list[str] = Field(default_factory=list)


class ConsistencyInfo(BaseModel):
    overall: float = 1.0
    spacing: float = 1.0
    color: float = 1.0
    typography: float = 1.0


class PatternAnalysisInfo(BaseModel):
    patterns: list[PatternInfo] = Field(default_factory=list)
    complexity: str = "low"
    consistency: ConsistencyInfo = Field(default_factory=ConsistencyInfo)
    type_counts: dict[str, int] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)


class CrossFlowInfo(BaseModel):
    shared_components: int = 0
    consistent_styling: float = 0.0
    navigation_patterns: float = 0.0
    overall_score: float = 0.0


class ResponsiveInfo(BaseModel):
    is_responsive: bool = False
    coverage_score: int = 0
    missing_device_types: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class AnalysisOutput(BaseModel):
    """Complete analysis of one node forest."""

    screens: list[ScreenInfo] = Field(default_factory=list)
    roles: list[RoleInfo] = Field(default_factory=list)
    flow_detection: FlowDetectionInfo = Field(default_factory=FlowDetectionInfo)
    screen_patterns: dict[str, PatternAnalysisInfo] = Field(default_factory=dict)
    flow_patterns: dict[str, PatternAnalysisInfo] = Field(default_factory=dict)
    cross_flow: CrossFlowInfo | None = None
    responsive: ResponsiveInfo | None = None
