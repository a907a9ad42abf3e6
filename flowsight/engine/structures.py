"""Engine entities: screens, components, roles, flow candidates and flows.

Everything here is created fresh per analysis run. Screens are joined across
strategies by ``ScreenStructure.id``, never by display name.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field

from flowsight.utils.math_helpers import clamp


class DeviceType(str, enum.Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"
    UNKNOWN = "unknown"


class LayoutType(str, enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    GRID = "grid"
    MIXED = "mixed"
    AUTO = "auto"
    NONE = "none"
    UNKNOWN = "unknown"


class RoleType(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    OPERATOR = "operator"
    GUEST = "guest"
    MODERATOR = "moderator"


class FlowType(str, enum.Enum):
    ONBOARDING = "onboarding"
    AUTHENTICATION = "authentication"
    CHECKOUT = "checkout"
    SETTINGS = "settings"
    MAIN_FEATURE = "main_feature"
    UNKNOWN = "unknown"


class NavigationPattern(str, enum.Enum):
    STACK = "stack"
    TAB = "tab"
    MODAL = "modal"
    DRAWER = "drawer"
    MIXED = "mixed"


@dataclass
class ComponentStructure:
    """One classified node inside a screen."""

    id: str
    name: str
    type: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    semantic_type: str | None = None
    confidence: float = 0.0
    background_color: str | None = None
    text_color: str | None = None
    border_color: str | None = None
    border_radius: float = 0.0
    font_size: float | None = None
    font_weight: str | None = None
    text_align: str | None = None
    text: str | None = None
    padding: tuple[float, float, float, float] | None = None
    item_spacing: float | None = None
    has_image_fill: bool = False
    children: list[ComponentStructure] = field(default_factory=list)

    def walk(self) -> Iterator[ComponentStructure]:
        """Pre-order traversal including self."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class DesignSystemStats:
    unique_colors: int = 0
    unique_font_sizes: int = 0
    unique_spacings: int = 0
    component_types: list[str] = field(default_factory=list)


@dataclass
class ScreenStructure:
    """A top-level frame treated as one app view."""

    id: str
    name: str
    page: str | None = None
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    device_type: DeviceType = DeviceType.UNKNOWN
    layout_type: LayoutType = LayoutType.NONE
    background_color: str | None = None
    components: list[ComponentStructure] = field(default_factory=list)
    design_system: DesignSystemStats = field(default_factory=DesignSystemStats)

    def walk(self) -> Iterator[ComponentStructure]:
        for component in self.components:
            yield from component.walk()

    @property
    def component_count(self) -> int:
        return sum(1 for _ in self.walk())

    def component_signature(self) -> list[str]:
        """Semantic types in pre-order; the multiset compared by content similarity."""
        return [c.semantic_type for c in self.walk() if c.semantic_type]


@dataclass
class UserRole:
    id: str
    name: str
    type: RoleType
    confidence: float
    detection_source: str = "layer_name"

    def __post_init__(self) -> None:
        self.confidence = clamp(self.confidence)


DEFAULT_ROLE_ID = "default_customer"


def default_role() -> UserRole:
    """Role assigned to flows no detected role matched."""
    return UserRole(
        id=DEFAULT_ROLE_ID,
        name="Customer",
        type=RoleType.CUSTOMER,
        confidence=0.5,
        detection_source="content_analysis",
    )


@dataclass
class FlowGroup:
    """Transient clustering candidate, alive only inside flow detection."""

    id: str
    screens: list[ScreenStructure]
    confidence: float
    detection_method: str
    role: UserRole | None = None
    flow_type: str | None = None
    navigation_pattern: str | None = None
    evidence: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.confidence = clamp(self.confidence)

    @property
    def screen_ids(self) -> set[str]:
        return {s.id for s in self.screens}


@dataclass
class FlowStructure:
    id: str
    name: str
    user_role: UserRole
    screens: list[ScreenStructure]
    flow_type: FlowType
    navigation_pattern: NavigationPattern
    device_targets: list[DeviceType]
    sequence: int
    confidence: float = 0.0
    detection_method: str = ""
    estimated_duration: int = 0
    critical_path: bool = False


@dataclass
class DetectionQuality:
    total_screens: int = 0
    screens_in_flows: int = 0
    average_flow_length: float = 0.0
    role_detection_accuracy: float = 0.0
    average_confidence: float = 0.0


@dataclass
class FlowDetectionResult:
    flows: list[FlowStructure] = field(default_factory=list)
    orphaned_screens: list[ScreenStructure] = field(default_factory=list)
    role_distribution: dict[str, int] = field(default_factory=dict)
    flow_type_distribution: dict[str, int] = field(default_factory=dict)
    detection_quality: DetectionQuality = field(default_factory=DetectionQuality)
    recommendations: list[str] = field(default_factory=list)


@dataclass
class FlowStep:
    """One screen's place inside a flow."""

    screen_id: str
    screen_name: str
    position: int
    stage: str
    navigation_to: list[str] = field(default_factory=list)
    navigation_from: list[str] = field(default_factory=list)
    user_intent: str = ""
    critical_path: bool = False


@dataclass
class DesignPattern:
    name: str
    confidence: float
    components: list[str] = field(default_factory=list)
    description: str = ""
    recommendations: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.confidence = clamp(self.confidence, 0.0, 100.0)


@dataclass
class ConsistencyScore:
    overall: float = 1.0
    spacing: float = 1.0
    color: float = 1.0
    typography: float = 1.0


@dataclass
class PatternAnalysis:
    patterns: list[DesignPattern] = field(default_factory=list)
    complexity: str = "low"
    consistency: ConsistencyScore = field(default_factory=ConsistencyScore)
    type_counts: dict[str, int] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)

    @property
    def pattern_names(self) -> list[str]:
        return [p.name for p in self.patterns]


@dataclass
class CrossFlowConsistency:
    shared_components: int = 0
    consistent_styling: float = 0.0
    navigation_patterns: float = 0.0
    overall_score: float = 0.0


@dataclass
class DeviceDetection:
    device_type: DeviceType
    orientation: str
    confidence: float
    width: float
    height: float
    aspect_ratio: float
    pixel_density: str = "@1x"
    category: str = "Unknown Device"
    recommendations: list[str] = field(default_factory=list)


@dataclass
class ResponsiveCoverage:
    is_responsive: bool
    coverage_score: int
    missing_device_types: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
