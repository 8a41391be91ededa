"""
Pack Models and Data Structures.

Defines the industry pack schema:
- Semantic types and detection indicators (used for detection)
- Metrics, funnels, charts and insight templates (used downstream)
- Terminology, theme and metadata (used for presentation)

Formula expressions, funnel conditions and insight templates are stored
as opaque strings; this package never evaluates them.
"""

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Union

from industry_analytics.utils.serialization import SerializableMixin


@dataclass
class IndustrySubCategory(SerializableMixin):
    """A refinement within an industry (e.g. puzzle vs idle in gaming)."""
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    icon: Optional[str] = None


@dataclass
class IndustrySemanticType(SerializableMixin):
    """A column-meaning category matched against column names."""
    type: str = ""
    patterns: List[str] = field(default_factory=list)  # lowercase fragments
    priority: int = 5  # 1-10, >= 8 counts as a strong indicator
    description: Optional[str] = None
    data_type: Optional[str] = None


@dataclass
class DetectionIndicator(SerializableMixin):
    """Weighted rule: these semantic types together imply the industry."""
    types: List[str] = field(default_factory=list)
    weight: float = 1.0
    min_count: Optional[int] = None
    reason: Optional[str] = None

    @property
    def required_count(self) -> int:
        """Number of listed types that must be present (all by default)."""
        return self.min_count if self.min_count else len(self.types)


@dataclass
class MetricFormula(SerializableMixin):
    """Expression with $column references plus its semantic-type dependencies."""
    expression: str = ""
    required_types: Optional[List[str]] = None
    fallback: Optional[str] = None


@dataclass
class MetricThresholds(SerializableMixin):
    """Good/warning/bad bounds used for visualization."""
    good: Optional[float] = None
    warning: Optional[float] = None
    bad: Optional[float] = None


@dataclass
class MetricDefinition(SerializableMixin):
    """Definition of a metric computed from a dataset."""
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    formula: MetricFormula = field(default_factory=MetricFormula)
    format: str = "number"
    category: str = "custom"
    thresholds: Optional[MetricThresholds] = None
    tags: Optional[List[str]] = None
    sub_categories: Optional[List[str]] = None

    @property
    def required_types(self) -> List[str]:
        return list(self.formula.required_types or [])

    def applies_to(self, sub_category: str) -> bool:
        """Unrestricted metrics apply to every sub-category."""
        return self.sub_categories is None or sub_category in self.sub_categories


@dataclass
class FunnelStep(SerializableMixin):
    """One step of a funnel template."""
    id: str = ""
    name: str = ""
    semantic_type: str = ""
    event_patterns: Optional[List[str]] = None
    condition: Optional[str] = None


@dataclass
class FunnelTemplate(SerializableMixin):
    """Pre-defined ordered funnel."""
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    steps: List[FunnelStep] = field(default_factory=list)
    sub_categories: Optional[List[str]] = None

    def applies_to(self, sub_category: str) -> bool:
        return self.sub_categories is None or sub_category in self.sub_categories


@dataclass
class ChartTypeConfig(SerializableMixin):
    """A chart the dashboard can render for this industry."""
    type: str = "line"
    name: str = ""
    description: Optional[str] = None
    metrics: List[str] = field(default_factory=list)
    default_dimensions: Optional[List[str]] = None
    sub_categories: Optional[List[str]] = None


@dataclass
class ChartConfig(SerializableMixin):
    """Chart catalog of a pack."""
    types: List[ChartTypeConfig] = field(default_factory=list)
    default_charts: Optional[List[str]] = None


@dataclass
class InsightTemplate(SerializableMixin):
    """Template string with {{metric}} placeholders."""
    id: str = ""
    name: str = ""
    template: str = ""
    required_metrics: List[str] = field(default_factory=list)
    priority: int = 5
    category: str = "neutral"


@dataclass
class TermEntry(SerializableMixin):
    """Industry wording for a concept (e.g. user -> Player/Players)."""
    singular: str = ""
    plural: str = ""


@dataclass
class IndustryTheme(SerializableMixin):
    """Colors and icon used when rendering the industry."""
    primary_color: str = "#8b5cf6"
    accent_color: str = "#6366f1"
    chart_colors: List[str] = field(default_factory=list)
    icon: Optional[str] = None

    def merged(self, overrides: Union["IndustryTheme", Mapping[str, Any], None]) -> "IndustryTheme":
        """Shallow-merge overrides (field names) into a new theme."""
        return replace(self, **_as_field_mapping(IndustryTheme, overrides))


@dataclass
class PackMetadata(SerializableMixin):
    """Authoring metadata."""
    author: Optional[str] = None
    license: Optional[str] = None
    homepage: Optional[str] = None
    repository: Optional[str] = None

    def merged(self, overrides: Union["PackMetadata", Mapping[str, Any], None]) -> "PackMetadata":
        return replace(self, **_as_field_mapping(PackMetadata, overrides))


@dataclass
class IndustryPack(SerializableMixin):
    """
    Complete configuration bundle for one analytics vertical.

    Invariants (checked by the registry and the dev kit):
    - semantic_types[].type values are unique
    - metrics[].id values are unique
    """
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    version: str = ""

    sub_categories: List[IndustrySubCategory] = field(default_factory=list)
    semantic_types: List[IndustrySemanticType] = field(default_factory=list)
    detection_indicators: List[DetectionIndicator] = field(default_factory=list)
    metrics: List[MetricDefinition] = field(default_factory=list)
    funnels: List[FunnelTemplate] = field(default_factory=list)
    chart_configs: ChartConfig = field(default_factory=ChartConfig)
    insight_templates: List[InsightTemplate] = field(default_factory=list)
    terminology: Dict[str, TermEntry] = field(default_factory=dict)
    theme: IndustryTheme = field(default_factory=IndustryTheme)
    metadata: Optional[PackMetadata] = None

    def get_semantic_type(self, type_id: str) -> Optional[IndustrySemanticType]:
        for semantic_type in self.semantic_types:
            if semantic_type.type == type_id:
                return semantic_type
        return None

    def get_metric(self, metric_id: str) -> Optional[MetricDefinition]:
        for metric in self.metrics:
            if metric.id == metric_id:
                return metric
        return None

    def sub_category_ids(self) -> List[str]:
        return [sc.id for sc in self.sub_categories]

    def clone(self) -> "IndustryPack":
        """Deep copy, rebuilding every nested list and record."""
        return IndustryPack.from_dict(self.to_dict())


@dataclass
class PackOverlay:
    """
    Partial pack used to customize or merge into a base pack.

    None means "not provided". theme and metadata are partial mappings of
    field names (e.g. {"primary_color": "#000"}) merged over the base.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    sub_categories: Optional[List[IndustrySubCategory]] = None
    semantic_types: Optional[List[IndustrySemanticType]] = None
    detection_indicators: Optional[List[DetectionIndicator]] = None
    metrics: Optional[List[MetricDefinition]] = None
    funnels: Optional[List[FunnelTemplate]] = None
    chart_configs: Optional[ChartConfig] = None
    insight_templates: Optional[List[InsightTemplate]] = None
    terminology: Optional[Dict[str, TermEntry]] = None
    theme: Optional[Union[IndustryTheme, Mapping[str, Any]]] = None
    metadata: Optional[Union[PackMetadata, Mapping[str, Any]]] = None

    @classmethod
    def from_pack(cls, pack: IndustryPack) -> "PackOverlay":
        """Treat a whole pack as an overlay."""
        return cls(**{f.name: getattr(pack, f.name) for f in fields(IndustryPack)})


def _as_field_mapping(record_type: type, overrides: Any) -> Dict[str, Any]:
    """Normalize a record or partial mapping into dataclass field overrides."""
    if overrides is None:
        return {}
    if isinstance(overrides, record_type):
        return {k: v for k, v in asdict(overrides).items() if v is not None}

    known = {f.name for f in fields(record_type)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(
            f"Unknown {record_type.__name__} fields: {sorted(unknown)}"
        )
    return dict(overrides)
