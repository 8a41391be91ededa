"""
Industry Packs System.

An industry pack bundles everything needed to analyze one vertical:
- Semantic types and detection indicators
- Metrics and funnel templates
- Charts, insight templates, terminology and theme
"""

from industry_analytics.packs.models import (
    IndustryPack,
    IndustrySubCategory,
    IndustrySemanticType,
    DetectionIndicator,
    MetricDefinition,
    MetricFormula,
    MetricThresholds,
    FunnelStep,
    FunnelTemplate,
    ChartTypeConfig,
    ChartConfig,
    InsightTemplate,
    TermEntry,
    IndustryTheme,
    PackMetadata,
    PackOverlay,
)
from industry_analytics.packs.validator import PackValidator, ValidationIssue, ValidationResult
from industry_analytics.packs.devkit import PackDevKit, FunnelBuilder, create_pack, extend_pack
from industry_analytics.packs.exporter import PackExporter, ImportResult, ExportMetadata
from industry_analytics.packs.loader import PackLoader, register_packs, bootstrap_registry
from industry_analytics.packs.builtin import (
    get_builtin_packs,
    load_builtin_pack,
    register_builtin_packs,
)

__all__ = [
    # Models
    "IndustryPack",
    "IndustrySubCategory",
    "IndustrySemanticType",
    "DetectionIndicator",
    "MetricDefinition",
    "MetricFormula",
    "MetricThresholds",
    "FunnelStep",
    "FunnelTemplate",
    "ChartTypeConfig",
    "ChartConfig",
    "InsightTemplate",
    "TermEntry",
    "IndustryTheme",
    "PackMetadata",
    "PackOverlay",
    # Validation
    "PackValidator",
    "ValidationIssue",
    "ValidationResult",
    # Authoring
    "PackDevKit",
    "FunnelBuilder",
    "create_pack",
    "extend_pack",
    # Import/export
    "PackExporter",
    "ImportResult",
    "ExportMetadata",
    # Loading
    "PackLoader",
    "register_packs",
    "bootstrap_registry",
    "get_builtin_packs",
    "load_builtin_pack",
    "register_builtin_packs",
]
