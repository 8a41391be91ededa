"""
Core components of Industry Analytics.

The registry and detector live in industry_analytics.core.registry and
industry_analytics.core.detector; they depend on the packs package and
are re-exported from the top-level package.
"""

from .schema import (
    ColumnMeaning,
    IndustryMatch,
    DetectedSemanticType,
    DetectionResult,
    columns_from_frame,
)

# Exceptions
from .exceptions import (
    IndustryAnalyticsError,
    RegistryError,
    DuplicatePackError,
    PackNotFoundError,
    PackError,
    PackValidationError,
    DuplicateSemanticTypeError,
    DuplicateMetricIdError,
    PackLoadError,
)

# Enums
from .enums import (
    IndustryType,
    SemanticDataType,
    MetricFormat,
    MetricCategory,
    ChartType,
    InsightCategory,
    RegistryEventType,
    IssueSeverity,
)

__all__ = [
    # Schema
    "ColumnMeaning",
    "IndustryMatch",
    "DetectedSemanticType",
    "DetectionResult",
    "columns_from_frame",
    # Exceptions
    "IndustryAnalyticsError",
    "RegistryError",
    "DuplicatePackError",
    "PackNotFoundError",
    "PackError",
    "PackValidationError",
    "DuplicateSemanticTypeError",
    "DuplicateMetricIdError",
    "PackLoadError",
    # Enums
    "IndustryType",
    "SemanticDataType",
    "MetricFormat",
    "MetricCategory",
    "ChartType",
    "InsightCategory",
    "RegistryEventType",
    "IssueSeverity",
]
