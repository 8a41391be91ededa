"""
Centralized Enum Definitions.

Shared enumerations used across the registry, detector and pack tooling.
"""

from enum import Enum


# -----------------------------------------------------------------------------
# Industries
# -----------------------------------------------------------------------------

class IndustryType(str, Enum):
    """
    Known industry identifiers.

    Packs may use any string id; CUSTOM is the sentinel returned when
    detection finds no signal.
    """
    GAMING = "gaming"
    SAAS = "saas"
    ECOMMERCE = "ecommerce"
    EDTECH = "edtech"
    MEDIA = "media"
    FINTECH = "fintech"
    HEALTHCARE = "healthcare"
    CUSTOM = "custom"


# -----------------------------------------------------------------------------
# Semantic Types
# -----------------------------------------------------------------------------

class SemanticDataType(str, Enum):
    """
    Expected value type of a column carrying a semantic type.

    Used by: IndustrySemanticType, columns_from_frame
    """
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


# -----------------------------------------------------------------------------
# Metrics
# -----------------------------------------------------------------------------

class MetricFormat(str, Enum):
    """Display format of a metric value."""
    NUMBER = "number"
    PERCENTAGE = "percentage"
    CURRENCY = "currency"
    DURATION = "duration"
    DECIMAL = "decimal"


class MetricCategory(str, Enum):
    """Grouping of metrics on dashboards."""
    KPI = "kpi"
    ENGAGEMENT = "engagement"
    MONETIZATION = "monetization"
    RETENTION = "retention"
    FUNNEL = "funnel"
    CUSTOM = "custom"


# -----------------------------------------------------------------------------
# Charts & Insights
# -----------------------------------------------------------------------------

class ChartType(str, Enum):
    """Chart kinds a pack can declare."""
    RETENTION = "retention"
    FUNNEL = "funnel"
    LINE = "line"
    BAR = "bar"
    AREA = "area"
    PIE = "pie"
    HEATMAP = "heatmap"
    SCATTER = "scatter"
    COHORT = "cohort"


class InsightCategory(str, Enum):
    """Tone of an insight template."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    ACTIONABLE = "actionable"


# -----------------------------------------------------------------------------
# Registry Events
# -----------------------------------------------------------------------------

class RegistryEventType(str, Enum):
    """Kinds of registry change notifications."""
    REGISTERED = "registered"
    UNREGISTERED = "unregistered"
    UPDATED = "updated"


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

class IssueSeverity(str, Enum):
    """Severity of a validation issue."""
    ERROR = "error"
    WARNING = "warning"
