"""
Pack Dev Kit.

Fluent builder for authoring industry packs. Validation is deferred to
validate()/build(), so a pack can be assembled in any order.
"""

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from industry_analytics.core.exceptions import PackValidationError
from industry_analytics.packs.models import (
    ChartConfig,
    ChartTypeConfig,
    DetectionIndicator,
    FunnelStep,
    FunnelTemplate,
    IndustryPack,
    IndustrySemanticType,
    IndustrySubCategory,
    IndustryTheme,
    InsightTemplate,
    MetricDefinition,
    MetricFormula,
    MetricThresholds,
    PackMetadata,
    PackOverlay,
    TermEntry,
)
from industry_analytics.packs.validator import PackValidator, ValidationResult


logger = logging.getLogger(__name__)

R = TypeVar("R")


def _coerce(record_type: Type[R], value: Union[R, Mapping[str, Any]]) -> R:
    """Accept a record or its camelCase dict form."""
    if isinstance(value, record_type):
        return value
    return record_type.from_dict(dict(value))


class PackDevKit:
    """
    Builder for industry packs.

    Every mutator returns the builder, so calls chain.

    Example:
        pack = (
            PackDevKit("fitness", "Fitness Apps")
            .describe("Workout and habit tracking")
            .add_sub_category("running", "Running")
            .add_semantic_type("workout_id", ["workout_id", "session_id"], priority=9)
            .add_indicator(["workout_id"], weight=5)
            .add_kpi("workouts", "Workouts", "count($workout_id)")
            .create_funnel("onboarding", "Onboarding")
                .add_step("install", "Install", "install_date")
                .add_step("first_workout", "First Workout", "workout_id")
                .build()
            .set_theme(primary_color="#22c55e")
            .build()
        )
    """

    def __init__(self, pack_id: str, name: str):
        self._pack = IndustryPack(
            id=pack_id,
            name=name,
            version="1.0.0",
            chart_configs=ChartConfig(types=[], default_charts=[]),
        )
        self._validator = PackValidator()

    def describe(self, description: str) -> "PackDevKit":
        self._pack.description = description
        return self

    def version(self, version: str) -> "PackDevKit":
        self._pack.version = version
        return self

    # -------------------------------------------------------------------------
    # Sub-categories & detection
    # -------------------------------------------------------------------------

    def add_sub_category(
        self,
        sub_category_id: str,
        name: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> "PackDevKit":
        self._pack.sub_categories.append(
            IndustrySubCategory(id=sub_category_id, name=name, description=description, icon=icon)
        )
        return self

    def add_sub_categories(self, categories: List[IndustrySubCategory]) -> "PackDevKit":
        self._pack.sub_categories.extend(_coerce(IndustrySubCategory, c) for c in categories)
        return self

    def add_semantic_type(
        self,
        type_id: str,
        patterns: List[str],
        priority: int = 5,
        description: Optional[str] = None,
        data_type: Optional[str] = None,
    ) -> "PackDevKit":
        """Add a column-meaning category; patterns are lowercase name fragments."""
        self._pack.semantic_types.append(IndustrySemanticType(
            type=type_id,
            patterns=list(patterns),
            priority=priority,
            description=description,
            data_type=data_type,
        ))
        return self

    def add_semantic_types(self, types: List[IndustrySemanticType]) -> "PackDevKit":
        self._pack.semantic_types.extend(_coerce(IndustrySemanticType, t) for t in types)
        return self

    def add_indicator(
        self,
        types: List[str],
        weight: float,
        reason: Optional[str] = None,
        min_count: Optional[int] = None,
    ) -> "PackDevKit":
        """Add a detection rule; all types must be present unless min_count is set."""
        self._pack.detection_indicators.append(DetectionIndicator(
            types=list(types),
            weight=weight,
            min_count=min_count,
            reason=reason,
        ))
        return self

    # -------------------------------------------------------------------------
    # Metrics & funnels
    # -------------------------------------------------------------------------

    def add_metric(self, metric: MetricDefinition) -> "PackDevKit":
        self._pack.metrics.append(_coerce(MetricDefinition, metric))
        return self

    def add_kpi(
        self,
        metric_id: str,
        name: str,
        expression: str,
        format: str = "number",
        description: Optional[str] = None,
        thresholds: Optional[MetricThresholds] = None,
    ) -> "PackDevKit":
        """Shorthand for a KPI metric with a bare expression."""
        self._pack.metrics.append(MetricDefinition(
            id=metric_id,
            name=name,
            description=description,
            formula=MetricFormula(expression=expression),
            format=format,
            category="kpi",
            thresholds=_coerce(MetricThresholds, thresholds) if thresholds else None,
        ))
        return self

    def add_funnel(self, funnel: FunnelTemplate) -> "PackDevKit":
        self._pack.funnels.append(_coerce(FunnelTemplate, funnel))
        return self

    def create_funnel(self, funnel_id: str, name: str) -> "FunnelBuilder":
        """Start a funnel; FunnelBuilder.build() adds it and returns this builder."""
        return FunnelBuilder(self, funnel_id, name)

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def add_chart_type(self, config: ChartTypeConfig) -> "PackDevKit":
        self._pack.chart_configs.types.append(_coerce(ChartTypeConfig, config))
        return self

    def set_default_charts(self, chart_ids: List[str]) -> "PackDevKit":
        self._pack.chart_configs.default_charts = list(chart_ids)
        return self

    def add_insight(self, insight: InsightTemplate) -> "PackDevKit":
        self._pack.insight_templates.append(_coerce(InsightTemplate, insight))
        return self

    def set_terminology(self, terminology: Dict[str, TermEntry]) -> "PackDevKit":
        self._pack.terminology = {k: _coerce(TermEntry, v) for k, v in terminology.items()}
        return self

    def add_term(self, key: str, singular: str, plural: str) -> "PackDevKit":
        self._pack.terminology[key] = TermEntry(singular=singular, plural=plural)
        return self

    def set_theme(
        self,
        theme: Union[IndustryTheme, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> "PackDevKit":
        """Shallow-merge theme fields (e.g. primary_color) over the current theme."""
        merged = self._pack.theme.merged(theme)
        self._pack.theme = merged.merged(fields)
        return self

    def set_metadata(self, metadata: Union[PackMetadata, Mapping[str, Any]]) -> "PackDevKit":
        self._pack.metadata = (
            metadata if isinstance(metadata, PackMetadata) else PackMetadata(**metadata)
        )
        return self

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        return self._validator.validate_draft(self._pack)

    def build(self) -> IndustryPack:
        """
        Validate and return the finished pack.

        Raises:
            PackValidationError: If validation reports errors
        """
        validation = self.validate()

        if not validation.is_valid:
            raise PackValidationError(self._pack.id or "<unnamed>", validation.errors)

        for issue in validation.issues:
            logger.warning(f"Pack '{self._pack.id}': {issue}")

        return copy.deepcopy(self._pack)

    def build_unsafe(self) -> IndustryPack:
        """Return the pack as assembled so far, without validation."""
        return copy.deepcopy(self._pack)

    def _add_funnel(self, funnel: FunnelTemplate) -> None:
        self._pack.funnels.append(funnel)


class FunnelBuilder:
    """Accumulates one funnel for a PackDevKit."""

    def __init__(self, parent: PackDevKit, funnel_id: str, name: str):
        self._parent = parent
        self._funnel = FunnelTemplate(id=funnel_id, name=name, steps=[])

    def describe(self, description: str) -> "FunnelBuilder":
        self._funnel.description = description
        return self

    def add_step(
        self,
        step_id: str,
        name: str,
        semantic_type: str,
        event_patterns: Optional[List[str]] = None,
        condition: Optional[str] = None,
    ) -> "FunnelBuilder":
        self._funnel.steps.append(FunnelStep(
            id=step_id,
            name=name,
            semantic_type=semantic_type,
            event_patterns=list(event_patterns) if event_patterns is not None else None,
            condition=condition,
        ))
        return self

    def for_sub_categories(self, sub_categories: List[str]) -> "FunnelBuilder":
        self._funnel.sub_categories = list(sub_categories)
        return self

    def build(self) -> PackDevKit:
        """Add the funnel to the parent pack and return the parent builder."""
        self._parent._add_funnel(self._funnel)
        return self._parent


def create_pack(pack_id: str, name: str) -> PackDevKit:
    """Create a new pack builder."""
    return PackDevKit(pack_id, name)


def extend_pack(
    base: IndustryPack,
    customizations: Optional[PackOverlay] = None,
) -> IndustryPack:
    """
    Derive a customized pack from a base pack.

    Collections are the base entries followed by the customization
    entries; terminology, theme and metadata are shallow-merged with the
    customization winning. The version defaults to "<base>-custom".

    Args:
        base: Pack to extend (left unchanged)
        customizations: Fields to override or append
    """
    custom = customizations or PackOverlay()
    base = copy.deepcopy(base)
    custom = copy.deepcopy(custom)

    chart_configs = ChartConfig(
        types=base.chart_configs.types + (
            custom.chart_configs.types if custom.chart_configs else []
        ),
        default_charts=(
            custom.chart_configs.default_charts
            if custom.chart_configs and custom.chart_configs.default_charts is not None
            else base.chart_configs.default_charts
        ),
    )

    metadata = base.metadata
    if custom.metadata is not None:
        metadata = (metadata or PackMetadata()).merged(custom.metadata)

    return IndustryPack(
        id=custom.id or base.id,
        name=custom.name or base.name,
        description=custom.description if custom.description is not None else base.description,
        version=custom.version or f"{base.version}-custom",
        sub_categories=base.sub_categories + (custom.sub_categories or []),
        semantic_types=base.semantic_types + (custom.semantic_types or []),
        detection_indicators=base.detection_indicators + (custom.detection_indicators or []),
        metrics=base.metrics + (custom.metrics or []),
        funnels=base.funnels + (custom.funnels or []),
        chart_configs=chart_configs,
        insight_templates=base.insight_templates + (custom.insight_templates or []),
        terminology={**base.terminology, **(custom.terminology or {})},
        theme=base.theme.merged(custom.theme),
        metadata=metadata,
    )
