"""
Industry Detector.

Classifies a dataset into one of the registered industries from its
column observations, using semantic-type pattern matching and the
weighted detection indicators declared by each pack.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import polars as pl
from pydantic import BaseModel, Field

from industry_analytics.config import get_settings
from industry_analytics.core.registry import IndustryRegistry, get_industry_registry
from industry_analytics.core.schema import (
    ColumnMeaning,
    DetectedSemanticType,
    DetectionResult,
    IndustryMatch,
    columns_from_frame,
)
from industry_analytics.packs.models import IndustryPack, IndustrySemanticType
from industry_analytics.utils.matching import match_strength


logger = logging.getLogger(__name__)


STRONG_PRIORITY = 8
STRONG_BONUS = 2.0
FUNNEL_WEIGHT = 0.5


class DetectorConfig(BaseModel):
    """Detector options."""

    min_confidence: float = Field(
        default=0.3, ge=0.0, le=1.0,
        description="Threshold applied by is_confident(); detect() does not filter on it",
    )
    ambiguity_threshold: float = Field(
        default=0.2, ge=0.0, le=1.0,
        description="Runner-up confidence above 1 - threshold marks a result ambiguous",
    )
    max_alternatives: int = Field(default=3, ge=0, description="Runners-up to report")

    @classmethod
    def from_settings(cls) -> "DetectorConfig":
        settings = get_settings()
        return cls(
            min_confidence=settings.min_confidence,
            ambiguity_threshold=settings.ambiguity_threshold,
            max_alternatives=settings.max_alternatives,
        )


class IndustryDetector:
    """
    Stateless classifier over the packs of a registry.

    Example:
        detector = IndustryDetector()
        result = detector.detect([
            ColumnMeaning(column="mrr", meaning="mrr", confidence=0.95),
        ])
        print(result.primary.industry, result.primary.confidence)
    """

    def __init__(
        self,
        registry: Optional[IndustryRegistry] = None,
        config: Optional[DetectorConfig] = None,
    ):
        self.registry = registry if registry is not None else get_industry_registry()
        self.config = config or DetectorConfig()

    def detect(self, columns: Sequence[ColumnMeaning]) -> DetectionResult:
        """
        Rank registered industries against the observed columns.

        Args:
            columns: Column observations from schema analysis

        Returns:
            DetectionResult; the empty result when nothing scores
        """
        packs = self.registry.get_all_packs()
        ranked = self._rank(columns, packs)

        if not ranked:
            logger.debug(f"No industry signal in {len(columns)} columns")
            return DetectionResult.empty()

        alternatives = ranked[1:self.config.max_alternatives + 1]
        is_ambiguous = (
            len(ranked) > 1
            and ranked[1].confidence > 1 - self.config.ambiguity_threshold
        )

        result = DetectionResult(
            primary=ranked[0],
            alternatives=alternatives,
            is_ambiguous=is_ambiguous,
            detected_semantic_types=self._detect_types(columns, packs),
        )

        logger.debug(
            f"Detected industry '{result.primary.industry}' "
            f"(ambiguous={is_ambiguous}, candidates={len(ranked)})"
        )
        return result

    def detect_with_sub_category(
        self,
        columns: Sequence[ColumnMeaning],
        industry_hint: Optional[str] = None,
    ) -> DetectionResult:
        """
        Detect, then pick the best sub-category of the resolved industry.

        The primary industry never changes. A registered hint only selects
        the pack whose sub-categories are scored; an unknown hint is
        ignored. The result is returned unchanged when the resolved pack
        has at most one sub-category.

        Args:
            columns: Column observations
            industry_hint: Industry id whose sub-categories are scored
        """
        base = self.detect(columns)

        target = base.primary.industry
        if industry_hint and self.registry.has_pack(industry_hint):
            target = industry_hint
        elif industry_hint:
            logger.debug(f"Ignoring unknown industry hint '{industry_hint}'")

        pack = self.registry.get_pack(target)
        if pack is None or len(pack.sub_categories) <= 1:
            return base

        scores = self._score_sub_categories(columns, pack)
        if scores:
            base.primary.sub_category = scores[0][0]
        return base

    def detect_frame(self, df: pl.DataFrame) -> DetectionResult:
        """Detect from a DataFrame using its column names."""
        return self.detect(columns_from_frame(df))

    def is_confident(self, result: DetectionResult) -> bool:
        """Whether the primary match reaches min_confidence and is a real industry."""
        return (
            result.primary.industry in self.registry
            and result.primary.confidence >= self.config.min_confidence
        )

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def _rank(
        self,
        columns: Sequence[ColumnMeaning],
        packs: List[IndustryPack],
    ) -> List[IndustryMatch]:
        """All packs ranked by score, or [] when the top score is zero."""
        scored = [(pack.id, *self._score_pack(columns, pack)) for pack in packs]
        # sorted() is stable: equal scores keep registration order
        scored = sorted(scored, key=lambda s: s[1], reverse=True)

        if not scored or scored[0][1] <= 0:
            return []

        top_score = scored[0][1]
        return [
            IndustryMatch(industry=pack_id, confidence=score / top_score, reasons=reasons)
            for pack_id, score, reasons in scored
        ]

    def _score_pack(
        self,
        columns: Sequence[ColumnMeaning],
        pack: IndustryPack,
    ) -> Tuple[float, List[str]]:
        score = 0.0
        reasons: List[str] = []

        # semantic type id -> number of columns assigned to it
        found: Dict[str, int] = {}
        for column in columns:
            semantic_type = self._best_type(column, pack.semantic_types)
            if semantic_type is not None:
                found[semantic_type.type] = found.get(semantic_type.type, 0) + 1

        for indicator in pack.detection_indicators:
            matched = [t for t in indicator.types if t in found]
            if len(matched) < indicator.required_count:
                continue

            score += indicator.weight * len(matched)
            if indicator.reason:
                reasons.append(indicator.reason)
            else:
                reasons.append(
                    f"Found {len(matched)} matching types: {', '.join(matched[:3])}"
                )

        for type_id in found:
            semantic_type = pack.get_semantic_type(type_id)
            if semantic_type is not None and semantic_type.priority >= STRONG_PRIORITY:
                score += STRONG_BONUS
                reasons.append(f"Strong indicator: {type_id}")

        return score, reasons

    @staticmethod
    def _best_type(
        column: ColumnMeaning,
        semantic_types: List[IndustrySemanticType],
    ) -> Optional[IndustrySemanticType]:
        """Strongest-matching semantic type; the first declared wins ties."""
        best = None
        best_strength = 0.0
        for semantic_type in semantic_types:
            strength = max(
                (match_strength(column.meaning, column.column, p) for p in semantic_type.patterns),
                default=0.0,
            )
            if strength > best_strength:
                best, best_strength = semantic_type, strength
        return best

    def _detect_types(
        self,
        columns: Sequence[ColumnMeaning],
        packs: List[IndustryPack],
    ) -> List[DetectedSemanticType]:
        """Best confidence per (column, semantic type) across all packs."""
        best: Dict[Tuple[str, str], float] = {}

        for column in columns:
            for pack in packs:
                for semantic_type in pack.semantic_types:
                    for pattern in semantic_type.patterns:
                        strength = match_strength(column.meaning, column.column, pattern)
                        if strength <= 0:
                            continue

                        key = (column.column, semantic_type.type)
                        confidence = strength * column.confidence
                        if key not in best or confidence > best[key]:
                            best[key] = confidence

        return [
            DetectedSemanticType(column=col, type=type_id, confidence=confidence)
            for (col, type_id), confidence in best.items()
        ]

    def _score_sub_categories(
        self,
        columns: Sequence[ColumnMeaning],
        pack: IndustryPack,
    ) -> List[Tuple[str, float]]:
        """
        Score each sub-category by the metrics and funnels restricted to it.

        A metric counts 1 when every required type appears in some column's
        meaning or name; each funnel counts 0.5.
        """
        observed = [(c.meaning.lower(), c.column.lower()) for c in columns]

        def satisfied(required_type: str) -> bool:
            needle = required_type.lower()
            return any(needle in meaning or needle in name for meaning, name in observed)

        scores = []
        for sub_category in pack.sub_categories:
            score = 0.0
            for metric in pack.metrics:
                if metric.sub_categories and sub_category.id in metric.sub_categories:
                    if all(satisfied(t) for t in metric.required_types):
                        score += 1
            for funnel in pack.funnels:
                if funnel.sub_categories and sub_category.id in funnel.sub_categories:
                    score += FUNNEL_WEIGHT
            scores.append((sub_category.id, score))

        return sorted(scores, key=lambda s: s[1], reverse=True)


def create_industry_detector(
    config: Optional[DetectorConfig] = None,
    registry: Optional[IndustryRegistry] = None,
) -> IndustryDetector:
    """Create a detector bound to the default registry and configured from settings."""
    return IndustryDetector(
        registry=registry if registry is not None else get_industry_registry(),
        config=config or DetectorConfig.from_settings(),
    )
