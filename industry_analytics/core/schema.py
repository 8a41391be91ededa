"""
Detection input and output records.

ColumnMeaning is the sole input of the industry detector; DetectionResult
is what it hands to metric evaluation and rendering layers.
"""

from typing import List, Optional

import polars as pl
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from industry_analytics.core.enums import IndustryType, SemanticDataType
from industry_analytics.utils.matching import normalize_name


class _DetectionModel(BaseModel):
    """Accepts snake_case or camelCase input; dumps camelCase with by_alias."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnMeaning(_DetectionModel):
    """A raw column annotated by upstream schema analysis."""

    column: str = Field(..., description="Raw header name")
    meaning: str = Field(default="", description="Normalized semantic label")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0, description="Upstream certainty")
    data_type: Optional[str] = Field(default=None, description="Value type hint")


class IndustryMatch(_DetectionModel):
    """One ranked industry candidate."""

    industry: str = Field(..., description="Pack id, or 'custom' when nothing matched")
    sub_category: Optional[str] = Field(default=None, description="Selected sub-category id")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list)


class DetectedSemanticType(_DetectionModel):
    """Column to semantic type assignment with its match confidence."""

    column: str
    type: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class DetectionResult(_DetectionModel):
    """Ranked classification of a dataset."""

    primary: IndustryMatch
    alternatives: List[IndustryMatch] = Field(default_factory=list)
    is_ambiguous: bool = False
    detected_semantic_types: List[DetectedSemanticType] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "DetectionResult":
        """Result for datasets with no detectable signal."""
        return cls(
            primary=IndustryMatch(
                industry=IndustryType.CUSTOM.value,
                confidence=0.0,
                reasons=["No industry packs registered or no matching indicators found"],
            ),
        )

    @property
    def industry(self) -> str:
        return self.primary.industry

    def types_for_column(self, column: str) -> List[DetectedSemanticType]:
        return [d for d in self.detected_semantic_types if d.column == column]


def _frame_data_type(dtype: pl.DataType) -> SemanticDataType:
    """Map a Polars dtype to the value type hint used by packs."""
    if dtype.is_numeric():
        return SemanticDataType.NUMBER
    if dtype.is_temporal():
        return SemanticDataType.DATE

    dtype_str = str(dtype).lower()
    if "bool" in dtype_str:
        return SemanticDataType.BOOLEAN
    if "list" in dtype_str or "array" in dtype_str:
        return SemanticDataType.ARRAY
    if "struct" in dtype_str or "object" in dtype_str:
        return SemanticDataType.OBJECT
    return SemanticDataType.STRING


def columns_from_frame(df: pl.DataFrame) -> List[ColumnMeaning]:
    """
    Derive column observations from a DataFrame schema.

    Without upstream schema analysis the normalized column name serves as
    the meaning, observed with full confidence.

    Args:
        df: Source DataFrame

    Returns:
        One ColumnMeaning per column, in frame order
    """
    return [
        ColumnMeaning(
            column=name,
            meaning=normalize_name(name),
            confidence=1.0,
            data_type=_frame_data_type(dtype).value,
        )
        for name, dtype in df.schema.items()
    ]
