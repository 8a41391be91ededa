"""
Pack Validator Module.

Validates industry packs at three levels:
- Registration: structural checks, first problem raised as an exception
- Authoring: errors and warnings reported by the dev kit
- Import: checks over the raw, untyped pack document
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from industry_analytics.core.enums import IssueSeverity
from industry_analytics.core.exceptions import (
    DuplicateMetricIdError,
    DuplicateSemanticTypeError,
    PackValidationError,
)
from industry_analytics.packs.models import IndustryPack


logger = logging.getLogger(__name__)


# Entry field that must hold a list, per object array
NESTED_ARRAYS = {
    "detectionIndicators": "types",
    "funnels": "steps",
    "insightTemplates": "requiredMetrics",
}


class ValidationIssue:
    """Represents a validation error or warning."""

    def __init__(
        self,
        code: str,
        message: str,
        path: Optional[str] = None,
        severity: IssueSeverity = IssueSeverity.ERROR,
    ):
        self.code = code
        self.message = message
        self.path = path
        self.severity = severity

    @property
    def is_error(self) -> bool:
        return self.severity == IssueSeverity.ERROR

    def describe(self) -> str:
        """Plain message prefixed with the location, if any."""
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def __str__(self) -> str:
        if self.path:
            return f"[{self.code}] {self.path}: {self.message}"
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"ValidationIssue({self.code!r}, {self.message!r}, path={self.path!r})"


@dataclass
class ValidationResult:
    """Outcome of a non-raising validation pass."""
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [i.describe() for i in self.issues if i.is_error]

    @property
    def warnings(self) -> List[str]:
        return [i.describe() for i in self.issues if not i.is_error]

    @property
    def is_valid(self) -> bool:
        return not any(i.is_error for i in self.issues)

    def error(self, code: str, message: str, path: Optional[str] = None) -> None:
        self.issues.append(ValidationIssue(code, message, path, IssueSeverity.ERROR))

    def warning(self, code: str, message: str, path: Optional[str] = None) -> None:
        self.issues.append(ValidationIssue(code, message, path, IssueSeverity.WARNING))


class PackValidator:
    """
    Validates pack structure and content.

    Example:
        validator = PackValidator()

        # Raise on the first structural problem (registry)
        validator.assert_valid(pack)

        # Collect errors and warnings (dev kit)
        result = validator.validate_draft(pack)

        # Check an untrusted document (import)
        result = validator.validate_raw(json.loads(text))
    """

    REQUIRED_FIELDS = ["id", "name", "version"]
    ARRAY_FIELDS = ["subCategories", "semanticTypes", "metrics"]
    OPTIONAL_ARRAY_FIELDS = ["detectionIndicators", "funnels", "insightTemplates"]
    OBJECT_FIELDS = ["chartConfigs", "terminology", "theme"]
    ENTRY_FIELDS = ["subCategories", "detectionIndicators", "funnels", "insightTemplates"]

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def assert_valid(self, pack: IndustryPack) -> None:
        """
        Check the invariants a registered pack must hold.

        Raises:
            PackValidationError: Missing required field or non-list collection
            DuplicateSemanticTypeError: Two semantic types share a type
            DuplicateMetricIdError: Two metrics share an id
        """
        pack_id = getattr(pack, "id", "") or "<unnamed>"

        if not pack.id:
            raise PackValidationError(pack_id, ["Pack must have an id"])
        if not pack.name:
            raise PackValidationError(pack_id, ["Pack must have a name"])
        if not pack.version:
            raise PackValidationError(pack_id, ["Pack must have a version"])

        for attr in ("sub_categories", "semantic_types", "metrics"):
            if not isinstance(getattr(pack, attr), list):
                raise PackValidationError(pack_id, [f"Pack must have {attr} list"])

        duplicate = _first_duplicate(st.type for st in pack.semantic_types)
        if duplicate is not None:
            raise DuplicateSemanticTypeError(pack.id, duplicate)

        duplicate = _first_duplicate(m.id for m in pack.metrics)
        if duplicate is not None:
            raise DuplicateMetricIdError(pack.id, duplicate)

    # -------------------------------------------------------------------------
    # Authoring
    # -------------------------------------------------------------------------

    def validate_draft(self, pack: IndustryPack) -> ValidationResult:
        """Errors block a build; warnings only flag incomplete packs."""
        result = ValidationResult()

        if not pack.id:
            result.error("MISSING_FIELD", "Pack ID is required")
        if not pack.name:
            result.error("MISSING_FIELD", "Pack name is required")

        if not pack.sub_categories:
            result.warning("NO_SUB_CATEGORIES", "No sub-categories defined")
        if not pack.semantic_types:
            result.warning(
                "NO_SEMANTIC_TYPES",
                "No semantic types defined - detection will not work",
            )
        if not pack.metrics:
            result.warning("NO_METRICS", "No metrics defined")
        if not pack.detection_indicators:
            result.warning(
                "NO_INDICATORS",
                "No detection indicators - industry cannot be auto-detected",
            )

        for type_id in _duplicates(st.type for st in pack.semantic_types):
            result.error(
                "DUPLICATE_SEMANTIC_TYPE", f"Duplicate semantic type: {type_id}"
            )
        for metric_id in _duplicates(m.id for m in pack.metrics):
            result.error("DUPLICATE_METRIC_ID", f"Duplicate metric: {metric_id}")

        if not pack.theme.chart_colors:
            result.warning("NO_CHART_COLORS", "No chart colors defined")

        return result

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def validate_raw(self, data: Any) -> ValidationResult:
        """
        Validate a pack document before it is turned into an IndustryPack.

        Shape errors cover every collection the detector and registry
        iterate, so a document that passes here deserializes into a pack
        those components can use.

        Args:
            data: Parsed JSON value (expected to be an object with camelCase keys)
        """
        result = ValidationResult()

        if not isinstance(data, dict):
            result.error("INVALID_PACK", "Pack must be an object")
            return result

        for key in self.REQUIRED_FIELDS:
            if not data.get(key):
                result.error("MISSING_FIELD", f"Missing required field: {key}")

        for key in self.ARRAY_FIELDS:
            if not isinstance(data.get(key), list):
                result.error("INVALID_TYPE", f"{key} must be an array")

        for key in self.OPTIONAL_ARRAY_FIELDS:
            if key in data and not isinstance(data[key], list):
                result.error("INVALID_TYPE", f"{key} must be an array")

        for key in self.OBJECT_FIELDS:
            if key in data and not isinstance(data[key], dict):
                result.error("INVALID_TYPE", f"{key} must be an object")

        metadata = data.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            result.error("INVALID_TYPE", "metadata must be an object")

        self._check_semantic_types(data.get("semanticTypes"), result)
        self._check_metrics(data.get("metrics"), result)
        self._check_entries(data, result)

        theme = data.get("theme")
        if "theme" not in data or theme == {}:
            result.warning("MISSING_THEME", "Missing theme - defaults will be used")
        elif isinstance(theme, dict) and not theme.get("primaryColor"):
            result.warning("MISSING_PRIMARY_COLOR", "theme.primaryColor is recommended")

        if not result.is_valid:
            logger.debug(
                f"Pack document '{data.get('id')}' failed validation "
                f"with {len(result.errors)} errors"
            )
        return result

    def _check_semantic_types(self, entries: Any, result: ValidationResult) -> None:
        if not isinstance(entries, list):
            return

        seen = set()
        for i, entry in enumerate(entries):
            path = f"semanticTypes[{i}]"
            if not isinstance(entry, dict):
                result.error("INVALID_ENTRY", "must be an object", path)
                continue

            type_id = entry.get("type")
            if not type_id:
                result.error("MISSING_SEMANTIC_TYPE", "missing type", path)
            elif type_id in seen:
                result.error("DUPLICATE_SEMANTIC_TYPE", f'duplicate type "{type_id}"', path)
            else:
                seen.add(type_id)

            patterns = entry.get("patterns")
            if "patterns" in entry and not isinstance(patterns, list):
                result.error("INVALID_TYPE", "patterns must be an array", path)
            elif not patterns:
                result.warning("EMPTY_PATTERNS", "empty patterns array", path)

    def _check_metrics(self, entries: Any, result: ValidationResult) -> None:
        if not isinstance(entries, list):
            return

        seen = set()
        for i, entry in enumerate(entries):
            path = f"metrics[{i}]"
            if not isinstance(entry, dict):
                result.error("INVALID_ENTRY", "must be an object", path)
                continue

            metric_id = entry.get("id")
            if not metric_id:
                result.error("MISSING_METRIC_ID", "missing id", path)
            elif metric_id in seen:
                result.error("DUPLICATE_METRIC_ID", f'duplicate id "{metric_id}"', path)
            else:
                seen.add(metric_id)

            formula = entry.get("formula")
            if not isinstance(formula, dict) or not formula.get("expression"):
                result.error("MISSING_FORMULA", "missing formula.expression", path)
            elif formula.get("requiredTypes") is not None and not isinstance(
                formula["requiredTypes"], list
            ):
                result.error("INVALID_TYPE", "formula.requiredTypes must be an array", path)

    def _check_entries(self, data: Dict[str, Any], result: ValidationResult) -> None:
        for key in self.ENTRY_FIELDS:
            entries = data.get(key)
            if not isinstance(entries, list):
                continue

            nested = NESTED_ARRAYS.get(key)
            for i, entry in enumerate(entries):
                path = f"{key}[{i}]"
                if not isinstance(entry, dict):
                    result.error("INVALID_ENTRY", "must be an object", path)
                elif nested and nested in entry and not isinstance(entry[nested], list):
                    result.error("INVALID_TYPE", f"{nested} must be an array", path)

        charts = data.get("chartConfigs")
        if isinstance(charts, dict) and "types" in charts and not isinstance(charts["types"], list):
            result.error("INVALID_TYPE", "chartConfigs.types must be an array")

        terminology = data.get("terminology")
        if isinstance(terminology, dict):
            for term, entry in terminology.items():
                if not isinstance(entry, dict):
                    result.error("INVALID_ENTRY", "must be an object", f"terminology.{term}")


def _first_duplicate(values) -> Optional[str]:
    seen = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return None


def _duplicates(values) -> List[str]:
    """Distinct duplicated values in first-repeat order."""
    seen = set()
    found: Dict[str, None] = {}
    for value in values:
        if value in seen:
            found[value] = None
        seen.add(value)
    return list(found)
