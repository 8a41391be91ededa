"""
Pack Exporter.

Serializes packs into shareable transport documents, imports them back
with structural validation and an integrity checksum, and merges packs.

Transport document:
    {
      "metadata": {"exportedAt": ..., "exportVersion": "1.0.0", ...},
      "pack": {...},
      "checksum": "<hex>"
    }
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from industry_analytics.config import get_settings
from industry_analytics.packs.models import (
    ChartConfig,
    IndustryPack,
    PackMetadata,
    PackOverlay,
)
from industry_analytics.packs.validator import PackValidator
from industry_analytics.utils.serialization import SerializableMixin, compact_json


logger = logging.getLogger(__name__)


EXPORT_VERSION = "1.0.0"
PACK_FILE_SUFFIX = ".pack.json"


@dataclass
class ExportMetadata(SerializableMixin):
    """Metadata block of a transport document."""
    exported_at: str = ""
    export_version: str = EXPORT_VERSION
    author: Optional[str] = None
    description: Optional[str] = None
    homepage: Optional[str] = None
    tags: Optional[List[str]] = None


@dataclass
class ImportResult:
    """Outcome of importing a transport document; never raised."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    pack: Optional[IndustryPack] = None
    metadata: Optional[ExportMetadata] = None


def rolling_hash(data: str) -> str:
    """
    Deterministic 32-bit string hash, hex encoded.

    Iterates UTF-16 code units with h = h * 31 + c in signed 32-bit
    arithmetic and encodes the absolute value.
    """
    encoded = data.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return format(abs(h), "x")


def compute_checksum(data: str, algorithm: Optional[str] = None) -> str:
    """
    Checksum of serialized pack content.

    Uses the configured hashlib digest when the runtime provides it and the
    rolling hash otherwise. Integrity hint only, not a security measure.
    """
    algorithm = algorithm or get_settings().checksum_algorithm
    if algorithm in hashlib.algorithms_available:
        return hashlib.new(algorithm, data.encode("utf-8")).hexdigest()
    return rolling_hash(data)


class PackExporter:
    """
    Import/export of industry packs.

    Example:
        text = PackExporter.export_pack(pack, author="Analytics Team")
        result = PackExporter.import_pack(text)
        if result.is_valid:
            registry.register_pack(result.pack)
    """

    @staticmethod
    def export_pack(
        pack: IndustryPack,
        author: Optional[str] = None,
        description: Optional[str] = None,
        homepage: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> str:
        """
        Serialize a pack to a transport document.

        Options fall back to the pack's own metadata and description.

        Returns:
            JSON string indented by 2 spaces
        """
        pack_metadata = pack.metadata or PackMetadata()
        metadata = ExportMetadata(
            exported_at=_utc_timestamp(),
            export_version=EXPORT_VERSION,
            author=author or pack_metadata.author,
            description=description or pack.description,
            homepage=homepage or pack_metadata.homepage,
            tags=list(tags) if tags else None,
        )

        # to_dict() rebuilds every nested list and object
        snapshot = pack.to_dict()
        checksum = compute_checksum(compact_json(snapshot))

        document = {
            "metadata": metadata.to_dict(),
            "pack": snapshot,
            "checksum": checksum,
        }

        logger.info(f"Exported pack '{pack.id}' v{pack.version}")
        return json.dumps(document, indent=2, ensure_ascii=False)

    @staticmethod
    def import_pack(json_string: str) -> ImportResult:
        """
        Parse and validate a transport document.

        Malformed input produces an invalid result instead of an exception.
        A checksum mismatch is only a warning since packs may be edited by
        hand after export.
        """
        errors: List[str] = []
        warnings: List[str] = []

        try:
            document = json.loads(json_string)
        except (TypeError, ValueError) as e:
            return ImportResult(is_valid=False, errors=[f"Parse error: {e}"])

        if not isinstance(document, dict) or "metadata" not in document or "pack" not in document:
            return ImportResult(
                is_valid=False,
                errors=["Invalid pack format: missing metadata or pack"],
            )

        raw_pack = document["pack"]
        raw_metadata = document["metadata"]

        # A missing checksum counts as a mismatch
        if compute_checksum(compact_json(raw_pack)) != document.get("checksum"):
            warnings.append("Checksum mismatch - pack may have been modified")
            logger.warning("Checksum mismatch on imported pack")

        validation = PackValidator().validate_raw(raw_pack)
        errors.extend(validation.errors)
        warnings.extend(validation.warnings)

        if errors:
            return ImportResult(is_valid=False, errors=errors, warnings=warnings)

        try:
            pack = IndustryPack.from_dict(raw_pack)
            metadata = (
                ExportMetadata.from_dict(raw_metadata) if isinstance(raw_metadata, dict) else None
            )
        except (TypeError, ValueError, AttributeError) as e:
            return ImportResult(
                is_valid=False,
                errors=[f"Invalid pack content: {e}"],
                warnings=warnings,
            )

        return ImportResult(
            is_valid=True,
            errors=[],
            warnings=warnings,
            pack=pack,
            metadata=metadata,
        )

    @staticmethod
    async def download_pack(
        json_string: str,
        filename: str,
        directory: Union[str, Path] = ".",
    ) -> Path:
        """
        Write a transport document to a file.

        Names not ending in ".json" get the ".pack.json" suffix.

        Returns:
            Path of the written file
        """
        if not filename.endswith(".json"):
            filename = f"{filename}{PACK_FILE_SUFFIX}"

        path = Path(directory) / filename
        with open(path, "w", encoding="utf-8") as f:
            f.write(json_string)

        logger.info(f"Wrote pack file {path}")
        return path

    @staticmethod
    async def read_pack_file(path: Union[str, Path]) -> str:
        """Read a pack file as text."""
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def merge_packs(
        base: IndustryPack,
        overlay: Union[PackOverlay, IndustryPack],
    ) -> IndustryPack:
        """
        Merge an overlay into a base pack.

        Entries are added only when their id is new to the base, so base
        entries always win. Terminology, theme and metadata are
        shallow-merged with the overlay winning.

        Args:
            base: Pack to merge into (left unchanged)
            overlay: Partial pack, or a whole pack

        Returns:
            New merged pack
        """
        if isinstance(overlay, IndustryPack):
            overlay = PackOverlay.from_pack(overlay)

        base = base.clone()

        def add_new(base_items: List[Any], extra: Optional[List[Any]], key) -> List[Any]:
            seen = {key(item) for item in base_items}
            merged = list(base_items)
            for item in extra or []:
                if key(item) not in seen:
                    merged.append(item)
                    seen.add(key(item))
            return merged

        chart_configs = base.chart_configs
        if overlay.chart_configs is not None:
            chart_configs = ChartConfig(
                types=add_new(chart_configs.types, overlay.chart_configs.types,
                              lambda c: (c.type, c.name)),
                default_charts=(
                    overlay.chart_configs.default_charts
                    if overlay.chart_configs.default_charts is not None
                    else chart_configs.default_charts
                ),
            )

        metadata = base.metadata
        if overlay.metadata is not None:
            metadata = (metadata or PackMetadata()).merged(overlay.metadata)

        merged = IndustryPack(
            id=overlay.id or base.id,
            name=overlay.name or base.name,
            description=overlay.description if overlay.description is not None else base.description,
            version=overlay.version or base.version,
            sub_categories=add_new(base.sub_categories, overlay.sub_categories, lambda s: s.id),
            semantic_types=add_new(base.semantic_types, overlay.semantic_types, lambda s: s.type),
            detection_indicators=add_new(
                base.detection_indicators, overlay.detection_indicators, _indicator_key
            ),
            metrics=add_new(base.metrics, overlay.metrics, lambda m: m.id),
            funnels=add_new(base.funnels, overlay.funnels, lambda f: f.id),
            chart_configs=chart_configs,
            insight_templates=add_new(
                base.insight_templates, overlay.insight_templates, lambda i: i.id
            ),
            terminology={**base.terminology, **(overlay.terminology or {})},
            theme=base.theme.merged(overlay.theme),
            metadata=metadata,
        )

        # Overlay records must not be shared with the caller's objects
        return merged.clone()


def _indicator_key(indicator) -> str:
    return compact_json(indicator.to_dict())


def _utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

