"""
Tests for pack export, import and merge.
"""

import asyncio
import json
import logging
import re

import pytest

from industry_analytics.config import IndustrySettings, configure
from industry_analytics.core.detector import IndustryDetector
from industry_analytics.core.registry import IndustryRegistry
from industry_analytics.core.schema import ColumnMeaning
from industry_analytics.packs.exporter import (
    EXPORT_VERSION,
    PackExporter,
    compute_checksum,
    rolling_hash,
)
from industry_analytics.packs.models import (
    ChartConfig,
    ChartTypeConfig,
    DetectionIndicator,
    IndustrySemanticType,
    MetricDefinition,
    MetricFormula,
    PackOverlay,
    TermEntry,
)
from industry_analytics.utils.serialization import compact_json


def raw_document(pack_data, metadata=None, with_checksum=True) -> str:
    document = {
        "metadata": metadata or {"exportedAt": "2024-01-01T00:00:00.000Z", "exportVersion": "1.0.0"},
        "pack": pack_data,
    }
    if with_checksum:
        document["checksum"] = compute_checksum(compact_json(pack_data))
    return json.dumps(document)


class TestExport:
    """Tests for export_pack()."""

    def setup_method(self):
        IndustryRegistry.reset()

    def test_document_structure(self, sample_pack):
        text = PackExporter.export_pack(sample_pack)
        document = json.loads(text)

        assert set(document) == {"metadata", "pack", "checksum"}
        assert document["metadata"]["exportVersion"] == EXPORT_VERSION
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z",
                            document["metadata"]["exportedAt"])
        assert re.fullmatch(r"[0-9a-f]{64}", document["checksum"])
        assert document["pack"]["semanticTypes"][0]["type"] == "user_id"
        assert text.startswith('{\n  "metadata"')

    def test_metadata_falls_back_to_pack(self, sample_pack):
        document = json.loads(PackExporter.export_pack(sample_pack))

        assert document["metadata"]["author"] == "Analytics Team"
        assert document["metadata"]["description"] == "alpha analytics"
        assert "tags" not in document["metadata"]

    def test_explicit_metadata_wins(self, sample_pack):
        document = json.loads(PackExporter.export_pack(
            sample_pack,
            author="Someone",
            description="Shared copy",
            homepage="https://example.com",
            tags=["saas", "b2b"],
        ))

        assert document["metadata"]["author"] == "Someone"
        assert document["metadata"]["description"] == "Shared copy"
        assert document["metadata"]["homepage"] == "https://example.com"
        assert document["metadata"]["tags"] == ["saas", "b2b"]

    def test_checksum_covers_pack_content(self, sample_pack):
        document = json.loads(PackExporter.export_pack(sample_pack))

        assert document["checksum"] == compute_checksum(compact_json(document["pack"]))

    def test_export_does_not_touch_pack(self, sample_pack):
        snapshot = sample_pack.to_dict()

        PackExporter.export_pack(sample_pack, tags=["x"])

        assert sample_pack.to_dict() == snapshot


class TestImport:
    """Tests for import_pack()."""

    def setup_method(self):
        IndustryRegistry.reset()

    def test_round_trip(self, sample_pack):
        result = PackExporter.import_pack(
            PackExporter.export_pack(sample_pack, tags=["saas"])
        )

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
        assert result.pack == sample_pack
        assert result.pack is not sample_pack
        assert result.metadata.tags == ["saas"]
        assert result.metadata.export_version == EXPORT_VERSION

    def test_imported_pack_registers(self, registry, sample_pack):
        result = PackExporter.import_pack(PackExporter.export_pack(sample_pack))

        registry.register_pack(result.pack)

        assert registry.get_pack("alpha").metrics[0].formula.required_types == ["mrr"]

    def test_tampered_content_is_warning(self, sample_pack, caplog):
        document = json.loads(PackExporter.export_pack(sample_pack))
        document["pack"]["name"] = "Edited"

        with caplog.at_level(logging.WARNING, logger="industry_analytics.packs.exporter"):
            result = PackExporter.import_pack(json.dumps(document))

        assert result.is_valid
        assert result.pack.name == "Edited"
        assert any("Checksum mismatch" in w for w in result.warnings)
        assert "Checksum mismatch" in caplog.text

    def test_missing_checksum_is_warning(self, sample_pack, caplog):
        text = raw_document(sample_pack.to_dict(), with_checksum=False)

        with caplog.at_level(logging.WARNING, logger="industry_analytics.packs.exporter"):
            result = PackExporter.import_pack(text)

        assert result.is_valid
        assert result.warnings == ["Checksum mismatch - pack may have been modified"]
        assert "Checksum mismatch" in caplog.text

    def test_matching_checksum_has_no_warnings(self, sample_pack):
        result = PackExporter.import_pack(raw_document(sample_pack.to_dict()))

        assert result.is_valid
        assert result.warnings == []

    def test_parse_error(self):
        result = PackExporter.import_pack("{not json")

        assert not result.is_valid
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Parse error:")
        assert result.pack is None

    @pytest.mark.parametrize("text", ['{"pack": {}}', '{"metadata": {}}', "[]"])
    def test_missing_sections(self, text):
        result = PackExporter.import_pack(text)

        assert not result.is_valid
        assert result.errors == ["Invalid pack format: missing metadata or pack"]

    def test_structural_errors(self):
        result = PackExporter.import_pack(raw_document({
            "id": "broken",
            "semanticTypes": [
                {"type": "a", "patterns": ["a"]},
                {"type": "a", "patterns": []},
                {"patterns": ["x"]},
            ],
            "metrics": [
                {"id": "m", "formula": {"expression": "1"}},
                {"id": "m", "formula": {}},
            ],
            "theme": {"accentColor": "#000"},
        }))

        assert not result.is_valid
        assert result.pack is None
        assert result.errors == [
            "Missing required field: name",
            "Missing required field: version",
            "subCategories must be an array",
            'semanticTypes[1]: duplicate type "a"',
            "semanticTypes[2]: missing type",
            'metrics[1]: duplicate id "m"',
            "metrics[1]: missing formula.expression",
        ]
        assert result.warnings == [
            "semanticTypes[1]: empty patterns array",
            "theme.primaryColor is recommended",
        ]

    def test_missing_theme_warning(self, sample_pack):
        data = sample_pack.to_dict()
        del data["theme"]

        result = PackExporter.import_pack(raw_document(data))

        assert result.is_valid
        assert result.warnings == ["Missing theme - defaults will be used"]
        assert result.pack.theme.primary_color == "#8b5cf6"

    @pytest.mark.parametrize("field,value,expected", [
        ("detectionIndicators", "oops", "detectionIndicators must be an array"),
        ("detectionIndicators", ["mrr"], "detectionIndicators[0]: must be an object"),
        ("detectionIndicators", [{"types": "mrr"}], "detectionIndicators[0]: types must be an array"),
        ("subCategories", ["b2b"], "subCategories[0]: must be an object"),
        ("funnels", {"signup": {}}, "funnels must be an array"),
        ("insightTemplates", [None], "insightTemplates[0]: must be an object"),
        ("theme", "dark", "theme must be an object"),
        ("terminology", ["user"], "terminology must be an object"),
        ("terminology", {"user": "Account"}, "terminology.user: must be an object"),
        ("chartConfigs", {"types": "line"}, "chartConfigs.types must be an array"),
    ])
    def test_wrongly_shaped_fields_are_rejected(self, sample_pack, field, value, expected):
        data = sample_pack.to_dict()
        data[field] = value

        result = PackExporter.import_pack(raw_document(data))

        assert not result.is_valid
        assert result.pack is None
        assert result.errors == [expected]

    def test_string_patterns_are_rejected(self, sample_pack):
        data = sample_pack.to_dict()
        data["semanticTypes"][0]["patterns"] = "user_id"

        result = PackExporter.import_pack(raw_document(data))

        assert not result.is_valid
        assert result.errors == ["semanticTypes[0]: patterns must be an array"]

    def test_accepted_import_is_detectable(self, registry, sample_pack):
        result = PackExporter.import_pack(raw_document(sample_pack.to_dict()))
        registry.register_pack(result.pack)

        detection = IndustryDetector(registry).detect([ColumnMeaning(column="mrr", meaning="mrr")])

        assert detection.primary.industry == "alpha"


class TestChecksum:
    """Tests for checksum computation."""

    def setup_method(self):
        IndustryRegistry.reset()

    def test_rolling_hash_values(self):
        assert rolling_hash("") == "0"
        assert rolling_hash("a") == "61"
        assert rolling_hash("ab") == "c21"

    def test_rolling_hash_is_deterministic(self):
        text = compact_json({"id": "alpha", "name": "Alpha"})

        assert rolling_hash(text) == rolling_hash(text)
        assert rolling_hash(text) != rolling_hash(text + " ")

    def test_configured_algorithm(self):
        assert len(compute_checksum("x", "md5")) == 32
        assert len(compute_checksum("x")) == 64

    def test_fallback_to_rolling_hash(self, sample_pack):
        configure(IndustrySettings(checksum_algorithm="not-a-real-algo"))

        document = json.loads(PackExporter.export_pack(sample_pack))

        assert document["checksum"] == rolling_hash(compact_json(sample_pack.to_dict()))
        assert PackExporter.import_pack(json.dumps(document)).warnings == []


class TestPackFiles:
    """Tests for writing and reading pack files."""

    def setup_method(self):
        IndustryRegistry.reset()

    def test_download_and_read(self, sample_pack, tmp_path):
        text = PackExporter.export_pack(sample_pack)

        path = asyncio.run(PackExporter.download_pack(text, "alpha", tmp_path))

        assert path == tmp_path / "alpha.pack.json"
        assert asyncio.run(PackExporter.read_pack_file(path)) == text

    def test_json_filename_kept(self, sample_pack, tmp_path):
        text = PackExporter.export_pack(sample_pack)

        path = asyncio.run(PackExporter.download_pack(text, "custom.json", tmp_path))

        assert path.name == "custom.json"
        assert PackExporter.import_pack(path.read_text(encoding="utf-8")).is_valid


class TestMergePacks:
    """Tests for merge_packs()."""

    def setup_method(self):
        IndustryRegistry.reset()

    def test_base_entries_win(self, sample_pack):
        merged = PackExporter.merge_packs(sample_pack, PackOverlay(
            semantic_types=[
                IndustrySemanticType(type="mrr", patterns=["monthly_revenue"]),
                IndustrySemanticType(type="churn", patterns=["churned"]),
            ],
            metrics=[
                MetricDefinition(id="total_mrr", name="Replaced", formula=MetricFormula(expression="0")),
                MetricDefinition(id="churn_rate", name="Churn", formula=MetricFormula(expression="1")),
            ],
        ))

        assert [st.type for st in merged.semantic_types] == ["user_id", "mrr", "plan", "churn"]
        assert merged.get_semantic_type("mrr").patterns == ["mrr"]
        assert [m.id for m in merged.metrics] == ["total_mrr", "seats", "churn_rate"]
        assert merged.get_metric("total_mrr").name == "Total MRR"

    def test_scalars_theme_and_terminology(self, sample_pack):
        merged = PackExporter.merge_packs(sample_pack, PackOverlay(
            name="Alpha Plus",
            theme={"accent_color": "#000000"},
            terminology={
                "user": TermEntry(singular="Customer", plural="Customers"),
                "plan": TermEntry(singular="Plan", plural="Plans"),
            },
            metadata={"homepage": "https://example.com"},
        ))

        assert merged.id == "alpha"
        assert merged.name == "Alpha Plus"
        assert merged.version == "1.0.0"
        assert merged.theme.primary_color == "#3b82f6"
        assert merged.theme.accent_color == "#000000"
        assert merged.terminology["user"].singular == "Customer"
        assert "plan" in merged.terminology
        assert merged.metadata.author == "Analytics Team"
        assert merged.metadata.homepage == "https://example.com"

    def test_indicators_deduplicated_by_content(self, sample_pack):
        merged = PackExporter.merge_packs(sample_pack, PackOverlay(detection_indicators=[
            DetectionIndicator(types=["mrr"], weight=4),
            DetectionIndicator(types=["mrr"], weight=6),
        ]))

        assert [i.weight for i in merged.detection_indicators] == [4, 6]

    def test_chart_types_keyed_by_type_and_name(self, sample_pack):
        base = PackExporter.merge_packs(sample_pack, PackOverlay(chart_configs=ChartConfig(
            types=[ChartTypeConfig(type="line", name="MRR")],
            default_charts=["MRR"],
        )))

        merged = PackExporter.merge_packs(base, PackOverlay(chart_configs=ChartConfig(types=[
            ChartTypeConfig(type="line", name="MRR", metrics=["total_mrr"]),
            ChartTypeConfig(type="bar", name="MRR"),
        ])))

        assert [(c.type, c.name) for c in merged.chart_configs.types] == [("line", "MRR"), ("bar", "MRR")]
        assert merged.chart_configs.types[0].metrics == []
        assert merged.chart_configs.default_charts == ["MRR"]

    def test_merge_whole_pack(self, sample_pack, pack_factory):
        other = pack_factory("beta", semantic_types=[
            IndustrySemanticType(type="arr", patterns=["arr"]),
        ])

        merged = PackExporter.merge_packs(sample_pack, other)

        assert merged.id == "beta"
        assert [st.type for st in merged.semantic_types] == ["user_id", "mrr", "plan", "arr"]

    def test_inputs_unchanged_and_result_detached(self, sample_pack):
        overlay = PackOverlay(semantic_types=[IndustrySemanticType(type="churn", patterns=["churn"])])
        snapshot = sample_pack.to_dict()

        merged = PackExporter.merge_packs(sample_pack, overlay)
        merged.semantic_types[-1].patterns.append("cancelled")

        assert sample_pack.to_dict() == snapshot
        assert overlay.semantic_types[0].patterns == ["churn"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
