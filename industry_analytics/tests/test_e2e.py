"""
End-to-End Tests for Industry Analytics.

Tests complete flows including:
- Bootstrapping the registry from settings
- Detecting industries from DataFrames
- Authoring, exporting and re-loading a custom pack
"""

import asyncio
from datetime import datetime, timedelta

import polars as pl
import pytest

from industry_analytics import (
    IndustryRegistry,
    IndustrySettings,
    PackExporter,
    bootstrap_registry,
    configure,
    create_industry_detector,
    create_pack,
    extend_pack,
    get_industry_registry,
)
from industry_analytics.core.enums import RegistryEventType
from industry_analytics.core.schema import columns_from_frame
from industry_analytics.packs.builtin import BUILTIN_PACK_IDS
from industry_analytics.packs.models import IndustrySemanticType, PackOverlay


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def orders_frame() -> pl.DataFrame:
    """Sample e-commerce order lines."""
    now = datetime.now()
    return pl.DataFrame({
        "order_id": [f"o{i}" for i in range(10)],
        "customer_id": [f"c{i % 4}" for i in range(10)],
        "product_id": [f"p{i % 3}" for i in range(10)],
        "price": [9.99 + i for i in range(10)],
        "quantity": [1 + i % 2 for i in range(10)],
        "order_total": [(9.99 + i) * (1 + i % 2) for i in range(10)],
        "created": [now - timedelta(hours=i) for i in range(10)],
    })


@pytest.fixture
def workouts_frame() -> pl.DataFrame:
    """Sample fitness tracker export."""
    return pl.DataFrame({
        "athlete_id": ["a1", "a1", "a2"],
        "workout_id": ["w1", "w2", "w3"],
        "distance_km": [5.2, 10.0, 3.1],
    })


def fitness_pack():
    return (
        create_pack("fitness", "Fitness Apps")
        .describe("Workout tracking")
        .add_sub_category("running", "Running")
        .add_sub_category("strength", "Strength")
        .add_semantic_type("user_id", ["user_id", "athlete_id"], priority=10)
        .add_semantic_type("workout_id", ["workout_id"], priority=9)
        .add_semantic_type("distance", ["distance", "km"], priority=6)
        .add_indicator(["workout_id", "distance"], weight=8, reason="Workout logs")
        .add_kpi("workouts", "Workouts", "count($workout_id)")
        .create_funnel("first_week", "First Week")
            .add_step("signup", "Sign Up", "user_id")
            .add_step("first_run", "First Run", "workout_id")
            .for_sub_categories(["running"])
            .build()
        .set_theme(chart_colors=["#22c55e", "#16a34a"])
        .build()
    )


# =============================================================================
# Built-in Packs
# =============================================================================

class TestBuiltinFlow:
    """Bootstrap with built-in packs, then detect from frames."""

    def setup_method(self):
        IndustryRegistry.reset()

    def test_bootstrap_and_detect_ecommerce(self, orders_frame):
        registry = bootstrap_registry()
        detector = create_industry_detector()

        result = detector.detect_frame(orders_frame)

        assert registry is get_industry_registry()
        assert registry.get_registered_industries() == BUILTIN_PACK_IDS
        assert result.industry == "ecommerce"
        assert result.primary.confidence == 1.0
        assert not result.is_ambiguous
        assert detector.is_confident(result)

        detected = {d.type for d in result.detected_semantic_types}
        metric_ids = [
            m.id for m in registry.get_available_metrics(result.industry, detected)
        ]
        assert {"gmv", "aov", "orders_count", "units_sold"} <= set(metric_ids)
        assert "cart_abandonment_rate" not in metric_ids

    def test_detection_types_from_frame(self, orders_frame):
        bootstrap_registry()

        result = create_industry_detector().detect_frame(orders_frame)

        order_types = {d.type for d in result.types_for_column("order_id")}
        assert "order_id" in order_types
        assert all(0 < d.confidence <= 1 for d in result.detected_semantic_types)

    def test_settings_drive_detector(self, orders_frame):
        configure(IndustrySettings(max_alternatives=1))
        bootstrap_registry()

        result = create_industry_detector().detect_frame(orders_frame)

        assert len(result.alternatives) == 1

    def test_empty_frame_columns(self):
        bootstrap_registry()

        result = create_industry_detector().detect_frame(pl.DataFrame({"zzq": [1]}))

        assert result.industry == "custom"
        assert not create_industry_detector().is_confident(result)


# =============================================================================
# Custom Pack Lifecycle
# =============================================================================

class TestCustomPackFlow:
    """Author a pack, ship it as a file, load it and detect with it."""

    def setup_method(self):
        IndustryRegistry.reset()

    def test_author_export_load_detect(self, tmp_path, workouts_frame):
        text = PackExporter.export_pack(fitness_pack(), author="Fitness Team", tags=["health"])
        asyncio.run(PackExporter.download_pack(text, "fitness", tmp_path))

        events = []
        get_industry_registry().subscribe(events.append)
        registry = bootstrap_registry(settings=IndustrySettings(packs_directory=str(tmp_path)))

        assert registry.get_registered_industries() == BUILTIN_PACK_IDS + ["fitness"]
        assert [e.pack_id for e in events][-1] == "fitness"
        assert all(e.type == RegistryEventType.REGISTERED for e in events)

        result = create_industry_detector().detect_with_sub_category(
            columns_from_frame(workouts_frame)
        )

        assert result.industry == "fitness"
        assert result.primary.sub_category == "running"
        assert "Workout logs" in result.primary.reasons

    def test_customized_builtin_replaces_original(self):
        registry = bootstrap_registry()
        saas = registry.get_pack("saas")

        customized = extend_pack(saas, PackOverlay(semantic_types=[
            IndustrySemanticType(type="workspace_id", patterns=["workspace_id"], priority=9),
        ]))
        registry.update_pack(customized)

        assert registry.get_pack("saas").version == "1.0.0-custom"
        assert saas.get_semantic_type("workspace_id") is None
        match = registry.find_semantic_type("workspace_id", "saas")
        assert match.semantic_type.type == "workspace_id"
        assert match.confidence == 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
