"""
Shared fixtures for Industry Analytics tests.
"""

import pytest

from industry_analytics.config import configure
from industry_analytics.core.registry import IndustryRegistry
from industry_analytics.packs.models import (
    DetectionIndicator,
    FunnelStep,
    FunnelTemplate,
    IndustryPack,
    IndustrySemanticType,
    IndustrySubCategory,
    IndustryTheme,
    MetricDefinition,
    MetricFormula,
    PackMetadata,
    TermEntry,
)


def make_pack(pack_id: str = "alpha", **overrides) -> IndustryPack:
    """Small valid pack; keyword arguments replace fields."""
    fields = dict(
        id=pack_id,
        name=pack_id.title(),
        description=f"{pack_id} analytics",
        version="1.0.0",
        sub_categories=[
            IndustrySubCategory(id="b2b", name="B2B"),
            IndustrySubCategory(id="b2c", name="B2C"),
        ],
        semantic_types=[
            IndustrySemanticType(type="user_id", patterns=["user_id", "player_id"], priority=10),
            IndustrySemanticType(type="mrr", patterns=["mrr"], priority=9),
            IndustrySemanticType(type="plan", patterns=["plan", "tier"], priority=5),
        ],
        detection_indicators=[DetectionIndicator(types=["mrr"], weight=4)],
        metrics=[
            MetricDefinition(
                id="total_mrr",
                name="Total MRR",
                formula=MetricFormula(expression="sum($mrr)", required_types=["mrr"]),
                format="currency",
                category="monetization",
            ),
            MetricDefinition(
                id="seats",
                name="Seats",
                formula=MetricFormula(expression="sum($seats)", required_types=["seats"]),
                sub_categories=["b2b"],
            ),
        ],
        funnels=[
            FunnelTemplate(
                id="signup",
                name="Signup",
                steps=[
                    FunnelStep(id="visit", name="Visit", semantic_type="user_id"),
                    FunnelStep(id="paid", name="Paid", semantic_type="plan"),
                ],
                sub_categories=["b2c"],
            ),
        ],
        terminology={"user": TermEntry(singular="Account", plural="Accounts")},
        theme=IndustryTheme(primary_color="#3b82f6", chart_colors=["#3b82f6", "#0ea5e9"]),
        metadata=PackMetadata(author="Analytics Team", license="MIT"),
    )
    fields.update(overrides)
    return IndustryPack(**fields)


@pytest.fixture
def pack_factory():
    """Factory for small valid packs."""
    return make_pack


@pytest.fixture
def sample_pack():
    return make_pack()


@pytest.fixture
def registry():
    """Fresh, isolated registry."""
    return IndustryRegistry()


@pytest.fixture(autouse=True)
def reset_global_state():
    """Clear the default registry and cached settings around each test."""
    IndustryRegistry.reset()
    configure(None)
    yield
    IndustryRegistry.reset()
    configure(None)
