"""
Industry Analytics v1.0

Industry detection and pack registry: classifies datasets into analytics
verticals and serves each vertical's metrics, funnels and presentation.
"""

__version__ = "1.0.0"

# Packs must be imported before the registry, which depends on them
from .packs import (
    IndustryPack,
    PackDevKit,
    PackExporter,
    PackLoader,
    create_pack,
    extend_pack,
    bootstrap_registry,
    register_builtin_packs,
)
from .core.registry import IndustryRegistry, get_industry_registry
from .core.detector import IndustryDetector, DetectorConfig, create_industry_detector
from .core.schema import ColumnMeaning, DetectionResult
from .config import IndustrySettings, get_settings, configure

__all__ = [
    # Registry & detection
    "IndustryRegistry",
    "get_industry_registry",
    "IndustryDetector",
    "DetectorConfig",
    "create_industry_detector",
    "ColumnMeaning",
    "DetectionResult",
    # Packs
    "IndustryPack",
    "PackDevKit",
    "PackExporter",
    "PackLoader",
    "create_pack",
    "extend_pack",
    "bootstrap_registry",
    "register_builtin_packs",
    # Config
    "IndustrySettings",
    "get_settings",
    "configure",
]
