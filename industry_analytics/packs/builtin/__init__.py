"""
Built-in industry packs.

Gaming, SaaS, e-commerce and fintech ship as JSON pack documents next to
this module.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from industry_analytics.core.exceptions import PackLoadError
from industry_analytics.packs.loader import PackLoader, register_packs
from industry_analytics.packs.models import IndustryPack

if TYPE_CHECKING:
    from industry_analytics.core.registry import IndustryRegistry


logger = logging.getLogger(__name__)


BUILTIN_DIR = Path(__file__).parent
BUILTIN_PACK_IDS = ["gaming", "saas", "ecommerce", "fintech"]


def load_builtin_pack(industry_id: str) -> IndustryPack:
    """
    Load one built-in pack.

    Raises:
        PackLoadError: If there is no built-in pack with this id
    """
    if industry_id not in BUILTIN_PACK_IDS:
        raise PackLoadError(industry_id, "No built-in pack with this id")
    return PackLoader().load_file(BUILTIN_DIR / f"{industry_id}.json")


def get_builtin_packs() -> List[IndustryPack]:
    """Freshly loaded copies of every built-in pack."""
    return [load_builtin_pack(industry_id) for industry_id in BUILTIN_PACK_IDS]


def register_builtin_packs(registry: Optional["IndustryRegistry"] = None) -> List[str]:
    """
    Register the built-in packs that are not registered yet.

    Returns:
        Ids of the packs registered by this call
    """
    registered = register_packs(get_builtin_packs(), registry=registry)
    if registered:
        logger.info(f"Registered built-in packs: {[p.id for p in registered]}")
    return [p.id for p in registered]
