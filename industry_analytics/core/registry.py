"""
Industry Pack Registry.

Single source of truth for which industry packs exist at runtime.
Registration is validated and every change is announced to subscribers.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from industry_analytics.core.enums import RegistryEventType
from industry_analytics.core.exceptions import DuplicatePackError, PackNotFoundError
from industry_analytics.packs.models import (
    FunnelTemplate,
    IndustryPack,
    IndustrySemanticType,
    IndustryTheme,
    MetricDefinition,
    TermEntry,
)
from industry_analytics.packs.validator import PackValidator
from industry_analytics.utils.matching import loose_match


logger = logging.getLogger(__name__)


@dataclass
class RegistryEvent:
    """Change notification delivered to registry subscribers."""
    type: RegistryEventType
    pack_id: str
    pack: Optional[IndustryPack] = None


@dataclass
class SemanticTypeMatch:
    """Best pattern match for a column name."""
    industry: str
    semantic_type: IndustrySemanticType
    confidence: float


RegistryListener = Callable[[RegistryEvent], None]


class IndustryRegistry:
    """
    Registry of industry packs, keyed by pack id.

    Supports:
    - Validated registration, whole-pack replacement and removal
    - Scoped lookups of semantic types, metrics, funnels and terminology
    - Synchronous change notification to subscribers

    Registries are ordinary objects; get_industry_registry() returns the
    process-wide default instance.

    Example:
        registry = IndustryRegistry()
        registry.register_pack(pack)

        unsubscribe = registry.subscribe(lambda event: print(event.type))
        registry.unregister_pack(pack.id)
        unsubscribe()
    """

    _default: Optional["IndustryRegistry"] = None
    _default_lock = threading.Lock()

    def __init__(self, validator: Optional[PackValidator] = None):
        self._packs: Dict[str, IndustryPack] = {}
        self._listeners: List[RegistryListener] = []
        self._validator = validator or PackValidator()
        self._lock = threading.RLock()

    @classmethod
    def default(cls) -> "IndustryRegistry":
        """Get the process-wide default registry, creating it on first use."""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls()
            return cls._default

    @classmethod
    def reset(cls) -> None:
        """Discard all packs and listeners of the default registry."""
        with cls._default_lock:
            if cls._default is not None:
                cls._default.clear()

    def clear(self) -> None:
        """Discard all packs and listeners of this registry."""
        with self._lock:
            self._packs.clear()
            self._listeners.clear()

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def register_pack(self, pack: IndustryPack) -> None:
        """
        Register a new industry pack.

        Args:
            pack: Pack to register

        Raises:
            DuplicatePackError: If a pack with the same id is registered
            PackValidationError: If the pack is structurally invalid
        """
        with self._lock:
            if pack.id in self._packs:
                raise DuplicatePackError(pack.id)
            self._validator.assert_valid(pack)
            self._packs[pack.id] = pack

        logger.info(f"Registered industry pack '{pack.id}' v{pack.version}")
        self._emit(RegistryEvent(RegistryEventType.REGISTERED, pack.id, pack))

    def unregister_pack(self, pack_id: str) -> bool:
        """
        Remove a pack.

        Returns:
            True if a pack was removed
        """
        with self._lock:
            removed = self._packs.pop(pack_id, None)

        if removed is None:
            return False

        logger.info(f"Unregistered industry pack '{pack_id}'")
        self._emit(RegistryEvent(RegistryEventType.UNREGISTERED, pack_id))
        return True

    def update_pack(self, pack: IndustryPack) -> None:
        """
        Replace a registered pack wholesale.

        Raises:
            PackNotFoundError: If no pack with this id is registered
            PackValidationError: If the new pack is structurally invalid
        """
        with self._lock:
            if pack.id not in self._packs:
                raise PackNotFoundError(pack.id)
            self._validator.assert_valid(pack)
            self._packs[pack.id] = pack

        logger.info(f"Updated industry pack '{pack.id}' to v{pack.version}")
        self._emit(RegistryEvent(RegistryEventType.UPDATED, pack.id, pack))

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_pack(self, pack_id: str) -> Optional[IndustryPack]:
        return self._packs.get(pack_id)

    def has_pack(self, pack_id: str) -> bool:
        return pack_id in self._packs

    def get_all_packs(self) -> List[IndustryPack]:
        """All packs in registration order."""
        with self._lock:
            return list(self._packs.values())

    def get_registered_industries(self) -> List[str]:
        with self._lock:
            return list(self._packs.keys())

    def get_all_semantic_types(self) -> List[IndustrySemanticType]:
        """Semantic types of every pack; the same type may appear per industry."""
        types = []
        for pack in self.get_all_packs():
            types.extend(pack.semantic_types)
        return types

    def get_semantic_types(self, industry_id: str) -> List[IndustrySemanticType]:
        pack = self.get_pack(industry_id)
        return list(pack.semantic_types) if pack else []

    def get_metrics(
        self,
        industry_id: str,
        sub_category: Optional[str] = None,
    ) -> List[MetricDefinition]:
        """Metrics of a pack, optionally limited to those applying to a sub-category."""
        pack = self.get_pack(industry_id)
        if pack is None:
            return []
        if sub_category:
            return [m for m in pack.metrics if m.applies_to(sub_category)]
        return list(pack.metrics)

    def get_funnels(
        self,
        industry_id: str,
        sub_category: Optional[str] = None,
    ) -> List[FunnelTemplate]:
        pack = self.get_pack(industry_id)
        if pack is None:
            return []
        if sub_category:
            return [f for f in pack.funnels if f.applies_to(sub_category)]
        return list(pack.funnels)

    def get_available_metrics(
        self,
        industry_id: str,
        detected_types: Iterable[str],
        sub_category: Optional[str] = None,
    ) -> List[MetricDefinition]:
        """
        Metrics whose required semantic types are all detected.

        Args:
            industry_id: Pack id
            detected_types: Semantic type ids observed in the dataset
            sub_category: Optional sub-category filter
        """
        available = set(detected_types)
        return [
            m for m in self.get_metrics(industry_id, sub_category)
            if all(t in available for t in m.required_types)
        ]

    def get_terminology(self, industry_id: str, key: str) -> Optional[TermEntry]:
        pack = self.get_pack(industry_id)
        return pack.terminology.get(key) if pack else None

    def get_theme(self, industry_id: str) -> Optional[IndustryTheme]:
        pack = self.get_pack(industry_id)
        return pack.theme if pack else None

    def find_semantic_type(
        self,
        column_name: str,
        industry_id: Optional[str] = None,
    ) -> Optional[SemanticTypeMatch]:
        """
        Find the semantic type whose patterns best match a column name.

        Names are compared after normalization: an exact match scores 1.0,
        containment in either direction scores 0.7. The first candidate
        reaching the best score wins.

        Args:
            column_name: Raw column name
            industry_id: Search only this pack (all packs when None)

        Returns:
            Best match, or None
        """
        if industry_id is not None:
            pack = self.get_pack(industry_id)
            packs = [pack] if pack else []
        else:
            packs = self.get_all_packs()

        best: Optional[SemanticTypeMatch] = None
        for pack in packs:
            for semantic_type in pack.semantic_types:
                for pattern in semantic_type.patterns:
                    confidence = loose_match(column_name, pattern)
                    if confidence > 0 and (best is None or confidence > best.confidence):
                        best = SemanticTypeMatch(pack.id, semantic_type, confidence)

        return best

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def subscribe(self, listener: RegistryListener) -> Callable[[], None]:
        """
        Register a listener for registry events.

        Returns:
            Function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: RegistryEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    f"Registry listener failed on {event.type.value} '{event.pack_id}'"
                )

    def __contains__(self, pack_id: str) -> bool:
        return self.has_pack(pack_id)

    def __len__(self) -> int:
        return len(self._packs)

    def __repr__(self) -> str:
        return f"IndustryRegistry(packs={self.get_registered_industries()})"


def get_industry_registry() -> IndustryRegistry:
    """Get the default industry registry instance."""
    return IndustryRegistry.default()
