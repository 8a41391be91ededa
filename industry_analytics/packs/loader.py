"""
Pack Loader Module.

Handles loading industry packs from JSON files:
- Raw pack documents ({"id": ..., "semanticTypes": [...], ...})
- Exported transport documents ({"metadata": ..., "pack": ..., "checksum": ...})
- Directories of such files
"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from industry_analytics.config import IndustrySettings, get_settings
from industry_analytics.core.exceptions import PackError, PackLoadError
from industry_analytics.packs.exporter import PackExporter
from industry_analytics.packs.models import IndustryPack
from industry_analytics.packs.validator import PackValidator

if TYPE_CHECKING:
    from industry_analytics.core.registry import IndustryRegistry


logger = logging.getLogger(__name__)


class PackLoader:
    """
    Loads industry packs from files.

    Example:
        loader = PackLoader()

        # Load a single pack
        pack = loader.load_file("/path/to/fitness.pack.json")

        # Load and register every pack in a directory
        loader.load_and_register("/path/to/packs")
    """

    PACK_SUFFIX = ".json"

    def __init__(self, validate: bool = True):
        """
        Initialize pack loader.

        Args:
            validate: Whether to validate raw pack documents before parsing
        """
        self.validate = validate
        self._validator = PackValidator()

    def load_file(self, path: Union[str, Path]) -> IndustryPack:
        """
        Load a pack from a JSON file.

        Raises:
            PackLoadError: If the file cannot be read or holds no valid pack
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise PackLoadError(str(path), str(e)) from e

        return self.load_text(text, source=str(path))

    def load_text(self, text: str, source: str = "<string>") -> IndustryPack:
        """Load a pack from JSON text (raw pack or transport document)."""
        try:
            data = json.loads(text)
        except ValueError as e:
            raise PackLoadError(source, f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PackLoadError(source, "Pack document must be a JSON object")

        if "pack" in data and "metadata" in data:
            return self._load_exported(text, source)
        return self._load_raw(data, source)

    def load_directory(self, directory: Union[str, Path]) -> List[IndustryPack]:
        """
        Load all pack files in a directory.

        Files that fail to load are logged and skipped.

        Returns:
            Packs in file name order
        """
        dir_path = Path(directory)
        packs: List[IndustryPack] = []

        if not dir_path.is_dir():
            logger.warning(f"Packs directory not found: {directory}")
            return packs

        for item in sorted(dir_path.iterdir()):
            if not item.is_file() or item.suffix.lower() != self.PACK_SUFFIX:
                continue
            try:
                packs.append(self.load_file(item))
            except PackLoadError as e:
                logger.warning(f"Skipping pack file {item}: {e.message}")

        logger.info(f"Loaded {len(packs)} packs from {dir_path}")
        return packs

    def load_and_register(
        self,
        path: Union[str, Path],
        registry: Optional["IndustryRegistry"] = None,
        replace: bool = False,
    ) -> List[IndustryPack]:
        """
        Load a file or directory and register the packs.

        Args:
            path: Pack file or directory of pack files
            registry: Target registry (default registry when None)
            replace: Update packs that are already registered

        Returns:
            Packs that were registered or updated
        """
        path = Path(path)
        if path.is_dir():
            packs = self.load_directory(path)
        else:
            packs = [self.load_file(path)]
        return register_packs(packs, registry=registry, replace=replace)

    def _load_exported(self, text: str, source: str) -> IndustryPack:
        result = PackExporter.import_pack(text)
        for warning in result.warnings:
            logger.warning(f"{source}: {warning}")
        if not result.is_valid:
            raise PackLoadError(source, "; ".join(result.errors))
        return result.pack

    def _load_raw(self, data: dict, source: str) -> IndustryPack:
        if self.validate:
            validation = self._validator.validate_raw(data)
            if not validation.is_valid:
                raise PackLoadError(source, "; ".join(validation.errors))
        try:
            return IndustryPack.from_dict(data)
        except (TypeError, ValueError) as e:
            raise PackLoadError(source, str(e)) from e


def register_packs(
    packs: Iterable[IndustryPack],
    registry: Optional["IndustryRegistry"] = None,
    replace: bool = False,
) -> List[IndustryPack]:
    """
    Register packs, skipping ids that are already present.

    Packs rejected by the registry are logged and skipped.

    Returns:
        Packs that were registered or updated
    """
    from industry_analytics.core.registry import get_industry_registry

    if registry is None:
        registry = get_industry_registry()
    registered = []

    for pack in packs:
        try:
            if registry.has_pack(pack.id):
                if not replace:
                    logger.debug(f"Pack '{pack.id}' already registered, skipping")
                    continue
                registry.update_pack(pack)
            else:
                registry.register_pack(pack)
        except PackError as e:
            logger.warning(f"Failed to register pack '{pack.id}': {e.message}")
            continue
        registered.append(pack)

    return registered


def bootstrap_registry(
    registry: Optional["IndustryRegistry"] = None,
    settings: Optional[IndustrySettings] = None,
) -> "IndustryRegistry":
    """
    Populate a registry from settings.

    Registers the built-in packs when register_builtin_packs is set, then
    every pack file in packs_directory.

    Returns:
        The populated registry
    """
    from industry_analytics.core.registry import get_industry_registry
    from industry_analytics.packs.builtin import get_builtin_packs

    if registry is None:
        registry = get_industry_registry()
    settings = settings or get_settings()

    if settings.register_builtin_packs:
        register_packs(get_builtin_packs(), registry=registry)

    if settings.packs_directory:
        packs = PackLoader().load_directory(settings.packs_directory)
        register_packs(packs, registry=registry)

    logger.info(f"Registry bootstrapped with {len(registry)} packs")
    return registry
