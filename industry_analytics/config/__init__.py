"""
Industry Analytics Configuration.

Settings and configuration management.
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class IndustrySettings(BaseSettings):
    """Global settings for industry detection and pack handling."""

    model_config = SettingsConfigDict(env_prefix="IA_", env_file=".env", extra="ignore")

    # Detection
    min_confidence: float = Field(default=0.3, ge=0.0, le=1.0, description="Caller-side confidence threshold")
    ambiguity_threshold: float = Field(default=0.2, ge=0.0, le=1.0, description="Ambiguity threshold")
    max_alternatives: int = Field(default=3, ge=0, description="Alternatives reported per detection")

    # Export
    checksum_algorithm: str = Field(default="sha256", description="hashlib digest for pack checksums")

    # Bootstrap
    register_builtin_packs: bool = Field(default=True, description="Register bundled packs on bootstrap")
    packs_directory: Optional[str] = Field(default=None, description="Directory of extra pack files")


# Global settings instance
_settings: Optional[IndustrySettings] = None


def get_settings() -> IndustrySettings:
    """Get global settings instance."""
    global _settings
    if _settings is None:
        _settings = IndustrySettings()
    return _settings


def configure(settings: Optional[IndustrySettings]) -> None:
    """Set global settings; None re-reads the environment on next access."""
    global _settings
    _settings = settings
