"""
Application configuration using pydantic-settings.

Settings are loaded from environment variables with sensible defaults for local development.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AssemblySettings(BaseSettings):
    """Geometry assembly constants supplied by the surrounding application."""

    model_config = SettingsConfigDict(env_prefix="ASSEMBLY_")

    # Eye material is fixed and independent of the trait palette
    eye_color: tuple[float, float, float] = (0.0, 0.0, 0.0)


class BatchSettings(BaseSettings):
    """Batch generation limits."""

    model_config = SettingsConfigDict(env_prefix="BATCH_")

    max_workers: int = Field(default=1, ge=1)
    max_items: int = Field(default=500, ge=1)  # Per API request


class ExportSettings(BaseSettings):
    """glTF export options."""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    generator: str = "Voxel Avatars"
    metallic_factor: float = 0.0
    roughness_factor: float = 0.5
    double_sided: bool = True


class Settings(BaseSettings):
    """Root application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Voxel Avatars"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Nested settings
    assembly: AssemblySettings = Field(default_factory=AssemblySettings)
    batch: BatchSettings = Field(default_factory=BatchSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once per process.
    """
    return Settings()
