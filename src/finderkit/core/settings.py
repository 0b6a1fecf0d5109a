"""Settings for finderkit.

Configuration is read from ``FINDERKIT_`` environment variables and an
optional ``.env`` file, validated by pydantic at load time.

Examples:
    >>> from finderkit.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.default_depth
    1

Tags:
    settings, configuration, pydantic, environment, finderkit
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FinderSettings(BaseSettings):
    """finderkit settings.

    Fields
    ──────
    catalog_path     : YAML entity catalog used by the CLI
    default_depth    : Combination depth used when none is given
    max_depth        : Largest depth the CLI accepts
    required_feature : Project feature that gates finder installation
    log_level        : Structlog log level
    json_logs        : Force JSON (True) or console (False) logs; auto when unset
    """

    model_config = SettingsConfigDict(
        env_prefix="FINDERKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Catalog ──────────────────────────────────────────────────
    catalog_path: Path = Field(
        default=Path("finders.yaml"),
        description="YAML entity catalog used by the CLI",
    )

    # ── Enumeration ──────────────────────────────────────────────
    default_depth: int = Field(default=1, ge=1)
    max_depth: int = Field(default=3, ge=1)

    # ── Installation gate ────────────────────────────────────────
    required_feature: str = "persistence"

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @model_validator(mode="after")
    def _check_depths(self) -> "FinderSettings":
        if self.default_depth > self.max_depth:
            raise ValueError(
                f"default_depth ({self.default_depth}) must not exceed max_depth ({self.max_depth})"
            )
        return self


_settings_cache: dict[str, FinderSettings] = {}


def get_settings(*, _force_reload: bool = False) -> FinderSettings:
    """Load, validate, and cache a :class:`FinderSettings` instance.

    Parameters
    ----------
    _force_reload:
        Bypass cache and reload from the environment.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = FinderSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (mainly for testing)."""
    _settings_cache.clear()


__all__ = ["FinderSettings", "get_settings", "clear_settings_cache"]
