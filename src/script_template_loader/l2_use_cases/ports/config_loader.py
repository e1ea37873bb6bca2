"""Port: configuration loader."""

from __future__ import annotations

from typing import Protocol

from script_template_loader.l1_entities.config import AppConfig


class ConfigLoader(Protocol):
    """Abstract configuration loader."""

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Read configuration data, merging overrides, before validation."""
        ...

    def save(self, config: AppConfig, config_path: str | None = None) -> str:
        """Persist *config*. Returns the path written."""
        ...
