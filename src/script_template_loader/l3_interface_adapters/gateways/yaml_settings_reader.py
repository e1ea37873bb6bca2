"""Gateway: YAML companion settings parser — implements SettingsReader port."""

from __future__ import annotations

from typing import Any

import yaml

from script_template_loader.l1_entities.errors import SettingsError


class YamlSettingsReader:
    """Parses ``<name>.settings.yaml``. An empty file means no settings."""

    def parse(self, raw: bytes, path: str) -> dict[str, Any]:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise SettingsError(f'{path}: {e}') from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsError(f'{path}: expected a mapping, got {type(data).__name__}')
        return data
