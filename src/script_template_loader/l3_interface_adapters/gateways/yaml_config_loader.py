"""Gateway: YAML configuration loader — implements ConfigLoader port."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from script_template_loader.l1_entities.config import AppConfig
from script_template_loader.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS

log = logging.getLogger('stl.config')


class YamlConfigLoader:
    """Reads raw config data from YAML files with merge and override support, and saves AppConfig."""

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Return the merged YAML data as a raw dict (before Pydantic validation)."""
        return _load_data(config_path, overrides)

    def save(self, config: AppConfig, config_path: str | None = None) -> str:
        """Write *config* as YAML, creating parent directories. Returns the path written."""
        path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATHS[0]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(config.model_dump(), sort_keys=False, allow_unicode=True),
            encoding='utf-8',
        )
        log.info('Configuration saved to %s', path)
        return str(path)


def _load_data(
    config_path: str | None = None,
    overrides: dict | None = None,
) -> dict:
    """Resolve, read, and merge YAML config into a plain dict."""
    data: dict = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f'Config file not found: {path}')
        data = _read_mapping(path)
    else:
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                data = _read_mapping(default_path)
                break
    if overrides:
        deep_merge(data, overrides)
    return data


def _read_mapping(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    except yaml.YAMLError as e:
        raise ValueError(f'Invalid config file {path}: {e}') from e
    if not isinstance(data, dict):
        raise ValueError(f'Config file must contain a mapping: {path}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
