"""Configuration defaults — lives in L4, not domain."""

from __future__ import annotations

import copy

from script_template_loader.l1_entities.config import AppConfig
from script_template_loader.l3_interface_adapters.gateways.paths import CONTEXT_SNAPSHOT_PATH, USER_TEMPLATES_DIR
from script_template_loader.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'logging': {
        'level': 'ERROR',
        'log_to_file': True,
    },
    'injection': {
        'line_count': 3,
        'remove_spaces': True,
        'add_tabs': True,
        'append_to_hook_name': 'Hook',
    },
    'templates': {
        'directory': str(USER_TEMPLATES_DIR),
        'script_extension': '.CEA',
        'settings_extension': '.settings.yaml',
        'header_name': 'Header',
    },
    'context': {
        'snapshot_path': str(CONTEXT_SNAPSHOT_PATH),
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)


def default_app_config() -> AppConfig:
    return build_app_config({})
