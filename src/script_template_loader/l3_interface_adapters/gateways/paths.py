"""Shared path constants for configuration, templates and logs."""

from __future__ import annotations

from platformdirs import user_config_path, user_log_path

APP_NAME = 'script-template-loader'

CONFIG_DIR = user_config_path(APP_NAME)
USER_TEMPLATES_DIR = CONFIG_DIR / 'templates'
CONTEXT_SNAPSHOT_PATH = CONFIG_DIR / 'context.yaml'

LOG_DIR = user_log_path(APP_NAME)
LOG_PATH = LOG_DIR / 'stl.log'

DEFAULT_CONFIG_PATHS = [
    CONFIG_DIR / 'config.yaml',
    CONFIG_DIR / 'config.yml',
]
