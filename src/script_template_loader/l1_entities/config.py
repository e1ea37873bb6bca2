"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class LoggingConfig(BaseModel):
    level: LogLevel
    log_to_file: bool


class InjectionConfig(BaseModel):
    line_count: int = Field(gt=0)
    remove_spaces: bool
    add_tabs: bool
    append_to_hook_name: str


class TemplatesConfig(BaseModel):
    directory: str
    script_extension: str
    settings_extension: str
    header_name: str = 'Header'


class ContextConfig(BaseModel):
    snapshot_path: str


class AppConfig(BaseModel):
    logging: LoggingConfig
    injection: InjectionConfig
    templates: TemplatesConfig
    context: ContextConfig
