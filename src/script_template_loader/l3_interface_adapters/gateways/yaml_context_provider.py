"""Gateway: target snapshot context — implements ContextProvider port."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from script_template_loader.l1_entities.config import InjectionConfig
from script_template_loader.l1_entities.target_snapshot import TargetSnapshot
from script_template_loader.l2_use_cases.utils.context_fields import build_context

log = logging.getLogger('stl.context')


class YamlContextProvider:
    """Reads a snapshot YAML on every call and flattens it into template fields.

    Returns None whenever no usable target is described, so the caller can
    report the context as unavailable instead of rendering half-empty output.
    """

    def __init__(self, snapshot_path: str | Path, injection: InjectionConfig, *, hook_name: str | None = None) -> None:
        self._path = Path(snapshot_path)
        self._injection = injection
        self._hook_name = hook_name

    def load_snapshot(self) -> TargetSnapshot | None:
        if not self._path.is_file():
            log.error('Target snapshot not found: %s', self._path)
            return None
        try:
            data = yaml.safe_load(self._path.read_text(encoding='utf-8')) or {}
            return TargetSnapshot.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            log.error('Invalid target snapshot %s: %s', self._path, e)
            return None

    def current_context(self) -> dict[str, Any] | None:
        snapshot = self.load_snapshot()
        if snapshot is None:
            return None
        if not snapshot.process:
            log.error('No process attached in %s', self._path)
            return None
        hook_name = self._hook_name or snapshot.hook_name
        if not hook_name:
            log.error('No hook name supplied')
            return None
        return build_context(snapshot, self._injection, hook_name)
