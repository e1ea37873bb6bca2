"""Template descriptor models. Pure data, no I/O."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SUBMENU = 'Templates'


class TemplateDescriptor(BaseModel):
    """One discoverable template: its paths plus the companion settings mapping.

    Produced fresh by every catalog scan and never mutated afterwards; the next
    scan supersedes it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    script_path: str
    settings_path: str = ''
    settings: dict[str, Any] = Field(default_factory=dict)

    @property
    def caption(self) -> str:
        return str(self.settings.get('caption') or self.name)

    @property
    def shortcut(self) -> str:
        return str(self.settings.get('shortcut') or '')

    @property
    def submenu(self) -> str:
        return str(self.settings.get('submenu') or DEFAULT_SUBMENU)


class SkippedTemplate(BaseModel):
    """A script file the catalog could not turn into a descriptor."""

    model_config = ConfigDict(frozen=True)

    name: str
    reason: str
