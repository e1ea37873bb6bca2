"""Registration entities: the registry's view of live host commands."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from script_template_loader.l1_entities.template import SkippedTemplate, TemplateDescriptor

HandleID = int


class RegisteredTemplate(BaseModel):
    """A descriptor bound to a host command handle."""

    model_config = ConfigDict(frozen=True)

    descriptor: TemplateDescriptor
    handle: HandleID
    caption: str
    shortcut: str = ''

    @property
    def submenu(self) -> str:
        return self.descriptor.submenu


class ShortcutConflict(BaseModel):
    """A later descriptor lost a shortcut (or caption) to an earlier one."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    owner: str
    kind: str = 'shortcut'  # 'shortcut' | 'caption'


class LoadReport(BaseModel):
    """Outcome of one load pass over the catalog."""

    registered: list[str] = Field(default_factory=list)
    conflicts: list[ShortcutConflict] = Field(default_factory=list)
    failures: list[str] = Field(default_factory=list)
    skipped: list[SkippedTemplate] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.conflicts and not self.failures
