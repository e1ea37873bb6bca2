"""TemplateRegistry binds catalog descriptors to host commands and owns their handles."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from script_template_loader.l1_entities.errors import TemplateError
from script_template_loader.l1_entities.registration import LoadReport, RegisteredTemplate, ShortcutConflict
from script_template_loader.l1_entities.render_mode import RenderMode
from script_template_loader.l1_entities.template import TemplateDescriptor
from script_template_loader.l2_use_cases.discover_templates_use_case import CatalogScan, DiscoverTemplatesUseCase
from script_template_loader.l2_use_cases.ports.command_host import CommandHost
from script_template_loader.l2_use_cases.ports.script_buffer import ScriptBuffer
from script_template_loader.l2_use_cases.render_template_use_case import RenderTemplateUseCase, apply_rendered

log = logging.getLogger('stl.registry')

RELOAD_DELAY_MS = 50


class TemplateRegistry:
    """Caption -> live registration map with first-writer-wins shortcut claims.

    All entry points run on the host's single scripting thread, so no locking.
    A record exists only while the host holds a handle for it.
    """

    def __init__(
        self,
        catalog: DiscoverTemplatesUseCase,
        directory: str,
        host: CommandHost,
        renderer: RenderTemplateUseCase,
        *,
        render_mode: RenderMode = RenderMode.APPEND,
    ) -> None:
        self._catalog = catalog
        self._directory = directory
        self._host = host
        self._renderer = renderer
        self._render_mode = render_mode

        self.scan = CatalogScan(header_name=catalog.header_name)
        self.leaked_handles: list[int] = []
        self._records: dict[str, RegisteredTemplate] = {}

    @property
    def records(self) -> dict[str, RegisteredTemplate]:
        return dict(self._records)

    def get(self, caption: str) -> RegisteredTemplate | None:
        return self._records.get(caption)

    def discover(self) -> CatalogScan:
        self.scan = self._catalog.execute(self._directory)
        return self.scan

    def load_all(self) -> LoadReport:
        """Register every command descriptor of the current scan, in catalog order."""
        report = LoadReport(skipped=list(self.scan.skipped))
        commands = self.scan.commands
        if not commands:
            log.warning('No templates to load')
            return report

        claimed = {r.shortcut: r.descriptor.name for r in self._records.values() if r.shortcut}
        captions: dict[str, str] = {}
        for descriptor in commands:
            caption = descriptor.caption
            if caption in captions:
                log.error(
                    "Caption conflict for '%s': '%s' is already used by template '%s'.",
                    descriptor.name,
                    caption,
                    captions[caption],
                )
                report.conflicts.append(
                    ShortcutConflict(name=descriptor.name, value=caption, owner=captions[caption], kind='caption')
                )
                continue
            captions[caption] = descriptor.name

            shortcut = descriptor.shortcut
            if shortcut:
                if claimed.get(shortcut, descriptor.name) != descriptor.name:
                    log.error(
                        "Shortcut conflict for '%s': '%s' is already used by template '%s'.",
                        descriptor.name,
                        shortcut,
                        claimed[shortcut],
                    )
                    report.conflicts.append(
                        ShortcutConflict(name=descriptor.name, value=shortcut, owner=claimed[shortcut])
                    )
                    shortcut = ''
                else:
                    claimed[shortcut] = descriptor.name

            if self.register(descriptor, shortcut=shortcut) is None:
                report.failures.append(caption)
            else:
                report.registered.append(caption)
        return report

    def register(self, descriptor: TemplateDescriptor, *, shortcut: str | None = None) -> RegisteredTemplate | None:
        """Bind *descriptor* to a host command. Returns None when the host refuses."""
        caption = descriptor.caption
        shortcut = descriptor.shortcut if shortcut is None else shortcut
        log.info('Registering template: %s', caption)

        if caption in self._records:
            log.warning("Template '%s' is already registered; replacing it", caption)
            self.unregister(caption)

        owner = self._shortcut_owner(shortcut)
        if owner is not None:
            log.error("Shortcut conflict for '%s': '%s' is already used by '%s'.", caption, shortcut, owner)
            shortcut = ''

        handle = self._host.register_command(caption, self._make_callback(descriptor), shortcut)
        if handle is None:
            log.error('Failed to register template: %s', caption)
            return None

        record = RegisteredTemplate(descriptor=descriptor, handle=handle, caption=caption, shortcut=shortcut)
        self._records[caption] = record
        if shortcut:
            log.info("Registered template '%s' with id %d and shortcut '%s'", caption, handle, shortcut)
        else:
            log.info("Registered template '%s' with id %d (no shortcut)", caption, handle)
        return record

    def unregister(self, caption: str) -> bool:
        """Release *caption*'s handle. Returns False if nothing was released cleanly."""
        record = self._records.get(caption)
        if record is None:
            log.warning('Tried to unregister unknown template: %s', caption)
            return False
        try:
            self._host.unregister_command(record.handle)
        except Exception as e:
            log.error("Host failed to release handle %d for '%s': %s", record.handle, caption, e)
            self.leaked_handles.append(record.handle)
            return False
        finally:
            del self._records[caption]
        log.info("Unregistered template '%s' (id=%d)", caption, record.handle)
        return True

    def unload_all(self) -> None:
        log.info('Unloading templates...')
        for caption in list(self._records):
            self.unregister(caption)
        log.info('All templates unloaded.')

    def reload_all(self) -> LoadReport:
        """Release every live record, rescan the directory and load again."""
        log.info('Starting template reload...')
        self.unload_all()
        scan = self.discover()
        log.info('Template discovery complete: %d template(s) found.', len(scan.descriptors))
        report = self.load_all()
        log.info('Template reload complete.')
        return report

    def request_reload(self, delay_ms: int = RELOAD_DELAY_MS) -> None:
        """Schedule reload_all on the host timer instead of running it inline."""
        log.info('Reload scheduled in %d ms', delay_ms)
        self._host.defer(delay_ms, self.reload_all)

    def by_submenu(self) -> dict[str, list[RegisteredTemplate]]:
        groups: dict[str, list[RegisteredTemplate]] = {}
        for record in self._records.values():
            groups.setdefault(record.submenu, []).append(record)
        return groups

    def _shortcut_owner(self, shortcut: str) -> str | None:
        if not shortcut:
            return None
        return next((r.caption for r in self._records.values() if r.shortcut == shortcut), None)

    def _make_callback(self, descriptor: TemplateDescriptor) -> Callable[[ScriptBuffer], Any]:
        renderer = self._renderer
        mode = self._render_mode

        def on_invoke(buffer: ScriptBuffer) -> str | None:
            try:
                text = renderer.execute(descriptor)
            except (TemplateError, OSError) as e:
                log.error("Template '%s' did not render: %s", descriptor.name, e)
                return None
            apply_rendered(buffer, text, mode)
            log.info('Applied compiled template: %s', descriptor.name)
            return text

        return on_invoke
