"""Use case: scan a template directory into descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from script_template_loader.l1_entities.errors import SettingsError
from script_template_loader.l1_entities.template import SkippedTemplate, TemplateDescriptor
from script_template_loader.l2_use_cases.ports.settings_reader import SettingsReader
from script_template_loader.l2_use_cases.ports.template_source import TemplateSource
from script_template_loader.l2_use_cases.utils.path_utils import base_name, join_path, normalize_path

log = logging.getLogger('stl.catalog')


@dataclass(frozen=True)
class CatalogScan:
    """Snapshot of one directory scan, in enumeration order."""

    descriptors: list[TemplateDescriptor] = field(default_factory=list)
    skipped: list[SkippedTemplate] = field(default_factory=list)
    header_name: str = 'Header'

    @property
    def header(self) -> TemplateDescriptor | None:
        return next((d for d in self.descriptors if d.name == self.header_name), None)

    @property
    def commands(self) -> list[TemplateDescriptor]:
        """Descriptors exposed as user commands (everything except the header)."""
        return [d for d in self.descriptors if d.name != self.header_name]

    def find(self, ref: str) -> TemplateDescriptor | None:
        """Look up by template name first, then by caption."""
        for d in self.descriptors:
            if d.name == ref:
                return d
        return next((d for d in self.commands if d.caption == ref), None)


class DiscoverTemplatesUseCase:
    """Pairs each script file with its settings file. One bad entry never aborts the scan."""

    def __init__(
        self,
        source: TemplateSource,
        settings_reader: SettingsReader,
        *,
        script_extension: str = '.CEA',
        settings_extension: str = '.settings.yaml',
        header_name: str = 'Header',
    ) -> None:
        self._source = source
        self._settings = settings_reader
        self._script_ext = script_extension
        self._settings_ext = settings_extension
        self._header_name = header_name

    @property
    def header_name(self) -> str:
        return self._header_name

    def header_path(self, directory: str) -> str:
        return join_path(directory, self._header_name + self._script_ext)

    def execute(self, directory: str) -> CatalogScan:
        folder = normalize_path(directory)
        log.info('Discovering templates in: %s', folder)
        if not folder or not self._source.is_directory(folder):
            log.warning('Template folder does not exist: %s', folder or '<empty>')
            return CatalogScan(header_name=self._header_name)

        descriptors: list[TemplateDescriptor] = []
        skipped: list[SkippedTemplate] = []
        for entry in self._source.list_entries(folder):
            file_name = base_name(entry)
            if not file_name.endswith(self._script_ext):
                continue
            name = file_name[: -len(self._script_ext)]
            descriptor, reason = self._describe(folder, name, normalize_path(entry))
            if descriptor is None:
                log.warning('Skipped template %s: %s', name, reason)
                skipped.append(SkippedTemplate(name=name, reason=reason))
                continue
            log.info('Found template: %s', name)
            descriptors.append(descriptor)

        log.info('Total templates discovered: %d (skipped %d)', len(descriptors), len(skipped))
        return CatalogScan(descriptors=descriptors, skipped=skipped, header_name=self._header_name)

    def _describe(self, folder: str, name: str, script_path: str) -> tuple[TemplateDescriptor | None, str]:
        try:
            self._source.read_all(script_path)
        except OSError as e:
            return None, f'script unreadable ({e})'

        settings_path = join_path(folder, name + self._settings_ext)
        if name == self._header_name:
            return TemplateDescriptor(name=name, script_path=script_path), ''

        if not self._source.exists(settings_path):
            return None, f'missing settings file {settings_path}'
        try:
            settings = self._settings.parse(self._source.read_all(settings_path), settings_path)
        except (OSError, SettingsError) as e:
            return None, f'invalid settings ({e})'
        return TemplateDescriptor(name=name, script_path=script_path, settings_path=settings_path, settings=settings), ''
