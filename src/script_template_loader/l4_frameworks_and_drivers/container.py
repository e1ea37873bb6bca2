"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from script_template_loader.l1_entities.config import AppConfig
from script_template_loader.l1_entities.render_mode import RenderMode
from script_template_loader.l2_use_cases.build_environment_use_case import BuildEnvironmentUseCase
from script_template_loader.l2_use_cases.discover_templates_use_case import DiscoverTemplatesUseCase
from script_template_loader.l2_use_cases.ports.command_host import CommandHost
from script_template_loader.l2_use_cases.ports.config_loader import ConfigLoader
from script_template_loader.l2_use_cases.ports.context_provider import ContextProvider
from script_template_loader.l2_use_cases.ports.settings_reader import SettingsReader
from script_template_loader.l2_use_cases.ports.template_compiler import TemplateCompiler
from script_template_loader.l2_use_cases.ports.template_source import TemplateSource
from script_template_loader.l2_use_cases.render_template_use_case import RenderTemplateUseCase
from script_template_loader.l2_use_cases.utils.context_fields import template_helpers
from script_template_loader.l2_use_cases.utils.template_codegen import ExecTemplateCompiler
from script_template_loader.l3_interface_adapters.controllers.template_registry import TemplateRegistry
from script_template_loader.l3_interface_adapters.gateways.in_memory_command_host import InMemoryCommandHost
from script_template_loader.l3_interface_adapters.gateways.local_template_source import LocalTemplateSource
from script_template_loader.l3_interface_adapters.gateways.yaml_config_loader import YamlConfigLoader
from script_template_loader.l3_interface_adapters.gateways.yaml_context_provider import YamlContextProvider
from script_template_loader.l3_interface_adapters.gateways.yaml_settings_reader import YamlSettingsReader


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        *,
        host: CommandHost | None = None,
        context_provider: ContextProvider | None = None,
        source: TemplateSource | None = None,
        hook_name: str | None = None,
        snapshot_path: str | None = None,
        render_mode: RenderMode = RenderMode.APPEND,
    ) -> None:
        self.config = config
        templates = config.templates

        self.source: TemplateSource = source or LocalTemplateSource()
        self.settings_reader: SettingsReader = YamlSettingsReader()
        self.compiler: TemplateCompiler = ExecTemplateCompiler()
        self.host: CommandHost = host or InMemoryCommandHost()
        self.context_provider: ContextProvider = context_provider or YamlContextProvider(
            snapshot_path or config.context.snapshot_path,
            config.injection,
            hook_name=hook_name,
        )

        self.catalog = DiscoverTemplatesUseCase(
            self.source,
            self.settings_reader,
            script_extension=templates.script_extension,
            settings_extension=templates.settings_extension,
            header_name=templates.header_name,
        )
        self.environment = BuildEnvironmentUseCase(
            self.context_provider,
            self.source,
            self.compiler,
            header_path=self.catalog.header_path(templates.directory),
            header_name=templates.header_name,
            ambient=template_helpers(),
        )
        self.renderer = RenderTemplateUseCase(self.source, self.environment, self.compiler)
        self.registry = TemplateRegistry(
            self.catalog,
            templates.directory,
            self.host,
            self.renderer,
            render_mode=render_mode,
        )

    @staticmethod
    def config_loader() -> ConfigLoader:
        return YamlConfigLoader()
