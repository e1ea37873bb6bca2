"""Use case: assemble the per-invocation render environment."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from script_template_loader.l1_entities.environment import Environment
from script_template_loader.l1_entities.errors import ContextUnavailableError, TemplateError
from script_template_loader.l2_use_cases.ports.context_provider import ContextProvider
from script_template_loader.l2_use_cases.ports.template_compiler import TemplateCompiler
from script_template_loader.l2_use_cases.ports.template_source import TemplateSource
from script_template_loader.l2_use_cases.utils.script_text import decode_script

log = logging.getLogger('stl.env')


class BuildEnvironmentUseCase:
    """Fresh context from the provider plus the rendered header slot."""

    def __init__(
        self,
        context_provider: ContextProvider,
        source: TemplateSource,
        compiler: TemplateCompiler,
        *,
        header_path: str = '',
        header_name: str = 'Header',
        ambient: Mapping[str, Any] | None = None,
    ) -> None:
        self._provider = context_provider
        self._source = source
        self._compiler = compiler
        self._header_path = header_path
        self._header_name = header_name
        self._ambient = ambient

    def execute(self) -> Environment:
        """Build the environment. Raises ContextUnavailableError when there is no target."""
        context = self._provider.current_context()
        if context is None:
            log.error('Failed to get target context for environment')
            raise ContextUnavailableError('no active target context (is a process attached?)')
        env = Environment(context, ambient=self._ambient)
        env[self._header_name] = self._render_header(env)
        return env

    def _render_header(self, env: Environment) -> str:
        path = self._header_path
        if not path or not self._source.exists(path):
            log.warning('Header template not found: %s', path or '<none>')
            return ''
        log.info('Compiling header template: %s', path)
        try:
            script = decode_script(self._source.read_all(path), path)
            return self._compiler.compile_and_render(script, env, name=path)
        except (OSError, TemplateError) as e:
            log.error('Failed to compile header template: %s', e)
            return ''
