"""Use case: render one template and hand the text to a script buffer."""

from __future__ import annotations

import logging

from script_template_loader.l1_entities.render_mode import RenderMode
from script_template_loader.l1_entities.template import TemplateDescriptor
from script_template_loader.l2_use_cases.build_environment_use_case import BuildEnvironmentUseCase
from script_template_loader.l2_use_cases.ports.script_buffer import ScriptBuffer
from script_template_loader.l2_use_cases.ports.template_compiler import TemplateCompiler
from script_template_loader.l2_use_cases.ports.template_source import TemplateSource
from script_template_loader.l2_use_cases.utils.script_text import decode_script

log = logging.getLogger('stl.render')


class RenderTemplateUseCase:
    """Reads the script fresh on every call so edits show up without a reload."""

    def __init__(
        self,
        source: TemplateSource,
        environment: BuildEnvironmentUseCase,
        compiler: TemplateCompiler,
    ) -> None:
        self._source = source
        self._environment = environment
        self._compiler = compiler

    def execute(self, descriptor: TemplateDescriptor) -> str:
        """Render *descriptor*. Raises OSError, ContextUnavailableError or CompileError."""
        log.info('Rendering template: %s', descriptor.name)
        script = decode_script(self._source.read_all(descriptor.script_path), descriptor.script_path)
        env = self._environment.execute()
        text = self._compiler.compile_and_render(script, env, name=descriptor.script_path)
        log.info('Rendered template %s (%d chars)', descriptor.name, len(text))
        return text


def apply_rendered(buffer: ScriptBuffer, text: str, mode: RenderMode = RenderMode.APPEND) -> None:
    if mode is RenderMode.REPLACE:
        buffer.set_text(text)
    else:
        buffer.set_text(buffer.get_text() + text)
