"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from script_template_loader.l1_entities.config import AppConfig, InjectionConfig
from script_template_loader.l1_entities.target_snapshot import Instruction, TargetSnapshot
from script_template_loader.l2_use_cases.build_environment_use_case import BuildEnvironmentUseCase
from script_template_loader.l2_use_cases.discover_templates_use_case import DiscoverTemplatesUseCase
from script_template_loader.l2_use_cases.render_template_use_case import RenderTemplateUseCase
from script_template_loader.l2_use_cases.utils.template_codegen import ExecTemplateCompiler
from script_template_loader.l3_interface_adapters.controllers.template_registry import TemplateRegistry
from script_template_loader.l3_interface_adapters.gateways.yaml_settings_reader import YamlSettingsReader
from script_template_loader.l4_frameworks_and_drivers.config import build_app_config

TEMPLATE_DIR = '/templates'

# --- Protocol-conforming Fakes ---


class FakeTemplateSource:
    """In-memory file system keyed by normalized path."""

    def __init__(self, files: dict[str, str | bytes] | None = None, directories: set[str] | None = None):
        self.files: dict[str, bytes] = {}
        self.directories = set(directories or {TEMPLATE_DIR})
        self.unreadable: set[str] = set()
        self.reads: list[str] = []
        for path, content in (files or {}).items():
            self.put(path, content)

    def put(self, path: str, content: str | bytes) -> None:
        self.files[path] = content.encode('utf-8') if isinstance(content, str) else content

    def remove(self, path: str) -> None:
        self.files.pop(path, None)

    def exists(self, path: str) -> bool:
        return path in self.files

    def is_directory(self, path: str) -> bool:
        return path in self.directories

    def list_entries(self, path: str) -> list[str]:
        prefix = path.rstrip('/') + '/'
        return [p for p in self.files if p.startswith(prefix) and '/' not in p[len(prefix) :]]

    def read_all(self, path: str) -> bytes:
        self.reads.append(path)
        if path in self.unreadable:
            raise PermissionError(f'Permission denied: {path}')
        if path not in self.files:
            raise FileNotFoundError(f'No such file: {path}')
        return self.files[path]


class FakeCommandHost:
    """Records registrations; can refuse captions or fail on release."""

    def __init__(self):
        self._next = 1
        self.live: dict[int, tuple[str, Callable, str]] = {}
        self.register_calls: list[tuple[str, str]] = []
        self.unregister_calls: list[int] = []
        self.deferred: list[tuple[int, Callable[[], Any]]] = []
        self.refuse: set[str] = set()
        self.fail_unregister = False

    def register_command(self, caption: str, callback: Callable, shortcut: str) -> int | None:
        self.register_calls.append((caption, shortcut))
        if caption in self.refuse:
            return None
        handle = self._next
        self._next += 1
        self.live[handle] = (caption, callback, shortcut)
        return handle

    def unregister_command(self, handle: int) -> None:
        self.unregister_calls.append(handle)
        if self.fail_unregister:
            raise RuntimeError('host refused to release')
        self.live.pop(handle)

    def defer(self, delay_ms: int, callback: Callable[[], Any]) -> None:
        self.deferred.append((delay_ms, callback))

    def run_deferred(self) -> None:
        pending, self.deferred = self.deferred, []
        for _, callback in pending:
            callback()

    def callback_for(self, caption: str) -> Callable:
        return next(cb for c, cb, _ in self.live.values() if c == caption)

    def shortcuts(self) -> dict[str, str]:
        return {c: s for c, _, s in self.live.values()}


class FakeContextProvider:
    def __init__(self, context: dict[str, Any] | None = None):
        self.context = context
        self.calls = 0

    def current_context(self) -> dict[str, Any] | None:
        self.calls += 1
        return dict(self.context) if self.context is not None else None


class FakeScriptBuffer:
    def __init__(self, text: str = ''):
        self.text = text
        self.set_calls = 0

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.set_calls += 1
        self.text = text


# --- Helpers ---


def template_files(name: str, script: str, settings: str | None = 'caption: {name}\n') -> dict[str, str]:
    """Script plus companion settings file for *name* under TEMPLATE_DIR."""
    files = {f'{TEMPLATE_DIR}/{name}.CEA': script}
    if settings is not None:
        files[f'{TEMPLATE_DIR}/{name}.settings.yaml'] = settings.format(name=name)
    return files


def make_registry(
    source: FakeTemplateSource,
    host: FakeCommandHost,
    context_provider: FakeContextProvider | None = None,
) -> TemplateRegistry:
    compiler = ExecTemplateCompiler()
    catalog = DiscoverTemplatesUseCase(source, YamlSettingsReader())
    environment = BuildEnvironmentUseCase(
        context_provider or FakeContextProvider({'Process': 'game.exe'}),
        source,
        compiler,
        header_path=catalog.header_path(TEMPLATE_DIR),
    )
    renderer = RenderTemplateUseCase(source, environment, compiler)
    return TemplateRegistry(catalog, TEMPLATE_DIR, host, renderer)


# --- Fixtures ---


@pytest.fixture
def compiler() -> ExecTemplateCompiler:
    return ExecTemplateCompiler()


@pytest.fixture
def default_config() -> AppConfig:
    return build_app_config({})


@pytest.fixture
def injection() -> InjectionConfig:
    return InjectionConfig(line_count=3, remove_spaces=True, add_tabs=True, append_to_hook_name='Hook')


@pytest.fixture
def sample_snapshot() -> TargetSnapshot:
    return TargetSnapshot(
        process='game.exe',
        process_base=0x140000000,
        module='game.exe',
        module_base=0x140000000,
        address='game.exe+1234',
        is_64bit=True,
        hook_name='Health',
        aob='8B 41 10 89 45 FC',
        aob_offset=2,
        preceding=[
            Instruction(address='game.exe+1230', bytes='55', opcode='push rbp'),
            Instruction(address='game.exe+1231', bytes='48 8B EC', opcode='mov rbp,rsp'),
        ],
        instructions=[
            Instruction(address='game.exe+1234', bytes='8B 41 10', opcode='mov eax,[rcx+10] {health}'),
            Instruction(address='game.exe+1237', bytes='89 45 FC', opcode='mov [rbp-04],eax'),
            Instruction(address='game.exe+123A', bytes='C3', opcode='ret'),
        ],
    )


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """On-disk template directory with two commands and a header."""
    d = tmp_path / 'templates'
    d.mkdir()
    (d / 'Header.CEA').write_text('// <<Process>>\n', encoding='utf-8')
    (d / 'Hook.CEA').write_text('<<Header>>[ENABLE]\n<<Alloc>>\n', encoding='utf-8')
    (d / 'Hook.settings.yaml').write_text("caption: Hook\nshortcut: 'Ctrl+H'\nsubmenu: Injection\n", encoding='utf-8')
    (d / 'Blank.CEA').write_text('[ENABLE]\n[DISABLE]\n', encoding='utf-8')
    (d / 'Blank.settings.yaml').write_text('caption: Blank script\n', encoding='utf-8')
    return d


@pytest.fixture
def snapshot_yaml(tmp_path: Path) -> Path:
    p = tmp_path / 'context.yaml'
    p.write_text(
        """\
process: game.exe
process_base: 0x140000000
module: game.exe
module_base: 0x140000000
address: game.exe+1234
hook_name: Health
instructions:
  - {address: game.exe+1234, bytes: 8B 41 10, opcode: 'mov eax,[rcx+10]'}
  - {address: game.exe+1237, bytes: 89 45 FC, opcode: 'mov [rbp-04],eax'}
extra:
  Author: tester
""",
        encoding='utf-8',
    )
    return p


@pytest.fixture
def config_yaml(tmp_path: Path, template_dir: Path, snapshot_yaml: Path) -> Path:
    p = tmp_path / 'config.yaml'
    p.write_text(
        f"""\
logging:
  level: ERROR
  log_to_file: false
templates:
  directory: {template_dir.as_posix()}
context:
  snapshot_path: {snapshot_yaml.as_posix()}
""",
        encoding='utf-8',
    )
    return p
