"""Template compiler: scans <<expr>> and <% stmt %> tags into a Python render function.

A template is a sequence of literal runs and tags:

- ``<< expr >>`` appends ``_safe(expr)`` to the output (whitespace around expr is trimmed).
- ``<% stmt %>`` splices Python statements into the program. A tag whose last statement
  ends with ``:`` opens a block, ``<% end %>`` closes it, and a tag starting with
  ``else``/``elif``/``except``/``finally`` closes the current block before opening
  the next one.

The generated function is executed with the render Environment as its globals, so
names resolve through bindings, the ambient scope and builtins, and unknown names
come back as None.
"""

from __future__ import annotations

import io
import logging
import re
import textwrap
import tokenize
import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from script_template_loader.l1_entities.environment import Environment
from script_template_loader.l1_entities.errors import CompileError, TemplateRuntimeError

log = logging.getLogger('stl.compiler')

OUTPUT_OPEN, OUTPUT_CLOSE = '<<', '>>'
CODE_OPEN, CODE_CLOSE = '<%', '%>'
ENTRY_POINT = '__render_template__'

_OPEN_TAG = re.compile(r'<[<%]')
_CLOSERS = {OUTPUT_OPEN: OUTPUT_CLOSE, CODE_OPEN: CODE_CLOSE}
_CONTINUATION = re.compile(r'(else|elif|except|finally)\b')
_TRIVIA = frozenset(
    {tokenize.COMMENT, tokenize.NL, tokenize.NEWLINE, tokenize.INDENT, tokenize.DEDENT, tokenize.ENDMARKER}
)
_BLOCK_END = 'end'
_INDENT = '    '


@dataclass
class GeneratedProgram:
    """Python source of a render function plus the template line behind each generated line."""

    source: str
    origins: list[int] = field(default_factory=list)

    def template_line(self, generated_line: int | None) -> int | None:
        if generated_line is None or not 1 <= generated_line <= len(self.origins):
            return None
        return self.origins[generated_line - 1]


@dataclass
class _Block:
    indent: str
    line: int
    has_body: bool = False


class _ProgramBuilder:
    def __init__(self) -> None:
        self._lines = [f'def {ENTRY_POINT}():', f'{_INDENT}_out = []']
        self._origins = [1, 1]
        self._blocks = [_Block(_INDENT, 1, has_body=True)]

    @property
    def open_blocks(self) -> int:
        return len(self._blocks) - 1

    def emit(self, text: str, line: int) -> None:
        block = self._blocks[-1]
        self._lines.append(block.indent + text)
        self._origins.extend([line] * (text.count('\n') + 1))
        if text.strip():
            block.has_body = True

    def open_block(self, opener: str, line: int) -> None:
        relative = opener[: len(opener) - len(opener.lstrip())]
        self._blocks.append(_Block(self._blocks[-1].indent + relative + _INDENT, line))

    def close_block(self, line: int) -> None:
        if not self.open_blocks:
            raise CompileError("'end' without an open block", line=line)
        block = self._blocks.pop()
        if not block.has_body:
            self._lines.append(block.indent + 'pass')
            self._origins.append(block.line)

    def finish(self) -> GeneratedProgram:
        if self.open_blocks:
            raise CompileError('unclosed block: missing <% end %>', line=self._blocks[-1].line)
        self._lines.append(f"{_INDENT}return ''.join(_out)")
        self._origins.append(self._origins[-1])
        return GeneratedProgram(source='\n'.join(self._lines) + '\n', origins=self._origins)


def _statement_lines(content: str, margin: str = '') -> list[str]:
    """Split a code tag into statements.

    *margin* is the whitespace equivalent of everything on the source line before the
    tag's content. When every continuation line starts with it, the first line is
    placed at that column and all lines are dedented together, so their indent
    relative to the first line survives. Otherwise the continuation lines are
    dedented on their own.
    """
    first, _, rest = content.partition('\n')
    head = first.strip()
    tail = rest.split('\n') if rest else []
    margin += first[: len(first) - len(first.lstrip())]
    if head and tail and all(line.startswith(margin) for line in tail if line.strip()):
        lines = textwrap.dedent('\n'.join([margin + head, *tail])).split('\n')
    else:
        lines = [head]
        if rest:
            lines.extend(textwrap.dedent(rest).split('\n'))
    lines = [line.rstrip() for line in lines]
    while lines and not lines[-1]:
        lines.pop()
    while lines and not lines[0]:
        lines.pop(0)
    return lines


def _block_opener(statements: list[str]) -> str | None:
    """Return the line starting the last logical statement if that statement ends with ':'."""
    last = None
    start_row = 0
    new_statement = True
    try:
        for tok in tokenize.generate_tokens(io.StringIO('\n'.join(statements) + '\n').readline):
            if tok.type in _TRIVIA:
                new_statement = new_statement or tok.type == tokenize.NEWLINE
                continue
            if new_statement:
                start_row = tok.start[0]
                new_statement = False
            last = tok
    except (tokenize.TokenError, SyntaxError):
        # Left for compile() to report against the template line.
        return None
    if last is None or last.type != tokenize.OP or last.string != ':':
        return None
    return statements[start_row - 1]


def _append_code(builder: _ProgramBuilder, content: str, line: int, margin: str = '') -> None:
    statements = _statement_lines(content, margin)
    if not statements:
        return
    head = statements[0].strip()
    if head == _BLOCK_END and len(statements) == 1:
        builder.close_block(line)
        return
    if _CONTINUATION.match(head):
        builder.close_block(line)
    for offset, statement in enumerate(statements):
        builder.emit(statement, line + offset)
    opener = _block_opener(statements)
    if opener is not None:
        builder.open_block(opener, line)


def _append_output(builder: _ProgramBuilder, content: str, line: int) -> None:
    expr = content.strip()
    if not expr:
        raise CompileError('empty output tag', line=line)
    if '\n' in expr or '#' in expr:
        builder.emit(f'_out.append(_safe(\n{expr}\n))', line)
    else:
        builder.emit(f'_out.append(_safe({expr}))', line)


def generate_program(source: str) -> GeneratedProgram:
    """Single left-to-right scan of *source* into a render function. Raises CompileError."""
    builder = _ProgramBuilder()
    pos = 0
    line = 1
    while pos < len(source):
        match = _OPEN_TAG.search(source, pos)
        if match is None:
            builder.emit(f'_out.append({source[pos:]!r})', line)
            break
        start = match.start()
        if start > pos:
            builder.emit(f'_out.append({source[pos:start]!r})', line)
            line += source.count('\n', pos, start)
        opener = match.group()
        closer = _CLOSERS[opener]
        end = source.find(closer, start + len(opener))
        if end == -1:
            raise CompileError(f'unterminated tag {opener!r}: missing {closer!r}', line=line)
        content = source[start + len(opener) : end]
        if opener == OUTPUT_OPEN:
            _append_output(builder, content, line)
        else:
            line_start = source.rfind('\n', 0, start) + 1
            margin = ''.join(c if c == '\t' else ' ' for c in source[line_start : start + len(opener)])
            _append_code(builder, content, line, margin)
        line += content.count('\n')
        pos = end + len(closer)
    return builder.finish()


class ExecTemplateCompiler:
    """Implements the TemplateCompiler port by executing the generated function."""

    def compile_and_render(self, source: str, environment: Mapping[str, Any], *, name: str = '<template>') -> str:
        if not source:
            log.info('Empty template %s, nothing to render', name)
            return ''
        program = generate_program(source)
        log.debug('Generated program for %s:\n%s', name, program.source)

        try:
            code = compile(program.source, name, 'exec')
        except SyntaxError as e:
            raise CompileError(
                f'{name}: generated program does not compile: {e.msg}',
                line=program.template_line(e.lineno),
            ) from e

        env = environment if isinstance(environment, Environment) else Environment(environment)
        exec(code, env)  # noqa: S102 -- executing the template program is the feature
        render = env.pop(ENTRY_POINT)
        try:
            return render()
        except Exception as e:
            raise TemplateRuntimeError(
                f'{name}: {type(e).__name__}: {e}',
                line=program.template_line(_failing_line(e, name)),
            ) from e


def _failing_line(exc: BaseException, filename: str) -> int | None:
    frames = [f for f in traceback.extract_tb(exc.__traceback__) if f.filename == filename]
    return frames[-1].lineno if frames else None
