"""Domain error types."""

from __future__ import annotations


class TemplateError(Exception):
    """Base class for failures confined to a single template."""


class CompileError(TemplateError):
    """Raised when a template's tag syntax is malformed or its generated program will not compile."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        super().__init__(f'{message} (line {line})' if line is not None else message)


class TemplateRuntimeError(CompileError):
    """Raised when the generated program raises while rendering."""


class ContextUnavailableError(TemplateError):
    """Raised when no target context can be produced for a render."""


class SettingsError(ValueError):
    """Raised when a template settings file cannot be parsed into a mapping."""
