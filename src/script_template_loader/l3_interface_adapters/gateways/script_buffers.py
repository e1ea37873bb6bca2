"""Gateways: render targets implementing the ScriptBuffer port."""

from __future__ import annotations

from pathlib import Path

import pyperclip


class MemoryScriptBuffer:
    def __init__(self, text: str = '') -> None:
        self.text = text

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = text


class FileScriptBuffer:
    """A script file on disk. A missing file reads as empty."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def get_text(self) -> str:
        if not self._path.exists():
            return ''
        return self._path.read_text(encoding='utf-8')

    def set_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(text, encoding='utf-8')


class ClipboardScriptBuffer:
    """System clipboard, for pasting into the host's script editor."""

    def get_text(self) -> str:
        return pyperclip.paste() or ''

    def set_text(self, text: str) -> None:
        pyperclip.copy(text)
