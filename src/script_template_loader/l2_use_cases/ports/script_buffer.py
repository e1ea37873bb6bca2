"""Port: render target (the host's script editor buffer)."""

from __future__ import annotations

from typing import Protocol


class ScriptBuffer(Protocol):
    """Abstract text buffer that receives rendered templates."""

    def get_text(self) -> str:
        ...

    def set_text(self, text: str) -> None:
        ...
