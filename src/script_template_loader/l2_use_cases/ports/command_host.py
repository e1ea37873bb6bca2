"""Port: host command registration and timer facility."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from script_template_loader.l1_entities.registration import HandleID

CommandCallback = Callable[[Any], Any]


class CommandHost(Protocol):
    """Abstract host that exposes templates as user commands."""

    def register_command(self, caption: str, callback: CommandCallback, shortcut: str) -> HandleID | None:
        """Bind *caption* to *callback*. Returns a handle, or None when the host refuses."""
        ...

    def unregister_command(self, handle: HandleID) -> None:
        """Release a handle returned by register_command."""
        ...

    def defer(self, delay_ms: int, callback: Callable[[], Any]) -> None:
        """Run *callback* later on the host thread."""
        ...
