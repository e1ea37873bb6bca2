"""Gateway: in-process command host — implements CommandHost port."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from script_template_loader.l1_entities.registration import HandleID
from script_template_loader.l2_use_cases.ports.command_host import CommandCallback

log = logging.getLogger('stl.host')


@dataclass(frozen=True)
class HostCommand:
    handle: HandleID
    caption: str
    callback: CommandCallback
    shortcut: str = ''


class InMemoryCommandHost:
    """Menu-less host used by the CLI and tests.

    Handles are issued from 1 and never reused. Deferred callbacks queue up
    until run_pending() drains them.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._commands: dict[HandleID, HostCommand] = {}
        self._pending: list[tuple[int, Callable[[], Any]]] = []

    def register_command(self, caption: str, callback: CommandCallback, shortcut: str) -> HandleID | None:
        if not caption:
            log.error('Refusing to register a command without a caption')
            return None
        handle = next(self._ids)
        self._commands[handle] = HostCommand(handle=handle, caption=caption, callback=callback, shortcut=shortcut)
        return handle

    def unregister_command(self, handle: HandleID) -> None:
        if self._commands.pop(handle, None) is None:
            raise KeyError(f'Unknown command handle: {handle}')

    def defer(self, delay_ms: int, callback: Callable[[], Any]) -> None:
        self._pending.append((delay_ms, callback))

    def commands(self) -> list[HostCommand]:
        return list(self._commands.values())

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        """Run queued callbacks in delay order. Returns how many ran."""
        ran = 0
        while self._pending:
            batch = sorted(self._pending, key=lambda item: item[0])
            self._pending.clear()
            for _, callback in batch:
                callback()
                ran += 1
        return ran

    def invoke(self, caption: str, buffer: Any) -> Any:
        """Fire the command bound to *caption* as if the user had clicked it."""
        for command in self._commands.values():
            if command.caption == caption:
                return command.callback(buffer)
        raise KeyError(f'No command registered for: {caption}')
