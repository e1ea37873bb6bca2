"""Port: template settings parser."""

from __future__ import annotations

from typing import Any, Protocol


class SettingsReader(Protocol):
    """Turns a companion settings file into a plain mapping."""

    def parse(self, raw: bytes, path: str) -> dict[str, Any]:
        """Parse *raw*. Raises SettingsError when it is not a valid mapping."""
        ...
