"""Port: read-only file-system view over the template directory."""

from __future__ import annotations

from typing import Protocol


class TemplateSource(Protocol):
    """Abstract template source. Paths are forward-slash normalized strings."""

    def exists(self, path: str) -> bool:
        """True if *path* names an existing file."""
        ...

    def is_directory(self, path: str) -> bool:
        """True if *path* names an existing directory."""
        ...

    def list_entries(self, path: str) -> list[str]:
        """Files directly inside *path*, in enumeration order (non-recursive)."""
        ...

    def read_all(self, path: str) -> bytes:
        """Whole-file read. Raises OSError when the file is missing or unreadable."""
        ...
