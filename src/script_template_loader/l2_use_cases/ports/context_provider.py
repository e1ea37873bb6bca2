"""Port: ambient context collaborator."""

from __future__ import annotations

from typing import Any, Protocol


class ContextProvider(Protocol):
    """Supplies the ambient values a template render may reference."""

    def current_context(self) -> dict[str, Any] | None:
        """Return the current context, or None when no target session is active."""
        ...
