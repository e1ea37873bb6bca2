"""Render environment: per-invocation bindings with an ambient fallback scope."""

from __future__ import annotations

import builtins
from collections.abc import Mapping
from typing import Any


def safe_str(value: Any) -> str:
    """Stringify *value*, mapping None to the empty string."""
    return '' if value is None else str(value)


class Environment(dict):
    """Two-level lookup used as the globals of a generated template program.

    Explicit bindings win. A missing name falls back to the ambient mapping,
    then to Python builtins, and finally resolves to None so that an output tag
    referencing an unknown name renders as an empty string.
    """

    def __init__(self, bindings: Mapping[str, Any] | None = None, ambient: Mapping[str, Any] | None = None) -> None:
        super().__init__(bindings or {})
        self._ambient: Mapping[str, Any] = ambient if ambient is not None else {}
        self.setdefault('_safe', safe_str)

    @property
    def ambient(self) -> Mapping[str, Any]:
        return self._ambient

    def __missing__(self, key: str) -> Any:
        if key in self._ambient:
            return self._ambient[key]
        return getattr(builtins, key, None)

    def child(self) -> Environment:
        """Copy of the bindings sharing the same ambient scope."""
        return Environment(self, ambient=self._ambient)
