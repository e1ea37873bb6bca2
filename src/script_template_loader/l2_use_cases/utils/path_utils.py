"""Pure path helpers. Every path the core compares or joins goes through normalize_path."""

from __future__ import annotations

import re

_REPEATED_SLASHES = re.compile(r'/{2,}')


def normalize_path(path: str | None) -> str:
    """Forward slashes, no repeated slashes, no trailing slash (the root '/' is kept)."""
    normalized = _REPEATED_SLASHES.sub('/', (path or '').replace('\\', '/'))
    if normalized == '/':
        return normalized
    return normalized.rstrip('/')


def join_path(directory: str, name: str) -> str:
    return normalize_path(f'{normalize_path(directory)}/{name}')


def base_name(path: str) -> str:
    return normalize_path(path).rsplit('/', 1)[-1]
