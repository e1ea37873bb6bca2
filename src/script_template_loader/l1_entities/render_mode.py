"""L1 entity: how rendered text lands in the target script buffer."""

from __future__ import annotations

import enum


class RenderMode(enum.Enum):
    APPEND = 'append'
    REPLACE = 'replace'
