"""Port: template compiler."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class TemplateCompiler(Protocol):
    """Turns template source into rendered text against an environment."""

    def compile_and_render(self, source: str, environment: Mapping[str, Any], *, name: str = '<template>') -> str:
        """Render *source*. Raises CompileError on malformed tags or a failing program."""
        ...
