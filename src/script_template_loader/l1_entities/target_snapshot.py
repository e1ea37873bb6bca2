"""Target snapshot entity, the debugger state a template render is based on."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Instruction(BaseModel):
    """One disassembled instruction."""

    address: str
    bytes: str = Field(description='Hex bytes, with or without separating spaces')
    opcode: str

    @property
    def size(self) -> int:
        return len(self.bytes.replace(' ', '')) // 2


class TargetSnapshot(BaseModel):
    """Process and selection state captured from the host."""

    process: str | None = None
    process_base: int | None = None
    module: str | None = None
    module_base: int | None = None
    address: str | None = None
    is_64bit: bool = True
    uses_14_byte_jump: bool = False
    hook_name: str | None = None
    aob: str | None = None
    aob_offset: int = 0
    preceding: list[Instruction] = Field(default_factory=list)
    instructions: list[Instruction] = Field(default_factory=list)
    extra: dict[str, Any] = Field(default_factory=dict)
