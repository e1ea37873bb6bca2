"""Pure functions deriving template context fields from a target snapshot."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from script_template_loader import __version__
from script_template_loader.l1_entities.config import InjectionConfig
from script_template_loader.l1_entities.target_snapshot import Instruction, TargetSnapshot

_DISASSEMBLER_COMMENT = re.compile(r'\{.*?\}')
_MEMORY_OPERAND = re.compile(r'\[([A-Za-z0-9]+)[-+]?([0-9A-Fa-f]*)\]')

NO_AOB = "'No Unique AoB Found'"


def format_hook_name(hook_name: str, suffix: str) -> str:
    """Append *suffix* unless the name already ends with it."""
    if not suffix or hook_name.endswith(suffix):
        return hook_name
    return hook_name + suffix


def alloc_statement(hook_name: str, hook_name_parsed: str, *, uses_14_byte_jump: bool) -> str:
    if uses_14_byte_jump:
        return f'alloc(n_{hook_name},$1000)'
    return f'alloc(n_{hook_name},$1000,{hook_name_parsed})'


def pointer_size(is_64bit: bool) -> tuple[str, int]:
    return ('dq', 8) if is_64bit else ('dd', 4)


def min_jump_size(uses_14_byte_jump: bool) -> int:
    return 14 if uses_14_byte_jump else 5


def jump_type(uses_14_byte_jump: bool) -> str:
    return 'jmp far' if uses_14_byte_jump else 'jmp'


def format_address(value: int | None, missing: str) -> str:
    return f'{value:016X}' if value is not None else missing


def format_bytes(raw: str) -> str:
    """'8b4d08' or '8B 4D 08' -> '8B 4D 08'."""
    digits = raw.replace(' ', '').upper()
    return ' '.join(digits[i : i + 2] for i in range(0, len(digits), 2))


def strip_comments(opcode: str) -> str:
    return _DISASSEMBLER_COMMENT.sub('', opcode)


def covered_instructions(instructions: list[Instruction], min_size: int) -> list[Instruction]:
    """Leading instructions whose combined size first reaches *min_size*."""
    covered: list[Instruction] = []
    total = 0
    for ins in instructions:
        if total >= min_size or ins.size <= 0:
            break
        covered.append(ins)
        total += ins.size
    return covered


def jump_size(instructions: list[Instruction], min_size: int) -> int:
    return sum(ins.size for ins in covered_instructions(instructions, min_size))


def original_opcodes(instructions: list[Instruction], min_size: int) -> str:
    return '\n'.join('  ' + strip_comments(ins.opcode) for ins in covered_instructions(instructions, min_size))


def original_bytes(instructions: list[Instruction], min_size: int) -> str:
    return ' '.join(format_bytes(ins.bytes) for ins in covered_instructions(instructions, min_size))


def nop_padding(size: int, min_size: int) -> str:
    pad = size - min_size
    if pad > 0:
        return 'db ' + ' '.join(['90'] * pad) + '\n'
    return ''


def injection_info(
    preceding: list[Instruction],
    instructions: list[Instruction],
    line_count: int,
    *,
    remove_spaces: bool,
    add_tabs: bool,
) -> str:
    """Disassembly listing centred on the injection address."""
    before = line_count // 2
    window = (preceding[-before:] if before else []) + instructions
    lines = []
    for ins in window[:line_count]:
        hex_bytes = format_bytes(ins.bytes)
        opcode = strip_comments(ins.opcode)
        if remove_spaces:
            line = f'{ins.address} - {hex_bytes} - {opcode}'
        else:
            line = f'{ins.address} - {hex_bytes:<24} - {opcode}'
        lines.append('\t  ' + line if add_tabs else line)
    return '\n'.join(lines)


def base_address_register(opcodes: str) -> str | None:
    """Register of the first memory operand, e.g. 'rcx' for 'mov eax,[rcx+10]'."""
    match = _MEMORY_OPERAND.search(opcodes)
    return match.group(1) if match else None


def aob_fields(snapshot: TargetSnapshot) -> tuple[str, str]:
    if not snapshot.aob:
        return NO_AOB, ''
    return snapshot.aob, (f'+{snapshot.aob_offset:X}' if snapshot.aob_offset else '')


def build_context(
    snapshot: TargetSnapshot,
    injection: InjectionConfig,
    hook_name: str,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Flatten a snapshot into the names templates reference."""
    now = now or datetime.now()
    uses_far = snapshot.uses_14_byte_jump
    hook_name_parsed = format_hook_name(hook_name, injection.append_to_hook_name)
    pointer_type, pointer_bytes = pointer_size(snapshot.is_64bit)
    min_size = min_jump_size(uses_far)
    aob, aob_offset = aob_fields(snapshot)

    info: dict[str, Any] = {
        'Version': __version__,
        'Date': now.strftime('%Y-%m-%d'),
        'Time': now.strftime('%H:%M:%S'),
        'DateTime': now.strftime('%Y-%m-%d %H:%M:%S'),
        'InjInfoLineCount': injection.line_count,
        'InjInfoRemoveSpaces': injection.remove_spaces,
        'InjInfoAddTabs': injection.add_tabs,
        'AppendToHookName': injection.append_to_hook_name,
        'Process': snapshot.process,
        'ProcessBase': format_address(snapshot.process_base, 'No process base found.'),
        'Module': snapshot.module,
        'ModuleBase': format_address(snapshot.module_base, 'No module base found.'),
        'Address': snapshot.address,
        'PointerType': pointer_type,
        'DefaultPointerBytes': pointer_bytes,
        'IsTarget64Bit': snapshot.is_64bit,
        'Is14ByteJump': uses_far,
        'MinJumpSize': min_size,
        'JumpType': jump_type(uses_far),
        'SelectionSize': snapshot.instructions[0].size if snapshot.instructions else 0,
        'AoBStr': aob,
        'AoBOffset': aob_offset,
        'HookName': hook_name,
        'HookNameParsed': hook_name_parsed,
        'Alloc': alloc_statement(hook_name, hook_name_parsed, uses_14_byte_jump=uses_far),
    }
    if snapshot.address:
        size = jump_size(snapshot.instructions, min_size)
        opcodes = original_opcodes(snapshot.instructions, min_size)
        info['JumpSize'] = size
        info['OriginalOpcodes'] = opcodes
        info['OriginalBytes'] = original_bytes(snapshot.instructions, min_size)
        info['NopPadding'] = nop_padding(size, min_size)
        info['InjectionInfo'] = injection_info(
            snapshot.preceding,
            snapshot.instructions,
            injection.line_count,
            remove_spaces=injection.remove_spaces,
            add_tabs=injection.add_tabs,
        )
        info['BaseAddressRegister'] = base_address_register(opcodes)
    info.update(snapshot.extra)
    return info


def template_helpers() -> dict[str, Any]:
    """Ambient helpers every template can call by name."""
    return {
        'format_hook_name': format_hook_name,
        'format_bytes': format_bytes,
        'strip_comments': strip_comments,
        'nop_padding': nop_padding,
        'alloc_statement': alloc_statement,
        'base_address_register': base_address_register,
    }
