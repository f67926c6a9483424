"""
CHIP-8 interpreter: memory, registers, call stack and the
fetch-decode-execute cycle.

Each executed instruction reports how far the program counter should move
afterwards. Sequential instructions report one instruction width, skips
report two, and jumps/calls report zero because they have already written
the destination into ``PC``.

``VF`` is the flag register. The 0x8 family add, subtract and shift
operations overwrite it with their carry/borrow/shifted-out bit, and every
draw overwrites it with the collision result, so programs must not keep
general data in ``VF`` across those instructions.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .constants import (INSTRUCTION_WIDTH, MAX_ROM_SIZE, MEMORY_SIZE, NUM_KEYS,
                        NUM_REGISTERS, PROGRAM_START, STACK_SIZE)
from .disasm import disassemble
from .display import Display
from .errors import MemoryAccessError, RomTooLarge, StackOverflow, UnimplementedOpcode

logger = logging.getLogger(__name__)

NEXT = INSTRUCTION_WIDTH
SKIP = 2 * INSTRUCTION_WIDTH
JUMPED = 0

DEFAULT_QUIRKS = {
    'legacy_shift_flags': False,  # 8XY6/8XYE set VF from a 0x0F/0xF0 mask
    'clip_sprites': False,        # Sprites clip at the edges instead of wrapping
}


@dataclass
class MachineState:
    """CHIP-8 machine state container"""
    # Memory
    memory: bytearray = field(default_factory=lambda: bytearray(MEMORY_SIZE))

    # Registers
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    I: int = 0              # Index register
    PC: int = PROGRAM_START # Program counter
    SP: int = 0             # Stack pointer

    # Stack
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)

    # Keypad state
    keys: List[bool] = field(default_factory=lambda: [False] * NUM_KEYS)


class Interpreter:
    """
    CHIP-8 interpreter core

    Owns one ``MachineState`` and one ``Display``. Nothing is shared between
    instances, so several machines can run side by side.

    Args:
        quirks: overrides for ``DEFAULT_QUIRKS``
        display: framebuffer to draw into, created if omitted
    """

    def __init__(self, quirks: Optional[dict] = None, display: Optional[Display] = None):
        self.quirks = dict(DEFAULT_QUIRKS)
        if quirks:
            self.quirks.update(quirks)

        self.state = MachineState()
        if display is None:
            display = Display(clip=self.quirks['clip_sprites'])
        self.display = display

    def reset(self):
        """Zero memory, registers and stack and clear the screen"""
        self.state = MachineState()
        self.display.clear()

    def load_rom(self, data: bytes):
        """Reset the machine and copy ``data`` into memory at 0x200"""
        if len(data) > MAX_ROM_SIZE:
            raise RomTooLarge(len(data))

        self.reset()
        self.state.memory[PROGRAM_START:PROGRAM_START + len(data)] = data
        logger.info("Loaded %d byte ROM at $%03X", len(data), PROGRAM_START)

    def load_rom_file(self, filepath: Union[str, Path]):
        """Load a ROM from disk; raises ``OSError`` if it cannot be read"""
        logger.debug("Loading ROM from %s", filepath)
        self.load_rom(Path(filepath).read_bytes())

    def key_down(self, key: int):
        if 0 <= key < NUM_KEYS:
            self.state.keys[key] = True

    def key_up(self, key: int):
        if 0 <= key < NUM_KEYS:
            self.state.keys[key] = False

    @property
    def can_execute(self) -> bool:
        """True while a whole opcode can be fetched at ``PC``"""
        return 0 <= self.state.PC <= MEMORY_SIZE - INSTRUCTION_WIDTH

    def fetch(self) -> int:
        """Read the big-endian opcode at ``PC`` without advancing it"""
        pc = self.state.PC
        if not self.can_execute:
            raise MemoryAccessError(pc)
        return (self.state.memory[pc] << 8) | self.state.memory[pc + 1]

    @staticmethod
    def decode(opcode: int) -> Tuple[int, int, int, int]:
        """Split an opcode into its four nibbles ``(op, x, y, n)``"""
        return ((opcode >> 12) & 0xF, (opcode >> 8) & 0xF,
                (opcode >> 4) & 0xF, opcode & 0xF)

    def cycle(self) -> int:
        """Execute the instruction at ``PC`` and advance past it"""
        width = self.execute_cycle()
        self.state.PC += width
        return width

    def execute_cycle(self) -> int:
        """
        Fetch and execute one instruction

        Returns:
            Number of bytes the caller must add to ``PC``

        Raises:
            UnimplementedOpcode: the opcode is outside the supported set
            StackOverflow: a call with all 16 stack slots in use
            MemoryAccessError: ``PC`` or the sprite source is out of range
        """
        opcode = self.fetch()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("$%03X: %04X  %s", self.state.PC, opcode, disassemble(opcode))
        return self.execute(opcode)

    def execute(self, opcode: int) -> int:
        """Decode and execute a single opcode, returning the PC advance"""
        op, x, y, n = self.decode(opcode)

        if op == 0x0:
            return self._misc_ops(opcode)
        elif op in (0x1, 0x2, 0xB):
            return self._control_flow_ops(opcode, op)
        elif op in (0x3, 0x4, 0x5, 0x9):
            return self._skip_ops(opcode, op, x, y, n)
        elif op in (0x6, 0x7):
            return self._const_ops(opcode, op, x)
        elif op == 0x8:
            return self._alu_ops(opcode, x, y, n)
        elif op == 0xA:
            self.state.I = opcode & 0x0FFF
            return NEXT
        elif op == 0xD:
            return self._draw_ops(x, y, n)
        elif op == 0xE:
            return self._key_ops(opcode, x)

        raise UnimplementedOpcode(opcode)

    # ─── 00E0 / 00EE ───
    def _misc_ops(self, opcode: int) -> int:
        s = self.state

        if opcode == 0x00E0:
            self.display.clear()

        elif opcode == 0x00EE:
            if s.SP == 0:
                logger.warning("Return with an empty stack at $%03X ignored", s.PC)
            else:
                s.SP -= 1
                s.PC = s.stack[s.SP]

        else:
            raise UnimplementedOpcode(opcode)

        return NEXT

    # ─── 1NNN: JP addr / 2NNN: CALL addr / BNNN: JP V0, addr ───
    def _control_flow_ops(self, opcode: int, op: int) -> int:
        s = self.state
        nnn = opcode & 0x0FFF

        if op == 0x1:
            s.PC = nnn

        elif op == 0x2:
            if s.SP >= STACK_SIZE:
                raise StackOverflow(s.PC)
            # The matching RET adds one instruction width to this address
            s.stack[s.SP] = s.PC
            s.SP += 1
            s.PC = nnn

        else:
            # Not masked to 12 bits: a target past memory stops the driver
            s.PC = s.V[0] + nnn

        return JUMPED

    # ─── 3XKK / 4XKK / 5XY0 / 9XY0: conditional skips ───
    def _skip_ops(self, opcode: int, op: int, x: int, y: int, n: int) -> int:
        V = self.state.V
        kk = opcode & 0x00FF

        if op == 0x3:
            taken = V[x] == kk
        elif op == 0x4:
            taken = V[x] != kk
        elif n != 0x0:
            raise UnimplementedOpcode(opcode)
        elif op == 0x5:
            taken = V[x] == V[y]
        else:
            taken = V[x] != V[y]

        return SKIP if taken else NEXT

    # ─── 6XKK: LD Vx, byte / 7XKK: ADD Vx, byte ───
    def _const_ops(self, opcode: int, op: int, x: int) -> int:
        V = self.state.V
        kk = opcode & 0x00FF

        if op == 0x6:
            V[x] = kk
        else:
            # Saturates at 255 and leaves VF alone
            V[x] = min(V[x] + kk, 0xFF)

        return NEXT

    # ─── 8XYZ: ALU operations ───
    def _alu_ops(self, opcode: int, x: int, y: int, z: int) -> int:
        V = self.state.V

        if z == 0x0:
            # 8XY0: LD Vx, Vy
            V[x] = V[y]

        elif z == 0x1:
            # 8XY1: OR Vx, Vy
            V[x] |= V[y]

        elif z == 0x2:
            # 8XY2: AND Vx, Vy
            V[x] &= V[y]

        elif z == 0x3:
            # 8XY3: XOR Vx, Vy
            V[x] ^= V[y]

        elif z == 0x4:
            # 8XY4: ADD Vx, Vy (VF = carry)
            result = V[x] + V[y]
            V[x] = result & 0xFF
            V[0xF] = 1 if result > 0xFF else 0

        elif z == 0x5:
            # 8XY5: SUB Vx, Vy (VF = borrow)
            result = V[x] - V[y]
            V[x] = result & 0xFF
            V[0xF] = 1 if result < 0 else 0

        elif z == 0x6:
            # 8XY6: SHR Vx, Vy
            if self.quirks['legacy_shift_flags']:
                V[0xF] = V[y] & 0x0F
                V[x] = V[y] >> 1
            else:
                flag = V[y] & 0x1
                V[x] = V[y] >> 1
                V[0xF] = flag

        elif z == 0x7:
            # 8XY7: SUBN Vx, Vy (VF = borrow)
            result = V[y] - V[x]
            V[x] = result & 0xFF
            V[0xF] = 1 if result < 0 else 0

        elif z == 0xE:
            # 8XYE: SHL Vx, Vy
            if self.quirks['legacy_shift_flags']:
                V[0xF] = V[y] & 0xF0
                V[y] = (V[y] << 1) & 0xFF
                V[x] = V[y]
            else:
                flag = V[y] >> 7
                V[x] = (V[y] << 1) & 0xFF
                V[0xF] = flag

        else:
            raise UnimplementedOpcode(opcode)

        return NEXT

    # ─── DXYN: DRW Vx, Vy, nibble ───
    def _draw_ops(self, x: int, y: int, n: int) -> int:
        s = self.state

        end = s.I + n
        if end > MEMORY_SIZE:
            raise MemoryAccessError(end - 1)

        collision = self.display.draw_sprite(s.V[x], s.V[y], n, s.memory[s.I:end])
        s.V[0xF] = 1 if collision else 0
        return NEXT

    # ─── EX9E: SKP Vx / EXA1: SKNP Vx ───
    def _key_ops(self, opcode: int, x: int) -> int:
        s = self.state
        pressed = s.keys[s.V[x] & 0xF]

        kk = opcode & 0x00FF
        if kk == 0x9E:
            return SKIP if pressed else NEXT
        elif kk == 0xA1:
            return NEXT if pressed else SKIP

        raise UnimplementedOpcode(opcode)
