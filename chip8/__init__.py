"""
CHIP-8 interpreter core with a pygame front end.

Modules:
    interpreter: memory, registers, stack and the fetch-decode-execute cycle
    display: 64x32 XOR framebuffer and its pygame rendering
    disasm: opcode mnemonics and ROM listings
    errors: exception hierarchy
    app: window, keypad input and frame loop
"""

__version__ = "0.1.0"

from .display import Display
from .errors import (Chip8Error, MemoryAccessError, RomTooLarge, StackOverflow,
                     UnimplementedOpcode)
from .interpreter import Interpreter, MachineState

__all__ = ["Display", "Interpreter", "MachineState", "Chip8Error",
           "UnimplementedOpcode", "StackOverflow", "MemoryAccessError", "RomTooLarge"]
