"""Exceptions raised by the CHIP-8 core."""


class Chip8Error(Exception):
    """Base class for every fault the interpreter can signal."""


class UnimplementedOpcode(Chip8Error):
    """The fetched word matches no supported instruction."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"unimplemented opcode: ${opcode:04X}")


class StackOverflow(Chip8Error):
    """A call was attempted with all 16 stack slots in use."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"stack overflow on call at ${pc:03X}")


class MemoryAccessError(Chip8Error):
    """A fetch or sprite read reached past the end of memory."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"memory access out of range: ${address:04X}")


class RomTooLarge(Chip8Error):
    def __init__(self, size: int):
        self.size = size
        super().__init__(f"ROM of {size} bytes does not fit in program memory")
