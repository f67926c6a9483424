"""CHIP-8 opcode mnemonics and ROM listings."""

from typing import List

from .constants import PROGRAM_START

ALU_MNEMONICS = {0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
                 0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL"}

MISC_MNEMONICS = {0x07: "LD Vx, DT", 0x0A: "LD Vx, K", 0x15: "LD DT, Vx",
                  0x18: "LD ST, Vx", 0x1E: "ADD I, Vx", 0x29: "LD F, Vx",
                  0x33: "LD B, Vx", 0x55: "LD [I], Vx", 0x65: "LD Vx, [I]"}


def disassemble(opcode: int) -> str:
    """Return a mnemonic for one 16-bit opcode, ``.word`` if unknown"""
    nnn = opcode & 0x0FFF
    kk = opcode & 0x00FF
    n = opcode & 0x000F
    x = (opcode >> 8) & 0x0F
    y = (opcode >> 4) & 0x0F
    op = (opcode >> 12) & 0xF

    if opcode == 0x00E0:
        return "CLS"
    elif opcode == 0x00EE:
        return "RET"
    elif op == 0x0:
        return f"SYS ${nnn:03X}"
    elif op == 0x1:
        return f"JP ${nnn:03X}"
    elif op == 0x2:
        return f"CALL ${nnn:03X}"
    elif op == 0x3:
        return f"SE V{x:X}, ${kk:02X}"
    elif op == 0x4:
        return f"SNE V{x:X}, ${kk:02X}"
    elif op == 0x5 and n == 0x0:
        return f"SE V{x:X}, V{y:X}"
    elif op == 0x6:
        return f"LD V{x:X}, ${kk:02X}"
    elif op == 0x7:
        return f"ADD V{x:X}, ${kk:02X}"
    elif op == 0x8 and n in ALU_MNEMONICS:
        return f"{ALU_MNEMONICS[n]} V{x:X}, V{y:X}"
    elif op == 0x9 and n == 0x0:
        return f"SNE V{x:X}, V{y:X}"
    elif op == 0xA:
        return f"LD I, ${nnn:03X}"
    elif op == 0xB:
        return f"JP V0, ${nnn:03X}"
    elif op == 0xC:
        return f"RND V{x:X}, ${kk:02X}"
    elif op == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    elif op == 0xE and kk == 0x9E:
        return f"SKP V{x:X}"
    elif op == 0xE and kk == 0xA1:
        return f"SKNP V{x:X}"
    elif op == 0xF and kk in MISC_MNEMONICS:
        return MISC_MNEMONICS[kk].replace("Vx", f"V{x:X}")

    return f".word ${opcode:04X}"


def disassemble_rom(data: bytes, start_addr: int = PROGRAM_START) -> List[str]:
    """
    Convert a ROM image into listing lines of the form ``"ADDR:  MNEMONIC"``

    Opcodes are read big-endian two bytes at a time; an odd trailing byte is
    listed as ``.byte``.
    """
    lines = []
    addr = start_addr
    i = 0
    while i + 1 < len(data):
        op = (data[i] << 8) | data[i + 1]
        lines.append(f"{addr:04X}:  {disassemble(op)}")
        addr += 2
        i += 2
    if i < len(data):
        lines.append(f"{addr:04X}:  .byte ${data[i]:02X}")
    return lines
