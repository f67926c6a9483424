"""Shared fixtures for the CHIP-8 tests."""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from chip8 import Interpreter


def rom(*words: int) -> bytes:
    """Assemble 16-bit opcodes into a big-endian program image."""
    return b"".join(word.to_bytes(2, "big") for word in words)


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def load(interp):
    """Load opcodes at 0x200 and return the interpreter."""
    def _load(*words):
        interp.load_rom(rom(*words))
        return interp
    return _load


@pytest.fixture
def assemble():
    return rom
