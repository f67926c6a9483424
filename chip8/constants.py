"""Machine geometry, colours and keypad layout shared by the core and driver."""

import pygame

# ═══════════════════════════════════════════════════════════════════════════════
# MACHINE
# ═══════════════════════════════════════════════════════════════════════════════

MEMORY_SIZE = 4096                      # 4KB RAM
PROGRAM_START = 0x200                   # Programs load at 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START
STACK_SIZE = 16                         # 16-level stack
NUM_REGISTERS = 16                      # V0-VF
NUM_KEYS = 16                           # 16 hex keys
INSTRUCTION_WIDTH = 2                   # Bytes per opcode

# ═══════════════════════════════════════════════════════════════════════════════
# DISPLAY
# ═══════════════════════════════════════════════════════════════════════════════

DISPLAY_W, DISPLAY_H = 64, 32           # CHIP-8 native resolution
SPRITE_W = 8                            # Sprites are always one byte wide
DEFAULT_SCALE = 10                      # Window pixels per CHIP-8 pixel
DEFAULT_FPS = 60
DEFAULT_CYCLES_PER_FRAME = 1

STATUS_H = 25                           # Status bar below the display

COLORS = {
    'off': (0, 0, 0),
    'on': (255, 255, 255),
    'status_bg': (20, 20, 35),
    'text_dim': (120, 120, 140),
}

# Keyboard mapping (QWERTY -> CHIP-8 hex keypad)
# CHIP-8 Keypad:    Keyboard:
# 1 2 3 C          1 2 3 4
# 4 5 6 D          Q W E R
# 7 8 9 E          A S D F
# A 0 B F          Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}
