"""pygame front end: window, keypad input and the frame loop."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pygame

from .constants import (COLORS, DEFAULT_CYCLES_PER_FRAME, DEFAULT_FPS,
                        DEFAULT_SCALE, DISPLAY_H, DISPLAY_W, KEY_MAP, STATUS_H)
from .disasm import disassemble_rom
from .errors import Chip8Error
from .interpreter import Interpreter

logger = logging.getLogger(__name__)


class StatusBar:
    """Bottom status bar"""

    def __init__(self, y: int, width: int, height: int):
        self.rect = pygame.Rect(0, y, width, height)
        self.text = "Ready - pass a .ch8 ROM to begin"

    def draw(self, surface: pygame.Surface, font: pygame.font.Font):
        pygame.draw.rect(surface, COLORS['status_bg'], self.rect)

        text_surf = font.render(self.text, True, COLORS['text_dim'])
        surface.blit(text_surf, (10, self.rect.y + 5))

    def set_text(self, text: str):
        self.text = text


class Chip8App:
    """
    Drives an ``Interpreter`` from a pygame window

    Each frame polls events, runs ``cycles_per_frame`` instructions while the
    program counter stays in bounds, then repaints the display if it is
    dirty. Any ``Chip8Error`` halts execution; the window stays open so the
    last frame and the error remain visible.
    """

    def __init__(self, interpreter: Interpreter, scale: int = DEFAULT_SCALE,
                 cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME,
                 fps: int = DEFAULT_FPS):
        self.interpreter = interpreter
        self.scale = scale
        self.cycles_per_frame = cycles_per_frame
        self.fps = fps

        self.running = True
        self.paused = False
        self.halted = True  # Until a ROM is loaded
        self.rom_name = None

        self.status_bar = StatusBar(DISPLAY_H * scale, DISPLAY_W * scale, STATUS_H)

        self.screen = None
        self.clock = None
        self.font = None

    def load_rom(self, path: str) -> bool:
        """Load a ROM file, reporting failures on the status bar"""
        try:
            self.interpreter.load_rom_file(path)
        except (OSError, Chip8Error) as e:
            logger.error("Failed to load ROM %s: %s", path, e)
            self.status_bar.set_text(f"Failed to load ROM: {e}")
            return False

        self.rom_name = Path(path).stem
        self.halted = False
        self.status_bar.set_text(f"Loaded: {self.rom_name}")
        return True

    def halt(self, reason: str):
        self.halted = True
        logger.error("Execution halted: %s", reason)
        self.status_bar.set_text(f"Halted: {reason}")

    def toggle_pause(self):
        self.paused = not self.paused
        self.status_bar.set_text("Paused" if self.paused else "Running")

    def handle_event(self, event: pygame.event.Event):
        """Apply one pygame event to the keypad or the app state"""
        if event.type == pygame.QUIT:
            self.running = False

        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key == pygame.K_p:
                self.toggle_pause()
            elif event.key in KEY_MAP:
                self.interpreter.key_down(KEY_MAP[event.key])

        elif event.type == pygame.KEYUP:
            if event.key in KEY_MAP:
                self.interpreter.key_up(KEY_MAP[event.key])

    def step_frame(self) -> int:
        """
        Run one frame's worth of instructions

        Returns:
            Number of instructions executed
        """
        if self.halted or self.paused:
            return 0

        executed = 0
        for _ in range(self.cycles_per_frame):
            if not self.interpreter.can_execute:
                self.halt(f"PC ${self.interpreter.state.PC:04X} out of range")
                break
            try:
                self.interpreter.cycle()
            except Chip8Error as e:
                self.halt(str(e))
                break
            executed += 1

        return executed

    def open(self):
        """Create the window"""
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self.rom_name}" if self.rom_name else "CHIP-8")

        self.screen = pygame.display.set_mode(
            (DISPLAY_W * self.scale, DISPLAY_H * self.scale + STATUS_H))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 20)

        self.screen.fill(COLORS['off'])
        self.interpreter.display.draw_flag = True

    def render(self):
        self.interpreter.display.render(self.screen, self.scale)
        self.status_bar.draw(self.screen, self.font)
        pygame.display.flip()

    def run(self):
        """Main loop"""
        self.open()
        try:
            while self.running:
                for event in pygame.event.get():
                    self.handle_event(event)
                self.step_frame()
                self.render()
                self.clock.tick(self.fps)
        finally:
            pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 interpreter")
    parser.add_argument("rom", nargs="?", help="path to a .ch8 program image")
    parser.add_argument("--scale", type=int, default=DEFAULT_SCALE,
                        help="window pixels per CHIP-8 pixel (default: %(default)s)")
    parser.add_argument("--cycles-per-frame", type=int, default=DEFAULT_CYCLES_PER_FRAME,
                        help="instructions executed per frame (default: %(default)s)")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS,
                        help="frame rate cap (default: %(default)s)")
    parser.add_argument("--legacy-shift", action="store_true",
                        help="set VF from a 0x0F/0xF0 mask on SHR/SHL")
    parser.add_argument("--clip-sprites", action="store_true",
                        help="clip sprites at the screen edge instead of wrapping")
    parser.add_argument("--disassemble", action="store_true",
                        help="print a listing of the ROM and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log every executed instruction")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[%(levelname)s]:  %(message)s", stream=sys.stdout)

    if args.disassemble:
        if not args.rom:
            parser.error("--disassemble needs a ROM")
        try:
            data = Path(args.rom).read_bytes()
        except OSError as e:
            logger.error("Cannot read %s: %s", args.rom, e)
            return 1
        for line in disassemble_rom(data):
            print(line)
        return 0

    print("Controls:")
    print("  CHIP-8 Keypad: 1234 / QWER / ASDF / ZXCV")
    print("  P = Pause/Resume")
    print("  ESC = Exit")
    print()

    interpreter = Interpreter(quirks={
        'legacy_shift_flags': args.legacy_shift,
        'clip_sprites': args.clip_sprites,
    })
    app = Chip8App(interpreter, scale=args.scale,
                   cycles_per_frame=args.cycles_per_frame, fps=args.fps)

    if args.rom:
        app.load_rom(args.rom)
    else:
        logger.info("No ROM loaded - pass a .ch8 file as argument")

    app.run()
    return 0
