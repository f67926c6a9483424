"""Tests for the pygame driver that do not open a window."""

import pygame
import pytest

from chip8 import Interpreter
from chip8.app import Chip8App, build_parser, main


@pytest.fixture
def app():
    return Chip8App(Interpreter(), cycles_per_frame=3)


@pytest.fixture
def rom_file(tmp_path, assemble):
    def _write(*words):
        path = tmp_path / "prog.ch8"
        path.write_bytes(assemble(*words))
        return str(path)
    return _write


class TestEvents:

    def test_keypad_mapping(self, app):
        app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q))
        app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_v))
        keys = app.interpreter.state.keys
        assert keys[0x4] and keys[0xF]

        app.handle_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_q))
        assert not keys[0x4]

    def test_unmapped_key_ignored(self, app):
        app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F5))
        assert not any(app.interpreter.state.keys)
        assert app.running

    def test_quit(self, app):
        app.handle_event(pygame.event.Event(pygame.QUIT))
        assert app.running is False

    def test_escape(self, app):
        app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        assert app.running is False

    def test_pause_toggle(self, app):
        app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p))
        assert app.paused is True
        assert app.status_bar.text == "Paused"
        app.toggle_pause()
        assert app.paused is False


class TestStepFrame:

    def test_nothing_runs_without_rom(self, app):
        assert app.halted is True
        assert app.step_frame() == 0

    def test_runs_cycles_per_frame(self, app, rom_file):
        assert app.load_rom(rom_file(0x7001, 0x1200))
        assert app.rom_name == "prog"
        assert app.step_frame() == 3
        assert app.interpreter.state.V[0] == 2
        assert app.interpreter.state.PC == 0x202

    def test_paused_runs_nothing(self, app, rom_file):
        app.load_rom(rom_file(0x1200))
        app.toggle_pause()
        assert app.step_frame() == 0

    def test_halts_on_unimplemented_opcode(self, app, rom_file):
        app.load_rom(rom_file(0x6001, 0xF00A))
        assert app.step_frame() == 1
        assert app.halted is True
        assert "F00A" in app.status_bar.text
        assert app.step_frame() == 0

    def test_halts_when_pc_leaves_memory(self, app, rom_file):
        app.load_rom(rom_file(0x60FF, 0xBFFF))
        assert app.step_frame() == 2
        assert app.halted is True
        assert app.interpreter.state.PC == 0x10FE

    def test_failed_load(self, app, tmp_path):
        assert app.load_rom(str(tmp_path / "nope.ch8")) is False
        assert app.halted is True
        assert app.status_bar.text.startswith("Failed to load ROM")


class TestCommandLine:

    def test_defaults(self):
        args = build_parser().parse_args(["game.ch8"])
        assert args.rom == "game.ch8"
        assert args.scale == 10
        assert args.cycles_per_frame == 1
        assert not args.legacy_shift
        assert not args.clip_sprites

    def test_options(self):
        args = build_parser().parse_args(
            ["--scale", "4", "--cycles-per-frame", "8", "--legacy-shift", "--clip-sprites"])
        assert args.rom is None
        assert args.scale == 4
        assert args.cycles_per_frame == 8
        assert args.legacy_shift and args.clip_sprites

    def test_disassemble_mode(self, rom_file, capsys):
        path = rom_file(0x00E0, 0x1200)
        assert main(["--disassemble", path]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["0200:  CLS", "0202:  JP $200"]

    def test_disassemble_missing_file(self, tmp_path):
        assert main(["--disassemble", str(tmp_path / "nope.ch8")]) == 1

    def test_disassemble_needs_rom(self):
        with pytest.raises(SystemExit):
            main(["--disassemble"])
