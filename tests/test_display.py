"""Tests for the framebuffer and its rendering."""

import pygame
import pytest

from chip8 import Display
from chip8.constants import COLORS, DISPLAY_H, DISPLAY_W


def rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


class TestDisplayClear:

    def test_starts_blank_and_clean(self):
        display = Display()
        assert not display.framebuffer.any()
        assert display.framebuffer.shape == (DISPLAY_H, DISPLAY_W)
        assert display.draw_flag is False

    def test_clear(self):
        """clear() switches every pixel off and requests a redraw."""
        display = Display()
        display.draw_sprite(0, 0, 15)
        display.draw_flag = False
        display.clear()
        assert not display.framebuffer.any()
        assert display.draw_flag is True


class TestDrawSprite:

    def test_draws_sprite_bits(self):
        display = Display()
        collision = display.draw_sprite(2, 1, 2, [0b10100000, 0b00000001])
        assert collision is False
        assert display.pixel(2, 1) and display.pixel(4, 1)
        assert not display.pixel(3, 1)
        assert display.pixel(9, 2)
        assert display.framebuffer.sum() == 3

    def test_solid_rows_without_sprite(self):
        display = Display()
        display.draw_sprite(0, 0, 3)
        assert display.framebuffer[:3, :8].all()
        assert display.framebuffer.sum() == 24

    def test_draw_twice_restores_framebuffer(self):
        """XOR drawing is self-inverse and the second draw collides."""
        display = Display()
        display.draw_sprite(41, 20, 1, [0x80])
        before = display.framebuffer

        sprite = [0xF0, 0x90, 0xF0]
        assert display.draw_sprite(38, 19, 3, sprite) is True
        assert display.draw_sprite(38, 19, 3, sprite) is True
        assert (display.framebuffer == before).all()

    def test_collision_only_on_lit_pixels(self):
        """A sprite that only touches dark pixels reports no collision."""
        display = Display()
        display.draw_sprite(0, 0, 1, [0xF0])
        assert display.draw_sprite(0, 0, 1, [0x0F]) is False
        assert display.framebuffer[0, :8].all()

    def test_zero_height_marks_dirty(self):
        display = Display()
        assert display.draw_sprite(5, 5, 0) is False
        assert display.draw_flag is True
        assert not display.framebuffer.any()

    def test_wraps_at_edges(self):
        display = Display()
        display.draw_sprite(62, 31, 2, [0xE0, 0xE0])
        lit = {(x, y) for y in range(DISPLAY_H) for x in range(DISPLAY_W)
               if display.pixel(x, y)}
        assert lit == {(62, 31), (63, 31), (0, 31), (62, 0), (63, 0), (0, 0)}

    def test_start_coordinates_wrap(self):
        display = Display()
        display.draw_sprite(DISPLAY_W + 3, DISPLAY_H + 1, 1, [0x80])
        assert display.pixel(3, 1)

    def test_clip_mode(self):
        """With clipping, pixels past the edge are dropped."""
        display = Display(clip=True)
        display.draw_sprite(62, 31, 2, [0xE0, 0xE0])
        assert display.framebuffer.sum() == 2
        assert display.pixel(62, 31) and display.pixel(63, 31)


class TestRender:

    @pytest.fixture
    def surface(self):
        return pygame.Surface((DISPLAY_W * 2, DISPLAY_H * 2))

    def test_render_skipped_when_clean(self, surface):
        display = Display()
        surface.fill((1, 2, 3))
        assert display.render(surface, 2) is False
        assert rgb(surface, (0, 0)) == (1, 2, 3)

    def test_render_paints_scaled_blocks(self, surface):
        display = Display()
        display.draw_sprite(1, 0, 1, [0x80])
        assert display.render(surface, 2) is True
        assert display.draw_flag is False

        for pos in [(2, 0), (3, 0), (2, 1), (3, 1)]:
            assert rgb(surface, pos) == COLORS['on']
        for pos in [(0, 0), (1, 1), (4, 0), (2, 2)]:
            assert rgb(surface, pos) == COLORS['off']

    def test_render_at_offset(self):
        surface = pygame.Surface((DISPLAY_W, DISPLAY_H + 10))
        surface.fill((9, 9, 9))
        display = Display()
        display.draw_sprite(0, 0, 1, [0x80])
        display.render(surface, 1, offset=(0, 10))
        assert rgb(surface, (0, 5)) == (9, 9, 9)
        assert rgb(surface, (0, 10)) == COLORS['on']
        assert rgb(surface, (1, 10)) == COLORS['off']
