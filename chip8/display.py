"""Monochrome 64x32 framebuffer with XOR sprite blitting."""

from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from .constants import COLORS, DISPLAY_H, DISPLAY_W, SPRITE_W

SOLID_ROW = 0xFF


class Display:
    """
    CHIP-8 framebuffer

    The grid is a (height, width) boolean array indexed ``[y, x]``. Every
    mutation sets ``draw_flag``; ``render`` paints the grid onto a pygame
    surface only while that flag is set and clears it afterwards.

    Args:
        clip: drop sprite pixels that run past the right or bottom edge
            instead of wrapping them to the opposite side
    """

    def __init__(self, clip: bool = False):
        self.clip = clip
        self.draw_flag = False
        self._gfx = np.zeros((DISPLAY_H, DISPLAY_W), dtype=bool)
        self._on = np.array(COLORS['on'], dtype=np.uint8)
        self._off = np.array(COLORS['off'], dtype=np.uint8)

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only copy of the grid, shape (DISPLAY_H, DISPLAY_W)"""
        return self._gfx.copy()

    def pixel(self, x: int, y: int) -> bool:
        return bool(self._gfx[y, x])

    def clear(self):
        """Switch every pixel off and request a redraw"""
        self._gfx.fill(False)
        self.draw_flag = True

    def draw_sprite(self, x: int, y: int, height: int,
                    sprite: Optional[Sequence[int]] = None) -> bool:
        """
        XOR an 8-pixel-wide sprite into the framebuffer

        Args:
            x, y: top-left corner, wrapped onto the grid
            height: number of sprite rows (0-15)
            sprite: one byte per row, MSB is the leftmost pixel; when omitted
                every row is solid

        Returns:
            True if any set sprite bit landed on a pixel that was already on
            (that pixel is now off)
        """
        self.draw_flag = True
        collision = False

        x %= DISPLAY_W
        y %= DISPLAY_H

        for row in range(height):
            py = y + row
            if py >= DISPLAY_H:
                if self.clip:
                    break
                py %= DISPLAY_H

            bits = SOLID_ROW if sprite is None else sprite[row]

            for col in range(SPRITE_W):
                px = x + col
                if px >= DISPLAY_W:
                    if self.clip:
                        break
                    px %= DISPLAY_W

                if bits & (0x80 >> col):
                    if self._gfx[py, px]:
                        collision = True
                    self._gfx[py, px] = not self._gfx[py, px]

        return collision

    def render(self, target: pygame.Surface, scale: int,
               offset: Tuple[int, int] = (0, 0)) -> bool:
        """
        Paint the framebuffer onto ``target`` if a redraw is pending

        Each CHIP-8 pixel becomes a ``scale`` x ``scale`` block, white when on
        and black when off, with the grid's top-left corner at ``offset``.

        Returns:
            True if the surface was painted
        """
        if not self.draw_flag:
            return False

        # surfarray wants (width, height, rgb)
        rgb = np.where(self._gfx.T[..., None], self._on, self._off).astype(np.uint8)
        small = pygame.surfarray.make_surface(rgb)
        scaled = pygame.transform.scale(small, (DISPLAY_W * scale, DISPLAY_H * scale))
        target.blit(scaled, offset)

        self.draw_flag = False
        return True
