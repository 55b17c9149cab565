from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (240, 240, 240),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        bg = (60, 60, 60) if self.enabled else (30, 30, 30)
        pygame.draw.rect(screen, bg, self.rect, border_radius=8)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=8)
        img = font.render(self.text, True, (240, 240, 240))
        r = img.get_rect(center=self.rect.center)
        screen.blit(img, r.topleft)


SYMBOL_COLORS: list[Color] = [(230, 40, 40), (20, 170, 60), (60, 80, 230), (220, 160, 20)]


def _symbol_points(shape: int, center: tuple[int, int], r: int) -> list[tuple[int, int]]:
    cx, cy = center
    if shape == 0:
        return [(cx - r, cy - r), (cx + r, cy - r), (cx + r, cy + r), (cx - r, cy + r)]
    if shape == 1:
        return [(cx - r, cy + r), (cx, cy - r), (cx + r, cy + r)]
    h = r // 2
    return [(cx - h, cy - r), (cx - r, cy), (cx - h, cy + r), (cx + h, cy + r), (cx + r, cy), (cx + h, cy - r)]


def draw_symbol(
    screen: pygame.Surface, shape: int, shading: int, color: Color, center: tuple[int, int], r: int
) -> None:
    """One card symbol: square, triangle or hexagon; outline, half-filled or solid."""
    pts = _symbol_points(shape, center, r)
    if shading == 2:
        pygame.draw.polygon(screen, color, pts)
    elif shading == 1:
        pygame.draw.polygon(screen, color, _symbol_points(shape, center, r // 2))
    pygame.draw.polygon(screen, color, pts, width=3)
