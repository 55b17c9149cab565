from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from trigo.engine.hints import find_match
from trigo.engine.match import MatchEngine
from trigo.engine.selection import Selection
from trigo.engine.types import Card
from trigo.services.savestate import SaveStateError

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import SYMBOL_COLORS, Button, draw_symbol, draw_text

CARD_ASPECT = 1.4
MISS_FLASH_SECONDS = 0.6


class TableScene:
    def __init__(self, ctx: GameContext) -> None:
        assert ctx.engine is not None
        self.ctx = ctx
        self.engine: MatchEngine = ctx.engine
        self.selection = Selection.empty(self.engine.config.num_attr_vals)
        self._hint: tuple[int, ...] = ()
        self._miss_timer = 0.0
        self._message = ""

        self.btn_new = Button(rect=pygame.Rect(20, 20, 140, 40), text="New Game", on_click=self._on_new_game)
        self.btn_hint = Button(rect=pygame.Rect(170, 20, 100, 40), text="Hint", on_click=self._on_hint)
        self.btn_quit = Button(
            rect=pygame.Rect(280, 20, 100, 40),
            text="Quit",
            on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
        )

    # -------- Layout --------
    def _grid(self) -> tuple[int, int]:
        rows = self.engine.config.field_expand
        cols = max(1, (self.engine.num_slots + rows - 1) // rows)
        return rows, cols

    def _slot_rect(self, slot: int) -> pygame.Rect:
        rows, cols = self._grid()
        sw, sh = self.ctx.screen.get_size()
        top = 90
        gap = 12
        avail_w, avail_h = sw - 2 * gap, sh - top - 60
        card_w = min((avail_w - gap * (cols - 1)) / cols, ((avail_h - gap * (rows - 1)) / rows) / CARD_ASPECT)
        card_h = card_w * CARD_ASPECT
        grid_w = cols * card_w + (cols - 1) * gap
        x0 = (sw - grid_w) / 2
        c, r = divmod(slot, rows)
        return pygame.Rect(int(x0 + c * (card_w + gap)), int(top + r * (card_h + gap)), int(card_w), int(card_h))

    def _hit_test_slot(self, pos: tuple[int, int]) -> int | None:
        for slot in range(self.engine.num_slots):
            if self._slot_rect(slot).collidepoint(pos):
                return slot
        return None

    # -------- Actions --------
    def _on_new_game(self) -> None:
        self.engine.shuffle()
        self.engine.deal()
        self.selection = self.selection.clear()
        self._hint = ()
        self._message = "New game."
        self.ctx.telemetry.log("game_started", {"variant": self._variant_id()})

    def _on_hint(self) -> None:
        combo = find_match(self.engine)
        self._hint = combo or ()
        self._message = "" if combo else "No matches on the field."
        if combo:
            self.ctx.telemetry.log("hint_shown", {"candidate": list(combo)})

    def _variant_id(self) -> str:
        return self.ctx.variant.id if self.ctx.variant is not None else ""

    def _pick(self, slot: int) -> None:
        if self.engine.field_card(slot).blank:
            return
        self.selection = self.selection.toggle(slot)
        if not self.selection.is_full:
            return
        candidate = list(self.selection.indices)
        if not self.engine.resolve(candidate):
            self.ctx.telemetry.log("match_missed", {"candidate": candidate})
            self._miss_timer = MISS_FLASH_SECONDS
            self._message = "Not a match."
            return
        self.ctx.telemetry.log(
            "match_found", {"candidate": candidate, "matches_found": self.engine.matches_found}
        )
        self.selection = self.selection.clear()
        self._hint = ()
        self._message = "Match!"
        if self.engine.num_matches() == 0:
            self.ctx.telemetry.log("round_complete", {"matches_found": self.engine.matches_found})
            self.engine.shuffle()
            self.engine.deal()
            self._message = "You found all the matches! Let's play again."

    def handle_event(self, event: pygame.event.Event) -> None:
        self.btn_new.handle_event(event)
        self.btn_hint.handle_event(event)
        self.btn_quit.handle_event(event)
        if self._miss_timer > 0:
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            slot = self._hit_test_slot(event.pos)
            if slot is not None:
                self._pick(slot)
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.selection = self.selection.clear()

    def update(self, dt: float) -> SceneTransition | None:
        if self._miss_timer > 0:
            self._miss_timer -= dt
            if self._miss_timer <= 0:
                self._miss_timer = 0.0
                self.selection = self.selection.clear()
        return None

    def on_exit(self) -> None:
        if self.ctx.saves is None:
            return
        try:
            self.ctx.saves.save(self.engine)
            self.ctx.telemetry.log("state_saved", {"path": str(self.ctx.saves.path)})
        except SaveStateError as e:
            self.ctx.telemetry.log("state_saved", {"ok": False, "error": str(e)})

    # -------- Drawing --------
    def render(self, screen: pygame.Surface) -> None:
        screen.fill((8, 10, 14))
        fonts = self.ctx.assets.fonts
        self.btn_new.draw(screen, fonts.ui)
        self.btn_hint.draw(screen, fonts.ui)
        self.btn_quit.draw(screen, fonts.ui)
        draw_text(
            screen,
            fonts.ui,
            f"MATCHES: {self.engine.matches_found}   DECK: {self.engine.deck_size()}",
            (400, 30),
            color=(0, 230, 230),
        )

        for slot, card in enumerate(self.engine.field()):
            self._draw_card(screen, slot, card)

        if self._message:
            sh = screen.get_height()
            draw_text(screen, fonts.ui, self._message, (20, sh - 40), color=(240, 200, 120))

    def _draw_card(self, screen: pygame.Surface, slot: int, card: Card) -> None:
        rect = self._slot_rect(slot)
        if card.blank:
            pygame.draw.rect(screen, (30, 30, 36), rect, width=2, border_radius=8)
            return
        pygame.draw.rect(screen, (245, 245, 245), rect, border_radius=8)

        if slot in self.selection:
            tint = (240, 60, 60) if self._miss_timer > 0 else (0, 200, 220)
            pygame.draw.rect(screen, tint, rect, width=5, border_radius=8)
        elif slot in self._hint:
            pygame.draw.rect(screen, (240, 220, 80), rect, width=4, border_radius=8)
        else:
            pygame.draw.rect(screen, (0, 0, 0), rect, width=2, border_radius=8)

        cfg = self.engine.config
        if cfg.num_attrs == 4 and cfg.num_attr_vals == 3:
            num, clr, shp, fil = card.attrs
            count = num + 1
            r = max(4, min(rect.width // 5, rect.height // 8))
            step = rect.height // (count + 1)
            for k in range(count):
                center = (rect.centerx, rect.y + step * (k + 1))
                draw_symbol(screen, shp, fil, SYMBOL_COLORS[clr], center, r)
            return

        label = "".join(str(a) for a in card.attrs)
        img = self.ctx.assets.fonts.big.render(label, True, (20, 20, 20))
        screen.blit(img, img.get_rect(center=rect.center).topleft)
