from __future__ import annotations

import traceback

import pygame  # type: ignore[import-not-found]

from trigo.services.savestate import SaveStateService
from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import Button, draw_text
from .table import TableScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            self.ctx.content.validate_all()
            self.ctx.variant = self.ctx.content.load_variants().get(self.ctx.variant_id)

            self.ctx.paths.userdata_dir.mkdir(parents=True, exist_ok=True)
            self.ctx.saves = SaveStateService(
                state_path=self.ctx.paths.state_file,
                config=self.ctx.variant.config,
            )
            self.ctx.engine, restored = self.ctx.saves.load_or_create()

            self.ctx.telemetry.log("boot", {"ok": True, "variant": self.ctx.variant.id})
            if restored:
                self.ctx.telemetry.log("state_restored", {"path": str(self.ctx.saves.path)})
            else:
                self.ctx.telemetry.log("game_started", {"variant": self.ctx.variant.id})
            return SceneTransition(TableScene(self.ctx))
        except Exception as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            # Offer quit button
            self._quit_button = Button(
                rect=pygame.Rect(20, 700, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def on_exit(self) -> None:
        pass

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((10, 10, 10))
        font = self.ctx.assets.fonts.big
        draw_text(screen, font, "TriGo", (20, 20))

        font2 = self.ctx.assets.fonts.ui
        if self._error is None:
            draw_text(screen, font2, "Booting... validating variants, loading saved game.", (20, 80))
        else:
            draw_text(screen, font2, "BOOT ERROR", (20, 80), color=(240, 80, 80))
            y = 120
            for line in self._error.splitlines()[:22]:
                draw_text(screen, self.ctx.assets.fonts.small, line[:120], (20, y), color=(230, 230, 230))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, font2)
