from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import pygame  # type: ignore[import-not-found]


@dataclass
class SceneTransition:
    """Returned from ``update`` to swap scenes, e.g. boot to table."""

    next_scene: "Scene"


class Scene(Protocol):
    """One screen of the client. ``App`` drives the active scene each frame."""

    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...

    def on_exit(self) -> None:
        """Called when the scene is left or the window closes; the table saves here."""
        ...
