from __future__ import annotations

import logging
import random
from pathlib import Path

from trigo.engine.match import MatchEngine
from trigo.engine.types import GameConfig

log = logging.getLogger(__name__)


class SaveStateError(RuntimeError):
    pass


class SaveStateService:
    """Keeps one game on disk between sessions.

    A missing, corrupt or foreign-config save is treated as no save: the caller
    gets a freshly dealt game instead.
    """

    def __init__(self, state_path: Path, config: GameConfig) -> None:
        self._path = state_path
        self.config = config

    @property
    def path(self) -> Path:
        return self._path

    def _try_restore(self, rng: random.Random | None) -> MatchEngine | None:
        if not self._path.exists():
            return None
        try:
            data = self._path.read_bytes()
        except OSError as e:
            log.warning("Could not read saved game %s: %s", self._path, e)
            return None
        engine = MatchEngine.from_state(data, rng=rng)
        if engine is None:
            log.warning("Ignoring unusable saved game %s", self._path)
            return None
        if engine.config != self.config:
            log.info("Saved game %s is for a different variant; starting fresh", self._path)
            return None
        return engine

    def load_or_create(self, rng: random.Random | None = None) -> tuple[MatchEngine, bool]:
        """Return ``(engine, restored)``."""
        engine = self._try_restore(rng)
        if engine is not None:
            return engine, True
        engine = MatchEngine.from_config(self.config, rng=rng)
        engine.deal()
        return engine, False

    def save(self, engine: MatchEngine) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(engine.state())
        except OSError as e:
            raise SaveStateError(f"Could not write saved game {self._path}: {e}") from e
