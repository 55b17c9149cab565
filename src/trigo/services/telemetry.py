from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

# Event types written by the CLI and the pygame client.
GAME_EVENTS = (
    "boot",
    "game_started",
    "state_restored",
    "state_saved",
    "match_found",
    "match_missed",
    "hint_shown",
    "round_complete",
)


@dataclass
class TelemetryService:
    """Append-only JSON-lines log of play events, one object per line.

    Each record is ``{"ts", "type", "payload"}``. Candidates are logged as
    field slot indices, so a log can be replayed against a saved game.
    ``path=None`` turns logging off.
    """

    path: Path | None

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        record = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
