from __future__ import annotations

import json
import logging
import random

from jsonschema import Draft202012Validator

from .match import GameState, MatchEngine
from .types import EMPTY, GameConfig

log = logging.getLogger(__name__)

STATE_VERSION = 1

# Largest universe a save may ask for; the quad game needs 256.
MAX_UNIVERSE_SIZE = 1 << 16

_POSITIVE_INT = {"type": "integer", "minimum": 1}
_INT_LIST = {"type": "array", "items": {"type": "integer"}}

STATE_SCHEMA: dict[str, object] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": [
        "version",
        "num_attrs",
        "num_attr_vals",
        "field_size",
        "field_expand",
        "deck",
        "field",
        "matches_found",
    ],
    "properties": {
        "version": {"const": STATE_VERSION},
        "num_attrs": _POSITIVE_INT,
        "num_attr_vals": _POSITIVE_INT,
        "field_size": _POSITIVE_INT,
        "field_expand": _POSITIVE_INT,
        "deck": _INT_LIST,
        "field": _INT_LIST,
        "matches_found": {"type": "integer", "minimum": 0},
    },
    "additionalProperties": False,
}

_validator = Draft202012Validator(STATE_SCHEMA)


def snapshot(engine: MatchEngine) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the engine state."""
    game = engine.game
    cfg = game.config
    return {
        "version": STATE_VERSION,
        "num_attrs": cfg.num_attrs,
        "num_attr_vals": cfg.num_attr_vals,
        "field_size": cfg.field_size,
        "field_expand": cfg.field_expand,
        "deck": list(game.deck),
        "field": list(game.field),
        "matches_found": game.matches_found,
    }


def state_to_bytes(engine: MatchEngine) -> bytes:
    return json.dumps(snapshot(engine), separators=(",", ":")).encode("utf-8")


def _is_int(value: object) -> bool:
    # JSON Schema "integer" also admits 4.0
    return type(value) is int


def _universe_size_capped(num_attrs: int, num_attr_vals: int) -> int | None:
    size = 1
    for _ in range(num_attrs):
        size *= num_attr_vals
        if size > MAX_UNIVERSE_SIZE:
            return None
    return size


def _consistency_error(raw: dict[str, object]) -> str | None:
    for key in ("num_attrs", "num_attr_vals", "field_size", "field_expand", "matches_found"):
        if not _is_int(raw[key]):
            return f"{key} is not an integer"
    deck: list[int] = raw["deck"]  # type: ignore[assignment]
    fld: list[int] = raw["field"]  # type: ignore[assignment]
    if not all(_is_int(c) for c in fld) or not all(_is_int(c) for c in deck):
        return "card indices must be integers"

    cfg = GameConfig(
        num_attrs=raw["num_attrs"],  # type: ignore[arg-type]
        num_attr_vals=raw["num_attr_vals"],  # type: ignore[arg-type]
        field_size=raw["field_size"],  # type: ignore[arg-type]
        field_expand=raw["field_expand"],  # type: ignore[arg-type]
    )
    if cfg.num_attrs > MAX_UNIVERSE_SIZE:
        return f"num_attrs {cfg.num_attrs} is too large"
    n = _universe_size_capped(cfg.num_attrs, cfg.num_attr_vals)
    if n is None:
        return f"universe of {cfg.num_attr_vals}^{cfg.num_attrs} cards exceeds {MAX_UNIVERSE_SIZE}"

    extra = len(fld) - cfg.field_size
    if extra < 0 or extra % cfg.field_expand != 0:
        return f"field length {len(fld)} is not field_size + k*field_expand"

    placed = [c for c in fld if c != EMPTY] + list(deck)
    for c in placed:
        if c < 0 or c >= n:
            return f"card index {c} outside universe of {n}"
    if len(set(placed)) != len(placed):
        return "a card appears more than once"
    return None


def engine_from_state(data: bytes, rng: random.Random | None = None) -> MatchEngine | None:
    """Rebuild an engine from ``state_to_bytes`` output, or None if it is unusable."""
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        log.warning("Saved state is not valid JSON: %s", e)
        return None

    errors = sorted(_validator.iter_errors(raw), key=lambda e: [str(p) for p in e.path])
    if errors:
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            log.warning("Saved state invalid at %s: %s", loc or "<root>", err.message)
        return None

    problem = _consistency_error(raw)
    if problem is not None:
        log.warning("Saved state inconsistent: %s", problem)
        return None

    cfg = GameConfig(
        num_attrs=raw["num_attrs"],
        num_attr_vals=raw["num_attr_vals"],
        field_size=raw["field_size"],
        field_expand=raw["field_expand"],
    )
    engine = MatchEngine.from_config(cfg, rng=rng)
    engine.game = GameState(
        config=cfg,
        deck=list(raw["deck"]),
        field=list(raw["field"]),
        matches_found=raw["matches_found"],
    )
    return engine
