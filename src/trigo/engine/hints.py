from __future__ import annotations

from .match import MatchEngine, combinations


def find_matches(engine: MatchEngine) -> list[tuple[int, ...]]:
    """All matches on the field, in the same order ``num_matches`` scans them."""
    return [
        combo
        for combo in combinations(engine.num_slots, engine.config.num_attr_vals)
        if engine.is_match(combo)
    ]


def find_match(engine: MatchEngine) -> tuple[int, ...] | None:
    for combo in combinations(engine.num_slots, engine.config.num_attr_vals):
        if engine.is_match(combo):
            return combo
    return None


def play_round(engine: MatchEngine, max_turns: int = 1000) -> int:
    """Resolve the first available match until none is left. Returns matches taken.

    Used for auto-play and fairness checks; ``max_turns`` bounds a broken engine.
    """
    taken = 0
    for _ in range(max_turns):
        combo = find_match(engine)
        if combo is None:
            break
        engine.resolve(combo)
        taken += 1
    return taken
