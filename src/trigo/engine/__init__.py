"""Headless deck, field and match-detection engine for TriGo.

IMPORTANT: This package must never import pygame.
"""

from .cards import generate_cards
from .hints import find_match, find_matches
from .match import MatchEngine, combinations, new_engine, new_standard
from .selection import Selection
from .serialize import engine_from_state, snapshot, state_to_bytes
from .types import EMPTY, Card, GameConfig

__all__ = [
    "Card",
    "EMPTY",
    "GameConfig",
    "MatchEngine",
    "Selection",
    "combinations",
    "engine_from_state",
    "find_match",
    "find_matches",
    "generate_cards",
    "new_engine",
    "new_standard",
    "snapshot",
    "state_to_bytes",
]
