from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field as dc_field
from typing import Iterator, Sequence

from .cards import generate_cards
from .types import EMPTY, Card, GameConfig, Slot

log = logging.getLogger(__name__)


@dataclass
class GameState:
    """Everything that changes during play. The universe is rebuilt from config."""

    config: GameConfig
    deck: list[int] = dc_field(default_factory=list)
    field: list[Slot] = dc_field(default_factory=list)
    matches_found: int = 0


def combinations(n: int, k: int) -> Iterator[tuple[int, ...]]:
    """Yield every ascending k-tuple of indices in range(n), lexicographically."""
    if k <= 0 or k > n:
        return
    combo = list(range(k))
    while True:
        yield tuple(combo)
        # Rightmost position that can still advance
        i = k - 1
        while i >= 0 and combo[i] == n - k + i:
            i -= 1
        if i < 0:
            return
        combo[i] += 1
        for j in range(i + 1, k):
            combo[j] = combo[j - 1] + 1


class MatchEngine:
    """Deck, field and match detection for one game.

    Every query is total over its inputs: bad slot indices give a blank card or
    ``False`` rather than an exception. ``remove`` followed by ``deal`` is one
    turn; ``resolve`` does both for a candidate that checks out.
    """

    def __init__(
        self,
        num_attrs: int,
        num_attr_vals: int,
        field_size: int,
        field_expand: int,
        *,
        rng: random.Random | None = None,
    ) -> None:
        config = GameConfig(
            num_attrs=num_attrs,
            num_attr_vals=num_attr_vals,
            field_size=field_size,
            field_expand=field_expand,
        )
        self.rng = rng or random.Random()
        self.cards: tuple[Card, ...] = generate_cards(num_attrs, num_attr_vals)
        self.game = GameState(config=config)
        self.shuffle()

    @classmethod
    def from_config(cls, config: GameConfig, rng: random.Random | None = None) -> "MatchEngine":
        return cls(
            config.num_attrs,
            config.num_attr_vals,
            config.field_size,
            config.field_expand,
            rng=rng,
        )

    @classmethod
    def from_state(cls, data: bytes, rng: random.Random | None = None) -> "MatchEngine | None":
        from .serialize import engine_from_state

        return engine_from_state(data, rng=rng)

    def state(self) -> bytes:
        """Opaque save blob; ``MatchEngine.from_state`` turns it back into an engine."""
        from .serialize import state_to_bytes

        return state_to_bytes(self)

    @property
    def config(self) -> GameConfig:
        return self.game.config

    @property
    def num_slots(self) -> int:
        return len(self.game.field)

    @property
    def matches_found(self) -> int:
        return self.game.matches_found

    def deck_size(self) -> int:
        return len(self.game.deck)

    def card(self, i: int) -> Card:
        if i < 0 or i >= len(self.cards):
            return Card.blank_card()
        return self.cards[i]

    def field_card(self, i: int) -> Card:
        if i < 0 or i >= len(self.game.field):
            return Card.blank_card()
        return self.card(self.game.field[i])

    def field(self) -> list[Card]:
        return [self.card(c) for c in self.game.field]

    # -------- Mutation --------
    def shuffle(self) -> None:
        deck = list(range(len(self.cards)))
        self.rng.shuffle(deck)
        self.game.deck = deck
        self.game.field = [EMPTY] * self.config.field_size
        self.game.matches_found = 0

    def remove(self, indices: Sequence[int]) -> bool:
        """Empty the given slots. Requires exactly one index per attribute value."""
        if len(indices) != self.config.num_attr_vals:
            log.debug("remove rejected: %d indices, need %d", len(indices), self.config.num_attr_vals)
            return False
        fld = self.game.field
        for i in indices:
            if 0 <= i < len(fld):
                fld[i] = EMPTY
        return True

    def deal(self) -> None:
        self._tidy_field()
        self._add_cards()
        while self.game.deck and self.num_matches() == 0:
            self._expand_field()
            self._add_cards()

    def resolve(self, candidate: Sequence[int]) -> bool:
        if not self.is_match(candidate):
            return False
        self.remove(candidate)
        self.game.matches_found += 1
        self.deal()
        return True

    def _expand_field(self) -> None:
        self.game.field.extend([EMPTY] * self.config.field_expand)
        log.debug("field expanded to %d slots", len(self.game.field))

    def _tidy_field(self) -> None:
        cfg = self.config
        fld = self.game.field
        if len(fld) <= cfg.field_size:
            return
        base = fld[: cfg.field_size]
        leftover: list[int] = []
        for c in fld[cfg.field_size :]:
            if c == EMPTY:
                continue
            try:
                base[base.index(EMPTY)] = c
            except ValueError:
                leftover.append(c)
        extra = int(math.ceil(len(leftover) / cfg.field_expand)) * cfg.field_expand
        before = len(fld)
        self.game.field = base + leftover + [EMPTY] * (extra - len(leftover))
        if len(self.game.field) != before:
            log.debug("field tidied from %d to %d slots", before, len(self.game.field))

    def _add_cards(self) -> None:
        fld = self.game.field
        deck = self.game.deck
        for i, c in enumerate(fld):
            if c != EMPTY:
                continue
            if not deck:
                break
            fld[i] = deck.pop(0)

    # -------- Queries --------
    def is_match(self, candidate: Sequence[int]) -> bool:
        cfg = self.config
        if len(candidate) != cfg.num_attr_vals:
            return False
        picked: list[int] = []
        for f in candidate:
            if f < 0 or f >= len(self.game.field) or f in picked:
                return False
            c = self.game.field[f]
            if c < 0 or c >= len(self.cards):
                return False
            picked.append(f)

        for j in range(cfg.num_attrs):
            distinct = {self.cards[self.game.field[f]].attrs[j] for f in candidate}
            if len(distinct) != 1 and len(distinct) != cfg.num_attr_vals:
                return False
        return True

    def num_matches(self) -> int:
        return sum(
            1
            for combo in combinations(len(self.game.field), self.config.num_attr_vals)
            if self.is_match(combo)
        )


def new_standard(rng: random.Random | None = None) -> MatchEngine:
    """The classic 81-card game: 4 attributes, 3 values, 12 slots growing by 3."""
    return MatchEngine.from_config(GameConfig(), rng=rng)


def new_engine(config: GameConfig | None = None, seed: int | None = None) -> MatchEngine:
    cfg = config or GameConfig()
    return MatchEngine.from_config(cfg, rng=random.Random(seed))
