from __future__ import annotations

import itertools
import random

from trigo.engine.cards import generate_cards, universe_size
from trigo.engine.match import MatchEngine, new_engine
from trigo.engine.types import EMPTY, Card, GameConfig


def _index(attrs: tuple[int, ...], vals: int = 3) -> int:
    # inverse of the mixed-radix enumeration: attribute 0 varies fastest
    return sum(a * vals**j for j, a in enumerate(attrs))


def _engine_with_field(cards: list[tuple[int, ...]], config: GameConfig | None = None) -> MatchEngine:
    cfg = config or GameConfig()
    engine = new_engine(cfg, seed=7)
    fld = [_index(c, cfg.num_attr_vals) for c in cards]
    fld += [EMPTY] * (cfg.field_size - len(fld))
    engine.game.field = fld
    engine.game.deck = [i for i in engine.game.deck if i not in fld]
    return engine


def _rule(cards: list[Card], vals: int) -> bool:
    for values in zip(*(c.attrs for c in cards)):
        if len(set(values)) not in (1, vals):
            return False
    return True


def test_universe_is_mixed_radix_order() -> None:
    cards = generate_cards(4, 3)
    assert len(cards) == universe_size(4, 3) == 81
    assert cards[0].attrs == (0, 0, 0, 0)
    assert cards[1].attrs == (1, 0, 0, 0)
    assert cards[3].attrs == (0, 1, 0, 0)
    assert cards[27].attrs == (0, 0, 0, 1)
    assert cards[80].attrs == (2, 2, 2, 2)
    assert len(set(c.attrs for c in cards)) == 81
    for i, card in enumerate(cards):
        assert _index(card.attrs) == i


def test_universe_for_other_dimensions() -> None:
    cards = generate_cards(3, 4)
    assert len(cards) == 64
    assert cards[5].attrs == (1, 1, 0)
    assert all(0 <= a < 4 for c in cards for a in c.attrs)


def test_all_same_or_all_different_is_a_match() -> None:
    engine = _engine_with_field([(0, 0, 0, 0), (0, 0, 0, 1), (0, 0, 0, 2)])
    assert engine.is_match([0, 1, 2])
    # order of the candidate does not matter
    assert engine.is_match([2, 0, 1])


def test_two_of_three_values_is_not_a_match() -> None:
    engine = _engine_with_field([(0, 0, 0, 0), (0, 0, 0, 1), (1, 0, 0, 1)])
    assert not engine.is_match([0, 1, 2])


def test_every_attribute_different_is_a_match() -> None:
    engine = _engine_with_field([(0, 1, 2, 0), (1, 2, 0, 1), (2, 0, 1, 2)])
    assert engine.is_match([0, 1, 2])


def test_malformed_candidates_are_not_matches() -> None:
    engine = _engine_with_field([(0, 0, 0, 0), (0, 0, 0, 1), (0, 0, 0, 2)])
    assert not engine.is_match([0, 1])
    assert not engine.is_match([0, 1, 2, 3])
    assert not engine.is_match([])
    assert not engine.is_match([0, 1, 12])
    assert not engine.is_match([-1, 0, 1])
    # slot 3 is empty
    assert not engine.is_match([0, 1, 3])
    # one slot named twice
    assert not engine.is_match([0, 0, 0])
    assert not engine.is_match([0, 1, 1])


def test_out_of_range_card_on_field_is_not_a_match() -> None:
    engine = _engine_with_field([(0, 0, 0, 0), (0, 0, 0, 1), (0, 0, 0, 2)])
    engine.game.field[2] = 500
    assert not engine.is_match([0, 1, 2])
    assert engine.field_card(2).blank


def test_is_match_agrees_with_rule_for_random_groups() -> None:
    rng = random.Random(99)
    engine = new_engine(seed=1)
    engine.deal()
    fld = engine.field()
    for _ in range(300):
        combo = rng.sample(range(engine.num_slots), 3)
        assert engine.is_match(combo) == _rule([fld[i] for i in combo], 3)


def test_four_valued_variant_needs_four_cards() -> None:
    cfg = GameConfig(num_attrs=4, num_attr_vals=4, field_size=16, field_expand=4)
    cards = [(0, 1, 2, 0), (1, 1, 2, 1), (2, 1, 2, 2), (3, 1, 2, 3)]
    engine = _engine_with_field(cards, cfg)
    assert engine.is_match([0, 1, 2, 3])
    assert not engine.is_match([0, 1, 2])

    engine.game.field[3] = _index((3, 1, 2, 2), 4)
    assert not engine.is_match([0, 1, 2, 3])


def test_num_matches_counts_every_combination() -> None:
    engine = new_engine(seed=3)
    engine.deal()
    fld = engine.field()
    expected = sum(
        1 for combo in itertools.combinations(range(len(fld)), 3) if _rule([fld[i] for i in combo], 3)
    )
    assert engine.num_matches() == expected
    assert engine.num_matches() == expected


def test_num_matches_on_known_field() -> None:
    # the 9 cards (x, y, 0, 0) hold 12 matches: every line of the 3x3 affine plane
    cards = [(x, y, 0, 0) for y in range(3) for x in range(3)]
    engine = _engine_with_field(cards)
    assert engine.num_matches() == 12


def test_blank_lookups() -> None:
    engine = new_engine(seed=2)
    assert engine.card(-1) == Card.blank_card()
    assert engine.card(81).blank
    assert engine.card(0).attrs == (0, 0, 0, 0)
    assert engine.field_card(-1).blank
    assert engine.field_card(100).blank
    # fresh shuffle: every slot empty
    assert all(c.blank for c in engine.field())
