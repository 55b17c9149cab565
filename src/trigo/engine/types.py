from __future__ import annotations

from dataclasses import dataclass

# Field slot: a universe index, or EMPTY when no card occupies it.
Slot = int
EMPTY: Slot = -1

STANDARD_NUM_ATTRS = 4
STANDARD_NUM_ATTR_VALS = 3
STANDARD_FIELD_SIZE = 12
STANDARD_FIELD_EXPAND = 3


@dataclass(frozen=True)
class Card:
    attrs: tuple[int, ...]
    blank: bool = False

    @staticmethod
    def blank_card() -> "Card":
        return Card(attrs=(), blank=True)


@dataclass(frozen=True)
class GameConfig:
    num_attrs: int = STANDARD_NUM_ATTRS
    num_attr_vals: int = STANDARD_NUM_ATTR_VALS
    field_size: int = STANDARD_FIELD_SIZE
    field_expand: int = STANDARD_FIELD_EXPAND

    @property
    def universe_size(self) -> int:
        return self.num_attr_vals**self.num_attrs
