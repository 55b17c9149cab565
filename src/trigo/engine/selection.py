from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Selection:
    """Slots the player has picked so far, in pick order.

    Never holds more than ``capacity`` slots (one match worth).
    """

    capacity: int
    indices: tuple[int, ...] = ()

    @staticmethod
    def empty(capacity: int) -> "Selection":
        return Selection(capacity=capacity)

    def __contains__(self, slot: object) -> bool:
        for i in self.indices:
            if i == slot:
                return True
        return False

    def __len__(self) -> int:
        return len(self.indices)

    @property
    def is_full(self) -> bool:
        return len(self.indices) >= self.capacity

    def toggle(self, slot: int) -> "Selection":
        if slot in self:
            return Selection(self.capacity, tuple(i for i in self.indices if i != slot))
        if self.is_full:
            return self
        return Selection(self.capacity, self.indices + (slot,))

    def clear(self) -> "Selection":
        return Selection.empty(self.capacity)
