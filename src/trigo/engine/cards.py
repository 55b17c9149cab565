from __future__ import annotations

from .types import Card


def universe_size(num_attrs: int, num_attr_vals: int) -> int:
    return num_attr_vals**num_attrs


def generate_cards(num_attrs: int, num_attr_vals: int) -> tuple[Card, ...]:
    """Enumerate every attribute combination in mixed-radix order.

    Attribute ``j`` of card ``i`` is ``(i // num_attr_vals**j) % num_attr_vals``,
    so attribute 0 varies fastest.
    """
    cards: list[Card] = []
    for i in range(universe_size(num_attrs, num_attr_vals)):
        attrs: list[int] = []
        div = 1
        for _ in range(num_attrs):
            attrs.append((i // div) % num_attr_vals)
            div *= num_attr_vals
        cards.append(Card(attrs=tuple(attrs)))
    return tuple(cards)
