from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from .cards import Card, parse_label
from .protocol import UP_MARKER

LOGGER = logging.getLogger("stud_client")

MAX_VISIBLE_CARDS = 52


@dataclass(frozen=True)
class VisibleCards:
    # Up cards seen in the current betting round, in the order the dealer sent them.
    cards: Tuple[Card, ...] = ()

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def spades(self) -> Tuple[Card, ...]:
        return tuple(card for card in self.cards if card.is_spade)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(card.label for card in self.cards)


def track_visible_cards(fields: Sequence[str]) -> VisibleCards:
    """Collect the cards listed after the ``up`` marker.

    The set is rebuilt from scratch on every call; a missing marker yields
    an empty set.
    """

    try:
        start = list(fields).index(UP_MARKER) + 1
    except ValueError:
        return VisibleCards()

    cards = []
    for token in fields[start:]:
        if not token:
            continue
        try:
            card = parse_label(token)
        except ValueError:
            LOGGER.debug("Skipping non-card token %r after up marker", token)
            continue
        if len(cards) == MAX_VISIBLE_CARDS:
            LOGGER.warning("More than %s visible cards listed; ignoring the rest", MAX_VISIBLE_CARDS)
            break
        cards.append(card)
    return VisibleCards(tuple(cards))
