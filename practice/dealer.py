from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from stud.cards import Card, build_deck, cards_to_labels, deal
from stud.models import ActionType, DealerConfig
from stud.protocol import FIELD_SEPARATOR, UP_MARKER, MalformedCommand, parse_action, parse_command
from stud.strategy import choose_action
from stud.tracker import track_visible_cards

LOGGER = logging.getLogger("practice_dealer")

RANK_ORDER = "23456789TJQKA"
RANK_VALUE = {rank: idx for idx, rank in enumerate(RANK_ORDER, start=2)}

# StudDealer keeps the chip accounting for one heads-up match between the
# remote client and the house. No networking lives here.


class DealerError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


@dataclass
class Hand:
    hand_id: int
    deck: List[Card]
    client_hole: Card
    house_hole: Card
    client_up: List[Card] = field(default_factory=list)
    house_up: List[Card] = field(default_factory=list)
    pot: int = 0
    round_number: int = 1
    current_bet: int = 0
    finished: bool = False
    outcome: Optional[str] = None

    def visible_labels(self) -> List[str]:
        return cards_to_labels(self.client_up + self.house_up)


def hand_strength(cards: Sequence[Card]) -> Tuple[int, List[int]]:
    """Rank a three-card stud hand: trips (2) > pair (1) > high card (0)."""
    counts = Counter(card.rank for card in cards)
    ordered = sorted(counts.items(), key=lambda x: (x[1], RANK_VALUE[x[0]]), reverse=True)
    category = {3: 2, 2: 1}.get(ordered[0][1], 0)
    return category, [RANK_VALUE[rank] for rank, _ in ordered]


def build_prompt(
    round_number: int,
    stack: int,
    pot: int,
    current_bet: int,
    hole: Card,
    up_cards: Sequence[Card],
    visible: Sequence[str],
) -> str:
    fields = [f"bet{round_number}", str(stack), str(pot), str(current_bet), hole.label]
    fields.extend(cards_to_labels(list(up_cards)))
    fields.append(UP_MARKER)
    fields.extend(visible)
    return FIELD_SEPARATOR.join(fields)


class StudDealer:
    """Heads-up simplified stud: one hole card, two up cards, two betting rounds."""

    def __init__(self, config: DealerConfig, seed: Optional[int] = None) -> None:
        self.config = config
        self.rng = random.Random(seed)
        self.client_stack = config.starting_stack
        self.house_stack = config.starting_stack
        self.hands_played = 0
        self.hand: Optional[Hand] = None

    @property
    def total_chips(self) -> int:
        in_pot = self.hand.pot if self.hand and not self.hand.finished else 0
        return self.client_stack + self.house_stack + in_pot

    def can_start_hand(self) -> bool:
        if self.hand is not None and not self.hand.finished:
            return False
        return self.hands_played < self.config.hands and self.client_stack > 0 and self.house_stack > 0

    def start_hand(self) -> Hand:
        if self.hand is not None and not self.hand.finished:
            raise DealerError("HAND_IN_PROGRESS", f"Hand {self.hand.hand_id} is still being played")
        if not self.can_start_hand():
            raise DealerError("MATCH_OVER", "No more hands can be dealt")

        deck = build_deck(seed=self.rng.randrange(2**32))
        client_hole, house_hole, client_up, house_up = deal(deck, 4)
        self.hands_played += 1
        hand = Hand(
            hand_id=self.hands_played,
            deck=deck,
            client_hole=client_hole,
            house_hole=house_hole,
            client_up=[client_up],
            house_up=[house_up],
        )
        client_ante = min(self.config.ante, self.client_stack)
        house_ante = min(self.config.ante, self.house_stack)
        self.client_stack -= client_ante
        self.house_stack -= house_ante
        hand.pot = client_ante + house_ante
        self.hand = hand
        LOGGER.debug("[hand %s] dealt | pot %s", hand.hand_id, hand.pot)
        return hand

    def bet_prompt(self) -> str:
        """Let the house open the current round, then return the client's prompt."""
        hand = self._require_open_hand()

        opening = min(self.config.opening_bet, self.house_stack)
        house_line = build_prompt(
            hand.round_number,
            self.house_stack,
            hand.pot,
            opening,
            hand.house_hole,
            hand.house_up,
            hand.visible_labels(),
        )
        request = parse_command(house_line)
        action = choose_action(request, track_visible_cards(request.trailing_fields), self.config.raise_step)
        # A broke house cannot put chips in; it stays in the hand all-in.
        committed = 0 if action.action == ActionType.FOLD else action.amount
        self.house_stack -= committed
        hand.pot += committed
        hand.current_bet = committed
        LOGGER.debug("[hand %s] house opens round %s with %s", hand.hand_id, hand.round_number, committed)

        return build_prompt(
            hand.round_number,
            self.client_stack,
            hand.pot,
            hand.current_bet,
            hand.client_hole,
            hand.client_up,
            hand.visible_labels(),
        )

    def apply_reply(self, reply: str) -> None:
        hand = self._require_open_hand()
        try:
            action, amount = parse_action(reply)
        except MalformedCommand as exc:
            LOGGER.warning("[hand %s] bad reply treated as fold: %s", hand.hand_id, exc)
            action, amount = ActionType.FOLD, 0

        if action == ActionType.FOLD:
            self._settle(winner="house", outcome="fold")
            return

        committed = max(0, min(amount, self.client_stack))
        if committed < hand.current_bet and committed < self.client_stack:
            # Only an all-in may fall short of the bet to match.
            LOGGER.warning("[hand %s] under-call of %s with chips behind treated as fold", hand.hand_id, committed)
            self._settle(winner="house", outcome="fold")
            return

        self.client_stack -= committed
        hand.pot += committed
        if committed > hand.current_bet:
            raise_by = committed - hand.current_bet
            called = min(raise_by, self.house_stack)
            self.house_stack -= called
            hand.pot += called
            refund = raise_by - called
            self.client_stack += refund
            hand.pot -= refund
        elif committed < hand.current_bet:
            # Short all-in call: the house takes back what was not matched.
            refund = hand.current_bet - committed
            self.house_stack += refund
            hand.pot -= refund

        if hand.round_number == 1:
            hand.round_number = 2
            hand.client_up.extend(deal(hand.deck, 1))
            hand.house_up.extend(deal(hand.deck, 1))
            return
        self._showdown()

    def finish_hand(self) -> str:
        hand = self.hand
        if hand is None or not hand.finished:
            raise DealerError("HAND_NOT_FINISHED", "Hand result requested before the hand ended")
        fields = [
            "status",
            str(hand.hand_id),
            hand.outcome or "",
            str(hand.pot),
            "you",
            *cards_to_labels([hand.client_hole] + hand.client_up),
            "house",
            *cards_to_labels([hand.house_hole] + hand.house_up),
            "stacks",
            str(self.client_stack),
            str(self.house_stack),
        ]
        return FIELD_SEPARATOR.join(fields)

    def _showdown(self) -> None:
        hand = self.hand
        assert hand is not None
        client_score = hand_strength([hand.client_hole] + hand.client_up)
        house_score = hand_strength([hand.house_hole] + hand.house_up)
        if client_score > house_score:
            self._settle(winner="client", outcome="win")
        elif house_score > client_score:
            self._settle(winner="house", outcome="lose")
        else:
            self._settle(winner=None, outcome="split")

    def _settle(self, winner: Optional[str], outcome: str) -> None:
        hand = self.hand
        assert hand is not None
        if winner == "client":
            self.client_stack += hand.pot
        elif winner == "house":
            self.house_stack += hand.pot
        else:
            half = hand.pot // 2
            self.client_stack += half
            self.house_stack += hand.pot - half
        hand.finished = True
        hand.outcome = outcome
        LOGGER.info(
            "[hand %s] %s | pot %s | stacks client=%s house=%s",
            hand.hand_id,
            outcome,
            hand.pot,
            self.client_stack,
            self.house_stack,
        )

    def _require_open_hand(self) -> Hand:
        if self.hand is None or self.hand.finished:
            raise DealerError("NO_HAND", "No hand in progress")
        return self.hand
