from __future__ import annotations

from typing import Union

from .cards import Card
from .models import DEFAULT_RAISE_STEP, Action, Bet1, Bet2
from .tracker import VisibleCards

HIGH_RANKS = "AKQJT"


def is_high_card(rank: str) -> bool:
    return rank in HIGH_RANKS


def evaluate_round1(hole: Card, up: Card) -> bool:
    """Bet on a pair or on any ten-or-better card."""
    has_pair = hole.rank == up.rank
    has_high_card = is_high_card(hole.rank) or is_high_card(up.rank)
    return has_pair or has_high_card


def is_highest_visible_spade(hole: Card, visible: VisibleCards) -> bool:
    # Ranks compare as characters, so "T" outranks "A" and "K" here.
    if not hole.is_spade:
        return False
    return not any(card.rank > hole.rank for card in visible.spades())


def evaluate_round2(hole: Card, first_up: Card, second_up: Card, visible: VisibleCards) -> bool:
    """Bet on a pair or better, or when holding the top visible spade."""
    has_pair = hole.rank == first_up.rank or hole.rank == second_up.rank or first_up.rank == second_up.rank
    has_three_of_a_kind = hole.rank == first_up.rank == second_up.rank
    return has_pair or has_three_of_a_kind or is_highest_visible_spade(hole, visible)


def size_action(should_bet: bool, stack: int, current_bet: int, raise_step: int = DEFAULT_RAISE_STEP) -> Action:
    if should_bet and stack > current_bet:
        # Raise by one step, capped at the stack and never below the bet to match.
        amount = max(current_bet, min(current_bet + raise_step, stack))
        return Action.bet(amount)
    if stack > 0:
        return Action.call(current_bet)
    return Action.fold()


def choose_action(
    request: Union[Bet1, Bet2],
    visible: VisibleCards,
    raise_step: int = DEFAULT_RAISE_STEP,
) -> Action:
    if isinstance(request, Bet2):
        should_bet = evaluate_round2(request.hole_card, request.first_up_card, request.second_up_card, visible)
    else:
        should_bet = evaluate_round1(request.hole_card, request.first_up_card)
    return size_action(should_bet, request.stack, request.current_bet, raise_step)
