import logging

import pytest

from practice.dealer import DealerError, hand_strength
from stud.cards import parse_label
from stud.models import Bet1, Bet2
from stud.protocol import parse_command

from .helpers import create_client, create_dealer, play_match


def cards(*labels):
    return [parse_label(label) for label in labels]


def rig(hand, client, house):
    """Replace the dealt cards with known ones."""
    hand.client_hole, *hand.client_up = cards(*client)
    hand.house_hole, *hand.house_up = cards(*house)


def test_start_hand_collects_antes():
    dealer = create_dealer()
    hand = dealer.start_hand()
    assert hand.pot == 10
    assert dealer.client_stack == 195
    assert dealer.house_stack == 195
    assert len(hand.client_up) == 1 and len(hand.house_up) == 1
    assert dealer.total_chips == 400


def test_prompt_lists_all_up_cards_after_marker():
    dealer = create_dealer()
    hand = dealer.start_hand()
    rig(hand, ["2C", "3D"], ["4H", "6C"])
    prompt = dealer.bet_prompt()
    assert prompt == "bet1:195:20:10:2C:3D:up:3D:6C"
    command = parse_command(prompt)
    assert isinstance(command, Bet1)
    assert dealer.house_stack == 185


def test_full_hand_with_raises_goes_to_showdown():
    dealer = create_dealer()
    hand = dealer.start_hand()
    rig(hand, ["7S", "7H"], ["AS", "KH"])

    # House holds a high card and opens for 20.
    assert dealer.bet_prompt() == "bet1:195:30:20:7S:7H:up:7H:KH"
    dealer.apply_reply("bet:30")
    assert dealer.client_stack == 165
    assert dealer.house_stack == 165
    assert hand.pot == 70
    assert hand.round_number == 2

    hand.client_up[1] = parse_label("7D")
    hand.house_up[1] = parse_label("2C")
    prompt = dealer.bet_prompt()
    assert prompt == "bet2:165:90:20:7S:7H:7D:up:7H:7D:KH:2C"
    assert isinstance(parse_command(prompt), Bet2)
    dealer.apply_reply("bet:30")

    assert hand.finished
    assert hand.outcome == "win"
    assert dealer.client_stack == 265
    assert dealer.house_stack == 135
    assert dealer.finish_hand() == "status:1:win:130:you:7S:7H:7D:house:AS:KH:2C:stacks:265:135"


def test_fold_awards_pot_to_house():
    dealer = create_dealer()
    hand = dealer.start_hand()
    rig(hand, ["2C", "3D"], ["4H", "6C"])
    dealer.bet_prompt()
    dealer.apply_reply("fold")
    assert hand.finished and hand.outcome == "fold"
    assert dealer.client_stack == 195
    assert dealer.house_stack == 205


def test_bad_reply_is_treated_as_fold(caplog):
    dealer = create_dealer()
    hand = dealer.start_hand()
    dealer.bet_prompt()
    with caplog.at_level(logging.WARNING, logger="practice_dealer"):
        dealer.apply_reply("check")
    assert hand.outcome == "fold"
    assert "bad reply" in caplog.text


def test_short_call_returns_unmatched_chips_to_house():
    dealer = create_dealer()
    hand = dealer.start_hand()
    dealer.client_stack, dealer.house_stack = 4, 386
    rig(hand, ["2C", "3D"], ["AS", "KH"])
    assert dealer.bet_prompt() == "bet1:4:30:20:2C:3D:up:3D:KH"
    dealer.apply_reply("bet:20")
    assert dealer.client_stack == 0
    assert dealer.house_stack == 382
    assert hand.pot == 18
    assert dealer.total_chips == 400


def test_under_call_with_chips_behind_forfeits_pot(caplog):
    dealer = create_dealer()
    hand = dealer.start_hand()
    rig(hand, ["2C", "3D"], ["AS", "KH"])
    assert dealer.bet_prompt() == "bet1:195:30:20:2C:3D:up:3D:KH"
    with caplog.at_level(logging.WARNING, logger="practice_dealer"):
        dealer.apply_reply("bet:0")
    assert hand.finished
    assert hand.outcome == "fold"
    assert hand.round_number == 1
    assert dealer.client_stack == 195
    assert dealer.house_stack == 205
    assert "under-call" in caplog.text


def test_raise_beyond_house_stack_is_refunded():
    dealer = create_dealer()
    hand = dealer.start_hand()
    dealer.client_stack, dealer.house_stack = 386, 4
    rig(hand, ["AS", "KD"], ["2C", "3D"])
    # House cannot afford the opening bet and calls for what it has.
    assert dealer.bet_prompt() == "bet1:386:14:4:AS:KD:up:KD:3D"
    dealer.apply_reply("bet:14")
    assert dealer.house_stack == 0
    assert dealer.client_stack == 382
    assert hand.pot == 18
    assert dealer.total_chips == 400


def test_split_pot_on_equal_hands():
    dealer = create_dealer()
    hand = dealer.start_hand()
    rig(hand, ["9C", "5D"], ["9H", "5S"])
    dealer.bet_prompt()
    dealer.apply_reply("bet:10")
    hand.client_up[1] = parse_label("2C")
    hand.house_up[1] = parse_label("2H")
    dealer.bet_prompt()
    dealer.apply_reply("bet:10")
    assert hand.outcome == "split"
    assert dealer.client_stack == dealer.house_stack == 200


def test_hand_strength_orders_categories():
    trips = hand_strength(cards("2C", "2D", "2H"))
    pair = hand_strength(cards("AC", "AD", "3H"))
    low_pair = hand_strength(cards("KC", "KD", "QH"))
    high = hand_strength(cards("AC", "KD", "QH"))
    assert trips > pair > low_pair > high
    assert pair == (1, [14, 3])


def test_dealer_rejects_out_of_order_calls():
    dealer = create_dealer(hands=1)
    with pytest.raises(DealerError, match="No hand in progress"):
        dealer.bet_prompt()
    dealer.start_hand()
    with pytest.raises(DealerError) as excinfo:
        dealer.start_hand()
    assert excinfo.value.code == "HAND_IN_PROGRESS"
    with pytest.raises(DealerError, match="before the hand ended"):
        dealer.finish_hand()
    dealer.bet_prompt()
    dealer.apply_reply("fold")
    with pytest.raises(DealerError) as excinfo:
        dealer.start_hand()
    assert excinfo.value.code == "MATCH_OVER"


def test_match_against_client_ends_with_done():
    dealer = create_dealer(starting_stack=1_000, hands=5, seed=3)
    client = create_client()
    transcript = play_match(dealer, client)
    assert transcript[:2] == ["login", "AresIntrepid:Ares"]
    assert transcript[-1] == "done"
    statuses = [line for line in transcript if line.startswith("status:")]
    assert len(statuses) == dealer.hands_played == 5
    assert client.stats.hand_results == 5


def test_chips_are_conserved_over_many_matches():
    for seed in range(40):
        dealer = create_dealer(starting_stack=60, hands=50, seed=seed)
        play_match(dealer, create_client())
        assert dealer.client_stack + dealer.house_stack == 120
        assert dealer.client_stack >= 0 and dealer.house_stack >= 0
