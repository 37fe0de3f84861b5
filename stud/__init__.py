"""Protocol, card and betting primitives shared by the client and the practice dealer."""

from .cards import Card, RANKS, SUITS, build_deck, deal, parse_label
from .models import (
    Action,
    ActionType,
    Bet1,
    Bet2,
    ClientConfig,
    Command,
    DealerConfig,
    Done,
    Login,
    Status,
    Unknown,
)
from .protocol import MalformedCommand, format_action, parse_command
from .strategy import choose_action, evaluate_round1, evaluate_round2, is_highest_visible_spade, size_action
from .tracker import VisibleCards, track_visible_cards

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "build_deck",
    "deal",
    "parse_label",
    "Action",
    "ActionType",
    "Bet1",
    "Bet2",
    "ClientConfig",
    "Command",
    "DealerConfig",
    "Done",
    "Login",
    "Status",
    "Unknown",
    "MalformedCommand",
    "format_action",
    "parse_command",
    "choose_action",
    "evaluate_round1",
    "evaluate_round2",
    "is_highest_visible_spade",
    "size_action",
    "VisibleCards",
    "track_visible_cards",
]
