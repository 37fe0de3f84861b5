from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .cards import Card

DEFAULT_LOGIN = "AresIntrepid:Ares"
DEFAULT_RAISE_STEP = 10


class ActionType(str, Enum):
    BET = "BET"
    CALL = "CALL"
    FOLD = "FOLD"


@dataclass(frozen=True)
class Action:
    action: ActionType
    amount: Optional[int] = None

    @classmethod
    def bet(cls, amount: int) -> "Action":
        return cls(ActionType.BET, amount)

    @classmethod
    def call(cls, current_bet: int) -> "Action":
        return cls(ActionType.CALL, current_bet)

    @classmethod
    def fold(cls) -> "Action":
        return cls(ActionType.FOLD)


@dataclass
class ClientConfig:
    login: str = DEFAULT_LOGIN
    raise_step: int = DEFAULT_RAISE_STEP


@dataclass
class DealerConfig:
    starting_stack: int = 200
    ante: int = 5
    opening_bet: int = 10
    hands: int = 10
    raise_step: int = DEFAULT_RAISE_STEP


# Commands are parsed from one protocol line and consumed immediately.


@dataclass(frozen=True)
class Login:
    pass


@dataclass(frozen=True)
class BetRequest:
    stack: int
    pot: int
    current_bet: int
    hole_card: Card
    first_up_card: Card
    trailing_fields: Tuple[str, ...]


@dataclass(frozen=True)
class Bet1(BetRequest):
    round_number = 1


@dataclass(frozen=True)
class Bet2(BetRequest):
    second_up_card: Card
    round_number = 2


@dataclass(frozen=True)
class Status:
    fields: Tuple[str, ...]

    @property
    def line(self) -> str:
        return ":".join(self.fields)


@dataclass(frozen=True)
class Done:
    pass


@dataclass(frozen=True)
class Unknown:
    tag: str
    fields: Tuple[str, ...]


Command = Union[Login, Bet1, Bet2, Status, Done, Unknown]
