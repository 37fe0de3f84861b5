"""Line protocol spoken between the dealer and the client.

Every command is a single line of colon separated fields whose first field
is the tag. Over TCP each line travels as a frame: a 2-byte big-endian
length followed by that many UTF-8 bytes.
"""

from __future__ import annotations

import re
import struct
from typing import List, Sequence, Tuple

from .cards import Card, parse_label
from .models import Action, ActionType, Bet1, Bet2, Command, Done, Login, Status, Unknown

FIELD_SEPARATOR = ":"
UP_MARKER = "up"

FRAME_HEADER = struct.Struct(">H")
MAX_FRAME_BYTES = 0xFFFF

_INTEGER = re.compile(r"[+-]?[0-9]+")

# Positional field counts, tag included.
_BET1_FIELDS = 6
_BET2_FIELDS = 7


class MalformedCommand(ValueError):
    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


def split_fields(line: str) -> List[str]:
    return line.split(FIELD_SEPARATOR)


def parse_command(line: str) -> Command:
    """Turn one protocol line into a typed command.

    Unrecognized tags produce ``Unknown`` rather than an error so newer
    dealers can add message types without breaking the client.
    """

    fields = split_fields(line)
    tag = fields[0]

    if tag == "login":
        return Login()
    if tag == "bet1":
        return _parse_bet(line, fields, Bet1, _BET1_FIELDS)
    if tag == "bet2":
        return _parse_bet(line, fields, Bet2, _BET2_FIELDS)
    if tag == "status":
        return Status(tuple(fields))
    if tag == "done":
        return Done()
    return Unknown(tag, tuple(fields[1:]))


def _parse_bet(line: str, fields: Sequence[str], kind, required: int):
    if len(fields) < required:
        raise MalformedCommand(line, f"{fields[0]} needs {required - 1} fields, got {len(fields) - 1}")

    stack = _parse_int(line, "stack", fields[1])
    pot = _parse_int(line, "pot", fields[2])
    current_bet = _parse_int(line, "current bet", fields[3])
    hole_card = _parse_card(line, "hole card", fields[4])
    first_up_card = _parse_card(line, "first up card", fields[5])
    trailing = tuple(fields[required:])

    if kind is Bet2:
        return Bet2(
            stack=stack,
            pot=pot,
            current_bet=current_bet,
            hole_card=hole_card,
            first_up_card=first_up_card,
            second_up_card=_parse_card(line, "second up card", fields[6]),
            trailing_fields=trailing,
        )
    return Bet1(
        stack=stack,
        pot=pot,
        current_bet=current_bet,
        hole_card=hole_card,
        first_up_card=first_up_card,
        trailing_fields=trailing,
    )


def _parse_int(line: str, name: str, raw: str) -> int:
    if not _INTEGER.fullmatch(raw):
        raise MalformedCommand(line, f"{name} is not an integer ({raw!r})")
    return int(raw)


def _parse_card(line: str, name: str, raw: str) -> Card:
    try:
        return parse_label(raw)
    except ValueError as exc:
        raise MalformedCommand(line, f"{name} is not a card ({exc})") from exc


def format_action(action: Action) -> str:
    if action.action == ActionType.FOLD:
        return "fold"
    return f"bet{FIELD_SEPARATOR}{action.amount}"


def parse_action(line: str) -> Tuple[ActionType, int]:
    """Read a client reply (``bet:<n>`` or ``fold``) on the dealer side."""

    fields = split_fields(line.strip())
    if fields == ["fold"]:
        return ActionType.FOLD, 0
    if len(fields) == 2 and fields[0] == "bet" and _INTEGER.fullmatch(fields[1]):
        return ActionType.BET, int(fields[1])
    raise MalformedCommand(line, "expected bet:<amount> or fold")


def encode_frame(line: str) -> bytes:
    payload = line.encode("utf-8")
    if len(payload) > MAX_FRAME_BYTES:
        raise ValueError(f"Line too long for one frame ({len(payload)} bytes)")
    return FRAME_HEADER.pack(len(payload)) + payload


def decode_payload(payload: bytes) -> str:
    return payload.decode("utf-8")
