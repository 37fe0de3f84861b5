from __future__ import annotations

from typing import Iterable, List

from client.session import StudClient
from client.transport import Transport, TransportError
from practice.dealer import StudDealer
from stud.models import ClientConfig, DealerConfig
from stud.protocol import parse_command


class ScriptedTransport(Transport):
    """Feeds canned dealer lines and records what the client writes back."""

    def __init__(self, lines: Iterable[str]) -> None:
        self.lines: List[str] = list(lines)
        self.sent: List[str] = []
        self.close_calls = 0

    def read(self) -> str:
        if not self.lines:
            raise TransportError("Script exhausted")
        return self.lines.pop(0)

    def write(self, line: str) -> None:
        self.sent.append(line)

    def _release(self) -> None:
        self.close_calls += 1


def create_dealer(
    *,
    starting_stack: int = 200,
    ante: int = 5,
    opening_bet: int = 10,
    hands: int = 10,
    seed: int = 42,
) -> StudDealer:
    config = DealerConfig(starting_stack=starting_stack, ante=ante, opening_bet=opening_bet, hands=hands)
    return StudDealer(config, seed=seed)


def play_match(dealer: StudDealer, client: StudClient) -> List[str]:
    """Run a whole match synchronously; returns every line the dealer sent."""
    transcript = ["login", client.respond(parse_command("login"))]
    while dealer.can_start_hand():
        hand = dealer.start_hand()
        while not hand.finished:
            prompt = dealer.bet_prompt()
            reply = client.respond(parse_command(prompt))
            transcript.extend([prompt, reply])
            dealer.apply_reply(reply)
        status = dealer.finish_hand()
        client.respond(parse_command(status))
        transcript.append(status)
    transcript.append("done")
    return transcript


def create_client(config: ClientConfig | None = None) -> StudClient:
    return StudClient(ScriptedTransport([]), config)
