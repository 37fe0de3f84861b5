from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from stud.models import Bet1, Bet2, ClientConfig, Command, Done, Login, Status, Unknown
from stud.protocol import format_action, parse_command
from stud.strategy import choose_action
from stud.tracker import track_visible_cards

from .transport import Transport

LOGGER = logging.getLogger("stud_client")


@dataclass
class SessionStats:
    commands: int = 0
    replies: int = 0
    hand_results: int = 0
    ignored: int = 0


class StudClient:
    """Reads dealer commands one at a time and answers login and betting prompts."""

    def __init__(self, transport: Transport, config: Optional[ClientConfig] = None) -> None:
        self.transport = transport
        self.config = config or ClientConfig()
        self.stats = SessionStats()

    def play(self) -> SessionStats:
        # The transport is released on every exit path, including errors.
        with self.transport:
            while True:
                command = parse_command(self.transport.read())
                self.stats.commands += 1
                if isinstance(command, Done):
                    LOGGER.info("Game over")
                    break
                reply = self.respond(command)
                if reply is not None:
                    self.transport.write(reply)
                    self.stats.replies += 1
        LOGGER.info(
            "[session] ended | commands=%s replies=%s hand_results=%s",
            self.stats.commands,
            self.stats.replies,
            self.stats.hand_results,
        )
        return self.stats

    def respond(self, command: Command) -> Optional[str]:
        """Return the reply line for ``command``, or None when nothing is sent."""

        if isinstance(command, Login):
            LOGGER.debug("[login] sending credentials")
            return self.config.login

        if isinstance(command, (Bet1, Bet2)):
            visible = track_visible_cards(command.trailing_fields)
            action = choose_action(command, visible, self.config.raise_step)
            reply = format_action(action)
            LOGGER.debug(
                "[bet%s] stack=%s pot=%s current_bet=%s hole=%s visible=%s -> %s",
                command.round_number,
                command.stack,
                command.pot,
                command.current_bet,
                command.hole_card,
                " ".join(visible.labels) or "-",
                reply,
            )
            return reply

        if isinstance(command, Status):
            self.stats.hand_results += 1
            LOGGER.info("Hand result: %s", command.line)
            return None

        if isinstance(command, Unknown):
            self.stats.ignored += 1
            LOGGER.debug("Ignoring command tag=%r", command.tag)
            return None

        if isinstance(command, Done):
            return None

        raise TypeError(f"Unsupported command: {command!r}")
