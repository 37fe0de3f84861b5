import argparse
import logging
from typing import List, Optional

from stud.models import DEFAULT_LOGIN, DEFAULT_RAISE_STEP, ClientConfig
from stud.protocol import MalformedCommand

from .session import StudClient
from .transport import ConsoleTransport, SocketTransport, Transport, TransportError, WebSocketTransport

LOGGER = logging.getLogger("stud_client")

USAGE_BANNER = """\
*** Poker Game Instructions ***
Follow these instructions to run the game:

Necessary Information:
1. IP Address: The address of the game server
2. Port: The port number on the server
3. Mode: Add 'test' to play in a simulated mode

Example Command format:
python -m client <IP_Address> <Port> [test]

Examples:
1. Normal mode:    python -m client localhost 12345
2. Test mode:      python -m client localhost 12345 test
3. WebSocket mode: python -m client --url ws://localhost:9877/

Enjoy the Game!"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stud poker client", add_help=True)
    parser.add_argument("host", nargs="?", help="Dealer address")
    parser.add_argument("port", nargs="?", type=int, help="Dealer port")
    parser.add_argument("mode", nargs="?", default="", help="'test' reads dealer commands from the console")
    parser.add_argument("--url", help="WebSocket dealer URL (replaces host and port)")
    parser.add_argument("--login", default=DEFAULT_LOGIN, help="Credential sent on login")
    parser.add_argument("--raise-step", type=int, default=DEFAULT_RAISE_STEP, help="Chips added on top of the current bet")
    parser.add_argument("--log-level", default="INFO")
    return parser


def open_transport(args: argparse.Namespace) -> Transport:
    if args.mode.lower() == "test":
        return ConsoleTransport()
    if args.url:
        return WebSocketTransport.connect(args.url)
    return SocketTransport.connect(args.host, args.port)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.url and (args.host is None or args.port is None):
        print(USAGE_BANNER)
        return 0

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    config = ClientConfig(login=args.login, raise_step=args.raise_step)

    try:
        transport = open_transport(args)
        StudClient(transport, config).play()
    except TransportError as exc:
        LOGGER.error("[session] transport failure: %s", exc)
        return 1
    except MalformedCommand as exc:
        LOGGER.error("[session] malformed command: %s", exc)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
