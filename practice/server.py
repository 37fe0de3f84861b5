from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List, Optional

import websockets

from stud.models import DEFAULT_RAISE_STEP, DealerConfig
from stud.protocol import FRAME_HEADER, decode_payload, encode_frame

from .dealer import StudDealer

LOGGER = logging.getLogger("practice_dealer")


class WebSocketChannel:
    def __init__(self, websocket) -> None:
        self.websocket = websocket

    async def send(self, line: str) -> None:
        await self.websocket.send(line)

    async def recv(self) -> str:
        message = await self.websocket.recv()
        if isinstance(message, bytes):
            return message.decode("utf-8")
        return message


class StreamChannel:
    """Length-prefixed frames over an asyncio TCP stream."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.reader = reader
        self.writer = writer

    async def send(self, line: str) -> None:
        self.writer.write(encode_frame(line))
        await self.writer.drain()

    async def recv(self) -> str:
        header = await self.reader.readexactly(FRAME_HEADER.size)
        (length,) = FRAME_HEADER.unpack(header)
        payload = await self.reader.readexactly(length)
        return decode_payload(payload)


# Each connection gets its own PracticeSession and dealer.


class PracticeSession:
    """Plays one match against a single remote client."""

    def __init__(self, channel, config: DealerConfig, seed: Optional[int] = None) -> None:
        self.channel = channel
        self.dealer = StudDealer(config, seed=seed)
        self.team: Optional[str] = None

    async def run(self) -> None:
        await self.channel.send("login")
        self.team = await self.channel.recv()
        LOGGER.info("[login] %s", self.team)

        while self.dealer.can_start_hand():
            hand = self.dealer.start_hand()
            while not hand.finished:
                await self.channel.send(self.dealer.bet_prompt())
                reply = await self.channel.recv()
                self.dealer.apply_reply(reply)
            await self.channel.send(self.dealer.finish_hand())

        await self.channel.send("done")
        LOGGER.info(
            "[match] %s done after %s hands | stacks client=%s house=%s",
            self.team,
            self.dealer.hands_played,
            self.dealer.client_stack,
            self.dealer.house_stack,
        )


async def run_websocket_server(host: str, port: int, config: DealerConfig, seed: Optional[int] = None) -> None:
    async def _handler(ws):
        try:
            await PracticeSession(WebSocketChannel(ws), config, seed=seed).run()
        except websockets.exceptions.ConnectionClosed as exc:
            LOGGER.warning("Client disconnected mid-match: %s", exc)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Practice session crashed: %s", exc)

    async with websockets.serve(_handler, host, port):
        LOGGER.info("Practice dealer listening on ws://%s:%s", host, port)
        await asyncio.Future()


async def run_tcp_server(host: str, port: int, config: DealerConfig, seed: Optional[int] = None) -> None:
    async def _handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            await PracticeSession(StreamChannel(reader, writer), config, seed=seed).run()
        except (asyncio.IncompleteReadError, ConnectionError) as exc:
            LOGGER.warning("Client disconnected mid-match: %s", exc)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Practice session crashed: %s", exc)
        finally:
            writer.close()
            await writer.wait_closed()

    server = await asyncio.start_server(_handler, host, port)
    async with server:
        LOGGER.info("Practice dealer listening on tcp://%s:%s", host, port)
        await server.serve_forever()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Practice dealer for the stud poker client")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=12345)
    parser.add_argument("--transport", choices=["tcp", "ws"], default="tcp")
    parser.add_argument("--hands", type=int, default=10)
    parser.add_argument("--starting-stack", type=int, default=200)
    parser.add_argument("--ante", type=int, default=5)
    parser.add_argument("--opening-bet", type=int, default=10)
    parser.add_argument("--seed", type=int, help="Seed the shuffles for repeatable matches")
    parser.add_argument("--raise-step", type=int, default=DEFAULT_RAISE_STEP, help="Chips the house adds on top of the current bet")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    config = DealerConfig(
        starting_stack=args.starting_stack,
        ante=args.ante,
        opening_bet=args.opening_bet,
        hands=args.hands,
        raise_step=args.raise_step,
    )
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    if args.transport == "ws":
        asyncio.run(run_websocket_server(args.host, args.port, config, seed=args.seed))
    else:
        asyncio.run(run_tcp_server(args.host, args.port, config, seed=args.seed))


if __name__ == "__main__":
    main()
