"""Load-generating client for the echo server: sends numbered messages and reads the echoes."""

from __future__ import annotations

import re
import socket
import sys
from dataclasses import dataclass

from .utils import INT_SIZE, pack_int, read_int_from_buffer

NUM_MSG = 1000
MAX_NUM_MSG = 10_000_000
SEND_BATCH = 100
ROUNDS = 5
NUM_MESSAGES_OPTION = "--num_messages="

_INT_RE = re.compile(r"\s*[+-]?\d+")


@dataclass(frozen=True)
class ClientConfig:
    """Where to connect and how many messages to send per round."""

    host: str
    port: int
    num_messages: int = NUM_MSG


def parse_int(text: str) -> int:
    """Parse a base-10 integer that must make up the whole of ``text``.

    Leading whitespace and a sign are allowed; anything after the digits is not.
    """
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _usage() -> str:
    return "Usage: client <SERVER_IP> <SERVER_PORT> [--num_messages=N | --num_messages N]"


def parse_args(argv: list[str]) -> ClientConfig:
    """Build a ClientConfig from command-line arguments (program name excluded)."""
    if len(argv) < 2:
        raise ValueError(_usage())

    host = argv[0]
    try:
        socket.inet_pton(socket.AF_INET, host)
    except OSError as exc:
        raise ValueError(f"Invalid server ip: {host}") from exc

    try:
        port = parse_int(argv[1])
    except ValueError as exc:
        raise ValueError(f"Invalid server port: {argv[1]}") from exc
    if not 0 <= port <= 65535:
        raise ValueError(f"Invalid server port: {argv[1]}")

    num_messages = NUM_MSG
    raw = None
    if len(argv) == 3 and argv[2].startswith(NUM_MESSAGES_OPTION):
        raw = argv[2][len(NUM_MESSAGES_OPTION):]
    elif len(argv) == 4 and argv[2].startswith(NUM_MESSAGES_OPTION[:-1]):
        raw = argv[3]
    if raw is not None:
        try:
            num_messages = parse_int(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid num messages: {raw}") from exc

    if not 0 <= num_messages <= MAX_NUM_MSG:
        raise ValueError(f"Invalid num messages: {num_messages}")

    return ClientConfig(host=host, port=port, num_messages=num_messages)


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise ConnectionError("server closed the connection")
        data += chunk
    return bytes(data)


def run_client(host: str, port: int, num_messages: int = NUM_MSG) -> list[int]:
    """Send ``num_messages`` numbered messages over one connection and collect the echoes.

    Messages go out in batches; each batch's echo is read back before the next
    is sent. Returns the integers received, in order.
    """
    if not 0 <= num_messages <= MAX_NUM_MSG:
        raise ValueError(f"Invalid num messages: {num_messages}")

    received: list[int] = []
    with socket.create_connection((host, port)) as sock:
        print(f"Connected to server with fd: {sock.fileno()}")
        for start in range(0, num_messages, SEND_BATCH):
            batch = range(start, min(start + SEND_BATCH, num_messages))
            sock.sendall(b"".join(pack_int(i) for i in batch))
            payload = _recv_exact(sock, len(batch) * INT_SIZE)
            for offset in range(0, len(payload), INT_SIZE):
                value = read_int_from_buffer(payload, offset)
                print(f"recv: {value}")
                received.append(value)
    print(f"received {len(received)} messages from server")
    return received


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point: run several rounds, each on a fresh connection."""
    args = sys.argv[1:] if argv is None else argv
    try:
        config = parse_args(args)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"num messages to send: {config.num_messages}")
    try:
        for _ in range(ROUNDS):
            run_client(config.host, config.port, config.num_messages)
    except OSError as exc:
        print(f"connect: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())