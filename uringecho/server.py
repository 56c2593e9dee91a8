"""An echo server that serves a bounded number of clients from an operation pool."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys

from .op import BUF_SIZE, Op, OpType, op_type_str
from .op_pool import OpPool, extract_client_id, extract_pool_idx
from .utils import INT_SIZE, read_int_from_buffer

PORT = 8080
BACKLOG = 10

log = logging.getLogger(__name__)


def handle_request(op: Op, data: bytes | bytearray | memoryview) -> list[int]:
    """Decode the network-order integers in ``data`` and log each one.

    Trailing bytes that do not form a whole integer are ignored.
    """
    client_id = extract_client_id(op.pool_id)
    pool_idx = extract_pool_idx(op.pool_id)
    whole = len(data) - len(data) % INT_SIZE
    messages = [read_int_from_buffer(data, offset) for offset in range(0, whole, INT_SIZE)]
    for msg_id in messages:
        log.info(
            "[client id=%d idx=%d fd=%d] received msg=%d",
            client_id,
            pool_idx,
            op.client_fd,
            msg_id,
        )
    return messages


class EchoServer:
    """Accepts TCP clients and echoes every chunk they send back to them."""

    def __init__(self, port: int = PORT, pool: OpPool | None = None) -> None:
        self.port = port
        self._pool = pool if pool is not None else OpPool()
        self._server: asyncio.base_events.Server | None = None
        self._writers: set[asyncio.StreamWriter] = set()

    async def start(self) -> None:
        """Bind the listening socket and begin accepting clients."""
        if self._server is not None:
            raise RuntimeError("server is already started")
        self._server = await asyncio.start_server(
            self.handle_connection,
            host="0.0.0.0",
            port=self.port,
            backlog=BACKLOG,
            reuse_address=True,
        )
        sockets = self._server.sockets
        if sockets:
            self.port = sockets[0].getsockname()[1]

    async def serve_forever(self) -> None:
        """Serve clients until cancelled."""
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """Serve one client: read, decode, and echo until it disconnects."""
        op = self._pool.pick_free()
        if op is None:
            log.warning("serving max number of clients")
            writer.close()
            with contextlib.suppress(ConnectionError, OSError):
                await writer.wait_closed()
            return

        pool_id = op.pool_id
        self._writers.add(writer)
        op.connection = writer
        sock = writer.get_extra_info("socket")
        op.client_fd = sock.fileno() if sock is not None else -1
        peer = writer.get_extra_info("peername")
        if peer:
            op.client_addr = (str(peer[0]), int(peer[1]))
        op.type = OpType.READ
        log.info(op.format_log("connected"))

        try:
            while True:
                op.type = OpType.READ
                op.buf_len = BUF_SIZE
                op.processed = 0
                data = await reader.read(BUF_SIZE)
                if not data:
                    log.info(op.format_log("disconnected"))
                    break
                op.buf[: len(data)] = data
                op.buf_len = len(data)
                handle_request(op, data)

                op.type = OpType.WRITE
                writer.write(data)
                await writer.drain()
                op.processed = len(data)
        except (ConnectionError, OSError) as exc:
            log.error(
                "[fd=%d id=%d] op %s failed: %s",
                op.client_fd,
                op.pool_id,
                op_type_str(op.type),
                exc,
            )
        finally:
            self._writers.discard(writer)
            self._pool.put(op, pool_id)
            if not writer.is_closing():
                writer.close()
            with contextlib.suppress(ConnectionError, OSError):
                await writer.wait_closed()

    async def close(self) -> None:
        """Stop accepting clients and close every open connection."""
        server, self._server = self._server, None
        if server is not None:
            server.close()
        for writer in list(self._writers):
            writer.close()
        if server is not None:
            with contextlib.suppress(ConnectionError, OSError):
                await server.wait_closed()


async def _serve(port: int) -> None:
    server = EchoServer(port)
    await server.start()
    print("Server is running", flush=True)
    try:
        await server.serve_forever()
    finally:
        await server.close()


def run_server(port: int = PORT) -> None:
    """Run the echo server on ``port`` until interrupted."""
    asyncio.run(_serve(port))


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point for the echo server."""
    parser = argparse.ArgumentParser(description="Echo server.")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)
    if not 0 <= args.port <= 65535:
        parser.error(f"invalid port: {args.port}")
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        run_server(args.port)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"failed to start server: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())