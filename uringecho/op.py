"""Per-client operation records used by the echo server."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Protocol

BUF_SIZE = 1024


class OpType(enum.IntEnum):
    """Kind of operation currently pending for a client."""

    ACCEPT = 0
    READ = 1
    WRITE = 2


def op_type_str(op_type: object) -> str:
    """Return the display name of an operation type, or ``UNKNOWN``."""
    try:
        return OpType(op_type).name
    except ValueError:
        return "UNKNOWN"


class _Closable(Protocol):
    def close(self) -> Any: ...


@dataclass(eq=False)
class Op:
    """State of one client slot: its buffer, address, connection and current operation."""

    pool_id: int
    buf: bytearray = field(default_factory=lambda: bytearray(BUF_SIZE))
    buf_len: int = BUF_SIZE
    processed: int = 0
    client_addr: tuple[str, int] = ("0.0.0.0", 0)
    client_addr_len: int = 0
    client_fd: int = -1
    type: OpType = OpType.ACCEPT
    username: str = ""
    connection: _Closable | None = None

    @classmethod
    def create_accept(cls, pool_id: int) -> Op:
        """Create a fresh operation ready to accept a new client."""
        return cls(pool_id=pool_id)

    def is_incomplete(self, processed: int) -> bool:
        """Return True if ``processed`` bytes fall short of what was still requested."""
        requested = self.buf_len - self.processed
        return processed < requested

    def format_log(self, msg: str) -> str:
        """Return a log line tagged with the client's address and pool identity."""
        from .op_pool import extract_client_id, extract_pool_idx

        host, port = self.client_addr
        return (
            f"[{host}:{port}] fd={self.client_fd} id={self.pool_id} "
            f"client_id={extract_client_id(self.pool_id)} "
            f"pool_idx={extract_pool_idx(self.pool_id)} => {msg}"
        )

    def close(self) -> None:
        """Close the client connection, if any, and forget it."""
        connection, self.connection = self.connection, None
        self.client_fd = -1
        if connection is not None:
            connection.close()