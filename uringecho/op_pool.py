"""A fixed-size pool of reusable client operations addressed by packed ids."""

from __future__ import annotations

import logging

from .op import Op

POOL_IDX_BITS = 10
CLIENT_ID_BITS = 64 - POOL_IDX_BITS - 1
SHFT_POOL_IDX = 1
SHFT_CLIENT_ID = POOL_IDX_BITS + 1
POOL_IDX_MASK = (1 << POOL_IDX_BITS) - 1
MAX_CLIENT_ID = (1 << CLIENT_ID_BITS) - 1
MAX_CLIENTS = 1024

_U64_MASK = (1 << 64) - 1

log = logging.getLogger(__name__)


def make_pool_id(client_id: int, pool_idx: int) -> int:
    """Pack a client id and pool index into an id marked as in use."""
    return (
        ((client_id << SHFT_CLIENT_ID) & _U64_MASK)
        | ((pool_idx & POOL_IDX_MASK) << SHFT_POOL_IDX)
        | 1
    )


def extract_in_use(pool_id: int) -> bool:
    """Return the in-use flag of a pool id."""
    return bool(pool_id & 1)


def clear_in_use(pool_id: int) -> int:
    """Return ``pool_id`` with the in-use flag cleared."""
    return pool_id & ~1 & _U64_MASK


def extract_pool_idx(pool_id: int) -> int:
    """Return the pool index packed into a pool id."""
    return (pool_id >> SHFT_POOL_IDX) & POOL_IDX_MASK


def extract_client_id(pool_id: int) -> int:
    """Return the client id packed into a pool id."""
    return (pool_id & _U64_MASK) >> SHFT_CLIENT_ID


class OpPool:
    """Allocates operations lazily up to ``max_clients`` and recycles them."""

    def __init__(self, max_clients: int = MAX_CLIENTS) -> None:
        if not 1 <= max_clients <= MAX_CLIENTS:
            raise ValueError(
                f"max_clients must be between 1 and {MAX_CLIENTS}: {max_clients}"
            )
        self._max_clients = max_clients
        self._ops: list[Op] = []
        self._free: list[int] = []
        self._next_client_id = 0

    def _take_client_id(self) -> int:
        client_id = self._next_client_id
        self._next_client_id = (client_id + 1) & MAX_CLIENT_ID
        return client_id

    def get(self, pool_id: int) -> Op | None:
        """Return the operation in the slot named by ``pool_id``, or None."""
        idx = extract_pool_idx(pool_id)
        if idx < len(self._ops):
            return self._ops[idx]
        return None

    def pick_free(self) -> Op | None:
        """Return an operation marked in use for a new client, or None if full."""
        if self._free:
            idx = self._free[0]
            last = self._free.pop()
            if self._free:
                self._free[0] = last
            op = self._ops[idx]
            op.pool_id = make_pool_id(self._take_client_id(), idx)
            return op

        if len(self._ops) == self._max_clients:
            return None

        idx = len(self._ops)
        op = Op.create_accept(make_pool_id(self._take_client_id(), idx))
        self._ops.append(op)
        return op

    def put(self, op: Op, pool_id: int) -> bool:
        """Return ``op`` to the pool if it still belongs to ``pool_id``.

        The connection is closed and the slot becomes free. Returns False,
        leaving everything untouched, when the id is stale.
        """
        if op.pool_id != pool_id:
            log.info("skip close id=%d", op.pool_id)
            return False
        idx = extract_pool_idx(op.pool_id)
        log.info(
            "closing socket=%d id=%d client_id=%d pool_idx=%d",
            op.client_fd,
            pool_id,
            extract_client_id(op.pool_id),
            idx,
        )
        op.pool_id = clear_in_use(op.pool_id)
        op.close()
        self._free.append(idx)
        return True