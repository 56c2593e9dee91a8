"""A hash set of 64-bit client ids using open addressing and linear probing."""

from __future__ import annotations

from typing import Iterable, Iterator

INIT_CAP = 8
LOAD_FACTOR = 0.75
_HASH_MULT = 11400714819323198485
EMPTY = 2**64 - 1


def _hash(cid: int, cap: int) -> int:
    return (cid * _HASH_MULT) & (cap - 1)


def _check_cid(cid: int) -> None:
    if not isinstance(cid, int) or cid < 0 or cid >= EMPTY:
        raise ValueError(f"illegal value for client id: {cid!r}")


class CidIter:
    """Batched iterator over the occupied slots of a set's table."""

    def __init__(self, ids: Iterable[int]) -> None:
        self._ids = list(ids)
        self._idx = 0

    def next_batch(self, batch_size: int) -> list[int]:
        """Return up to ``batch_size`` further ids; an empty list at the end."""
        if batch_size < 0:
            raise ValueError(f"batch size must not be negative: {batch_size}")
        batch: list[int] = []
        while self._idx < len(self._ids) and len(batch) < batch_size:
            cid = self._ids[self._idx]
            self._idx += 1
            if cid != EMPTY:
                batch.append(cid)
        return batch

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        batch = self.next_batch(1)
        if not batch:
            raise StopIteration
        return batch[0]


class CidSet:
    """Set of client ids; the table capacity is always a power of two."""

    def __init__(self) -> None:
        self._ids = [EMPTY] * INIT_CAP
        self._len = 0

    def __len__(self) -> int:
        return self._len

    @property
    def capacity(self) -> int:
        """Number of slots in the table."""
        return len(self._ids)

    def exists(self, cid: int) -> bool:
        """Return True if ``cid`` is in the set."""
        if not isinstance(cid, int) or cid < 0 or cid >= EMPTY:
            return False
        cap = len(self._ids)
        i = _hash(cid, cap)
        while self._ids[i] != EMPTY:
            if self._ids[i] == cid:
                return True
            i = (i + 1) & (cap - 1)
        return False

    def __contains__(self, cid: object) -> bool:
        return isinstance(cid, int) and self.exists(cid)

    def _place(self, cid: int) -> None:
        cap = len(self._ids)
        i = _hash(cid, cap)
        while self._ids[i] != EMPTY:
            if self._ids[i] == cid:
                return
            i = (i + 1) & (cap - 1)
        self._ids[i] = cid
        self._len += 1

    def insert(self, cid: int) -> None:
        """Add ``cid``; the maximum 64-bit value is reserved and rejected."""
        _check_cid(cid)
        if self._len >= len(self._ids) * LOAD_FACTOR:
            self.grow()
        self._place(cid)

    def grow(self) -> None:
        """Double the table capacity and rehash every id."""
        old = self._ids
        self._ids = [EMPTY] * (len(old) * 2)
        self._len = 0
        for cid in old:
            if cid != EMPTY:
                self._place(cid)

    def iter(self) -> CidIter:
        """Return a batched iterator over a snapshot of the set."""
        return CidIter(self._ids)

    def __iter__(self) -> Iterator[int]:
        return (cid for cid in list(self._ids) if cid != EMPTY)