"""A pool of reusable fixed-size byte buffers."""

from __future__ import annotations

SLAB_INIT_CAP = 64


class Slab:
    """Hands out buffers of ``buf_len`` bytes and takes them back for reuse."""

    def __init__(self, buf_len: int, cap: int = SLAB_INIT_CAP) -> None:
        if buf_len < 0 or cap < 0:
            raise ValueError("buffer length and capacity must not be negative")
        self._buf_len = buf_len
        self._cap = cap
        self._buffers = [bytearray(buf_len) for _ in range(cap)]

    def __len__(self) -> int:
        return len(self._buffers)

    @property
    def cap(self) -> int:
        """Number of buffers the pool can hold before it grows."""
        return self._cap

    @property
    def buf_len(self) -> int:
        """Size of each buffer handed out."""
        return self._buf_len

    def get(self) -> bytearray:
        """Take a buffer from the pool, or allocate one if the pool is empty."""
        if not self._buffers:
            return bytearray(self._buf_len)
        first = self._buffers[0]
        last = self._buffers.pop()
        if self._buffers:
            self._buffers[0] = last
        return first

    def put(self, buf: bytearray) -> None:
        """Return a buffer to the pool, doubling capacity when it is full."""
        if len(self._buffers) == self._cap:
            self._cap = max(1, self._cap * 2)
        self._buffers.append(buf)