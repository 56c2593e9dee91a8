"""Small helpers: network-order integers and number utilities."""

from __future__ import annotations

import struct

_NET_INT = struct.Struct("!i")
INT_SIZE = _NET_INT.size


def read_int_from_buffer(buf: bytes | bytearray | memoryview, offset: int = 0) -> int:
    """Read a signed 32-bit big-endian integer from ``buf`` at ``offset``."""
    try:
        (value,) = _NET_INT.unpack_from(buf, offset)
    except struct.error as exc:
        raise ValueError(f"cannot read an int at offset {offset}: {exc}") from exc
    return value


def pack_int(value: int) -> bytes:
    """Encode ``value`` as a signed 32-bit big-endian integer."""
    try:
        return _NET_INT.pack(value)
    except struct.error as exc:
        raise ValueError(f"value out of range for a 32-bit int: {value}") from exc


def is_prime(n: int) -> bool:
    """Return True if ``n`` is a prime number."""
    if n <= 1:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True


def closest_prime(n: int) -> int:
    """Return the smallest prime greater than or equal to ``n``."""
    while not is_prime(n):
        n += 1
    return n


def round_up_pow_2(x: int) -> int:
    """Return the smallest power of two that is at least ``x`` (1 for ``x < 1``)."""
    if x < 1:
        return 1
    return 1 << (x - 1).bit_length()