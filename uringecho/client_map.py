"""A map from client ids to client records, recycling freed records."""

from __future__ import annotations

from dataclasses import dataclass

FREE_INIT_LEN = 64


@dataclass(eq=False)
class ClientInfo:
    """What the server knows about one connected client."""

    client_id: int = 0
    client_addr: tuple[str, int] = ("0.0.0.0", 0)
    client_addr_len: int = 0
    username: str = ""

    def format_log(self, msg: str) -> str:
        """Return a log line tagged with the client's address and id."""
        host, port = self.client_addr
        return f"[{host}:{port}] client_id={self.client_id} => {msg}"

    def reset(self) -> None:
        """Clear every field back to its zero value."""
        self.client_id = 0
        self.client_addr = ("0.0.0.0", 0)
        self.client_addr_len = 0
        self.username = ""


class ClientMap:
    """Chained hash map of ClientInfo records with a free list for reuse."""

    def __init__(self, cap: int) -> None:
        if cap <= 0 or cap & (cap - 1):
            raise ValueError(f"cap must be a power of 2: {cap}")
        self._buckets: list[list[ClientInfo]] = [[] for _ in range(cap)]
        self._free: list[ClientInfo] = []
        self._free_cap = FREE_INIT_LEN

    def _bucket(self, client_id: int) -> list[ClientInfo]:
        return self._buckets[client_id & (len(self._buckets) - 1)]

    def get_new(self, client_id: int) -> ClientInfo | None:
        """Create a record for ``client_id``; None if one already exists."""
        bucket = self._bucket(client_id)
        if any(info.client_id == client_id for info in bucket):
            return None
        if self._free:
            info = self._free[0]
            last = self._free.pop()
            if self._free:
                self._free[0] = last
        else:
            info = ClientInfo()
        info.client_id = client_id
        bucket.insert(0, info)
        return info

    def get(self, client_id: int) -> ClientInfo | None:
        """Return the record for ``client_id``, or None."""
        for info in self._bucket(client_id):
            if info.client_id == client_id:
                return info
        return None

    def _add_free(self, info: ClientInfo) -> None:
        if len(self._free) == self._free_cap:
            self._free_cap *= 2
        info.reset()
        self._free.append(info)

    def delete(self, client_id: int) -> bool:
        """Remove the record for ``client_id``; return whether it existed."""
        bucket = self._bucket(client_id)
        for pos, info in enumerate(bucket):
            if info.client_id == client_id:
                del bucket[pos]
                self._add_free(info)
                return True
        return False

    @property
    def free_len(self) -> int:
        """Number of recycled records waiting for reuse."""
        return len(self._free)

    @property
    def free_cap(self) -> int:
        """Capacity of the free list before it grows."""
        return self._free_cap