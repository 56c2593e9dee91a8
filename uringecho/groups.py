"""Groups of client ids keyed by a 64-bit group id."""

from __future__ import annotations

from .cid_set import CidIter, CidSet


class Groups:
    """A fixed-size table of groups, each holding a set of client ids."""

    def __init__(self, num_groups: int) -> None:
        if num_groups < 1:
            raise ValueError(f"number of groups must be positive: {num_groups}")
        self._size = num_groups
        self._groups: dict[int, CidSet] = {}

    @property
    def size(self) -> int:
        """Number of buckets the table was created with."""
        return self._size

    def insert(self, gid: int, cid: int) -> None:
        """Add client ``cid`` to group ``gid``, creating the group if needed."""
        if gid < 0 or gid >= 2**64:
            raise ValueError(f"illegal value for group id: {gid}")
        members = self._groups.get(gid)
        if members is None:
            members = CidSet()
            self._groups[gid] = members
        members.insert(cid)

    def get(self, gid: int) -> CidIter | None:
        """Return an iterator over the members of ``gid``, or None if unknown."""
        members = self._groups.get(gid)
        if members is None:
            return None
        return members.iter()