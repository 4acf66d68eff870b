"""Bounded record of recently printed content ids."""

from collections import OrderedDict
from typing import Iterator, List


class SeenWindow:
    """Fixed-capacity FIFO set of content ids.

    Ids are kept in observation order, most recent first when listed. Adding
    an id beyond capacity evicts the oldest insert, regardless of the item's
    own timestamp. Membership and eviction are O(1).
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        # oldest first; popitem(last=False) evicts the oldest
        self._ids: "OrderedDict[str, None]" = OrderedDict()

    @classmethod
    def for_batch_size(cls, batch_size: int) -> "SeenWindow":
        """Window sized to two batches, so items repeated across a poll boundary stay suppressed."""
        return cls(2 * batch_size)

    def __contains__(self, content_id: object) -> bool:
        return content_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return reversed(self._ids)

    def add(self, content_id: str) -> List[str]:
        """Record *content_id* as most recent and return the ids evicted to stay within capacity.

        Re-adding a known id is a no-op; callers only add ids they have not seen.
        """
        if content_id in self._ids:
            return []
        self._ids[content_id] = None
        evicted = []
        while len(self._ids) > self.capacity:
            oldest, _ = self._ids.popitem(last=False)
            evicted.append(oldest)
        return evicted

    def as_list(self) -> List[str]:
        """Ids most-recent-first."""
        return list(self)


__all__ = ["SeenWindow"]
