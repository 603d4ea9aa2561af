"""Intrusive recency list for the LRU engine.

Ordering rules:
  • Front is the most recently used entry; back is the least recently used.
  • Every entry is its own list node (`Link`), so the key index can hold the
    node directly and move-to-front / erase at a known node are O(1).
  • A node's identity never changes while it is linked; unlinking clears its
    neighbour pointers so a stale node cannot corrupt the list.
  • A private sentinel closes the ring; the list is empty iff the sentinel
    points at itself.
"""
from __future__ import annotations

from typing import Iterator, Optional

__all__ = ["Link", "RecencyList"]


class Link:
    """Neighbour pointers shared by every node kind (entries and the sentinel)."""

    __slots__ = ("_prev", "_next")

    def __init__(self) -> None:
        self._prev: Optional[Link] = None
        self._next: Optional[Link] = None

    def linked(self) -> bool:
        return self._next is not None


class RecencyList:
    """Doubly-linked, sentinel-closed list of `Link` nodes (front → back)."""

    __slots__ = ("_head", "_len")

    def __init__(self) -> None:
        head = Link()
        head._prev = head
        head._next = head
        self._head = head
        self._len = 0

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iterator[Link]:
        # Front → back; capture the successor first so callers may unlink the
        # node they were handed.
        head = self._head
        node = head._next
        while node is not head:
            nxt = node._next
            yield node
            node = nxt

    def front(self) -> Optional[Link]:
        node = self._head._next
        return None if node is self._head else node

    def back(self) -> Optional[Link]:
        node = self._head._prev
        return None if node is self._head else node

    # -- Mutations ---------------------------------------------------------

    def push_front(self, node: Link) -> None:
        """Link a detached node at the front."""
        if node.linked():
            raise ValueError("node is already linked")
        self._link_after(self._head, node)
        self._len += 1

    def move_to_front(self, node: Link) -> None:
        """Relink an already-linked node at the front (no-op when it is the front)."""
        head = self._head
        if head._next is node:
            return
        self._detach(node)
        self._link_after(head, node)

    def remove(self, node: Link) -> None:
        """Unlink a node; its neighbour pointers are cleared."""
        self._detach(node)
        node._prev = None
        node._next = None
        self._len -= 1

    def pop_back(self) -> Optional[Link]:
        """Unlink and return the back node, or None when empty."""
        node = self.back()
        if node is None:
            return None
        self.remove(node)
        return node

    def clear(self) -> None:
        """Unlink every node; leaves the list empty."""
        for node in self:
            node._prev = None
            node._next = None
        head = self._head
        head._prev = head
        head._next = head
        self._len = 0

    # -- Internal helpers --------------------------------------------------

    @staticmethod
    def _link_after(anchor: Link, node: Link) -> None:
        nxt = anchor._next
        node._prev = anchor
        node._next = nxt
        nxt._prev = node  # type: ignore[union-attr]
        anchor._next = node

    @staticmethod
    def _detach(node: Link) -> None:
        prev, nxt = node._prev, node._next
        if prev is None or nxt is None:
            raise ValueError("node is not linked")
        prev._next = nxt
        nxt._prev = prev
