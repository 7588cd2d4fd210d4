"""A plain, non-circular doubly linked list node."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional


@dataclass(eq=False, repr=False)
class DListNode:
    """A node of a doubly linked list with open ends."""

    data: Any = None
    prev: Optional["DListNode"] = None
    next: Optional["DListNode"] = None

    def append(self, newel: "DListNode") -> None:
        """Link ``newel`` directly after this node."""
        self.next = newel
        newel.prev = self

    def remove(self) -> "DListNode":
        """Unlink this node from its neighbours and return it."""
        if self.prev is not None:
            self.prev.next = self.next
        if self.next is not None:
            self.next.prev = self.prev
        return self

    def __iter__(self) -> Iterator["DListNode"]:
        node: Optional[DListNode] = self
        while node is not None:
            yield node
            node = node.next

    def __repr__(self) -> str:
        return f"DListNode(data={self.data!r})"