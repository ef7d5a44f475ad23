"""In-process conversation buffer.

A single ordered list of exchanges shared by every request. It lives for the
lifetime of the process and is rebuilt into a flat text prompt on each chat
call. There is no per-client isolation and no locking.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel


Role = Literal["user", "assistant"]

DEFAULT_MAX_ENTRIES = 20


class Exchange(BaseModel):
    role: Role
    content: str


class ConversationBuffer:
    """Bounded list of exchanges, oldest first."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._items: List[Exchange] = []

    def __len__(self) -> int:
        return len(self._items)

    def append(self, exchange: Exchange) -> None:
        self._items.append(exchange)

    def add(self, role: Role, content: str) -> Exchange:
        exchange = Exchange(role=role, content=content)
        self.append(exchange)
        return exchange

    def flatten(self) -> str:
        """Join entries as ``role: content`` lines in insertion order."""
        return "\n".join(f"{item.role}: {item.content}" for item in self._items)

    def truncate(self) -> None:
        if len(self._items) > self.max_entries:
            self._items = self._items[-self.max_entries :]

    def clear(self) -> None:
        self._items = []

    def history(self) -> List[Exchange]:
        return list(self._items)
