"""Persistence for participants and messages.

:class:`ChatStore` is the interface shared by the request handlers and the
reaper.  Individual operations are atomic; sequences of operations are not.
Name uniqueness is enforced by :meth:`ChatStore.insert_participant`, which
raises :class:`~lib.contracts.errors.ConflictError` for a taken name.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from lib.contracts.message import Message
from lib.contracts.participant import Participant


class ChatStore:
    """Abstract async store with an explicit connect/close lifecycle."""

    url: str = ""

    @property
    def connected(self) -> bool:
        raise NotImplementedError

    async def connect(self) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        raise NotImplementedError

    # Participants ---------------------------------------------------------

    async def find_participant(self, name: str) -> Optional[Participant]:
        raise NotImplementedError

    async def insert_participant(self, participant: Participant) -> None:
        raise NotImplementedError

    async def list_participants(self) -> List[Participant]:
        raise NotImplementedError

    async def touch_participant(self, name: str, last_status: int) -> bool:
        """Set ``last_status`` for ``name``; return whether it matched anyone."""

        raise NotImplementedError

    async def find_inactive(self, threshold: int) -> List[Participant]:
        """Return participants whose ``last_status`` is ``<= threshold``."""

        raise NotImplementedError

    async def delete_participants(self, names: Iterable[str]) -> int:
        raise NotImplementedError

    # Messages -------------------------------------------------------------

    async def insert_message(self, message: Message) -> None:
        await self.insert_messages([message])

    async def insert_messages(self, messages: Iterable[Message]) -> None:
        raise NotImplementedError

    async def list_messages(self, reader: Optional[str]) -> List[Message]:
        """Messages ``reader`` may see, in insertion order."""

        raise NotImplementedError


def open_store(url: str) -> ChatStore:
    """Build an unconnected store for ``url``.

    ``memory://`` selects :class:`MemoryStore`; ``sqlite:///chat.db``,
    ``sqlite:////var/lib/chat.db`` and ``sqlite://:memory:`` select
    :class:`SqliteStore`.
    """

    if url.startswith("memory://"):
        from .memory import MemoryStore

        return MemoryStore()
    if url.startswith("sqlite://"):
        from .sqlite import SqliteStore

        path = url[len("sqlite://"):]
        # sqlite:///chat.db is relative, sqlite:////var/chat.db is absolute
        if path.startswith("/"):
            path = path[1:]
        return SqliteStore(path or ":memory:")
    raise ValueError(f"unsupported store url: {url!r}")


__all__ = ["ChatStore", "open_store"]
