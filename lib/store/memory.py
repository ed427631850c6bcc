"""In-process store kept in plain Python containers.

Every coroutine runs to completion without awaiting, so each operation is
atomic with respect to the other tasks on the event loop.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from lib.contracts.errors import ConflictError, StoreError
from lib.contracts.message import Message
from lib.contracts.participant import Participant

from . import ChatStore


class MemoryStore(ChatStore):
    url = "memory://"

    def __init__(self) -> None:
        self._participants: Dict[str, Participant] = {}
        self._messages: List[Message] = []
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    async def close(self) -> None:
        self._connected = False

    def _check(self) -> None:
        if not self._connected:
            raise StoreError("store is not connected")

    async def find_participant(self, name: str) -> Optional[Participant]:
        self._check()
        found = self._participants.get(name)
        return found.model_copy() if found else None

    async def insert_participant(self, participant: Participant) -> None:
        self._check()
        if participant.name in self._participants:
            raise ConflictError(participant.name)
        self._participants[participant.name] = participant.model_copy()

    async def list_participants(self) -> List[Participant]:
        self._check()
        return [p.model_copy() for p in self._participants.values()]

    async def touch_participant(self, name: str, last_status: int) -> bool:
        self._check()
        if name not in self._participants:
            return False
        self._participants[name] = Participant(name=name, last_status=last_status)
        return True

    async def find_inactive(self, threshold: int) -> List[Participant]:
        self._check()
        return [p.model_copy() for p in self._participants.values() if p.last_status <= threshold]

    async def delete_participants(self, names: Iterable[str]) -> int:
        self._check()
        removed = 0
        for name in set(names):
            if self._participants.pop(name, None) is not None:
                removed += 1
        return removed

    async def insert_messages(self, messages: Iterable[Message]) -> None:
        self._check()
        self._messages.extend(messages)

    async def list_messages(self, reader: Optional[str]) -> List[Message]:
        self._check()
        return [m for m in self._messages if m.visible_to(reader)]


__all__ = ["MemoryStore"]
