"""Chat room service.

:class:`ChatRoom` implements the five room operations on top of a
:class:`~lib.store.ChatStore`.  It knows nothing about HTTP: failures are
raised as the errors from :mod:`lib.contracts.errors` and mapped to status
codes by :mod:`apps.chat_room.main`.

The caller's identity is whatever name the client asserts; there is no
authentication.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from lib.contracts.errors import ConflictError, NotFoundError, UnknownSenderError
from lib.contracts.message import Message, status_message
from lib.contracts.participant import Participant
from lib.store import ChatStore
from lib.utils.clock import Clock, SystemClock
from lib.utils.validation import parse_limit, validate_message, validate_participant_name

JOIN_TEXT = "entra na sala..."
LEAVE_TEXT = "sai da sala..."


@dataclass
class ChatRoom:
    """Request handlers for a single chat room."""

    store: ChatStore
    clock: Clock = field(default_factory=SystemClock)

    async def register(self, payload: Any) -> Participant:
        """Add a participant and announce it to the room.

        The name check and the insert are separate store calls; if two
        registrations race, the store's uniqueness guard rejects the loser
        with :class:`ConflictError`.
        """

        body = validate_participant_name(payload)
        if await self.store.find_participant(body.name) is not None:
            raise ConflictError(body.name)

        participant = Participant(name=body.name, last_status=self.clock.timestamp_ms())
        await self.store.insert_participant(participant)
        await self.store.insert_message(status_message(body.name, JOIN_TEXT, self.clock.clock_time()))
        return participant

    async def participants(self) -> List[Participant]:
        return await self.store.list_participants()

    async def post(self, sender: Optional[str], payload: Any) -> Message:
        body = validate_message(payload)
        if sender is None or await self.store.find_participant(sender) is None:
            raise UnknownSenderError(sender)

        message = Message(
            sender=sender,
            to=body.to,
            text=body.text,
            type=body.type,
            time=self.clock.clock_time(),
        )
        await self.store.insert_message(message)
        return message

    async def messages(self, reader: Optional[str], limit: Optional[str] = None) -> List[Message]:
        """Messages visible to ``reader``, optionally only the last ``limit``."""

        count = parse_limit(limit)
        visible = await self.store.list_messages(reader)
        if count is None:
            return visible
        return visible[-count:]

    async def heartbeat(self, name: Optional[str]) -> None:
        if name is None or not await self.store.touch_participant(name, self.clock.timestamp_ms()):
            raise NotFoundError(name)


__all__ = ["ChatRoom", "JOIN_TEXT", "LEAVE_TEXT"]
