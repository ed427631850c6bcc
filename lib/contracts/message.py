"""Message models exchanged between participants."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

BROADCAST = "Todos"


class MessageType(str, Enum):
    MESSAGE = "message"
    PRIVATE_MESSAGE = "private_message"
    STATUS = "status"


class Message(BaseModel):
    """A message as stored and returned to readers.

    Messages are immutable once created.  ``sender`` and ``to`` reference
    participants by name only; the participant may have left the room since.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, frozen=True)

    sender: str = Field(alias="from")
    to: str
    text: str
    type: MessageType
    time: str

    def visible_to(self, reader: str | None) -> bool:
        """Return ``True`` if ``reader`` may see this message."""

        if self.to == BROADCAST:
            return True
        if reader is None:
            return False
        return self.to == reader or self.sender == reader


def status_message(name: str, text: str, time: str) -> Message:
    """Build a broadcast ``status`` message announcing ``name``'s movement."""

    return Message(sender=name, to=BROADCAST, text=text, type=MessageType.STATUS, time=time)
