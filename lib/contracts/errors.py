"""Error taxonomy shared by the chat room service, the reaper and the stores."""

from typing import List, Sequence


class ChatRoomError(Exception):
    """Base class for every error raised by the chat room."""


class ValidationError(ChatRoomError):
    """Client supplied data failed validation.

    ``messages`` holds every violation found, not just the first one, so that
    a client can display all of them at once.
    """

    def __init__(self, messages: Sequence[str]):
        self.messages: List[str] = list(messages)
        super().__init__("; ".join(self.messages))


class UnknownSenderError(ValidationError):
    """The ``user`` asserted on a post is not a participant of the room."""

    def __init__(self, name: str | None):
        self.name = name
        super().__init__(["Remetente não encontrado"])


class ConflictError(ChatRoomError):
    """A participant with the requested name is already in the room."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("Nome de usuário indisponível")


class NotFoundError(ChatRoomError):
    """The referenced participant is not in the room."""

    def __init__(self, name: str | None):
        self.name = name
        super().__init__("Participante não encontrado")


class StoreError(ChatRoomError):
    """The backing store is unavailable or an operation on it failed."""


__all__ = [
    "ChatRoomError",
    "ConflictError",
    "NotFoundError",
    "StoreError",
    "UnknownSenderError",
    "ValidationError",
]
