"""Participant model."""

from pydantic import BaseModel, ConfigDict, Field


class Participant(BaseModel):
    """A named entity currently present in the chat room.

    ``last_status`` is the epoch timestamp in milliseconds of the last
    registration or heartbeat; it travels as ``lastStatus`` on the wire.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    last_status: int = Field(alias="lastStatus")
