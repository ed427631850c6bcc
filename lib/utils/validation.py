"""Validation helpers for incoming chat payloads.

Payloads are checked against strict pydantic models.  Every violation is
collected and raised together in a single :class:`ValidationError` so that
clients can show all problems at once.
"""

from __future__ import annotations

import math
import re
from typing import Any, Literal, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from lib.contracts.errors import ValidationError

_M = TypeVar("_M", bound=BaseModel)


class _StrictPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ParticipantPayload(_StrictPayload):
    name: StrictStr = Field(min_length=1)


class MessagePayload(_StrictPayload):
    to: StrictStr = Field(min_length=1)
    text: StrictStr = Field(min_length=1)
    type: Literal["message", "private_message"]


def ensure(condition: bool, message: str) -> None:
    if not condition:
        raise ValidationError([message])


def _describe(error: Any) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    if error.get("type") == "extra_forbidden":
        return f'"{loc}" is not allowed'
    return f'"{loc}" {error.get("msg", "is invalid")}'


def _validate(model: Type[_M], payload: Any) -> _M:
    ensure(isinstance(payload, dict), "body must be a JSON object")
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError([_describe(err) for err in exc.errors()]) from None


def validate_participant_name(payload: Any) -> ParticipantPayload:
    """Validate a registration body; ``name`` must be a non-empty string."""

    return _validate(ParticipantPayload, payload)


def validate_message(payload: Any) -> MessagePayload:
    """Validate a message body with ``to``, ``text`` and ``type``."""

    return _validate(MessagePayload, payload)


_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_LIMIT_ERROR = "O parâmetro 'limit' deve ser um número inteiro maior ou igual a 1."


def parse_limit(raw: Optional[str]) -> Optional[int]:
    """Parse the ``limit`` query parameter.

    ``None`` means no limit.  Any plain decimal numeral with an integral value
    of at least one is accepted, so ``"3"``, ``" 3 "`` and ``"3.0"`` all yield
    ``3``.  Python-only spellings such as ``"1_000"`` or ``"inf"`` are not.
    """

    if raw is None:
        return None
    ensure(_DECIMAL_RE.fullmatch(raw.strip()) is not None, _LIMIT_ERROR)
    value = float(raw)
    ensure(math.isfinite(value) and value.is_integer() and value >= 1, _LIMIT_ERROR)
    return int(value)


__all__ = [
    "MessagePayload",
    "ParticipantPayload",
    "ensure",
    "parse_limit",
    "validate_message",
    "validate_participant_name",
]
