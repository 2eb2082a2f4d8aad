"""Chat message model for the chat-completion API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """One entry of a chat-completion ``messages`` array."""

    role: Role
    content: str
