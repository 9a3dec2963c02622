"""Models for the chat room: users, messages, events and REST payloads."""
from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A signed-in display name."""
    model_config = ConfigDict(frozen=True)

    user: str


class ChatMessage(BaseModel):
    """A single message in the room log. ``text`` travels as ``message``."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: int = Field(ge=0)
    user: str
    text: str = Field(alias="message")


class SignInEvent(BaseModel):
    """Published when a user signs in."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["signIn"] = "signIn"
    user: str


class MessageEvent(BaseModel):
    """Published when a message is appended to the log."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["message"] = "message"
    index: int
    user: str
    text: str = Field(alias="message")

    @classmethod
    def from_message(cls, message: ChatMessage) -> "MessageEvent":
        return cls(index=message.index, user=message.user, text=message.text)


ChatEvent = Union[SignInEvent, MessageEvent]


def event_to_json(event: ChatEvent) -> dict:
    """Wire representation of an event."""
    return event.model_dump(mode="json", by_alias=True)


# ── REST payloads ────────────────────────────────────────────────


class SignInRequest(BaseModel):
    user: str


class SignInResponse(BaseModel):
    user: str


class UsersListResponse(BaseModel):
    users: List[str]


class MessageSendRequest(BaseModel):
    user: str
    message: str


class MessageSendResponse(BaseModel):
    index: int


class MessagesListResponse(BaseModel):
    messages: List[ChatMessage]
