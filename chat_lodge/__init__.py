"""chat-lodge — realtime chat room backend."""

from chat_lodge.chat_errors import (
    ChatError, DuplicateNameError, EmptyMessageError, EmptyNameError, UnknownUserError,
)
from chat_lodge.chat_models import ChatMessage, MessageEvent, SignInEvent, User
from chat_lodge.chat_config import ChatServerConfig
from chat_lodge.directory import Directory
from chat_lodge.message_log import MessageLog
from chat_lodge.hub import ChatHub, Subscriber, log_events

__all__ = [
    "ChatError",
    "DuplicateNameError",
    "EmptyMessageError",
    "EmptyNameError",
    "UnknownUserError",
    "ChatMessage",
    "MessageEvent",
    "SignInEvent",
    "User",
    "ChatServerConfig",
    "Directory",
    "MessageLog",
    "ChatHub",
    "Subscriber",
    "log_events",
    "create_app",
]


def __getattr__(name: str):
    if name == "create_app":
        from chat_lodge.standalone import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
