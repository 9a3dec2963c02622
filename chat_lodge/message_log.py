"""Append-only, strictly ordered message log."""
import logging
import threading

from .chat_errors import EmptyMessageError, UnknownUserError
from .chat_models import ChatMessage
from .directory import Directory

logger = logging.getLogger(__name__)


class MessageLog:
    """Ordered record of every message sent to the room.

    The log assigns indices itself: a message's index is always its
    zero-based position in the log.
    """

    def __init__(self, directory: Directory):
        self._directory = directory
        self._lock = threading.Lock()
        self._messages: list[ChatMessage] = []

    def append(self, user: str, text: str) -> ChatMessage:
        """Store a new message and return it with its assigned index.

        :raises UnknownUserError: if ``user`` is not signed in
        :raises EmptyMessageError: if ``text`` is empty
        """
        if user not in self._directory:
            raise UnknownUserError(user)
        if not text:
            raise EmptyMessageError()
        with self._lock:
            message = ChatMessage(index=len(self._messages), user=user, text=text)
            self._messages.append(message)
        logger.debug(f"[LOG] Appended message {message.index} from '{user}'")
        return message

    def list(self) -> list[ChatMessage]:
        """Snapshot of all messages, ascending by index."""
        with self._lock:
            return list(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
