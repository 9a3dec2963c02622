"""Chat hub — serializes room mutations and fans events out to subscribers.

ChatHub — owns the Directory and MessageLog, the only mutation entry point
Subscriber — bounded, forward-only event queue for one live connection
log_events() — background consumer that logs every published event
"""

import asyncio
import itertools
import logging
import threading
from collections import deque
from typing import Optional

from .chat_models import ChatEvent, ChatMessage, MessageEvent, SignInEvent, User
from .directory import Directory
from .message_log import MessageLog

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1000


# ── Subscriber ──────────────────────────────────────────────────────


class Subscriber:
    """Event sink for one connection.

    ``offer()`` never blocks: it is called by the hub while the hub holds its
    serialization lock, from the event loop or from any other thread. Events
    are buffered in offer order under the subscriber's own lock; the
    consumer's event loop is only used to wake up a waiting ``get()``.
    When more than ``max_queue_size`` events are pending the subscriber is
    closed, its pending events are discarded and ``dropped`` is set.
    """

    def __init__(self, subscriber_id: int, max_queue_size: int = DEFAULT_QUEUE_SIZE):
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1")
        self.id = subscriber_id
        self.max_queue_size = max_queue_size
        self.dropped = False
        try:
            self._loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            # bound by the first get()
            self._loop = None
        self._events: deque = deque()
        self._wakeup = asyncio.Event()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of events queued but not yet consumed."""
        with self._lock:
            return len(self._events)

    def offer(self, event: ChatEvent) -> bool:
        """Queue an event. Returns False if the subscriber is (now) closed."""
        with self._lock:
            if self._closed:
                return False
            overflow = len(self._events) >= self.max_queue_size
            if not overflow:
                self._events.append(event)
        if overflow:
            logger.warning(f"[HUB] Subscriber {self.id} queue overflow "
                           f"({self.max_queue_size} pending), disconnecting")
            self.dropped = True
            self.close(discard_pending=True)
            return False
        if not self._wake():
            self.close()
            return False
        return True

    def close(self, discard_pending: bool = False) -> None:
        """Stop accepting events and wake up the consumer. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if discard_pending:
                self._events.clear()
        self._wake()

    async def get(self) -> Optional[ChatEvent]:
        """Wait for the next event. Returns None once the subscriber is closed."""
        loop = asyncio.get_running_loop()
        while True:
            with self._lock:
                if self._loop is None:
                    self._loop = loop
                if self._events:
                    return self._events.popleft()
                if self._closed:
                    return None
                self._wakeup.clear()
            await self._wakeup.wait()

    async def wait_closed(self) -> None:
        """Wait until the subscriber is closed, by the hub or by overflow."""
        loop = asyncio.get_running_loop()
        while True:
            with self._lock:
                if self._loop is None:
                    self._loop = loop
                if self._closed:
                    return
                self._wakeup.clear()
            await self._wakeup.wait()

    def __aiter__(self):
        return self

    async def __anext__(self) -> ChatEvent:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event

    def _wake(self) -> bool:
        """Schedule a wake-up of waiting consumers. False if their loop is gone."""
        with self._lock:
            loop = self._loop
        if loop is None:
            return True
        if loop.is_closed():
            return False
        try:
            loop.call_soon_threadsafe(self._wakeup.set)
        except RuntimeError as e:
            logger.debug(f"[HUB] Subscriber {self.id} loop unavailable: {e}")
            return False
        return True

    def __repr__(self) -> str:
        return f"Subscriber(id={self.id}, pending={self.pending}, closed={self._closed})"


# ── Hub ─────────────────────────────────────────────────────────────


class ChatHub:
    """Single coordination point for the chat room.

    Every sign-in and send passes through one lock. The directory or log
    mutation and the hand-off of the resulting event to every subscriber
    queue happen inside that lock, so all subscribers observe the same commit
    order and list snapshots never see a mutation whose event has not been
    queued yet.
    """

    def __init__(
        self,
        *,
        max_queue_size: int = DEFAULT_QUEUE_SIZE,
        directory: Optional[Directory] = None,
        message_log: Optional[MessageLog] = None,
    ):
        self.max_queue_size = max_queue_size
        self.directory = directory if directory is not None else Directory()
        self.message_log = message_log if message_log is not None else MessageLog(self.directory)
        self._lock = threading.Lock()
        self._subscribers: dict[int, Subscriber] = {}
        self._ids = itertools.count(1)

    # ── Mutations ─────────────────────────────────────────────

    def sign_in(self, name: str) -> User:
        """Sign in ``name`` and publish a sign-in event.

        :raises EmptyNameError: if ``name`` is empty
        :raises DuplicateNameError: if ``name`` is already signed in
        """
        with self._lock:
            user = self.directory.sign_in(name)
            self._publish(SignInEvent(user=user.user))
        logger.info(f"[HUB] User '{name}' signed in")
        return user

    def send(self, user: str, text: str) -> int:
        """Append a message from ``user`` and publish it. Returns its index.

        :raises UnknownUserError: if ``user`` is not signed in
        :raises EmptyMessageError: if ``text`` is empty
        """
        with self._lock:
            message = self.message_log.append(user, text)
            self._publish(MessageEvent.from_message(message))
        logger.info(f"[HUB] Message {message.index} from '{user}'")
        return message.index

    # ── Snapshots ─────────────────────────────────────────────

    def list_users(self) -> list[str]:
        with self._lock:
            return self.directory.list()

    def list_messages(self) -> list[ChatMessage]:
        with self._lock:
            return self.message_log.list()

    # ── Subscriptions ─────────────────────────────────────────

    def subscribe(self, max_queue_size: Optional[int] = None) -> Subscriber:
        """Register a subscriber for all events published from now on."""
        size = self.max_queue_size if max_queue_size is None else max_queue_size
        with self._lock:
            subscriber = Subscriber(next(self._ids), size)
            self._subscribers[subscriber.id] = subscriber
            count = len(self._subscribers)
        logger.info(f"[HUB] Subscriber {subscriber.id} registered ({count} active)")
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        """Deregister ``subscriber`` and close it. Safe to call more than once."""
        with self._lock:
            removed = self._subscribers.pop(subscriber.id, None)
            count = len(self._subscribers)
        subscriber.close()
        if removed is not None:
            logger.info(f"[HUB] Subscriber {subscriber.id} removed ({count} active)")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _publish(self, event: ChatEvent) -> None:
        """Hand ``event`` to every subscriber. Caller holds ``self._lock``."""
        gone = [sub for sub in self._subscribers.values() if not sub.offer(event)]
        for sub in gone:
            del self._subscribers[sub.id]
            logger.info(f"[HUB] Subscriber {sub.id} dropped during publish "
                        f"({len(self._subscribers)} active)")


# ── Event logger ────────────────────────────────────────────────────


async def log_events(hub: ChatHub) -> None:
    """Log every event published by ``hub`` until cancelled or dropped."""
    subscriber = hub.subscribe()
    try:
        async for event in subscriber:
            logger.debug(f"[EVENTS] {event.model_dump(by_alias=True)}")
        if subscriber.dropped:
            logger.warning("[EVENTS] Event logger fell behind and was disconnected")
    finally:
        hub.unsubscribe(subscriber)
