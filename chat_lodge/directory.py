"""Directory of signed-in user names."""
import logging
import threading

from .chat_errors import DuplicateNameError, EmptyNameError
from .chat_models import User

logger = logging.getLogger(__name__)


class Directory:
    """Thread-safe set of signed-in names.

    Names are compared by exact, case-sensitive match and are never removed
    once added.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._names: set[str] = set()

    def sign_in(self, name: str) -> User:
        """Add ``name`` to the directory.

        :raises EmptyNameError: if ``name`` is empty
        :raises DuplicateNameError: if ``name`` is already signed in
        """
        if not name:
            raise EmptyNameError()
        with self._lock:
            if name in self._names:
                raise DuplicateNameError(name)
            self._names.add(name)
        logger.debug(f"[DIRECTORY] Signed in '{name}'")
        return User(user=name)

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._names

    def list(self) -> list[str]:
        """Alphabetically sorted snapshot of all signed-in names."""
        with self._lock:
            snapshot = list(self._names)
        return sorted(snapshot)

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)
