"""Typed validation errors raised by the chat core.

All of them are detected before any state is touched, so a raised error
always means nothing was stored and nothing was published.
"""


class ChatError(Exception):
    """Base class for chat validation failures."""
    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EmptyNameError(ChatError):
    """Raised when signing in with an empty display name."""
    status_code = 400

    def __init__(self):
        super().__init__("user name must not be empty")


class DuplicateNameError(ChatError):
    """Raised when the display name is already signed in."""
    status_code = 409

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"user '{name}' is already signed in")


class UnknownUserError(ChatError):
    """Raised when a message is sent by a name that never signed in."""
    status_code = 404

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"user '{name}' is not signed in")


class EmptyMessageError(ChatError):
    """Raised when the message text is empty."""
    status_code = 400

    def __init__(self):
        super().__init__("message must not be empty")
