"""
Exception types raised by rxcommand.

Action failures never surface as exceptions; they are published on the
command's status and failure streams. These types cover misuse of the
API and environment problems.
"""


class RxCommandError(Exception):
    """Base class for all rxcommand errors."""
    pass


class CommandDisposedError(RxCommandError):
    """Raised when waiting on a command that has been disposed."""
    pass


class CommandLoopError(RxCommandError, RuntimeError):
    """Raised when an awaitable action is started without a running event loop."""
    pass
