"""
RxListener - owns commands and subscriptions for bulk teardown.

When a command is added, the listener subscribes to its
thrown_exceptions stream and reports every failure to its error sink
(loguru by default). Disposing the listener cancels every subscription
and disposes every command.

Usage:
    listener = RxListener()
    listener.add([save_command, document.changes.subscribe(on_change)])
    ...
    listener.dispose()
"""
from typing import Callable, Iterable, List, Optional, Tuple, Union
from loguru import logger

from .commands import CommandError, RxCommand
from .events import CompositeSubscription, Subscription


def _log_command_error(error: CommandError) -> None:
    logger.error(f"Command failed: {error}")


class RxListener:
    """Collects Subscriptions and RxCommands and disposes them together."""

    # Global switch for reporting command failures to the error sink
    listen_to_command_exceptions: bool = True

    def __init__(self, error_sink: Optional[Callable[[CommandError], None]] = None):
        self._error_sink = error_sink or _log_command_error
        self._listeners = CompositeSubscription()
        self._commands: List[RxCommand] = []

    @property
    def commands(self) -> Tuple[RxCommand, ...]:
        return tuple(self._commands)

    @property
    def subscription_count(self) -> int:
        return len(self._listeners)

    def _set_sink(self, reference: Union[Subscription, RxCommand]) -> None:
        self.add([reference])

    # listener.sink = command  ->  listener.add([command])
    sink = property(None, _set_sink)

    def add(self, references: Iterable[Union[Subscription, RxCommand]]) -> None:
        """
        Take ownership of subscriptions and commands.

        A command that is already owned is skipped.

        Args:
            references: Subscription or RxCommand instances

        Raises:
            TypeError: If an item is neither a Subscription nor an RxCommand
        """
        for reference in references:
            if isinstance(reference, Subscription):
                self._listeners.add(reference)
            elif isinstance(reference, RxCommand):
                if reference in self._commands:
                    continue
                self._listeners.add(self._listen_to_command_exceptions(reference))
                self._commands.append(reference)
            else:
                raise TypeError(f"Cannot add {type(reference).__name__} to RxListener")

    def dispose(self) -> None:
        """Cancel all subscriptions and dispose all commands. Reusable afterwards."""
        self._listeners.clear()

        commands, self._commands = self._commands, []
        for command in commands:
            command.dispose()

    def __enter__(self) -> 'RxListener':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    def _listen_to_command_exceptions(self, command: RxCommand) -> Subscription:
        return command.thrown_exceptions.filter(
            lambda _: RxListener.listen_to_command_exceptions
        ).subscribe(self._error_sink)
