from dataclasses import dataclass
from typing import Any, Callable, Optional
from loguru import logger

from .error import CommandError
from .result import CommandResult


ExceptionHandler = Callable[[Optional[str], CommandError], None]
LoggingHandler = Callable[[Optional[str], CommandResult], None]


@dataclass
class CommandHooks:
    """
    Optional handlers notified by every command that uses this instance.

    exception_handler(debug_name, CommandError) is called on any error
    inside a command. Ideal for logging.
    logging_handler(debug_name, CommandResult) is called for every data
    or error record a command produces.

    Commands share `default_hooks` unless given their own instance.
    """
    exception_handler: Optional[ExceptionHandler] = None
    logging_handler: Optional[LoggingHandler] = None

    def report_exception(self, debug_name: Optional[str], error: CommandError) -> None:
        self._call(self.exception_handler, debug_name, error)

    def report_result(self, debug_name: Optional[str], result: CommandResult) -> None:
        self._call(self.logging_handler, debug_name, result)

    def _call(self, handler: Optional[Callable], debug_name: Optional[str], payload: Any) -> None:
        if handler is None:
            return
        try:
            handler(debug_name, payload)
        except Exception as e:
            logger.error(f"Command hook '{handler}' failed for '{debug_name}': {e}")


default_hooks = CommandHooks()
