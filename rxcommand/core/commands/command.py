"""
RxCommand - observable execution state around an action.

RxCommand wraps a handler (sync, async or stream-producing) that is run by
execute(). Results and execution state are published on streams:

- results: every value produced by the action
- status: CommandResult records (running, data, error)
- is_executing: True while an attempt is in flight
- can_execute: restriction gate AND not executing
- thrown_exceptions: CommandError for every failure

Only one attempt runs at a time. execute() calls made while an attempt is
in flight, or while the restriction gate is closed, are dropped.

Usage:
    save = RxCommand.create(save_document, restriction=has_changes)
    save.can_execute.subscribe(button.setEnabled)
    save.thrown_exceptions.subscribe(show_error)
    save.execute(document)
"""
import asyncio
from typing import Any, Callable, Generic, Optional, TypeVar, Union
from loguru import logger

from ..config import CommandOptions
from ..events import BehaviorSubject, CompositeSubscription, Observer, ReplaySubject, Stream, Subject, Subscription
from ..exceptions import CommandDisposedError
from .adapter import adapt
from .error import CommandError
from .hooks import CommandHooks, default_hooks
from .result import CommandResult

TParam = TypeVar('TParam')
TResult = TypeVar('TResult')

_UNSET = object()


class RxCommand(Generic[TParam, TResult]):
    """
    Execution engine with a single-flight guard and a restriction gate.

    Create instances with RxCommand.create(). Calling the command object
    is the same as calling execute().
    """

    def __init__(
        self,
        action: Callable[[TParam], Any],
        restriction: Optional[Stream[bool]] = None,
        options: Optional[CommandOptions] = None,
        hooks: Optional[CommandHooks] = None,
    ):
        self._action = action
        self._options = options or CommandOptions()
        self._hooks = hooks if hooks is not None else default_hooks

        # The result of the last successful call to execute()
        self.last_result: Optional[TResult] = self._options.initial_last_result

        self._running = False
        self._gate_open = True
        self._last_gate = _UNSET
        self._disposed = False
        self._attempt: Optional[Subscription] = None
        self._attempt_observer: Optional[Observer] = None
        self._attempt_id = 0

        name = self.debug_name or "RxCommand"
        subject_cls = ReplaySubject if self._options.replay_results else Subject
        self._results: Subject[TResult] = subject_cls(f"{name}.results")
        self._status: Subject[CommandResult[TParam, TResult]] = subject_cls(f"{name}.status")
        self._is_executing = BehaviorSubject(False, f"{name}.is_executing")
        self._can_execute = BehaviorSubject(True, f"{name}.can_execute")
        self._thrown_exceptions: Subject[CommandError[TParam]] = Subject(f"{name}.thrown_exceptions")
        self._subscriptions = CompositeSubscription()

        self._subscriptions.add(
            self._status.filter(lambda result: result.has_error).subscribe(
                lambda result: self._thrown_exceptions.on_next(CommandError(result.param, result.error))
            )
        )

        gate = restriction if restriction is not None else Stream.of(True)
        self._subscriptions.add(gate.subscribe(self._on_gate, self._on_gate_error))

        if self._options.emit_initial_command_result:
            self._status.on_next(CommandResult(None, self.last_result, None, False))

    @classmethod
    def create(
        cls,
        action: Callable[[TParam], Any],
        restriction: Optional[Stream[bool]] = None,
        options: Optional[CommandOptions] = None,
        hooks: Optional[CommandHooks] = None,
        **option_fields: Any,
    ) -> 'RxCommand[TParam, TResult]':
        """
        Create a command for `action`.

        Args:
            action: Callable taking one parameter. May return a value, an
                awaitable, a Stream, an async iterable or a generator.
            restriction: Stream of booleans; execution is only possible
                while the latest distinct value is True.
            options: CommandOptions instance
            hooks: CommandHooks to notify instead of the shared default_hooks
            **option_fields: CommandOptions fields, overriding `options`

        Raises:
            pydantic.ValidationError: If an option is unknown or invalid
        """
        if options is None:
            options = CommandOptions(**option_fields)
        elif option_fields:
            options = CommandOptions.model_validate({**dict(options), **option_fields})
        return cls(action, restriction, options, hooks)

    # --- Streams ---

    @property
    def results(self) -> Stream[TResult]:
        return self._results

    @property
    def status(self) -> Stream[CommandResult[TParam, TResult]]:
        return self._status

    @property
    def is_executing(self) -> Stream[bool]:
        return self._is_executing

    @property
    def can_execute(self) -> Stream[bool]:
        return self._can_execute

    @property
    def thrown_exceptions(self) -> Stream[CommandError[TParam]]:
        return self._thrown_exceptions

    @property
    def debug_name(self) -> Optional[str]:
        return self._options.debug_name

    @property
    def options(self) -> CommandOptions:
        return self._options

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def subscribe(self, on_next=None, on_error=None, on_completed=None) -> Subscription:
        """Subscribe to the produced values, same as results.subscribe()."""
        return self._results.subscribe(on_next, on_error, on_completed)

    # --- Execution ---

    def __call__(self, param: Optional[TParam] = None) -> None:
        self.execute(param)

    def execute(self, param: Optional[TParam] = None) -> None:
        """
        Start the action with `param` unless the command is busy, restricted or disposed.

        Failures of the action are published on status/thrown_exceptions
        and never raised here.
        """
        if self._disposed:
            logger.debug(f"Command '{self.debug_name}' is disposed, ignoring execute")
            return
        if not self._gate_open or self._running:
            logger.debug(f"Command '{self.debug_name}' cannot execute now, dropping call")
            return

        self._running = True
        self._attempt_id += 1
        attempt_id = self._attempt_id

        self._can_execute.on_next(False)
        self._status.on_next(CommandResult(param, self._baseline(), None, True))
        self._is_executing.on_next(True)
        logger.debug(f"Command '{self.debug_name}' executing (attempt {attempt_id})")

        # A subscriber may have disposed the command while reacting to the start
        if self._disposed:
            return

        observer = Observer(
            lambda value: self._on_value(param, value),
            lambda error: self._on_error(attempt_id, param, error),
            lambda: self._finish(attempt_id),
            name=f"{self.debug_name or 'RxCommand'}.attempt",
        )
        # dispose() stops the observer even while the action is still emitting
        self._attempt_observer = observer
        try:
            subscription = adapt(self._action, param).subscribe_observer(observer)
        except BaseException:
            # KeyboardInterrupt and friends are not action failures
            self._finish(attempt_id)
            raise

        if self._disposed:
            subscription.unsubscribe()
        # Synchronous actions have already finished at this point
        elif self._running and self._attempt_id == attempt_id:
            self._attempt = subscription

    async def next_result(self) -> Union[TResult, CommandError[TParam]]:
        """
        Wait for the next produced value or failure of this command.

        Returns:
            The next value, or the CommandError if the next event is a failure

        Raises:
            CommandDisposedError: If the command is or gets disposed first
        """
        if self._disposed:
            raise CommandDisposedError(f"Command '{self.debug_name}' is disposed")

        future = asyncio.get_running_loop().create_future()
        armed = False

        def resolve(value):
            if armed and not future.done():
                future.set_result(value)

        def disposed():
            if not future.done():
                future.set_exception(CommandDisposedError(f"Command '{self.debug_name}' was disposed"))

        subscriptions = CompositeSubscription(
            self._results.subscribe(resolve, on_completed=disposed),
            self._thrown_exceptions.subscribe(resolve, on_completed=disposed),
        )
        # Values replayed during subscribe are not "next"
        armed = True
        try:
            return await future
        finally:
            subscriptions.unsubscribe()

    # --- Lifecycle ---

    def dispose(self) -> None:
        """Complete all streams and release internal subscriptions. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True
        logger.debug(f"Disposing command '{self.debug_name}'")

        if self._attempt_observer is not None:
            self._attempt_observer.dispose()
            self._attempt_observer = None
        if self._attempt is not None:
            self._attempt.unsubscribe()
            self._attempt = None

        self._status.on_completed()
        self._is_executing.on_completed()
        self._can_execute.on_completed()
        self._thrown_exceptions.on_completed()
        self._results.on_completed()
        self._subscriptions.unsubscribe()

    def __enter__(self) -> 'RxCommand[TParam, TResult]':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"RxCommand(debug_name={self.debug_name!r}, running={self._running}, disposed={self._disposed})"

    # --- Internals ---

    def _baseline(self) -> Optional[TResult]:
        return self.last_result if self._options.emit_last_result else None

    def _on_value(self, param: Optional[TParam], value: TResult) -> None:
        if self._disposed:
            return
        result = CommandResult(param, value, None, False)
        self._results.on_next(value)
        self.last_result = value
        self._status.on_next(result)
        if not self._disposed:
            self._hooks.report_result(self.debug_name, result)

    def _on_error(self, attempt_id: int, param: Optional[TParam], error: BaseException) -> None:
        if self._disposed:
            return
        result = CommandResult(param, self._baseline(), error, False)
        logger.debug(f"Command '{self.debug_name}' failed: {error!r}")
        self._status.on_next(result)
        if not self._disposed:
            self._hooks.report_exception(self.debug_name, CommandError(param, error))
            self._hooks.report_result(self.debug_name, result)
        self._finish(attempt_id)

    def _finish(self, attempt_id: int) -> None:
        if attempt_id != self._attempt_id or not self._running:
            return
        self._running = False
        self._attempt = None
        self._attempt_observer = None
        self._is_executing.on_next(False)
        # An is_executing subscriber may already have started the next attempt
        self._can_execute.on_next(self._gate_open and not self._running)

    def _on_gate(self, value: bool) -> None:
        value = bool(value)
        if value == self._last_gate:
            return
        self._last_gate = value
        self._gate_open = value
        logger.debug(f"Command '{self.debug_name}' restriction changed: {value}")
        self._can_execute.on_next(value and not self._running)

    def _on_gate_error(self, error: BaseException) -> None:
        if not isinstance(error, Exception):
            logger.warning(f"Restriction of '{self.debug_name}' ended without an Exception ({type(error).__name__})")
            return
        failure = CommandError(None, error)
        self._thrown_exceptions.on_next(failure)
        self._hooks.report_exception(self.debug_name, failure)
