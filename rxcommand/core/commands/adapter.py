"""
Action Adapter - normalizes handler return values into a Stream.

A command action may:
- return a plain value             -> Immediate
- return an awaitable (coroutine)  -> Deferred
- return a Stream, an async iterable or a generator -> Multi

classify() runs the action once and tags its return value; to_stream()
turns the tag into a Stream that emits the value(s), then completes or
fails.
"""
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union
from loguru import logger

from ..events import Stream


@dataclass(frozen=True)
class Immediate:
    """Already computed value."""
    value: Any


@dataclass(frozen=True)
class Deferred:
    """Awaitable resolving to a single value."""
    awaitable: Awaitable


@dataclass(frozen=True)
class Multi:
    """Source of zero or more values."""
    source: Any


ActionShape = Union[Immediate, Deferred, Multi]


def _is_multi(value: Any) -> bool:
    return (
        isinstance(value, Stream)
        or hasattr(value, "__aiter__")
        or inspect.isgenerator(value)
    )


def classify(action: Callable[[Any], Any], param: Any) -> ActionShape:
    """
    Invoke the action and classify its return value.

    Awaitables are checked first, then multi-value sources. Anything else
    (including lists and strings) is a single value.
    """
    try:
        value = action(param)
    except Exception as e:
        return Multi(Stream.throw(e))

    if inspect.isawaitable(value):
        return Deferred(value)
    if _is_multi(value):
        return Multi(value)
    return Immediate(value)


def to_stream(shape: ActionShape) -> Stream:
    if isinstance(shape, Immediate):
        stream = Stream.of(shape.value)
    elif isinstance(shape, Deferred):
        stream = Stream.from_awaitable(shape.awaitable)
    elif isinstance(shape.source, Stream):
        stream = shape.source
    elif hasattr(shape.source, "__aiter__"):
        stream = Stream.from_async_iterable(shape.source)
    else:
        stream = Stream.from_iterable(shape.source)
    return _drop_non_exceptions(stream)


def adapt(action: Callable[[Any], Any], param: Any) -> Stream:
    """Run the action for `param` and return its normalized result stream."""
    return to_stream(classify(action, param))


def _drop_non_exceptions(source: Stream) -> Stream:
    """
    Complete instead of failing on terminations that are not Exceptions.

    Cancellation of an awaited action is logged and treated as the end of
    the attempt rather than as a failure.
    """
    def subscribe(observer):
        def on_error(error: BaseException):
            if isinstance(error, Exception):
                observer.on_error(error)
            else:
                logger.warning(f"Action terminated without an Exception ({type(error).__name__}); dropping it")
                observer.on_completed()

        return source.subscribe_observer(source.forward_to(observer, on_error=on_error))

    return Stream(subscribe, name=source.name)
