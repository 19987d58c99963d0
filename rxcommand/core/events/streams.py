"""
Push Streams - Synchronous multicast observables.

Provides:
- Subscription / CompositeSubscription: cancellation handles
- Stream: cold stream built from a subscribe function, with filter/map
- Subject: hot multicast stream (pure broadcast)
- ReplaySubject: Subject that replays the latest value to late subscribers
- BehaviorSubject: Subject with a current value

Delivery is synchronous: on_next/on_error/on_completed run every
subscriber callback before returning. A failing subscriber is logged and
does not prevent delivery to the others.

Usage:
    subject = Subject("clicks")
    sub = subject.filter(lambda x: x > 1).subscribe(print)
    subject.on_next(2)
    sub.unsubscribe()
"""
import asyncio
import inspect
from typing import Any, AsyncIterable, Awaitable, Callable, Generic, Iterable, List, Optional, TypeVar
from loguru import logger

from ..exceptions import CommandLoopError

T = TypeVar('T')
R = TypeVar('R')


class Subscription:
    """Handle returned by subscribe(); unsubscribe() is idempotent."""

    def __init__(self, teardown: Optional[Callable[[], None]] = None):
        self._teardown = teardown
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True
        teardown, self._teardown = self._teardown, None
        if teardown is not None:
            teardown()


class CompositeSubscription(Subscription):
    """
    Owns a group of subscriptions and cancels them together.

    Adding to an already cancelled composite cancels the child right away.
    """

    def __init__(self, *subscriptions: Subscription):
        super().__init__()
        self._children: List[Subscription] = []
        for subscription in subscriptions:
            self.add(subscription)

    def add(self, subscription: Subscription) -> None:
        if subscription.closed:
            return
        if self._closed:
            subscription.unsubscribe()
            return
        self._children.append(subscription)

    def clear(self) -> None:
        """Cancel all children but keep the composite usable."""
        children, self._children = self._children, []
        for child in children:
            child.unsubscribe()

    def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.clear()

    def __len__(self) -> int:
        return len(self._children)


def _closed_subscription() -> Subscription:
    subscription = Subscription()
    subscription.unsubscribe()
    return subscription


class Observer(Generic[T]):
    """
    One subscriber's callbacks.

    Stops delivering after the first terminal notification or dispose(),
    or once the `downstream` observer it feeds has stopped.
    """

    def __init__(
        self,
        on_next: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        on_completed: Optional[Callable[[], Any]] = None,
        name: str = "Stream",
        downstream: Optional['Observer'] = None,
    ):
        self._on_next = on_next
        self._on_error = on_error
        self._on_completed = on_completed
        self._name = name
        self._downstream = downstream
        self._stopped = False

    @property
    def is_stopped(self) -> bool:
        return self._stopped or (self._downstream is not None and self._downstream.is_stopped)

    def on_next(self, value: T) -> None:
        if self.is_stopped or self._on_next is None:
            return
        self._call(self._on_next, value)

    def on_error(self, error: BaseException) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._on_error is None:
            logger.error(f"Stream '{self._name}' terminated with unhandled error: {error!r}")
            return
        self._call(self._on_error, error)

    def on_completed(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._on_completed is not None:
            self._call(self._on_completed)

    def dispose(self) -> None:
        self._stopped = True

    def _call(self, callback: Callable, *args) -> None:
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Stream '{self._name}' error in subscriber '{callback}': {e}")


class Stream(Generic[T]):
    """
    Cold stream: every subscribe() runs the subscribe function anew.

    The subscribe function receives an Observer and may return a
    Subscription, a teardown callable or None.
    """

    def __init__(self, subscribe_fn: Optional[Callable[[Observer[T]], Any]] = None, name: str = "Stream"):
        self._subscribe_fn = subscribe_fn
        self.name = name

    def subscribe(
        self,
        on_next: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        on_completed: Optional[Callable[[], Any]] = None,
    ) -> Subscription:
        """
        Subscribe callbacks to this stream.

        Args:
            on_next: Called with every value
            on_error: Called once if the stream fails
            on_completed: Called once if the stream completes

        Returns:
            Subscription that stops delivery when cancelled
        """
        observer = Observer(on_next, on_error, on_completed, name=self.name)
        return self.subscribe_observer(observer)

    def subscribe_observer(self, observer: Observer[T]) -> Subscription:
        """Subscribe an Observer the caller keeps, so it can be disposed mid-delivery."""
        try:
            inner = self._subscribe_fn(observer) if self._subscribe_fn is not None else None
        except Exception as e:
            observer.on_error(e)
            inner = None

        def teardown():
            observer.dispose()
            if isinstance(inner, Subscription):
                inner.unsubscribe()
            elif callable(inner):
                inner()

        return Subscription(teardown)

    # --- Operators ---

    def filter(self, predicate: Callable[[T], bool]) -> 'Stream[T]':
        def subscribe(observer: Observer[T]):
            def on_next(value):
                if predicate(value):
                    observer.on_next(value)
            return self.subscribe_observer(self.forward_to(observer, on_next=on_next))
        return Stream(subscribe, name=f"{self.name}.filter")

    def map(self, selector: Callable[[T], R]) -> 'Stream[R]':
        def subscribe(observer: Observer[R]):
            return self.subscribe_observer(
                self.forward_to(observer, on_next=lambda value: observer.on_next(selector(value)))
            )
        return Stream(subscribe, name=f"{self.name}.map")

    def forward_to(self, downstream: Observer, on_next=None, on_error=None, on_completed=None) -> Observer:
        """Observer for this stream relaying to `downstream` and stopping with it."""
        return Observer(
            on_next or downstream.on_next,
            on_error or downstream.on_error,
            on_completed or downstream.on_completed,
            name=self.name,
            downstream=downstream,
        )

    # --- Factories ---

    @classmethod
    def of(cls, *values: T) -> 'Stream[T]':
        return cls.from_iterable(values)

    @classmethod
    def from_iterable(cls, iterable: Iterable[T]) -> 'Stream[T]':
        """Emit every item synchronously on subscribe, then complete."""
        def subscribe(observer: Observer[T]):
            for value in iterable:
                observer.on_next(value)
                if observer.is_stopped:
                    # Run the generator's finally blocks now
                    if hasattr(iterable, "close"):
                        iterable.close()
                    return
            observer.on_completed()
        return cls(subscribe, name="from_iterable")

    @classmethod
    def throw(cls, error: BaseException) -> 'Stream[T]':
        return cls(lambda observer: observer.on_error(error), name="throw")

    @classmethod
    def from_awaitable(cls, awaitable: Awaitable[T]) -> 'Stream[T]':
        """
        Emit the awaited result once, then complete.

        Coroutines and other awaitables are scheduled on the running
        event loop; futures are used as they are. Cancelling the
        subscription detaches from the future but does not cancel it.
        """
        def subscribe(observer: Observer[T]):
            future = _schedule(awaitable)

            def on_done(fut: asyncio.Future):
                if fut.cancelled():
                    observer.on_error(asyncio.CancelledError())
                    return
                error = fut.exception()
                if error is not None:
                    observer.on_error(error)
                else:
                    observer.on_next(fut.result())
                    observer.on_completed()

            future.add_done_callback(on_done)
        return cls(subscribe, name="from_awaitable")

    @classmethod
    def from_async_iterable(cls, iterable: AsyncIterable[T]) -> 'Stream[T]':
        """
        Pump an async iterable on the running event loop.

        Cancelling the subscription cancels the pump task.
        """
        def subscribe(observer: Observer[T]):
            async def pump():
                async for value in iterable:
                    observer.on_next(value)
                    if observer.is_stopped:
                        if hasattr(iterable, "aclose"):
                            await iterable.aclose()
                        return
                observer.on_completed()

            task = _schedule(pump())

            def on_done(fut: asyncio.Future):
                if fut.cancelled():
                    observer.on_error(asyncio.CancelledError())
                elif fut.exception() is not None:
                    observer.on_error(fut.exception())

            task.add_done_callback(on_done)
            return task.cancel
        return cls(subscribe, name="from_async_iterable")


def _schedule(awaitable: Awaitable) -> asyncio.Future:
    if asyncio.isfuture(awaitable):
        return awaitable
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise CommandLoopError("Awaitable action requires a running asyncio event loop")
    return asyncio.ensure_future(awaitable, loop=loop)


class Subject(Stream[T]):
    """
    Hot multicast stream.

    Late subscribers only see values pushed after they subscribed. After
    on_error/on_completed, pushes are ignored and new subscribers receive
    the terminal notification immediately.
    """

    def __init__(self, name: str = "Subject"):
        super().__init__(name=name)
        self._observers: List[Observer[T]] = []
        self._stopped = False
        self._error: Optional[BaseException] = None

    @property
    def has_observers(self) -> bool:
        return len(self._observers) > 0

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def _replay(self, observer: Observer[T]) -> None:
        pass

    def subscribe_observer(self, observer: Observer[T]) -> Subscription:
        self._replay(observer)
        if self._stopped:
            if self._error is not None:
                observer.on_error(self._error)
            else:
                observer.on_completed()
            return _closed_subscription()

        self._observers.append(observer)

        def teardown():
            observer.dispose()
            if observer in self._observers:
                self._observers.remove(observer)

        return Subscription(teardown)

    def on_next(self, value: T) -> None:
        if self._stopped:
            return
        for observer in list(self._observers):
            observer.on_next(value)

    def on_error(self, error: BaseException) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._error = error
        observers, self._observers = self._observers, []
        for observer in observers:
            observer.on_error(error)

    def on_completed(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        observers, self._observers = self._observers, []
        for observer in observers:
            observer.on_completed()


class ReplaySubject(Subject[T]):
    """Subject that replays the most recent value to every new subscriber."""

    def __init__(self, name: str = "ReplaySubject"):
        super().__init__(name=name)
        self._has_value = False
        self._last: Optional[T] = None

    def _replay(self, observer: Observer[T]) -> None:
        if self._has_value:
            observer.on_next(self._last)

    def on_next(self, value: T) -> None:
        if self._stopped:
            return
        self._has_value = True
        self._last = value
        super().on_next(value)


class BehaviorSubject(Subject[T]):
    """Subject holding a current value, delivered to every new subscriber."""

    def __init__(self, value: T, name: str = "BehaviorSubject"):
        super().__init__(name=name)
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def _replay(self, observer: Observer[T]) -> None:
        if not self._stopped:
            observer.on_next(self._value)

    def on_next(self, value: T) -> None:
        if self._stopped:
            return
        self._value = value
        super().on_next(value)
