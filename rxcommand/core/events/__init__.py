"""
Event System - Push streams for command state.

Provides:
- Stream: Cold stream with filter/map operators and factories
- Subject / ReplaySubject / BehaviorSubject: Hot multicast streams
- Subscription / CompositeSubscription: Cancellation handles

Usage:
    from rxcommand.core.events import Subject

    clicks = Subject("clicks")
    sub = clicks.subscribe(on_click)
    clicks.on_next(1)
"""
from .streams import (
    BehaviorSubject,
    CompositeSubscription,
    Observer,
    ReplaySubject,
    Stream,
    Subject,
    Subscription,
)


__all__ = [
    "Stream",
    "Subject",
    "ReplaySubject",
    "BehaviorSubject",
    "Observer",
    "Subscription",
    "CompositeSubscription",
]
