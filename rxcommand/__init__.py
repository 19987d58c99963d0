"""
rxcommand - Reactive Commands

Wraps sync, async and stream-producing actions in commands whose
execution state (executing, results, errors, can-execute) is published
as push streams, for UI and application code that reacts to running
operations without juggling flags.
"""

# Commands
from rxcommand.core.commands import (
    RxCommand,
    CommandResult,
    CommandError,
    CommandHooks,
    default_hooks,
)
from rxcommand.core.listener import RxListener

# Streams
from rxcommand.core.events import (
    Stream,
    Subject,
    ReplaySubject,
    BehaviorSubject,
    Subscription,
    CompositeSubscription,
)

# Configuration / logging
from rxcommand.core.config import CommandOptions, LoggingSettings
from rxcommand.core.logging import setup_logging
from rxcommand.core.exceptions import (
    RxCommandError,
    CommandDisposedError,
    CommandLoopError,
)

__version__ = "0.1.0"

__all__ = [
    # Commands
    "RxCommand",
    "CommandResult",
    "CommandError",
    "CommandHooks",
    "default_hooks",
    "RxListener",

    # Streams
    "Stream",
    "Subject",
    "ReplaySubject",
    "BehaviorSubject",
    "Subscription",
    "CompositeSubscription",

    # Configuration
    "CommandOptions",
    "LoggingSettings",
    "setup_logging",

    # Errors
    "RxCommandError",
    "CommandDisposedError",
    "CommandLoopError",
]
