"""
Command System.

Provides reactive command infrastructure:
- RxCommand: Single-flight execution engine with observable state
- CommandResult: Status record pushed on RxCommand.status
- CommandError: Failure record pushed on RxCommand.thrown_exceptions
- CommandHooks: Exception/logging handlers shared by commands
- adapt: Normalizes sync, async and stream-producing actions
"""
from .adapter import Deferred, Immediate, Multi, adapt, classify, to_stream
from .command import RxCommand
from .error import CommandError
from .hooks import CommandHooks, default_hooks
from .result import CommandResult

__all__ = [
    # Engine
    "RxCommand",
    # Records
    "CommandResult",
    "CommandError",
    # Hooks
    "CommandHooks",
    "default_hooks",
    # Adapter
    "adapt",
    "classify",
    "to_stream",
    "Immediate",
    "Deferred",
    "Multi",
]
