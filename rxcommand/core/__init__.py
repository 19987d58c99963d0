from .commands import CommandError, CommandHooks, CommandResult, RxCommand, default_hooks
from .config import CommandOptions, LoggingSettings
from .events import BehaviorSubject, CompositeSubscription, ReplaySubject, Stream, Subject, Subscription
from .exceptions import CommandDisposedError, CommandLoopError, RxCommandError
from .listener import RxListener
from .logging import setup_logging
