from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

TParam = TypeVar('TParam')


@dataclass(frozen=True)
class CommandError(Generic[TParam]):
    """
    Pairs an error with the parameter that was passed to execute().

    Emitted on RxCommand.thrown_exceptions. `param` is None for failures
    of the restriction stream.
    """
    param: Optional[TParam]
    error: Optional[BaseException]

    def __str__(self) -> str:
        return f"{self.error} - for param: {self.param}"
