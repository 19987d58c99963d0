"""
Command Status Records.

CommandResult is the combined execution state pushed on RxCommand.status:
1. Newly created command (with emit_initial_command_result): None, None, False
2. When execute() is accepted: param, None, True
3. For every produced value: param, value, False
4. When the action fails: param, None, error, False

`param` is the argument passed to execute().
"""
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

TParam = TypeVar('TParam')
TResult = TypeVar('TResult')


@dataclass(frozen=True)
class CommandResult(Generic[TParam, TResult]):
    """Immutable snapshot of one point in an execution attempt."""
    param: Optional[TParam] = None
    data: Optional[TResult] = None
    error: Optional[BaseException] = None
    is_executing: bool = False

    @classmethod
    def data_result(cls, param: Optional[TParam], data: TResult) -> 'CommandResult[TParam, TResult]':
        return cls(param, data, None, False)

    @classmethod
    def error_result(cls, param: Optional[TParam], error: BaseException) -> 'CommandResult[TParam, TResult]':
        return cls(param, None, error, False)

    @classmethod
    def loading(cls, param: Optional[TParam] = None) -> 'CommandResult[TParam, TResult]':
        return cls(param, None, None, True)

    @classmethod
    def blank(cls) -> 'CommandResult[Any, Any]':
        return cls(None, None, None, False)

    @property
    def has_data(self) -> bool:
        return self.data is not None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def __str__(self) -> str:
        return (
            f"ParamData {self.param} - Data {self.data} - "
            f"HasError - {self.has_error} - IsExecuting - {self.is_executing}"
        )
