from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


# --- Command Options ---
class CommandOptions(BaseModel):
    """
    Per-command configuration, validated on construction.

    emit_initial_command_result: push a blank status record at construction
    emit_last_result: include the last successful value in running/error records
    emits_last_value_to_new_subscriptions: replay the latest result/status to late subscribers
    initial_last_result: seed value for RxCommand.last_result
    debug_name: label passed to the logging and exception hooks
    """
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    emit_initial_command_result: bool = False
    emit_last_result: bool = False
    emits_last_value_to_new_subscriptions: bool = False
    initial_last_result: Any = None
    debug_name: Optional[str] = None

    @property
    def replay_results(self) -> bool:
        # An initial record is only useful if late subscribers can see it
        return self.emits_last_value_to_new_subscriptions or self.emit_initial_command_result


# --- Logging ---
class LoggingSettings(BaseModel):
    debug_mode: bool = True
    log_dir: Optional[str] = None
    rotation: str = "10 MB"
    retention: str = "1 week"
