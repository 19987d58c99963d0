import sys
import pytest
from loguru import logger
from pydantic import ValidationError

from rxcommand.core.commands import RxCommand
from rxcommand.core.config import CommandOptions, LoggingSettings
from rxcommand.core.logging import setup_logging


def test_command_options_defaults():
    options = CommandOptions()

    assert options.emit_initial_command_result is False
    assert options.emit_last_result is False
    assert options.emits_last_value_to_new_subscriptions is False
    assert options.initial_last_result is None
    assert options.debug_name is None
    assert options.replay_results is False


@pytest.mark.parametrize("field", ["emit_initial_command_result", "emits_last_value_to_new_subscriptions"])
def test_replay_results(field):
    assert CommandOptions(**{field: True}).replay_results is True


def test_unknown_option_rejected():
    with pytest.raises(ValidationError):
        CommandOptions(emit_everything=True)


def test_options_are_frozen():
    options = CommandOptions()
    with pytest.raises(ValidationError):
        options.debug_name = "changed"


def test_create_rejects_unknown_option():
    with pytest.raises(ValidationError):
        RxCommand.create(lambda x: x, debugName="camel")


def test_initial_last_result_accepts_any_object():
    marker = object()
    assert CommandOptions(initial_last_result=marker).initial_last_result is marker


def test_setup_logging_creates_log_dir(tmp_path):
    log_dir = tmp_path / "logs"
    try:
        setup_logging(LoggingSettings(debug_mode=False, log_dir=str(log_dir)))
        assert log_dir.is_dir()
    finally:
        logger.remove()
        logger.add(sys.stderr)
