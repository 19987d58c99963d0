import pytest
from loguru import logger

from rxcommand.core.commands import default_hooks
from rxcommand.core.listener import RxListener


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), format="{level} {message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def reset_globals():
    """Restore process-wide hooks and switches after each test."""
    yield
    default_hooks.exception_handler = None
    default_hooks.logging_handler = None
    RxListener.listen_to_command_exceptions = True
