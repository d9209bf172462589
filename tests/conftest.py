import sys
from pathlib import Path
from typing import Optional

import pytest
from loguru import logger

from maptool.core.cmdline import CommandLineSource
from maptool.core.context import ConfigContext
from maptool.core.registry import PropertyRegistry
from maptool.core.startup_file import StartupFileSource
from maptool.core.system import SystemProperties


class RecordingNotifier:
    """Notifier that remembers what would have been shown to the user."""

    def __init__(self):
        self.information: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def show_information(self, message: str) -> None:
        self.information.append(message)

    def show_warning(self, message: str, error: Optional[BaseException] = None) -> None:
        self.warnings.append(message)

    def show_error(self, message: str, error: Optional[BaseException] = None) -> None:
        self.errors.append(message)


@pytest.fixture
def home(tmp_path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def environ() -> dict:
    """Stand-in for os.environ; tests put system properties here."""
    return {}


@pytest.fixture
def system(environ, home) -> SystemProperties:
    return SystemProperties(
        environ,
        derived={
            "os.name": "Linux",
            "user.home": str(home),
            "user.language": "en",
            "user.region": "US",
        },
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_context(system, notifier):
    def _make(*args: str) -> ConfigContext:
        return ConfigContext.create(list(args), system=system, notifier=notifier)

    return _make


@pytest.fixture
def make_registry(system):
    def _make(*args: str, startup_file: Optional[StartupFileSource] = None) -> PropertyRegistry:
        cmdline = CommandLineSource()
        cmdline.initialize(list(args))
        return PropertyRegistry(system, cmdline, startup_file)

    return _make


@pytest.fixture
def startup_file(tmp_path) -> StartupFileSource:
    """An in-memory startup file; values are set without touching disk."""
    return StartupFileSource(tmp_path / "startup.properties")


@pytest.fixture
def log_messages():
    """Collects loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def restore_logger():
    """For tests that let setup_logging() replace the loguru handlers."""
    yield
    logger.remove()
    logger.add(sys.stderr)
