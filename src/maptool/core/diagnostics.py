"""Pending diagnostics recorded before logging is configured.

The configuration components run before the log directory is known, so they
record what they would have logged here. Once logging is attached the buffer is
flushed in order and later records go straight to loguru.
"""

import sys
from dataclasses import dataclass
from typing import List, Optional, Protocol

from loguru import logger


class Notifier(Protocol):
    """User-facing notification surface (dialogs, console, ...)."""

    def show_information(self, message: str) -> None: ...

    def show_warning(self, message: str, error: Optional[BaseException] = None) -> None: ...

    def show_error(self, message: str, error: Optional[BaseException] = None) -> None: ...


class ConsoleNotifier:
    """Notifier that writes to the terminal."""

    def __init__(self, stream=None) -> None:
        self._stream = stream

    def _write(self, text: str) -> None:
        print(text, file=self._stream or sys.stderr)

    def show_information(self, message: str) -> None:
        self._write(message)

    def show_warning(self, message: str, error: Optional[BaseException] = None) -> None:
        self._write(f"WARNING: {message}" + (f" ({error})" if error else ""))

    def show_error(self, message: str, error: Optional[BaseException] = None) -> None:
        self._write(f"ERROR: {message}" + (f" ({error})" if error else ""))


@dataclass
class Diagnostic:
    level: str  # 'INFO', 'WARNING', 'ERROR'
    message: str
    error: Optional[BaseException] = None
    notify: bool = False


class Diagnostics:
    """Buffers log records until a logger is attached.

    Attributes:
        notifier: Where warnings and errors flagged with ``notify`` are shown.
        pending: Records waiting for the logger.
    """

    def __init__(self, notifier: Optional[Notifier] = None) -> None:
        self.notifier: Notifier = notifier or ConsoleNotifier()
        self.pending: List[Diagnostic] = []
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def record(
        self,
        level: str,
        message: str,
        error: Optional[BaseException] = None,
        notify: bool = False,
    ) -> None:
        """Logs ``message`` now if attached, otherwise keeps it for later."""
        entry = Diagnostic(level=level, message=message, error=error, notify=notify)
        if self._attached:
            self._emit(entry)
        else:
            self.pending.append(entry)

    def info(self, message: str) -> None:
        self.record("INFO", message)

    def warning(self, message: str, error: Optional[BaseException] = None) -> None:
        self.record("WARNING", message, error, notify=True)

    def error(self, message: str, error: Optional[BaseException] = None) -> None:
        self.record("ERROR", message, error, notify=True)

    def attach(self) -> int:
        """Marks the logger as available and flushes pending records.

        Returns:
            Number of records flushed.
        """
        if self._attached:
            return 0
        self._attached = True
        flushed = self.pending
        self.pending = []
        for entry in flushed:
            self._emit(entry)
        return len(flushed)

    def _emit(self, entry: Diagnostic) -> None:
        if entry.error is not None:
            logger.opt(exception=entry.error).log(entry.level, entry.message)
        else:
            logger.log(entry.level, entry.message)
        if not entry.notify:
            return
        if entry.level == "ERROR":
            self.notifier.show_error(entry.message, entry.error)
        elif entry.level == "WARNING":
            self.notifier.show_warning(entry.message, entry.error)
