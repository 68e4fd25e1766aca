"""Logging framework for PyMemSpec.
Builders report each construction step through a shared logger. Steps are
logged at DEBUG or TRACE so a normal run stays quiet; raise the level to
follow allocations, fresh symbols and points-to facts as they are recorded.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Log levels for PyMemSpec."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3
    TRACE = 4

    @classmethod
    def from_name(cls, name: str) -> LogLevel:
        """Parse a level name such as ``"debug"``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}") from None


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    GRAY = "\033[90m"


def supports_color(stream: TextIO) -> bool:
    """Check if the stream supports ANSI colors."""
    if not hasattr(stream, "isatty"):
        return False
    if not stream.isatty():
        return False
    if sys.platform == "win32":
        return bool(os.environ.get("TERM") or "ANSICON" in os.environ)
    return True


@dataclass
class LogEntry:
    """A log entry with metadata."""

    level: LogLevel
    message: str
    category: str = "general"
    timestamp: float = field(default_factory=time.time)
    context: dict[str, Any] = field(default_factory=dict)

    def format(self, color: bool = True, show_time: bool = True) -> str:
        """Format the log entry for display."""
        parts = []
        if show_time:
            elapsed = time.strftime("%H:%M:%S", time.localtime(self.timestamp))
            if color:
                parts.append(f"{Colors.GRAY}{elapsed}{Colors.RESET}")
            else:
                parts.append(elapsed)
        level_str = self._level_str(color)
        if level_str:
            parts.append(level_str)
        if self.category != "general":
            if color:
                parts.append(f"{Colors.CYAN}[{self.category}]{Colors.RESET}")
            else:
                parts.append(f"[{self.category}]")
        parts.append(self.message)
        return " ".join(parts)

    def _level_str(self, color: bool) -> str:
        if self.level == LogLevel.QUIET:
            return ""
        indicators = {
            LogLevel.NORMAL: ("•", Colors.WHITE),
            LogLevel.VERBOSE: ("→", Colors.BLUE),
            LogLevel.DEBUG: ("⚙", Colors.MAGENTA),
            LogLevel.TRACE: ("⋯", Colors.GRAY),
        }
        char, col = indicators.get(self.level, ("", ""))
        if color:
            return f"{col}{char}{Colors.RESET}"
        return char


class MemSpecLogger:
    """Main logger for PyMemSpec."""

    def __init__(
        self,
        level: LogLevel = LogLevel.NORMAL,
        color: bool = True,
        stream: TextIO | None = None,
        file_path: Path | None = None,
        keep_entries: bool = True,
    ):
        self.level = level
        self._stream = stream or sys.stderr
        self._color = color and supports_color(self._stream)
        self._file_handle: TextIO | None = None
        self._keep_entries = keep_entries
        self._entries: list[LogEntry] = []
        self._counters: dict[str, int] = {}
        if file_path is not None:
            self.open_file(file_path)

    def set_level(self, level: LogLevel) -> None:
        """Set the logging level."""
        self.level = level

    def is_enabled(self, level: LogLevel) -> bool:
        """Check if a message at this level would be shown."""
        return level <= self.level

    def _emit(self, entry: LogEntry) -> None:
        if self._keep_entries:
            self._entries.append(entry)
        if self.is_enabled(entry.level):
            self._stream.write(entry.format(color=self._color) + "\n")
            self._stream.flush()
            if self._file_handle:
                self._file_handle.write(entry.format(color=False) + "\n")
                self._file_handle.flush()

    def log(
        self,
        level: LogLevel,
        message: str,
        category: str = "general",
        **context: Any,
    ) -> None:
        """Log a message at the specified level."""
        self._emit(LogEntry(level=level, message=message, category=category, context=context))

    def info(self, message: str, **context: Any) -> None:
        self.log(LogLevel.NORMAL, message, **context)

    def verbose(self, message: str, **context: Any) -> None:
        self.log(LogLevel.VERBOSE, message, **context)

    def debug(self, message: str, **context: Any) -> None:
        self.log(LogLevel.DEBUG, message, **context)

    def trace(self, message: str, **context: Any) -> None:
        self.log(LogLevel.TRACE, message, **context)

    def success(self, message: str) -> None:
        """Log a success message with green checkmark."""
        if self.is_enabled(LogLevel.NORMAL):
            if self._color:
                self._stream.write(f"{Colors.GREEN}✓{Colors.RESET} {message}\n")
            else:
                self._stream.write(f"✓ {message}\n")
            self._stream.flush()

    def warning(self, message: str) -> None:
        """Log a warning message (shown unless QUIET)."""
        if self.level == LogLevel.QUIET:
            return
        if self._color:
            self._stream.write(f"{Colors.YELLOW}⚠{Colors.RESET} {message}\n")
        else:
            self._stream.write(f"⚠ {message}\n")
        self._stream.flush()

    def error(self, message: str) -> None:
        """Log an error message (always shown)."""
        if self._color:
            self._stream.write(f"{Colors.RED}✗{Colors.RESET} {message}\n")
        else:
            self._stream.write(f"✗ {message}\n")
        self._stream.flush()

    @contextmanager
    def timer(self, name: str, category: str = "timing"):
        """Context manager for timing operations."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.verbose(f"{name}: {elapsed:.3f}s", category=category)

    def count(self, name: str, increment: int = 1) -> int:
        """Increment a counter and return new value."""
        self._counters[name] = self._counters.get(name, 0) + increment
        return self._counters[name]

    def get_count(self, name: str) -> int:
        return self._counters.get(name, 0)

    def reset_counters(self) -> None:
        self._counters.clear()

    def get_entries(
        self,
        level: LogLevel | None = None,
        category: str | None = None,
    ) -> list[LogEntry]:
        """Get logged entries, optionally filtered."""
        entries = self._entries
        if level is not None:
            entries = [e for e in entries if e.level == level]
        if category is not None:
            entries = [e for e in entries if e.category == category]
        return entries

    def clear(self) -> None:
        self._entries.clear()

    def open_file(self, path: Path) -> None:
        """Mirror shown entries into a file."""
        self._file_handle = open(path, "w", encoding="utf-8")

    def close(self) -> None:
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None


_logger: MemSpecLogger | None = None


def get_logger() -> MemSpecLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = MemSpecLogger()
    return _logger


def set_logger(logger: MemSpecLogger) -> None:
    """Set the global logger instance."""
    global _logger
    _logger = logger


def configure_logging(
    level: LogLevel = LogLevel.NORMAL,
    color: bool = True,
    file_path: Path | None = None,
    stream: TextIO | None = None,
) -> MemSpecLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = MemSpecLogger(level=level, color=color, stream=stream, file_path=file_path)
    return _logger


class PythonLoggingBridge(logging.Handler):
    """Forward records from Python's logging module to the PyMemSpec logger."""

    def __init__(self, memspec_logger: MemSpecLogger):
        super().__init__()
        self.memspec_logger = memspec_logger
        self._level_map = {
            logging.DEBUG: LogLevel.DEBUG,
            logging.INFO: LogLevel.NORMAL,
        }

    def emit(self, record: logging.LogRecord) -> None:
        message = self.format(record)
        if record.levelno >= logging.ERROR:
            self.memspec_logger.error(message)
        elif record.levelno >= logging.WARNING:
            self.memspec_logger.warning(message)
        else:
            level = self._level_map.get(record.levelno, LogLevel.TRACE)
            self.memspec_logger.log(level, message, category="python")


def setup_python_logging(level: int = logging.INFO) -> logging.Logger:
    """Route the ``pymemspec`` stdlib logger through the PyMemSpec logger."""
    logger = logging.getLogger("pymemspec")
    logger.setLevel(level)
    if not any(isinstance(h, PythonLoggingBridge) for h in logger.handlers):
        logger.addHandler(PythonLoggingBridge(get_logger()))
    return logger


__all__ = [
    "LogLevel",
    "LogEntry",
    "Colors",
    "MemSpecLogger",
    "get_logger",
    "set_logger",
    "configure_logging",
    "setup_python_logging",
    "PythonLoggingBridge",
    "supports_color",
]
