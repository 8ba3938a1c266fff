"""
LTR Universal Logger Module
===========================

Structured, timestamped logging shared by every LTR component.

The logger provides:
- Multiple log levels (DEBUG, INFO, WARN, ERROR, PASS, FAIL)
- Suite/test lifecycle lines (SUITE, RESULT) written by the reporters
- File and console output (console goes to stderr so report output on
  stdout stays machine-readable)
- Line subscribers, so a caller can mirror the log somewhere else
- A process-wide active logger hook used by reporters and tools

Author: DvidMakesThings
"""

import time
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional, TextIO
from dataclasses import dataclass
from enum import Enum

from .utilities import format_number


class LogLevel(Enum):
    """Enumeration of available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    PASS = "PASS"
    FAIL = "FAIL"
    SUITE = "SUITE"
    RESULT = "RESULT"


@dataclass
class LogConfig:
    """Configuration class for logger settings.

    Attributes:
        console_output (bool): Enable/disable console (stderr) output.
        file_output (bool): Enable/disable file output.
        debug (bool): If False, DEBUG lines are dropped.
        timestamp_format (str): Format string for timestamps.
    """
    console_output: bool = True
    file_output: bool = True
    debug: bool = False
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"


class UniversalLogger:
    """Universal logger for the LTR package.

    Every line is prefixed with a timestamp and written to the console,
    the log file and all registered subscribers. The logger is thread-safe;
    reporters themselves run single-threaded but the CLI and embedding
    frameworks may log from other threads.

    Args:
        name (str): Logger instance name (typically the run name).
        log_file (Optional[Path]): Path to log file. If None, no file logging.
        config (Optional[LogConfig]): Logger configuration. Uses defaults if None.

    Example:
        >>> logger = UniversalLogger("nightly", Path("nightly.log"))
        >>> logger.suite_start("Parser", depth=0)
        >>> logger.test_result("parses empty input", True, 12)
        >>> logger.suite_end("Parser", passed=1, total=1, duration="0:00.012")
    """

    def __init__(self, name: str, log_file: Optional[Path] = None,
                 config: Optional[LogConfig] = None):
        self.name = name
        self.config = config or LogConfig()
        self.log_file = log_file
        self._file_handle: Optional[TextIO] = None
        self._subscribers: List[Callable[[str], None]] = []
        self._lock = threading.Lock()

        if self.config.file_output and self.log_file:
            self._open_file()

    def _open_file(self) -> None:
        """Open the log file for writing.

        Creates parent directories if they don't exist and opens the file
        in write mode with UTF-8 encoding.
        """
        if not self.log_file:
            return

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(self.log_file, "w", encoding="utf-8")
        except OSError as e:
            print(f"Warning: Could not open log file {self.log_file}: {e}", file=sys.stderr)
            self._file_handle = None

    def _get_timestamp(self) -> str:
        return time.strftime(self.config.timestamp_format)

    def _write_line(self, message: str) -> None:
        """Write a timestamped line to console, file and subscribers.

        Args:
            message (str): The message to log (without timestamp).
        """
        timestamped_line = f"[{self._get_timestamp()}] {message}"

        with self._lock:
            if self.config.console_output:
                print(timestamped_line, file=sys.stderr)

            if self.config.file_output and self._file_handle:
                try:
                    self._file_handle.write(timestamped_line + "\n")
                    self._file_handle.flush()
                except OSError as e:
                    print(f"Warning: Could not write to log file: {e}", file=sys.stderr)

            subscribers = list(self._subscribers)

        for callback in subscribers:
            callback(timestamped_line)

    def _log(self, level: LogLevel, message: str) -> None:
        if level is LogLevel.DEBUG and not self.config.debug:
            return
        self._write_line(f"[{level.value}] {message}")

    # ======================== Subscribers ========================

    def add_subscriber(self, callback: Callable[[str], None]) -> None:
        """Register a callable that receives every timestamped line."""
        with self._lock:
            self._subscribers.append(callback)

    def remove_subscriber(self, callback: Callable[[str], None]) -> None:
        """Unregister a line subscriber. Unknown callbacks are ignored."""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    # ======================== Standard Log Levels ========================

    def log(self, message: str) -> None:
        """Generic logging entry point, logs at INFO."""
        self._log(LogLevel.INFO, message)

    def debug(self, message: str) -> None:
        """Log a DEBUG level message (only when ``config.debug`` is set)."""
        self._log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        """Log an INFO level message."""
        self._log(LogLevel.INFO, message)

    def warn(self, message: str) -> None:
        """Log a WARN level message."""
        self._log(LogLevel.WARN, message)

    def error(self, message: str) -> None:
        """Log an ERROR level message."""
        self._log(LogLevel.ERROR, message)

    def pass_(self, message: str) -> None:
        """Log a PASS result message."""
        self._log(LogLevel.PASS, message)

    def fail(self, message: str) -> None:
        """Log a FAIL result message."""
        self._log(LogLevel.FAIL, message)

    # ======================== Run Lifecycle Logging ========================

    def run_start(self, run_name: str) -> None:
        """Log the start of a reported run."""
        self._write_line(f"===== {run_name}: START =====")

    def run_end(self, result: str) -> None:
        """Log the end of a reported run with its overall result.

        Args:
            result (str): Overall result (typically "PASS" or "FAIL").
        """
        self._write_line(f"===== RESULT: {result} =====")

    def suite_start(self, suite_name: str, depth: int = 0) -> None:
        """Log the start of a suite, indented by its nesting depth.

        Args:
            suite_name (str): Name of the suite being started.
            depth (int): Nesting depth below the root suite (0 = top level).
        """
        self._log(LogLevel.SUITE, f"{'  ' * depth}{suite_name}")

    def suite_end(self, suite_name: str, passed: int, total: int, duration: str) -> None:
        """Log the end of a suite with its pass count and formatted duration."""
        self._log(LogLevel.RESULT, f"{suite_name}: {passed}/{total} tests passed ({duration})")

    def test_result(self, test_name: str, passed: bool, duration_ms: float,
                    message: str = "") -> None:
        """Log a single test outcome as a PASS or FAIL line.

        Args:
            test_name (str): Name of the test.
            passed (bool): Whether the test passed.
            duration_ms (float): Elapsed test time in milliseconds.
            message (str, optional): Error message for failed tests.
        """
        text = f"{test_name} ({format_number(duration_ms)} ms)"
        if passed:
            self.pass_(text)
        else:
            self.fail(f"{text}: {message}" if message else text)

    # ======================== Resource Management ========================

    def close(self) -> None:
        """Close the logger and release the file handle."""
        with self._lock:
            if self._file_handle:
                try:
                    self._file_handle.close()
                finally:
                    self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# ======================== Global Logger Management ========================

_ACTIVE_LOGGER: Optional[UniversalLogger] = None
_LOGGER_LOCK = threading.Lock()


def set_active_logger(logger: Optional[UniversalLogger]) -> None:
    """Set the active logger instance for global access.

    Args:
        logger (Optional[UniversalLogger]): Logger instance to set as active,
            or None to clear the active logger.
    """
    global _ACTIVE_LOGGER
    with _LOGGER_LOCK:
        _ACTIVE_LOGGER = logger


def get_active_logger() -> Optional[UniversalLogger]:
    """Get the currently active logger instance, or None."""
    with _LOGGER_LOCK:
        return _ACTIVE_LOGGER


def create_logger(name: str, log_file: Optional[Path] = None,
                  config: Optional[LogConfig] = None) -> UniversalLogger:
    """Create a new logger instance with the specified configuration.

    Args:
        name (str): Name for the logger instance.
        log_file (Optional[Path]): Path to the log file, or None for console-only.
        config (Optional[LogConfig]): Logger configuration, or None for defaults.

    Returns:
        UniversalLogger: Configured logger instance.

    Example:
        >>> logger = create_logger("nightly", Path("nightly.log"))
        >>> set_active_logger(logger)
        >>> logger.info("Replay started")
    """
    return UniversalLogger(name, log_file, config)
