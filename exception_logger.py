"""
Exception Logger for the Portfolio Assistant

Central place where every assistant component reports recoverable problems:
malformed knowledge-base records, unreadable synonym entries, queries that
arrive before the knowledge base is loaded, and host-level failures.

Features:
- Thread-safe error logging
- Stack trace capture for exceptions
- Module tag on every entry (INDEX, SYNONYMS, ENGINE, LOADER, SERVER...)
- Optional log file, stdout otherwise
- Bounded in-memory history of recent entries for inspection
"""

import os
import threading
import traceback
from collections import deque
from datetime import datetime
from pathlib import Path
from typing import List, Optional


class ExceptionLogger:
    """
    Centralized error logging for the assistant.

    Entries are appended to ``log_file`` when one is configured and printed
    otherwise. The last ``history_limit`` entries are also kept in memory so
    hosts and tests can inspect what the engine reported.

    Attributes:
        log_file (str): Path to the current log file, or None
        lock (threading.Lock): Serializes file and history access
        history (deque): Recent formatted entries, oldest first
    """

    def __init__(self, history_limit: int = 200):
        """Initialize the exception logger."""
        self.log_file = None
        self.lock = threading.Lock()
        self.history = deque(maxlen=history_limit)

    def set_log_file(self, log_file_path: Optional[str]):
        """
        Set the log file path for error logging.

        Args:
            log_file_path (str): Full path to the error log file. ``None`` or
                an empty string switches back to stdout.
        """
        if not log_file_path:
            self.log_file = None
            return

        self.log_file = log_file_path
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            Path(log_dir).mkdir(parents=True, exist_ok=True)

    def log_exception(self, exception: Exception, module: str = "unknown",
                      context: Optional[str] = None):
        """
        Log an exception with its stack trace.

        Args:
            exception (Exception): The exception that occurred
            module (str): Name of the component where it occurred
            context (str, optional): What the component was doing
        """
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] [{module.upper()}] {type(exception).__name__}: {exception}"
        if context:
            log_entry += f" | Context: {context}"

        trace = "".join(traceback.format_exception(
            type(exception), exception, exception.__traceback__
        ))
        self._write(log_entry, detail=f"Stack Trace:\n{trace}" + "=" * 80)

    def log_error(self, error_message: str, module: str = "unknown",
                  context: Optional[str] = None):
        """
        Log an error message without an exception object.

        Args:
            error_message (str): The error message to log
            module (str): Name of the component reporting it
            context (str, optional): Additional context information
        """
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] [{module.upper()}] {error_message}"
        if context:
            log_entry += f" | Context: {context}"
        self._write(log_entry)

    def recent(self, module: Optional[str] = None) -> List[str]:
        """Return remembered entries, optionally only those of one module."""
        with self.lock:
            entries = list(self.history)
        if module is None:
            return entries
        tag = f"[{module.upper()}]"
        return [entry for entry in entries if tag in entry]

    def clear(self):
        with self.lock:
            self.history.clear()

    def _write(self, log_entry: str, detail: Optional[str] = None):
        with self.lock:
            self.history.append(log_entry)
            if not self.log_file:
                print(log_entry)
                return
            try:
                with open(self.log_file, "a", encoding="utf-8") as f:
                    f.write(log_entry + "\n")
                    if detail:
                        f.write(detail + "\n")
            except OSError as write_error:
                print(f"Failed to write to error log: {write_error}")
                print(f"Original error: {log_entry}")


# Global exception logger instance
exception_logger = ExceptionLogger()
