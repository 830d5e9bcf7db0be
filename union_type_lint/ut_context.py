"""
Checker context for cross-cutting options.

This module defines the CheckerContext dataclass which holds options that
affect logging, tracing and host-facing reporting, but never the set of
violations a run produces.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path


class LogLevel(IntEnum):
    """Hierarchical logging levels for the checker."""
    SILENT = 0      # No logging
    ERROR = 3       # Error messages only
    WARNING = 6     # Warning messages (default)
    INFO = 10       # General progress messages
    DEBUG = 30      # Traversal decisions


class TraceSink(Enum):
    """Where detection events are mirrored to."""
    NONE = "none"
    CONSOLE = "console"
    FILE = "file"


DEFAULT_TRACE_FILE = Path("union_type_lint_log.txt")


@dataclass
class CheckerContext:
    """
    Holds cross-cutting checker options.

    Attributes:
        log_level:          Current logging level.
        log_rich_format:    If True, emit logs with timestamp and level prefixes.
        trace:              Sink that mirrors detection events (none, console, file).
        trace_file:         File appended to when trace is TraceSink.FILE.
        lib_dir_only:       If True, host-facing reporting only covers units
                            located under a `lib` directory.
    """
    log_level: LogLevel = LogLevel.WARNING
    log_rich_format: bool = False
    trace: TraceSink = TraceSink.NONE
    trace_file: Path = field(default=DEFAULT_TRACE_FILE)
    lib_dir_only: bool = True

    @staticmethod
    def default() -> 'CheckerContext':
        """Create a CheckerContext with default settings."""
        return CheckerContext(log_level=LogLevel.WARNING)
