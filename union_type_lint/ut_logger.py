"""
Logging utilities for the union-type checker.

Messages go to stderr when the CheckerContext log level admits them. A
separate tracing channel mirrors detection events to the console or to a
file, independently of the log level.
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import sys
import time
from typing import Optional

from ut_context import CheckerContext, LogLevel, TraceSink

_LEVEL_TAGS = {
    LogLevel.ERROR: "ERROR",
    LogLevel.WARNING: "WARNING",
    LogLevel.INFO: "INFO",
    LogLevel.DEBUG: "DEBUG",
}


def log(context: CheckerContext, log_level: LogLevel, message: str) -> None:
    """
    Write `message` to stderr if the context's level admits `log_level`.

    With `log_rich_format` set, the line starts with a timestamp and the
    level tag, e.g. `2026-01-01 12:00:00 [INFO] ...`.
    """
    if context is None:
        print(f"(no checker context) {message}", file=sys.stderr)
        return
    if context.log_level < log_level:
        return
    if context.log_rich_format and log_level in _LEVEL_TAGS:
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        message = f"{stamp} [{_LEVEL_TAGS[log_level]}] {message}"
    print(message, file=sys.stderr)


def log_error(context: CheckerContext, message: str) -> None:
    log(context, LogLevel.ERROR, message)


def log_warning(context: CheckerContext, message: str) -> None:
    log(context, LogLevel.WARNING, message)


def log_info(context: CheckerContext, message: str) -> None:
    log(context, LogLevel.INFO, message)


def log_debug(context: CheckerContext, message: str) -> None:
    """
    Log a debug-level message. The traversal reports every decision here.

    Args:
        context: The checker context containing logging level.
        message: The message to log.
    """
    log(context, LogLevel.DEBUG, message)


def log_stage(context: CheckerContext, stage: str, unit: Optional[str] = None) -> None:
    """
    Log the start of a checker stage.

    Args:
        context: The checker context containing logging flags.
        stage: The name of the stage (e.g., "Checking").
        unit: Optional filename of the unit being processed.
    """
    if unit:
        log(context, LogLevel.INFO, f"{stage} unit '{unit}'")
    else:
        log(context, LogLevel.INFO, f"{stage}...")


def trace(context: CheckerContext, message: str) -> None:
    """
    Mirror a detection event to the configured trace sink.

    The console sink writes `[LOG] message` to stderr; the file sink appends
    one line to `context.trace_file`.
    """
    if context is None or context.trace is TraceSink.NONE:
        return
    if context.trace is TraceSink.CONSOLE:
        print(f"[LOG] {message}", file=sys.stderr)
    elif context.trace is TraceSink.FILE:
        with open(context.trace_file, "a", encoding="utf-8") as f:
            f.write(f"{message}\n")
