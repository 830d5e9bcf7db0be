#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

# ut_internal_error.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ICELocation:
    filename: Optional[str]
    position: Optional[Tuple[int, int]]  # 1-based (line, column)


class InternalCheckerError(RuntimeError):
    """
    ICE = checker bug / violated traversal invariant.
    Not for problems in the checked code (those are Violations).
    """

    def __init__(self, message: str, loc: ICELocation | None = None):
        super().__init__(message)
        self.message = message
        self.loc = loc

    def format(self) -> str:
        message = self.message
        if "[ICE-" not in message:
            message = f"[ICE-9999] {message}"
        if self.loc and self.loc.filename:
            if self.loc.position is not None:
                line, column = self.loc.position
                return f"{self.loc.filename}:{line}:{column}: internal checker error: {message}"
            return f"{self.loc.filename}: internal checker error: {message}"
        return f"internal checker error: {message}"
