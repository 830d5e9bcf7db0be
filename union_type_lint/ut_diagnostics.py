#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import os
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Callable, List, Optional, Sequence, Tuple


DIAGNOSTIC_CODE_FAMILIES = {
    "UNI": [
        "UNI-0010",  # function literal matches no allowed alternative
        "UNI-0020",  # constructed object implements no allowed alternative
    ],
}

FUNCTION_MISMATCH = "UNI-0010"
OBJECT_MISMATCH = "UNI-0020"

MESSAGE_TEMPLATE = "{0} does not match any allowed type in @UnionType {1}: [{2}]."


def join_alternatives(alternatives: Sequence[str]) -> str:
    return ", ".join(alternatives)


def format_violation_message(target: str, union_type_name: str, alternatives: Sequence[str]) -> str:
    return MESSAGE_TEMPLATE.format(target, union_type_name, join_alternatives(alternatives))


@dataclass(frozen=True)
class SourceRange:
    offset: Optional[int]
    length: Optional[int]
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None


@dataclass(frozen=True)
class Violation:
    target: str
    union_type_name: str
    allowed_alternatives: Tuple[str, ...]
    line: Optional[int]
    offset: Optional[int]
    length: Optional[int]
    code: str = FUNCTION_MISMATCH
    column: Optional[int] = None

    @property
    def message(self) -> str:
        return format_violation_message(self.target, self.union_type_name, self.allowed_alternatives)

    @property
    def arguments(self) -> Tuple[str, str, str]:
        return self.target, self.union_type_name, join_alternatives(self.allowed_alternatives)

    def format_with_line(self) -> str:
        return f"{self.message} Line {self.line}."


@dataclass
class Diagnostic:
    kind: str  # "warning" for union-type violations
    message: str
    code: Optional[str] = None
    filename: Optional[str] = None  # file path

    # Primary location (start of the range)
    line: Optional[int] = None
    column: Optional[int] = None

    # Exact range for host highlighting
    offset: Optional[int] = None
    length: Optional[int] = None

    # Template arguments: (target, union type name, joined alternatives)
    arguments: Tuple[str, ...] = field(default_factory=tuple)

    def format(self) -> str:
        loc = ""
        if self.filename is not None:
            loc += f"{os.path.abspath(str(self.filename))}"
        if self.line is not None:
            loc += f":{self.line}"
            if self.column is not None:
                loc += f":{self.column}"
        if loc:
            loc += ": "
        return f"{loc}{self.kind}: {self.message}"


def diag_from_violation(
        violation: Violation,
        *,
        filename: Optional[str],
) -> Diagnostic:
    return Diagnostic(
        kind="warning",
        message=f"[{violation.code}] {violation.message}",
        code=violation.code,
        filename=filename,
        line=violation.line,
        column=violation.column,
        offset=violation.offset,
        length=violation.length,
        arguments=violation.arguments,
    )


def is_in_lib_dir(filename: Optional[str]) -> bool:
    if filename is None:
        return False
    return "lib" in PurePath(filename).parts[:-1]


class ViolationLog:
    """
    In-memory reporter: an ordered list of violations plus a running count.

    Order is detection order, which is traversal order.
    """

    def __init__(self) -> None:
        self.violations: List[Violation] = []
        self.violations_found = 0

    def report(
            self,
            target: str,
            union_type_name: str,
            allowed_alternatives: Sequence[str],
            source_range: SourceRange,
            *,
            code: str = FUNCTION_MISMATCH,
    ) -> Violation:
        violation = Violation(
            target=target,
            union_type_name=union_type_name,
            allowed_alternatives=tuple(allowed_alternatives),
            line=source_range.line,
            offset=source_range.offset,
            length=source_range.length,
            code=code,
            column=source_range.column,
        )
        self.violations_found += 1
        self.violations.append(violation)
        return violation

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]


class HostReporter(ViolationLog):
    """
    Push-style reporter for a host diagnostics engine.

    Every violation is recorded like in ViolationLog and, when enabled,
    forwarded to `sink` as a Diagnostic with the exact offset/length.
    """

    def __init__(
            self,
            sink: Callable[[Diagnostic], None],
            *,
            filename: Optional[str] = None,
            enabled: bool = True,
    ) -> None:
        super().__init__()
        self.sink = sink
        self.filename = filename
        self.enabled = enabled

    def report(
            self,
            target: str,
            union_type_name: str,
            allowed_alternatives: Sequence[str],
            source_range: SourceRange,
            *,
            code: str = FUNCTION_MISMATCH,
    ) -> Violation:
        violation = super().report(target, union_type_name, allowed_alternatives, source_range, code=code)
        if self.enabled:
            self.sink(diag_from_violation(violation, filename=self.filename))
        return violation
