#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from ut_ast import SourceUnit
from ut_ast_printer import format_unit
from ut_checker import UnionTypeChecker
from ut_context import CheckerContext, LogLevel
from ut_diagnostics import Diagnostic, HostReporter, Violation, ViolationLog, diag_from_violation, is_in_lib_dir
from ut_logger import log_debug, log_info, log_stage, log_warning
from ut_registry import UnionTypeRegistry


@dataclass
class CheckResult:
    """
    Result of checking one SourceUnit.

    Contains:
      - the unit that was checked
      - the registry built while walking it
      - violations in detection order
      - the same violations as host diagnostics
    """
    unit: SourceUnit
    registry: UnionTypeRegistry = field(default_factory=UnionTypeRegistry)
    violations: List[Violation] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    def has_violations(self) -> bool:
        return bool(self.violations)


class UnionTypeDriver:
    """
    Runs the union-type checker over syntax trees handed over by a front-end.

    Each unit gets its own UnionTypeChecker, so nothing carries over between
    units or between runs.

    Entry points:
      - check(unit): check one unit, optionally pushing diagnostics to a host sink.
      - check_all(units): check several independent units in order.
    """

    def __init__(self, context: CheckerContext | None = None):
        self.context = context or CheckerContext.default()

    def check(
            self,
            unit: SourceUnit,
            sink: Optional[Callable[[Diagnostic], None]] = None,
    ) -> CheckResult:
        log_stage(self.context, "Checking", unit.filename)
        if self.context.log_level >= LogLevel.DEBUG:
            log_debug(self.context, format_unit(unit))

        reporter: ViolationLog
        if sink is not None:
            enabled = is_in_lib_dir(unit.filename) or not self.context.lib_dir_only
            reporter = HostReporter(sink, filename=unit.filename, enabled=enabled)
        else:
            reporter = ViolationLog()

        run = UnionTypeChecker(unit, self.context, reporter).check()

        result = CheckResult(unit=unit, registry=run.registry)
        result.violations.extend(run.violations)
        result.diagnostics.extend(diag_from_violation(v, filename=unit.filename) for v in run.violations)
        for diag in result.diagnostics:
            log_warning(self.context, diag.format())
        log_info(
            self.context,
            f"Found {result.violation_count} union-type violation(s) "
            f"across {len(run.registry.union_types)} union type(s)",
        )
        return result

    def check_all(self, units: Iterable[SourceUnit]) -> List[CheckResult]:
        return [self.check(unit) for unit in units]
