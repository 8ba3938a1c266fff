"""
LTR Console Reporter
====================
Mirrors run progress into the universal logger as it happens: one SUITE
line per suite start, a PASS/FAIL line per test and a RESULT line per
suite end, followed by the overall result.

Author: DvidMakesThings
"""

from typing import Callable, Optional

from ..core.aggregator import RunAggregator
from ..core.logger import UniversalLogger, get_active_logger
from ..core.model import Suite, Test
from ..core.utilities import format_duration
from .base import BaseReporter


class ConsoleReporter(BaseReporter):
    """Logs lifecycle events through a :class:`UniversalLogger`.

    Args:
        logger (Optional[UniversalLogger]): Logger to write to; the active
            logger is looked up on every event when omitted.
    """

    name = "console"

    def __init__(self, logger: Optional[UniversalLogger] = None,
                 aggregator: Optional[RunAggregator] = None,
                 clock: Optional[Callable[[], float]] = None):
        super().__init__(aggregator, clock)
        self._logger = logger

    @property
    def logger(self) -> Optional[UniversalLogger]:
        return self._logger or get_active_logger()

    def _on_suite_start(self, suite: Suite, depth: int) -> None:
        if self.logger:
            self.logger.suite_start(suite.name, depth)

    def _on_suite_end(self, suite: Suite, elapsed: float, depth: int) -> None:
        if self.logger:
            total = suite.num_tests
            self.logger.suite_end(suite.name, total - suite.num_failed_tests, total, format_duration(elapsed))

    def _on_test(self, test: Test, depth: int) -> None:
        if self.logger:
            message = test.error.message if test.error is not None else ""
            self.logger.test_result(test.name, test.has_passed, test.time_elapsed, message)

    def _on_run_end(self, root: Suite) -> None:
        logger = self.logger
        if not logger:
            return
        summary = self.aggregator.summary()
        logger.info(f"Suites: {summary.suites}  Tests: {summary.tests}  Failed: {summary.failures}  "
                    f"Success Rate: {summary.success_rate_text}  Duration: {summary.duration_text}")
        logger.run_end("FAIL" if summary.failures else "PASS")
