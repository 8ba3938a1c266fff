"""
LTR Run Aggregator
==================
Running totals for one reported run.

Each reporter owns one :class:`RunAggregator` and forwards its events to
it. Totals are folded in only when a top-level suite closes, using the
suite's recursive counts, so nested suites are never counted twice. Tests
reported directly inside the root suite are folded as they end.

Author: DvidMakesThings
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .model import Suite, Test
from .utilities import compute_success_rate, format_duration, format_success_rate, now_ms


@dataclass
class RunSummary:
    """Snapshot of the running totals."""
    suites: int
    tests: int
    failures: int
    success_rate: Optional[float]
    duration: float

    @property
    def success_rate_text(self) -> str:
        return format_success_rate(self.success_rate)

    @property
    def duration_text(self) -> str:
        return format_duration(self.duration)


class RunAggregator:
    """Counts suites, tests and failures as lifecycle events arrive.

    Args:
        clock (Optional[Callable[[], float]]): Millisecond clock; defaults to
            wall-clock time. Replays pass a virtual clock.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or now_ms
        self.suite_count = 0
        self.test_count = 0
        self.fail_count = 0
        self.tests_seen = 0
        self.failures_seen = 0
        self.depth = 0
        self.start_tick = self.clock()
        self._suite_starts: Dict[Suite, float] = {}

    def start(self) -> None:
        """Reset all totals and start timing the run."""
        self.suite_count = 0
        self.test_count = 0
        self.fail_count = 0
        self.tests_seen = 0
        self.failures_seen = 0
        self.depth = 0
        self._suite_starts.clear()
        self.start_tick = self.clock()

    def suite_start(self, suite: Suite) -> bool:
        """Record a suite start. Returns False for the root suite, which is skipped."""
        if suite.is_root:
            return False
        self.suite_count += 1
        self._suite_starts[suite] = self.clock()
        self.depth += 1
        return True

    def suite_end(self, suite: Suite) -> Optional[float]:
        """Record a suite end and return its elapsed milliseconds.

        Returns None for the root suite. The suite's counts are folded into
        the totals when it is a top-level suite (depth back to zero).
        """
        if suite.is_root:
            return None
        started = self._suite_starts.pop(suite, self.start_tick)
        elapsed = self.clock() - started
        self.depth = max(self.depth - 1, 0)
        if self.depth == 0:
            self.test_count += suite.num_tests
            self.fail_count += suite.num_failed_tests
        return elapsed

    def test_end(self, test: Test) -> None:
        """Count a finished test towards the live counters.

        A test published directly inside the root suite has no top-level
        suite to fold it, so it is folded into the totals here.
        """
        self.tests_seen += 1
        if not test.has_passed:
            self.failures_seen += 1
        if self.depth == 0:
            self.test_count += 1
            if not test.has_passed:
                self.fail_count += 1

    def success_rate(self) -> Optional[float]:
        """Folded success rate in percent, None until a test has been folded."""
        return compute_success_rate(self.test_count, self.fail_count)

    def elapsed(self) -> float:
        """Milliseconds since :meth:`start`."""
        return self.clock() - self.start_tick

    def summary(self) -> RunSummary:
        return RunSummary(
            suites=self.suite_count,
            tests=self.test_count,
            failures=self.fail_count,
            success_rate=self.success_rate(),
            duration=self.elapsed(),
        )
