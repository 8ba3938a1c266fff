"""
LTR Reporter Base
=================
Shared lifecycle plumbing for the HTML and JUnit XML reporters.

Author: DvidMakesThings
"""

from pathlib import Path
from typing import Callable, Optional
import os
import tempfile

from ..core.aggregator import RunAggregator
from ..core.logger import get_active_logger
from ..core.model import Suite, Test


def write_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` via a temp file and ``os.replace``.

    Readers of ``path`` see either the previous content or the new one,
    never a partially written file. Errors propagate to the caller.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


class BaseReporter:
    """Forwards lifecycle events to a per-run :class:`RunAggregator`.

    Subclasses implement the ``_on_*`` hooks. ``test_fail`` is the same
    handler as ``test_pass``: the test's error decides how it renders.

    Args:
        aggregator (Optional[RunAggregator]): Aggregator for this reporter.
            One aggregator must not be shared between reporters, since each
            reporter forwards every event to it.
        clock (Optional[Callable[[], float]]): Millisecond clock for the
            aggregator created when none is given.
    """

    name = "reporter"

    def __init__(self, aggregator: Optional[RunAggregator] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.aggregator = aggregator or RunAggregator(clock)

    # ------------------------ lifecycle handlers ------------------------

    def start(self) -> None:
        self.aggregator.start()
        self._on_start()

    def suite_start(self, suite: Suite) -> None:
        depth = self.aggregator.depth
        if not self.aggregator.suite_start(suite):
            return
        logger = get_active_logger()
        if logger:
            logger.debug(f"[{self.name.upper()}] suite start: {suite.name}")
        self._on_suite_start(suite, depth)

    def suite_end(self, suite: Suite) -> None:
        elapsed = self.aggregator.suite_end(suite)
        if elapsed is None:
            self._on_run_end(suite)
            return
        self._on_suite_end(suite, elapsed, self.aggregator.depth)

    def test_pass(self, test: Test) -> None:
        self.aggregator.test_end(test)
        self._on_test(test, self.aggregator.depth)

    test_fail = test_pass

    # ------------------------ hooks ------------------------

    def _on_start(self) -> None:
        pass

    def _on_suite_start(self, suite: Suite, depth: int) -> None:
        pass

    def _on_suite_end(self, suite: Suite, elapsed: float, depth: int) -> None:
        pass

    def _on_test(self, test: Test, depth: int) -> None:
        pass

    def _on_run_end(self, root: Suite) -> None:
        pass
