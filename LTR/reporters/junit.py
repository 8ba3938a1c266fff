"""
LTR JUnit XML Reporter
======================
Builds a JUnit ``testsuites`` document while the run progresses and emits
it once the root suite ends.

The root suite itself never becomes a ``testsuite`` node. A test reported
directly inside the root suite therefore has no enclosing ``testsuite``
and its ``testcase`` is placed straight under ``testsuites``. Strict JUnit
schemas reject that shape, but many consumers accept it, and wrapping the
test in a synthetic suite would invent a suite the run never had.

Author: DvidMakesThings
"""

import sys
from pathlib import Path
from typing import Callable, Dict, Optional, TextIO, Union

from ..core.aggregator import RunAggregator
from ..core.logger import get_active_logger
from ..core.model import Suite, Test
from ..core.report_node import ReportNode
from ..core.utilities import format_number
from .base import BaseReporter, write_atomic

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" ?>'


def seconds(ms: float) -> str:
    """Milliseconds as a JUnit ``time`` value in seconds (``"1.5"``, ``"2"``)."""
    return format_number(ms / 1000)


class JUnitXmlReporter(BaseReporter):
    """Writes the run as JUnit XML.

    Nesting of ``testsuite`` nodes mirrors suite nesting; the root suite
    itself never becomes a node.

    Args:
        stream (Optional[TextIO]): Where the document is printed at the end
            of the run. Defaults to ``sys.stdout`` when no ``out_path`` is
            given; pass ``emit_stream=False`` to only write the file.
        out_path (Optional[Union[str, Path]]): Optional file for the document.
        emit_stream (Optional[bool]): Force printing to the stream on or off.
        aggregator (Optional[RunAggregator]): Aggregator owned by this reporter.
        clock (Optional[Callable[[], float]]): Clock for a default aggregator.
    """

    name = "junit"

    def __init__(self, stream: Optional[TextIO] = None, *,
                 out_path: Optional[Union[str, Path]] = None,
                 emit_stream: Optional[bool] = None,
                 aggregator: Optional[RunAggregator] = None,
                 clock: Optional[Callable[[], float]] = None):
        super().__init__(aggregator, clock)
        self.stream = stream
        self.out_path = Path(out_path) if out_path else None
        if emit_stream is None:
            emit_stream = stream is not None or self.out_path is None
        self.emit_stream = emit_stream

        self.report: Optional[ReportNode] = None
        self.output: Optional[str] = None
        self._suite_nodes: Dict[Suite, ReportNode] = {}

    def _on_start(self) -> None:
        self.report = ReportNode("testsuites")
        self.output = None
        self._suite_nodes = {}

    def _node_for(self, suite: Optional[Suite]) -> ReportNode:
        if self.report is None:
            self._on_start()
        if suite is not None and suite in self._suite_nodes:
            return self._suite_nodes[suite]
        return self.report

    def _on_suite_start(self, suite: Suite, depth: int) -> None:
        parent_node = self._node_for(suite.parent)
        self._suite_nodes[suite] = parent_node.create_node("testsuite")

    def _on_suite_end(self, suite: Suite, elapsed: float, depth: int) -> None:
        suite_node = self._suite_nodes.pop(suite)
        suite_node.attributes = {
            "name": suite.name,
            "tests": str(suite.num_tests),
            "failures": str(suite.num_failed_tests),
            "time": seconds(elapsed),
        }

    def _on_test(self, test: Test, depth: int) -> None:
        suite_node = self._node_for(test.parent)
        test_node = suite_node.create_node("testcase", {
            "name": test.name,
            "time": seconds(test.time_elapsed),
        })

        if test.error is not None:
            failure_node = test_node.create_node("failure", {
                "type": test.error.type_name,
                "message": test.error.message,
            })
            failure_node.set_content(test.error.stack or "")

    def _on_run_end(self, root: Suite) -> None:
        report = self._node_for(None)
        text = f"{XML_DECLARATION}\n{report.to_string()}\n"

        if self.emit_stream:
            stream = self.stream or sys.stdout
            stream.write(text)
            stream.flush()
        if self.out_path:
            write_atomic(self.out_path, text)

        self.output = text
        self.report = None
        self._suite_nodes = {}

        logger = get_active_logger()
        if logger:
            logger.debug(f"[JUNIT] {len(report.find_all('testsuite'))} testsuites, "
                         f"{len(report.find_all('testcase'))} testcases")
            if self.out_path:
                logger.info(f"[JUNIT] report written to: {self.out_path}")
