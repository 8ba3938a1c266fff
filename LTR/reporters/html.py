"""
LTR HTML Reporter
=================
Renders the run as an HTML document with two tables:

- a summary table (suites, tests, failed, success rate, duration)
- a hierarchical report table with one row per suite and per test, the
  first cell indented by ``depth * indent_size`` pixels

Rows are buffered while the run is in progress and the document is
replaced in one step when the root suite ends. In live mode the document
is also re-rendered after every top-level suite.

Author: DvidMakesThings
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..core.aggregator import RunAggregator
from ..core.logger import get_active_logger
from ..core.model import Suite, Test
from ..core.report_node import ReportNode
from ..core.utilities import format_duration
from .base import BaseReporter, write_atomic

# Size in pixels to indent tests and nested suites
INDENT_SIZE = 18

SUITE_MARKER = "▸"

SUMMARY_HEADERS = ["Suites", "Tests", "Failed", "Success Rate", "Duration"]


class HtmlReporter(BaseReporter):
    """Builds the HTML report from lifecycle events.

    Args:
        out_path (Optional[Union[str, Path]]): File the document is written
            to on every render. When None the document is only kept in
            memory (``document`` / ``output``).
        title (str): Report heading and page title.
        indent_size (int): Pixels of indentation per nesting level.
        live (bool): Re-render after each top-level suite, not only at the end.
        aggregator (Optional[RunAggregator]): Aggregator owned by this reporter.
        clock (Optional[Callable[[], float]]): Clock for a default aggregator.
    """

    name = "html"

    def __init__(self, out_path: Optional[Union[str, Path]] = None, *,
                 title: str = "Test Report",
                 indent_size: int = INDENT_SIZE,
                 live: bool = False,
                 aggregator: Optional[RunAggregator] = None,
                 clock: Optional[Callable[[], float]] = None):
        super().__init__(aggregator, clock)
        self.out_path = Path(out_path) if out_path else None
        self.title = title
        self.indent_size = int(indent_size)
        self.live = bool(live)

        self.document: Optional[ReportNode] = None
        self.output: Optional[str] = None
        self.render_count = 0
        self._rows: List[ReportNode] = []
        self._suite_rows: Dict[Suite, ReportNode] = {}

    # ------------------------ row builders ------------------------

    def _title_cell(self, row: ReportNode, depth: int, text: str, css_class: Optional[str] = None) -> ReportNode:
        attrs = {}
        if css_class:
            attrs["class"] = css_class
        if depth:
            attrs["style"] = f"padding-left: {depth * self.indent_size}px"
        cell = row.create_node("td", attrs)
        cell.set_content(text)
        return cell

    def _on_start(self) -> None:
        self._rows = []
        self._suite_rows = {}

    def _on_suite_start(self, suite: Suite, depth: int) -> None:
        row = ReportNode("tr", {"class": "suite"})
        self._title_cell(row, depth, f"{SUITE_MARKER} {suite.name}", "title")
        self._rows.append(row)
        self._suite_rows[suite] = row

    def _on_suite_end(self, suite: Suite, elapsed: float, depth: int) -> None:
        row = self._suite_rows.pop(suite)
        total = suite.num_tests
        failed = suite.num_failed_tests
        if failed:
            row.attributes["class"] += " failed"

        row.create_node("td").set_content(f"{total - failed}/{total} tests passed")
        row.create_node("td", {"class": "numeric duration"}).set_content(format_duration(elapsed))

        if self.live and depth == 0:
            self.render()

    def _on_test(self, test: Test, depth: int) -> None:
        row = ReportNode("tr")
        self._title_cell(row, depth, test.name)

        message_cell = row.create_node("td")
        if test.error is not None:
            row.attributes["class"] = "failed"
            message_cell.set_content(test.error.message)

        row.create_node("td", {"class": "numeric duration"}).set_content(format_duration(test.time_elapsed))
        self._rows.append(row)

    def _on_run_end(self, root: Suite) -> None:
        self.render()
        logger = get_active_logger()
        if logger:
            summary = self.aggregator.summary()
            logger.info(f"[HTML] {summary.suites} suites, {summary.tests} tests, "
                        f"{summary.failures} failed ({summary.success_rate_text})")
            if self.out_path:
                logger.info(f"[HTML] report written to: {self.out_path}")

    # ------------------------ document ------------------------

    def _summary_table(self) -> ReportNode:
        summary = self.aggregator.summary()
        table = ReportNode("table", {"class": "report"})

        header_row = table.create_node("thead").create_node("tr")
        for header in SUMMARY_HEADERS:
            attrs = {"class": "duration"} if header == "Duration" else None
            header_row.create_node("th", attrs).set_content(header)

        summary_row = table.create_node("tbody").create_node("tr", {"class": "summary"})
        values = [
            str(summary.suites),
            str(summary.tests),
            str(summary.failures),
            summary.success_rate_text,
            summary.duration_text,
        ]
        for value in values:
            summary_row.create_node("td", {"class": "numeric"}).set_content(value)
        return table

    def build_document(self) -> ReportNode:
        """Build a complete document from the current totals and buffered rows."""
        document = ReportNode("html")
        document.create_node("head").create_node("title").set_content(self.title)

        body = document.create_node("body")
        body.create_node("h1").set_content(self.title)
        body.create_node("h2").set_content("Summary")
        body.append(self._summary_table())
        body.create_node("h2").set_content("Test Suites")

        report_body = body.create_node("table", {"class": "report"}).create_node("tbody")
        for row in self._rows:
            report_body.append(row)
        return document

    def render(self) -> str:
        """Replace the current document and, when configured, the output file."""
        document = self.build_document()
        text = "<!DOCTYPE html>\n" + document.to_string(short_empty=False) + "\n"

        if self.out_path:
            write_atomic(self.out_path, text)

        self.document = document
        self.output = text
        self.render_count += 1
        return text
