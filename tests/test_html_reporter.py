import pytest

from LTR.core.events import EventHub, Topic, attach, replay_run
from LTR.core.model import Suite, Test, TestError
from LTR.reporters.html import INDENT_SIZE, HtmlReporter


def _replay(root, clock, **kwargs):
    reporter = HtmlReporter(clock=clock, **kwargs)
    hub = EventHub()
    attach(hub, reporter)
    replay_run(hub, root, clock)
    return reporter


def _report_rows(reporter):
    tables = reporter.document.find_all("table")
    return tables[1].find_all("tr")


def _summary_cells(reporter):
    summary_row = reporter.document.find_all("table")[0].find_all("tbody")[0].children[0]
    return [cell.content for cell in summary_row.children]


def test_summary_row(sample_run, clock):
    reporter = _replay(sample_run, clock)
    assert _summary_cells(reporter) == ["3", "5", "1", "80%", "0:00.072"]


def test_summary_headers(sample_run, clock):
    reporter = _replay(sample_run, clock)
    headers = reporter.document.find_all("th")
    assert [h.content for h in headers] == ["Suites", "Tests", "Failed", "Success Rate", "Duration"]
    assert headers[-1].attributes == {"class": "duration"}


def test_rows_follow_event_order(sample_run, clock):
    reporter = _replay(sample_run, clock)
    titles = [row.children[0].content for row in _report_rows(reporter)]
    assert titles == ["▸ A", "t1", "▸ B", "t2", "t3", "t4", "▸ C", "t5"]


def test_root_suite_has_no_row(sample_run, clock):
    reporter = _replay(sample_run, clock)
    assert "main" not in reporter.output


def test_indentation(sample_run, clock):
    reporter = _replay(sample_run, clock)
    rows = {row.children[0].content: row.children[0] for row in _report_rows(reporter)}
    assert "style" not in rows["▸ A"].attributes
    assert rows["t1"].attributes["style"] == f"padding-left: {INDENT_SIZE}px"
    assert rows["▸ B"].attributes["style"] == f"padding-left: {INDENT_SIZE}px"
    assert rows["t3"].attributes["style"] == f"padding-left: {2 * INDENT_SIZE}px"


def test_custom_indent_size(sample_run, clock):
    reporter = _replay(sample_run, clock, indent_size=10)
    rows = {row.children[0].content: row.children[0] for row in _report_rows(reporter)}
    assert rows["t3"].attributes["style"] == "padding-left: 20px"


def test_suite_rows(sample_run, clock):
    reporter = _replay(sample_run, clock)
    rows = {row.children[0].content: row for row in _report_rows(reporter)}

    assert rows["▸ A"].attributes["class"] == "suite failed"
    assert rows["▸ B"].attributes["class"] == "suite failed"
    assert rows["▸ C"].attributes["class"] == "suite"
    assert [cell.content for cell in rows["▸ A"].children[1:]] == ["3/4 tests passed", "0:00.065"]
    assert [cell.content for cell in rows["▸ C"].children[1:]] == ["1/1 tests passed", "0:00.007"]
    assert rows["▸ A"].children[0].attributes["class"] == "title"


def test_test_rows(sample_run, clock):
    reporter = _replay(sample_run, clock)
    rows = {row.children[0].content: row for row in _report_rows(reporter)}

    passed, failed = rows["t2"], rows["t3"]
    assert "class" not in passed.attributes
    assert passed.children[1].content is None
    assert passed.children[2].content == "0:00.020"
    assert passed.children[2].attributes == {"class": "numeric duration"}

    assert failed.attributes["class"] == "failed"
    assert failed.children[1].content == "expected 1 to equal 2"


def test_output_is_html_document(sample_run, clock):
    reporter = _replay(sample_run, clock, title="Nightly")
    assert reporter.output.startswith("<!DOCTYPE html>\n<html><head><title>Nightly</title></head><body><h1>Nightly</h1>")
    assert "<td></td>" in reporter.output
    assert "<td/>" not in reporter.output


def test_renders_once_in_batch_mode(sample_run, clock, tmp_path):
    out = tmp_path / "report.html"
    reporter = HtmlReporter(out, clock=clock)
    hub = EventHub()
    attach(hub, reporter)

    renders = []
    hub.subscribe(Topic.SUITE_END, lambda suite: renders.append(reporter.render_count))
    replay_run(hub, sample_run, clock)

    assert renders == [0, 0, 0, 1]
    assert out.read_text(encoding="utf-8") == reporter.output


def test_live_mode_renders_after_top_level_suites(sample_run, clock, tmp_path):
    out = tmp_path / "live.html"
    reporter = HtmlReporter(out, live=True, clock=clock)
    hub = EventHub()
    attach(hub, reporter)

    snapshots = []
    hub.subscribe(Topic.SUITE_END, lambda suite: snapshots.append((suite.name, reporter.render_count)))
    replay_run(hub, sample_run, clock)

    assert snapshots == [("B", 0), ("A", 1), ("C", 2), ("main", 3)]
    assert _summary_cells(reporter)[:3] == ["3", "5", "1"]


def test_live_and_batch_final_output_match(sample_run, tmp_path):
    from LTR.core.utilities import VirtualClock

    batch = _replay(sample_run, VirtualClock())
    live = _replay(sample_run, VirtualClock(), live=True)
    assert batch.output == live.output


def test_summary_placeholder_before_any_test(clock):
    reporter = HtmlReporter(clock=clock)
    reporter.start()
    reporter.render()
    assert _summary_cells(reporter) == ["0", "0", "0", "-", "0:00.000"]


def test_escapes_names(clock):
    root = Suite("main")
    root.add(Suite("<script>")).add(Test("a & b"))
    reporter = _replay(root, clock)
    assert "&lt;script&gt;" in reporter.output
    assert "a &amp; b" in reporter.output


def test_write_errors_propagate(sample_run, clock, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    reporter = HtmlReporter(blocker / "report.html", clock=clock)
    hub = EventHub()
    attach(hub, reporter)
    with pytest.raises(OSError):
        replay_run(hub, sample_run, clock)


def test_summary_counts_tests_directly_in_root(clock):
    root = Suite("main")
    root.add(Test("loose", time_elapsed=5, error=TestError("boom")))
    root.add(Suite("S")).add(Test("nested", time_elapsed=1))
    reporter = _replay(root, clock)
    assert _summary_cells(reporter) == ["1", "2", "1", "50%", "0:00.006"]
