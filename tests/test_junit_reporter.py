import io
import xml.etree.ElementTree as ET

from LTR.core.events import EventHub, attach, replay_run
from LTR.core.logger import LogConfig, create_logger, set_active_logger
from LTR.core.model import Suite, Test, TestError
from LTR.reporters.junit import XML_DECLARATION, JUnitXmlReporter, seconds


def _replay(root, clock, **kwargs):
    stream = io.StringIO()
    reporter = JUnitXmlReporter(stream, clock=clock, **kwargs)
    hub = EventHub()
    attach(hub, reporter)
    replay_run(hub, root, clock)
    return reporter, stream.getvalue()


def test_seconds():
    assert seconds(1500) == "1.5"
    assert seconds(2000) == "2"
    assert seconds(65) == "0.065"
    assert seconds(0.004) == "0.000004"


def test_nested_suites_match_call_order(nested_pair, clock):
    _, text = _replay(nested_pair, clock)
    assert text == (
        XML_DECLARATION + "\n"
        '<testsuites>'
        '<testsuite name="A" tests="2" failures="1" time="0.3">'
        '<testsuite name="B" tests="2" failures="1" time="0.3">'
        '<testcase name="t1" time="0.1"/>'
        '<testcase name="t2" time="0.2">'
        '<failure type="AssertionError" message="boom">trace</failure>'
        '</testcase>'
        '</testsuite>'
        '</testsuite>'
        '</testsuites>\n'
    )


def test_root_suite_never_becomes_a_node(sample_run, clock):
    _, text = _replay(sample_run, clock)
    tree = ET.fromstring(text.split("\n", 1)[1])
    assert tree.tag == "testsuites"
    names = [node.get("name") for node in tree.iter("testsuite")]
    assert names == ["A", "B", "C"]
    assert "main" not in names


def test_testsuite_attributes(sample_run, clock):
    _, text = _replay(sample_run, clock)
    tree = ET.fromstring(text.split("\n", 1)[1])
    suites = {node.get("name"): node for node in tree.iter("testsuite")}
    assert list(suites["A"].attrib) == ["name", "tests", "failures", "time"]
    assert suites["A"].attrib == {"name": "A", "tests": "4", "failures": "1", "time": "0.065"}
    assert suites["B"].attrib == {"name": "B", "tests": "2", "failures": "1", "time": "0.05"}
    assert suites["C"].attrib == {"name": "C", "tests": "1", "failures": "0", "time": "0.007"}


def test_failure_children(sample_run, clock):
    _, text = _replay(sample_run, clock)
    tree = ET.fromstring(text.split("\n", 1)[1])
    cases = {node.get("name"): node for node in tree.iter("testcase")}

    for name in ("t1", "t2", "t4", "t5"):
        assert cases[name].findall("failure") == []

    failures = cases["t3"].findall("failure")
    assert len(failures) == 1
    assert failures[0].get("type") == "AssertionError"
    assert failures[0].get("message") == "expected 1 to equal 2"
    assert failures[0].text == "AssertionError: expected 1 to equal 2\n    at b_test.py:12"


def test_failure_without_kind_or_stack(clock):
    root = Suite("main")
    suite = root.add(Suite("S"))
    suite.add(Test("bare", error=TestError("no details")))
    _, text = _replay(root, clock)
    assert '<failure type="Error" message="no details"/>' in text


def test_test_directly_in_root_attaches_to_testsuites(clock):
    root = Suite("main")
    root.add(Test("loose", time_elapsed=1000))
    _, text = _replay(root, clock)
    assert text.endswith('<testsuites><testcase name="loose" time="1"/></testsuites>\n')


def test_tree_is_discarded_after_emit(sample_run, clock):
    reporter, text = _replay(sample_run, clock)
    assert reporter.report is None
    assert reporter.output == text


def test_writes_file_without_stdout(sample_run, clock, tmp_path, capsys):
    out = tmp_path / "reports" / "junit.xml"
    reporter = JUnitXmlReporter(out_path=out, clock=clock)
    hub = EventHub()
    attach(hub, reporter)
    replay_run(hub, sample_run, clock)

    assert out.read_text(encoding="utf-8") == reporter.output
    assert capsys.readouterr().out == ""


def test_defaults_to_stdout(nested_pair, clock, capsys):
    hub = EventHub()
    attach(hub, JUnitXmlReporter(clock=clock))
    replay_run(hub, nested_pair, clock)
    assert capsys.readouterr().out.startswith(XML_DECLARATION + "\n<testsuites>")


def test_logs_written_path(sample_run, clock, tmp_path):
    lines = []
    logger = create_logger("junit", config=LogConfig(console_output=False, file_output=False))
    logger.add_subscriber(lines.append)
    set_active_logger(logger)

    out = tmp_path / "junit.xml"
    hub = EventHub()
    attach(hub, JUnitXmlReporter(out_path=out, clock=clock))
    replay_run(hub, sample_run, clock)

    assert any(f"[JUNIT] report written to: {out}" in line for line in lines)


def test_short_times_are_plain_decimals(clock):
    root = Suite("main")
    root.add(Suite("fast")).add(Test("t", time_elapsed=0.004))
    _, text = _replay(root, clock)
    assert '<testsuite name="fast" tests="1" failures="0" time="0.000004">' in text
    assert '<testcase name="t" time="0.000004"/>' in text
    assert "e-" not in text


def test_logs_node_counts_in_debug(sample_run, clock):
    lines = []
    logger = create_logger("junit", config=LogConfig(console_output=False, file_output=False, debug=True))
    logger.add_subscriber(lines.append)
    set_active_logger(logger)

    hub = EventHub()
    attach(hub, JUnitXmlReporter(io.StringIO(), clock=clock))
    replay_run(hub, sample_run, clock)

    assert any("[JUNIT] 3 testsuites, 5 testcases" in line for line in lines)
