import pytest

from LTR.core.events import REPORTER_METHODS, EventHub
from LTR.core.logger import set_active_logger
from LTR.core.model import Suite, Test, TestError, build_suite
from LTR.core.utilities import VirtualClock


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def hub():
    return EventHub()


@pytest.fixture
def events(hub):
    """Every (topic, payload...) published on ``hub``, in order."""
    recorded = []
    for topic in REPORTER_METHODS:
        hub.subscribe(topic, lambda *payload, _topic=topic: recorded.append((_topic,) + payload))
    return recorded


@pytest.fixture(autouse=True)
def no_active_logger():
    """Make sure no test leaks an active logger into the next one."""
    set_active_logger(None)
    yield
    set_active_logger(None)


@pytest.fixture
def sample_run():
    """main > A (t1, B (t2, t3 failed), t4), C (t5).

    5 tests, 1 failure, 3 suites, 72 ms of recorded test time.
    """
    return build_suite({
        "name": "main",
        "tests": [
            {"name": "A", "tests": [
                {"name": "t1", "duration": 10},
                {"name": "B", "tests": [
                    {"name": "t2", "duration": 20},
                    {"name": "t3", "duration": 30, "error": {
                        "message": "expected 1 to equal 2",
                        "stack": "AssertionError: expected 1 to equal 2\n    at b_test.py:12",
                        "kind": "AssertionError",
                    }},
                ]},
                {"name": "t4", "duration": 5},
            ]},
            {"name": "C", "tests": [
                {"name": "t5", "duration": 7},
            ]},
        ],
    })


@pytest.fixture
def nested_pair():
    """main > A > B with one passing and one failing test."""
    root = Suite("main")
    suite_a = root.add(Suite("A"))
    suite_b = suite_a.add(Suite("B"))
    suite_b.add(Test("t1", time_elapsed=100))
    suite_b.add(Test("t2", time_elapsed=200,
                     error=TestError("boom", stack="trace", kind="AssertionError")))
    return root
