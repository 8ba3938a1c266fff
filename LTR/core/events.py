"""
LTR Event Hub
=============
Synchronous publish/subscribe channel carrying test-lifecycle events.

Topics mirror the lifecycle a test-running framework publishes:

- ``start``        run started (no payload)
- ``/suite/start`` suite started (Suite)
- ``/suite/end``   suite ended (Suite)
- ``/test/pass``   test passed (Test)
- ``/test/fail``   test failed (Test)

Handlers run one at a time, in subscription order, on the publishing
thread. Handler exceptions propagate to the publisher.

Author: DvidMakesThings
"""

from typing import Any, Callable, Dict, List, Optional

from .logger import get_active_logger
from .model import Suite
from .utilities import VirtualClock


class Topic:
    """Names of the published lifecycle topics."""
    START = "start"
    SUITE_START = "/suite/start"
    SUITE_END = "/suite/end"
    TEST_PASS = "/test/pass"
    TEST_FAIL = "/test/fail"


# topic -> reporter method name
REPORTER_METHODS: Dict[str, str] = {
    Topic.START: "start",
    Topic.SUITE_START: "suite_start",
    Topic.SUITE_END: "suite_end",
    Topic.TEST_PASS: "test_pass",
    Topic.TEST_FAIL: "test_fail",
}


class Subscription:
    """Handle returned by :meth:`EventHub.subscribe`; call :meth:`remove` to unsubscribe."""

    def __init__(self, hub: "EventHub", topic: str, handler: Callable[..., Any]):
        self.hub = hub
        self.topic = topic
        self.handler = handler

    def remove(self) -> None:
        self.hub.unsubscribe(self.topic, self.handler)


class EventHub:
    """In-process topic channel with synchronous, in-order delivery."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable[..., Any]]] = {}

    def subscribe(self, topic: str, handler: Callable[..., Any]) -> Subscription:
        """Register ``handler`` for ``topic`` and return its subscription handle."""
        self._handlers.setdefault(topic, []).append(handler)
        return Subscription(self, topic, handler)

    def unsubscribe(self, topic: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(topic, [])
        if handler in handlers:
            handlers.remove(handler)

    def subscribers(self, topic: str) -> List[Callable[..., Any]]:
        return list(self._handlers.get(topic, []))

    def publish(self, topic: str, *payload: Any) -> None:
        """Invoke every handler of ``topic`` with ``payload``, in subscription order."""
        for handler in self.subscribers(topic):
            handler(*payload)


def attach(hub: EventHub, reporter: Any) -> List[Subscription]:
    """Subscribe a reporter's lifecycle methods to their topics.

    Only methods the reporter defines are subscribed, so partial reporters
    (e.g. one that only cares about failures) are fine.
    """
    subscriptions = []
    for topic, method_name in REPORTER_METHODS.items():
        method = getattr(reporter, method_name, None)
        if callable(method):
            subscriptions.append(hub.subscribe(topic, method))
    return subscriptions


def publish_suite(hub: EventHub, suite: Suite, clock: Optional[VirtualClock] = None) -> None:
    """Publish the events of ``suite``'s subtree in depth-first order.

    When a virtual clock is given it is advanced by each test's recorded
    duration before the test's event, so suite timings in the reports add
    up to the recorded test times.
    """
    hub.publish(Topic.SUITE_START, suite)
    for child in suite.tests:
        if isinstance(child, Suite):
            publish_suite(hub, child, clock)
            continue
        if clock is not None:
            clock.advance(child.time_elapsed)
        hub.publish(Topic.TEST_PASS if child.has_passed else Topic.TEST_FAIL, child)
    hub.publish(Topic.SUITE_END, suite)


def replay_run(hub: EventHub, root: Suite, clock: Optional[VirtualClock] = None) -> None:
    """Replay a whole recorded run: ``start`` followed by the root suite's events.

    Args:
        hub (EventHub): Channel the reporters are attached to.
        root (Suite): Root suite of the run (no parent).
        clock (Optional[VirtualClock]): Clock shared with the reporters'
            aggregators.

    Raises:
        ValueError: If ``root`` has a parent.
    """
    if not root.is_root:
        raise ValueError(f"Suite {root.name!r} is not a root suite")

    logger = get_active_logger()
    if logger:
        logger.debug(f"[REPLAY] {root.name}: {root.num_tests} tests, {root.num_failed_tests} failed")

    hub.publish(Topic.START)
    publish_suite(hub, root, clock)
