"""
LTR Run Model
=============
Data structures for the suites and tests a test-running framework reports.

Suites and tests are owned by the framework. Reporters only read them and
keep their own bookkeeping in side tables keyed by suite identity, which
is why both classes compare by identity (``eq=False``).

Author: DvidMakesThings
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

GENERIC_ERROR_TYPE = "Error"


@dataclass(frozen=True)
class TestError:
    """Error attached to a failed test.

    Attributes:
        message: Human-readable failure message.
        stack: Stack trace text, empty when unknown.
        kind: Declared error classification (e.g. ``"AssertionError"``),
            None when the producer could not name it.
    """
    __test__ = False

    message: str
    stack: str = ""
    kind: Optional[str] = None

    @property
    def type_name(self) -> str:
        """The declared kind, or the generic ``"Error"`` label."""
        return self.kind or GENERIC_ERROR_TYPE

    @classmethod
    def from_exception(cls, exc: BaseException) -> "TestError":
        """Build an error record from a live exception, including its traceback."""
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(message=str(exc), stack=stack.rstrip("\n"), kind=type(exc).__name__)


@dataclass(eq=False)
class Test:
    """A single reported test.

    Attributes:
        name: Test name.
        time_elapsed: Elapsed time in milliseconds.
        error: Attached error for failed tests, None for passing ones.
        parent: Enclosing suite.
    """
    __test__ = False

    name: str
    time_elapsed: float = 0.0
    error: Optional[TestError] = None
    parent: Optional["Suite"] = field(default=None, repr=False)

    @property
    def has_passed(self) -> bool:
        return self.error is None


@dataclass(eq=False)
class Suite:
    """A named, possibly nested group of tests.

    ``tests`` holds the children in execution order; an entry is either a
    :class:`Test` or a nested :class:`Suite`. The root suite generated by the
    framework has no parent and is never rendered.
    """
    name: str
    parent: Optional["Suite"] = field(default=None, repr=False)
    tests: List[Union["Suite", Test]] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def add(self, child: Union["Suite", Test]) -> Union["Suite", Test]:
        """Append a child test or suite and point its parent here."""
        child.parent = self
        self.tests.append(child)
        return child

    def iter_tests(self) -> Iterator[Test]:
        """Yield every test of the subtree, depth-first."""
        for child in self.tests:
            if isinstance(child, Suite):
                yield from child.iter_tests()
            else:
                yield child

    @property
    def num_tests(self) -> int:
        return sum(1 for _ in self.iter_tests())

    @property
    def num_failed_tests(self) -> int:
        return sum(1 for t in self.iter_tests() if not t.has_passed)

    @property
    def depth(self) -> int:
        """Nesting depth below the root suite (top-level suites are 0)."""
        level = -1
        node = self.parent
        while node is not None:
            level += 1
            node = node.parent
        return max(level, 0)


def _build_error(data: Any) -> Optional[TestError]:
    if data is None or data is False or data == "":
        return None
    if isinstance(data, str):
        return TestError(message=data)
    if not isinstance(data, dict):
        raise ValueError(f"test error must be a message or a mapping, got {data!r}")
    return TestError(
        message=str(data.get("message", "")),
        stack=str(data.get("stack", "") or ""),
        kind=data.get("kind") or None,
    )


def build_suite(data: Dict[str, Any], parent: Optional[Suite] = None) -> Suite:
    """Build a suite tree from a recorded-run mapping.

    Each entry of ``tests`` that has its own ``tests`` key is a nested
    suite; every other entry is a test with ``name``, ``duration`` (ms) and
    an optional ``error`` (a message string or a mapping with ``message``,
    ``stack`` and ``kind``).

    Raises:
        ValueError: If an entry is not a mapping, ``tests`` is not a list,
            ``error`` has the wrong type or ``duration`` is not a number.

    Example:
        >>> root = build_suite({"name": "main", "tests": [
        ...     {"name": "A", "tests": [{"name": "t1", "duration": 5}]}]})
        >>> root.num_tests
        1
    """
    suite = Suite(name=str(data.get("name", "Unnamed suite")), parent=parent)
    entries = data.get("tests") or []
    if not isinstance(entries, list):
        raise ValueError(f"'tests' of suite {suite.name!r} must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError(f"entry {entry!r} in suite {suite.name!r} is not a mapping")
        if "tests" in entry:
            suite.add(build_suite(entry, parent=suite))
        else:
            duration = entry.get("duration", 0) or 0
            if isinstance(duration, bool) or not isinstance(duration, (int, float)):
                raise ValueError(f"duration of test {entry.get('name')!r} must be a number, got {duration!r}")
            suite.add(Test(
                name=str(entry.get("name", "Unnamed test")),
                time_elapsed=float(duration),
                error=_build_error(entry.get("error")),
            ))
    return suite
