"""
LTR/__init__.py

LTR (Live Test Reporter)
========================================

Renders test-run progress from test-lifecycle events:
- Event hub carrying suite/test lifecycle events in publish order
- Per-run aggregation of suite, test and failure totals
- HTML report with a summary table and a hierarchical suite/test table
- JUnit XML report mirroring suite nesting
- Replay tool for recorded runs (YAML/JSON)

Author: DvidMakesThings
"""

from .core import (
    # Model
    Suite, Test, TestError, build_suite,
    # Events
    Topic, EventHub, attach, publish_suite, replay_run,
    # Aggregation
    RunAggregator, RunSummary,
    # Report tree
    ReportNode,
    # Logging system
    UniversalLogger, LogConfig, LogLevel, set_active_logger, get_active_logger, create_logger,
    # Utilities
    UtilitiesError, format_duration, parse_duration, format_success_rate,
    load_config_file, save_config_file, VirtualClock,
)
from .reporters import BaseReporter, HtmlReporter, JUnitXmlReporter, ConsoleReporter

__version__ = "1.0.0"
__all__ = [
    # Model
    "Suite",
    "Test",
    "TestError",
    "build_suite",

    # Events
    "Topic",
    "EventHub",
    "attach",
    "publish_suite",
    "replay_run",

    # Aggregation
    "RunAggregator",
    "RunSummary",
    "ReportNode",

    # Logging system
    "UniversalLogger",
    "LogConfig",
    "LogLevel",
    "set_active_logger",
    "get_active_logger",
    "create_logger",

    # Utilities
    "UtilitiesError",
    "format_duration",
    "parse_duration",
    "format_success_rate",
    "load_config_file",
    "save_config_file",
    "VirtualClock",

    # Reporters
    "BaseReporter",
    "HtmlReporter",
    "JUnitXmlReporter",
    "ConsoleReporter",
]
