"""
LTR Core Module
===============

Core functionality for the Live Test Reporter including:
- Run model (suites, tests, error records)
- Event hub and run replay
- Run aggregation (totals, success rate, timings)
- Report node tree
- Logging
- Common utilities

Author: DvidMakesThings
"""

from .logger import (
    UniversalLogger,
    LogConfig,
    LogLevel,
    set_active_logger,
    get_active_logger,
    create_logger,
)
from .model import Suite, Test, TestError, build_suite, GENERIC_ERROR_TYPE
from .events import (
    Topic,
    EventHub,
    Subscription,
    attach,
    publish_suite,
    replay_run,
)
from .aggregator import RunAggregator, RunSummary
from .report_node import ReportNode
from .utilities import *

__all__ = [
    # Logger
    "UniversalLogger",
    "LogConfig",
    "LogLevel",
    "set_active_logger",
    "get_active_logger",
    "create_logger",
    # Model
    "Suite",
    "Test",
    "TestError",
    "build_suite",
    "GENERIC_ERROR_TYPE",
    # Events
    "Topic",
    "EventHub",
    "Subscription",
    "attach",
    "publish_suite",
    "replay_run",
    # Aggregation
    "RunAggregator",
    "RunSummary",
    # Report tree
    "ReportNode",
    # Utilities
    "UtilitiesError",
    "format_duration",
    "parse_duration",
    "format_number",
    "compute_success_rate",
    "format_success_rate",
    "load_config_file",
    "save_config_file",
    "VirtualClock",
    "now_ms",
]
