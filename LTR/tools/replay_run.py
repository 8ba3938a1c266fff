#!/usr/bin/env python3
"""
Run Replay Tool for LTR
=======================
Replays a recorded test run (YAML/JSON) through the event hub into the
HTML and/or JUnit XML reporters.

Run file format::

    name: main
    tests:
      - name: Parser
        tests:
          - name: parses empty input
            duration: 12
          - name: rejects bad header
            duration: 40
            error:
              message: expected 'HDR'
              kind: AssertionError
              stack: "AssertionError: expected 'HDR'\\n    at parser_test.py:31"

An entry with its own ``tests`` list is a nested suite.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from LTR.core.events import EventHub, attach, replay_run
from LTR.core.logger import LogConfig, create_logger, set_active_logger
from LTR.core.model import Suite, build_suite
from LTR.core.utilities import UtilitiesError, VirtualClock, load_config_file, save_config_file
from LTR.reporters import ConsoleReporter, HtmlReporter, JUnitXmlReporter

REPORTS_DIR_ENV = "LTR_REPORTS_DIR"

DEFAULT_CONFIG: Dict[str, Any] = {
    "title": "Test Report",
    "indent_size": 18,
    "live": False,
    "html": None,
    "junit": None,
    "log_file": None,
    "debug": False,
}


def load_run_file(run_path: Path) -> Suite:
    """Load a recorded run and return its root suite.

    Raises:
        UtilitiesError: If the file cannot be loaded or has no ``tests`` list.
    """
    data = load_config_file(run_path)
    if not isinstance(data.get("tests"), list):
        raise UtilitiesError(f"Run file {run_path} has no 'tests' list")
    data.setdefault("name", "main")
    try:
        return build_suite(data)
    except ValueError as e:
        raise UtilitiesError(f"Invalid run file {run_path}: {e}") from e


def resolve_output(value: Optional[str]) -> Optional[Path]:
    """Resolve an output path, relative to ``LTR_REPORTS_DIR`` when it is set."""
    if not value or value == "-":
        return None
    path = Path(value)
    base = os.environ.get(REPORTS_DIR_ENV)
    if base and not path.is_absolute():
        path = Path(base) / path
    return path


class ReplayRunner:
    """Replays one recorded run into the configured reporters."""

    def __init__(self, run_path: Path, config: Optional[Dict[str, Any]] = None):
        self.run_path = run_path
        self.config = dict(DEFAULT_CONFIG)
        self.config.update(config or {})
        self.clock = VirtualClock()
        self.reporters: List[Any] = []

    def _build_reporters(self) -> None:
        html_path = resolve_output(self.config.get("html"))
        junit_value = self.config.get("junit")

        self.reporters.append(ConsoleReporter(clock=self.clock))

        if html_path:
            self.reporters.append(HtmlReporter(
                html_path,
                title=self.config["title"],
                indent_size=self.config["indent_size"],
                live=self.config["live"],
                clock=self.clock,
            ))

        if junit_value == "-" or (junit_value is None and not html_path):
            self.reporters.append(JUnitXmlReporter(sys.stdout, clock=self.clock))
        elif junit_value:
            self.reporters.append(JUnitXmlReporter(out_path=resolve_output(junit_value), clock=self.clock))

    def run(self) -> bool:
        """Replay the run. Returns True when no test failed."""
        root = load_run_file(self.run_path)

        log_file = resolve_output(self.config.get("log_file"))
        logger = create_logger(
            name=root.name,
            log_file=log_file,
            config=LogConfig(
                console_output=not self.config.get("quiet", False),
                file_output=log_file is not None,
                debug=bool(self.config.get("debug")),
            ),
        )
        set_active_logger(logger)
        try:
            logger.run_start(f"{root.name} ({self.run_path})")
            self._build_reporters()
            hub = EventHub()
            for reporter in self.reporters:
                attach(hub, reporter)
            replay_run(hub, root, self.clock)
        finally:
            logger.close()
            set_active_logger(None)

        return root.num_failed_tests == 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="LTR Run Replay - render a recorded test run as HTML and/or JUnit XML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # JUnit XML to stdout
  ltr-replay nightly_run.yaml

  # HTML report plus JUnit XML file
  ltr-replay nightly_run.yaml --html nightly.html --junit nightly.xml

  # Settings from a config file, HTML re-rendered after each top-level suite
  ltr-replay nightly_run.json --config ltr.yaml --live

  # Keep the effective settings for the next run
  ltr-replay nightly_run.yaml --html nightly.html --save-config ltr.yaml
        """
    )
    parser.add_argument('run', type=Path, help='Recorded run file (YAML or JSON)')
    parser.add_argument('--html', help='HTML report output path')
    parser.add_argument('--junit', help="JUnit XML output path, '-' for stdout")
    parser.add_argument('--config', '-c', type=Path, help='Reporter configuration file (YAML or JSON)')
    parser.add_argument('--log', dest='log_file', help='Log file path')
    parser.add_argument('--title', help='HTML report title')
    parser.add_argument('--live', action='store_true', default=None,
                        help='Re-render the HTML report after each top-level suite')
    parser.add_argument('--debug', action='store_true', default=None, help='Enable DEBUG log lines')
    parser.add_argument('--quiet', '-q', action='store_true', default=None, help='No log output on stderr')
    parser.add_argument('--save-config', type=Path,
                        help='Write the effective configuration (YAML or JSON) before replaying')

    args = parser.parse_args(argv)

    try:
        config: Dict[str, Any] = {}
        if args.config:
            config.update(load_config_file(args.config))
        for key in ("html", "junit", "log_file", "title", "live", "debug", "quiet"):
            value = getattr(args, key)
            if value is not None:
                config[key] = value

        runner = ReplayRunner(args.run, config)
        if args.save_config:
            save_config_file(runner.config, args.save_config)
        success = runner.run()
        return 0 if success else 1
    except UtilitiesError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
