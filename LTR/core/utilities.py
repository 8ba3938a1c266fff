"""
LTR Utilities Module
====================
Formatting, timing and configuration helpers shared by the aggregator,
the reporters and the command line tools.

Author: DvidMakesThings
"""

import json
import math
import re
import time
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


DURATION_RE = re.compile(r"^(?:(\d+):)?(\d+):(\d{2})\.(\d{3})$")


class UtilitiesError(Exception):
    """Exception raised by utility functions when operations fail.

    Used for configuration and run-file loading problems such as missing
    files, unparsable content or unsupported formats.

    Args:
        message (str): Description of the error that occurred.
    """
    pass


def pad(value: Any, size: int) -> str:
    """Left-pad ``value`` with zeroes up to ``size`` characters."""
    return str(value).rjust(size, "0")


def format_duration(duration: float) -> str:
    """Format a millisecond duration as ``[H:]MM:SS.mmm``.

    The hours segment is only present (and unpadded) for durations of at
    least one hour. Minutes are padded to two digits only when hours are
    present. Fractional milliseconds are truncated and negative durations
    clamp to zero.

    Args:
        duration (float): Duration in milliseconds.

    Returns:
        str: Formatted duration string.

    Example:
        >>> format_duration(65123)
        '1:05.123'
        >>> format_duration(3725004)
        '1:02:05.004'
    """
    total = max(0, int(duration))
    hours, rest = divmod(total, 3600000)
    minutes, rest = divmod(rest, 60000)
    seconds, milliseconds = divmod(rest, 1000)

    if hours:
        return f"{hours}:{pad(minutes, 2)}:{pad(seconds, 2)}.{pad(milliseconds, 3)}"
    return f"{minutes}:{pad(seconds, 2)}.{pad(milliseconds, 3)}"


def parse_duration(text: str) -> int:
    """Parse a ``[H:]MM:SS.mmm`` string back into milliseconds.

    Raises:
        UtilitiesError: If the text is not a formatted duration.
    """
    match = DURATION_RE.match(text.strip())
    if not match:
        raise UtilitiesError(f"Invalid duration: {text!r}")
    hours, minutes, seconds, milliseconds = (int(g) if g else 0 for g in match.groups())
    return ((hours * 60 + minutes) * 60 + seconds) * 1000 + milliseconds


def format_number(value: float) -> str:
    """Render a number in plain decimal notation, without a trailing ``.0``
    when it is integral and never in exponent form (``4e-06`` -> ``0.000004``).
    """
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def compute_success_rate(tests: int, failures: int) -> Optional[float]:
    """Percentage of passing tests rounded half-up to two decimals.

    Returns None when no tests were counted, instead of dividing by zero.
    """
    if not tests:
        return None
    return math.floor((1 - failures / tests) * 10000 + 0.5) / 100


def format_success_rate(rate: Optional[float], placeholder: str = "-") -> str:
    """Format a success rate as ``"70%"`` / ``"66.67%"``, or a placeholder."""
    if rate is None:
        return placeholder
    return f"{format_number(rate)}%"


def now_ms() -> float:
    """Wall-clock time in milliseconds."""
    return time.time() * 1000


class VirtualClock:
    """Deterministic millisecond clock for replayed runs and tests.

    Instances are callable like :func:`now_ms`, so they can be handed to
    :class:`LTR.core.aggregator.RunAggregator` as its clock.
    """

    def __init__(self, start: float = 0.0):
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        """Move the clock forward by ``ms`` milliseconds and return the new time."""
        if ms < 0:
            raise ValueError("VirtualClock cannot move backwards")
        self.now += ms
        return self.now


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a mapping from a JSON or YAML file.

    The format is selected by extension: ``.json`` or ``.yaml``/``.yml``.

    Args:
        config_path (Union[str, Path]): Path to the file to load.

    Returns:
        Dict[str, Any]: Parsed content (an empty dict for an empty YAML file).

    Raises:
        UtilitiesError: If the file cannot be found, cannot be parsed, has an
            unsupported extension or does not contain a mapping.

    Example:
        >>> config = load_config_file("ltr.yaml")
        >>> config["title"]
        'Nightly Report'
    """
    path = Path(config_path)
    if not path.exists():
        raise UtilitiesError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    try:
        content = path.read_text(encoding="utf-8")
        if suffix == ".json":
            data = json.loads(content)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            raise UtilitiesError(f"Unsupported config format: {path.suffix}. Use .yaml, .yml, or .json")
    except json.JSONDecodeError as e:
        raise UtilitiesError(f"Invalid JSON in configuration file {path}: {e}")
    except yaml.YAMLError as e:
        raise UtilitiesError(f"Invalid YAML in configuration file {path}: {e}")
    except OSError as e:
        raise UtilitiesError(f"Failed to load configuration file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise UtilitiesError(f"Configuration file {path} must contain a mapping")
    return data


def save_config_file(config: Dict[str, Any], config_path: Union[str, Path]) -> None:
    """Save a mapping as JSON or YAML, creating parent directories.

    Raises:
        UtilitiesError: If the file cannot be written or the extension is
            not supported.
    """
    path = Path(config_path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        content = json.dumps(config, indent=2)
    elif suffix in (".yaml", ".yml"):
        content = yaml.dump(config, default_flow_style=False, sort_keys=False, indent=2)
    else:
        raise UtilitiesError(f"Unsupported config format: {path.suffix}. Use .yaml, .yml, or .json")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise UtilitiesError(f"Failed to save configuration file {path}: {e}")
