"""
LTR Reporters
=============
Event-driven reporters. Attach one to an :class:`LTR.core.events.EventHub`
with :func:`LTR.core.events.attach`.

Author: DvidMakesThings
"""

from .base import BaseReporter, write_atomic
from .html import HtmlReporter, INDENT_SIZE
from .junit import JUnitXmlReporter, XML_DECLARATION
from .console import ConsoleReporter

__all__ = [
    "BaseReporter",
    "write_atomic",
    "HtmlReporter",
    "INDENT_SIZE",
    "JUnitXmlReporter",
    "XML_DECLARATION",
    "ConsoleReporter",
]
