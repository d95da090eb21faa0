"""
pytest-console-capture: Browser console transcripts for Playwright tests.

Attach it to a page and every console message, uncaught exception and
failed resource load ends up in one time-ordered report.
"""

from .capture import CaptureSummary, ConsoleCapture, attach_console_capture, capture_console
from .config import CaptureOptions
from .records import Level, LogRecord
from .reporter import ConsoleReporter

__version__ = "0.1.0"
__all__ = [
    "CaptureOptions",
    "CaptureSummary",
    "ConsoleCapture",
    "ConsoleReporter",
    "Level",
    "LogRecord",
    "attach_console_capture",
    "capture_console",
]
