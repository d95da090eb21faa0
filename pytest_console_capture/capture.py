"""
Browser console capture for Playwright pages.

Attach a ConsoleCapture to a page and it records:
1. console messages (log, info, warning, error, ...)
2. uncaught exceptions raised in the page
3. failed resource loads (HTTP status >= 400), once per URL

Records are streamed as they arrive and can be rendered as a full report.
"""

import json
import logging
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Protocol
from urllib.parse import urlsplit

from .config import CaptureOptions
from .records import Level, LogRecord, extract_stack_location, format_location, format_timestamp
from .reporter import DEFAULT_TITLE, ConsoleReporter, render_report

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """The part of a Playwright Page the capture subscribes through."""

    def on(self, event: str, f: Callable[..., Any]) -> Any: ...

    def remove_listener(self, event: str, f: Callable[..., Any]) -> Any: ...


@dataclass(frozen=True)
class CaptureSummary:
    message_count: int
    error_count: int
    warning_count: int
    elapsed_seconds: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class ConsoleCapture:
    """Collects console, page error and failed response events from one page."""

    def __init__(self, page: EventSource, options: CaptureOptions | None = None, output=None):
        self.page = page
        self.options = options or CaptureOptions()
        self.reporter = ConsoleReporter(output)

        self.base_url = self.options.base_url
        self.start_time = time.time()
        self._start = time.monotonic()

        self.messages: list[LogRecord] = []
        self.errors = 0
        self.warnings = 0
        self.reported_errors: set[str] = set()

        # Set once a base url is supplied or learned; never cleared.
        self._base_url_fixed = bool(self.base_url)
        self._lock = threading.Lock()
        self._listeners: list[tuple[str, Callable[..., Any]]] = []

        self._setup_listeners()

    def _setup_listeners(self):
        self._listeners = [
            ("console", self.on_console),
            ("pageerror", self.on_page_error),
            ("response", self.on_response),
        ]
        if not self._base_url_fixed:
            self._listeners.append(("framenavigated", self.on_navigation))

        for event, handler in self._listeners:
            self.page.on(event, handler)
        logger.debug("console capture attached to %r", self.page)

        if self.options.auto_log:
            self.reporter.banner(self.options.auto_log, self.options.verbose)

    def detach(self):
        """Stop listening; already captured records stay available."""
        for event, handler in self._listeners:
            self.page.remove_listener(event, handler)
        self._listeners = []
        logger.debug("console capture detached from %r", self.page)

    @property
    def attached(self) -> bool:
        return bool(self._listeners)

    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def _append(self, level: Level, location: str, text: str, source: str) -> LogRecord:
        # Caller holds self._lock.
        record = LogRecord(
            sequence_time=format_timestamp(self.elapsed()),
            level=level,
            location=location,
            text=text,
            captured_at=time.time(),
            source=source,
        )
        self.messages.append(record)
        if level is Level.ERROR:
            self.errors += 1
        elif level is Level.WARN:
            self.warnings += 1
        return record

    def _emit(self, record: LogRecord):
        if self.options.auto_log:
            self.reporter.emit(record)

    def on_console(self, msg):
        """Handle a console message (``page.on("console")``)."""
        level = Level.from_console_type(getattr(msg, "type", None))
        loc = getattr(msg, "location", None)
        if not isinstance(loc, dict):
            loc = {}
        text = getattr(msg, "text", "")

        with self._lock:
            location = format_location(
                loc.get("url"), loc.get("lineNumber"), loc.get("columnNumber"), self.base_url
            )
            record = self._append(level, location, str(text), "console")
        self._emit(record)

    def on_page_error(self, error):
        """Handle an uncaught exception (``page.on("pageerror")``)."""
        message = getattr(error, "message", None) or str(error)
        stack = getattr(error, "stack", None) or message

        with self._lock:
            location = extract_stack_location(stack, self.base_url)
            record = self._append(Level.ERROR, location, f"Uncaught: {message}", "pageerror")
        self._emit(record)

    def on_response(self, response):
        """Handle a finished response (``page.on("response")``); only failures are kept."""
        try:
            status = int(response.status)
        except (TypeError, ValueError):
            return
        if status < 400:
            return

        url = response.url
        with self._lock:
            if url in self.reported_errors:
                logger.debug("duplicate failed response for %s suppressed", url)
                return
            self.reported_errors.add(url)
            record = self._append(
                Level.ERROR,
                format_location(url, base_url=self.base_url),
                f"HTTP {status} ({response.status_text})",
                "response",
            )
        self._emit(record)

    def on_navigation(self, frame):
        """Learn the base url from the first main-frame http(s) navigation."""
        main_frame = getattr(self.page, "main_frame", None)
        if main_frame is not None and frame != main_frame:
            return

        url = getattr(frame, "url", "") or ""
        if not url.startswith("http"):
            return
        parts = urlsplit(url)

        with self._lock:
            if self._base_url_fixed:
                return
            self.base_url = f"{parts.scheme}://{parts.netloc}"
            self._base_url_fixed = True
        logger.debug("console capture base url learned: %s", self.base_url)

    def summary(self) -> CaptureSummary:
        with self._lock:
            return CaptureSummary(
                message_count=len(self.messages),
                error_count=self.errors,
                warning_count=self.warnings,
                elapsed_seconds=round(self.elapsed(), 1),
            )

    def render(self, title: str = DEFAULT_TITLE) -> str:
        """Render the report for everything captured so far."""
        with self._lock:
            records = list(self.messages)
            errors, warnings = self.errors, self.warnings
        return render_report(
            records,
            title=title,
            started=datetime.fromtimestamp(self.start_time, timezone.utc),
            elapsed=self.elapsed(),
            errors=errors,
            warnings=warnings,
        )

    def print_report(self, title: str = DEFAULT_TITLE):
        report = self.render(title)
        self.reporter.print_report(report)
        if self.options.save_to_file:
            self.reporter.save(report, self.options.output_dir, self.options.file_prefix)

    def save_output(self, title: str = DEFAULT_TITLE) -> Path:
        return self.reporter.save(self.render(title), self.options.output_dir, self.options.file_prefix)

    def to_json(self) -> str:
        with self._lock:
            messages = [record.as_dict() for record in self.messages]
        return json.dumps(
            {"summary": self.summary().as_dict(), "messages": messages},
            indent=2,
            default=str,
        )


def attach_console_capture(page: EventSource, options: CaptureOptions | None = None, output=None, **overrides) -> ConsoleCapture:
    """
    Attach console capture to a Playwright page.

    ``overrides`` are CaptureOptions fields, e.g. ``base_url=...`` or
    ``auto_log=False``. Without a base url the first main-frame navigation
    provides one.
    """
    options = (options or CaptureOptions()).with_overrides(**overrides)
    return ConsoleCapture(page, options, output)


def capture_console(page: EventSource, output=None) -> ConsoleCapture:
    """Attach and forget: stream everything as it arrives."""
    return attach_console_capture(page, output=output, auto_log=True)
