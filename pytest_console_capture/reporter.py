"""Transcript reporter for captured browser console output."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable

from .records import GLYPHS, LogRecord

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Browser Console Log Capture"
RULE = "=" * 80


def render_report(
    records: Iterable[LogRecord],
    *,
    title: str,
    started: datetime,
    elapsed: float,
    errors: int,
    warnings: int,
    now: datetime | None = None,
) -> str:
    """Render the full transcript for a snapshot of capture state.

    ``started`` is printed as given (ConsoleCapture passes it in UTC); the
    completion footer uses ``now``, local time by default.
    """
    records = sorted(records, key=lambda record: record.captured_at)
    now = now or datetime.now()

    output = f"# {title}\n"
    output += f"# Started: {started:%Y-%m-%d %H:%M:%S} | Elapsed: {elapsed:.1f}s\n"
    output += f"# Errors: {errors} | Warnings: {warnings} | Total Messages: {len(records)}\n\n"

    for record in records:
        output += record.as_line() + "\n"

    if errors > 0:
        output += f"\nERROR: {errors} SEVERE logs detected!\n"
    if warnings > 0:
        output += f"WARNING: {warnings} warning logs detected!\n"

    clock = now.strftime("%I:%M%p").lower()
    output += f"\n## Console capture complete on {now:%Y-%m-%d} @{clock} ##\n"
    return output


class ConsoleReporter:
    """Writes capture output to a text stream (stdout by default)."""

    def __init__(self, output=None):
        self.output = output or sys.stdout

    def write(self, text: str):
        """Print one chunk of text, swallowing sink failures."""
        try:
            print(text, file=self.output)
        except Exception:
            logger.debug("console capture sink write failed", exc_info=True)

    def emit(self, record: LogRecord):
        """Stream a single record as soon as it is captured."""
        self.write(f"{GLYPHS[record.level]} {record.as_line()}")

    def banner(self, auto_log: bool, verbose: bool):
        self.write(
            f"\n🎬 Console capture started (autoLog: {str(auto_log).lower()}, "
            f"verbose: {str(verbose).lower()})\n"
        )

    def print_report(self, report: str):
        self.write("\n" + RULE)
        self.write(report)
        self.write(RULE + "\n")

    def save(self, report: str, output_dir: Path, file_prefix: str) -> Path:
        """Persist ``report`` under ``output_dir``; file-system errors propagate.

        Existing files are never overwritten: a ``-1``, ``-2`` ... suffix is
        added when the timestamped name is already taken.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
        stem = f"{file_prefix}-{timestamp}"
        counter = 0
        while True:
            suffix = f"-{counter}" if counter else ""
            filepath = output_dir / f"{stem}{suffix}.txt"
            try:
                with open(filepath, "x", encoding="utf-8") as f:
                    f.write(report)
                break
            except FileExistsError:
                counter += 1

        self.write(f"📁 Console logs saved to: {filepath}")
        return filepath
