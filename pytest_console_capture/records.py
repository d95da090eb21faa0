"""Log record model and the formatting helpers shared by capture and reporter."""

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class Level(str, Enum):
    """Severity of a captured record."""

    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"

    @classmethod
    def from_console_type(cls, type_tag: Any) -> "Level":
        """Map a console message type (``error``, ``warning``, ``log`` ...) to a level."""
        tag = str(type_tag or "").upper()
        if tag == "ERROR":
            return cls.ERROR
        if tag == "WARNING":
            return cls.WARN
        return cls.INFO


GLYPHS = {
    Level.ERROR: "❌",
    Level.WARN: "⚠️",
    Level.INFO: "ℹ️",
}

# First frame of a V8 (`at file:1:2`, `at fn (file:1:2)`) or
# Firefox/WebKit (`fn@file:1:2`) stack trace.
STACK_FRAME_RE = re.compile(r"(?:\bat |@)(?:[^(\n]*?\()?([^\s()@]+?):(\d+):(\d+)")


@dataclass(frozen=True)
class LogRecord:
    sequence_time: str
    level: Level
    location: str
    text: str
    captured_at: float
    source: str = "console"

    @property
    def stamp(self) -> str:
        return f"[{self.sequence_time}]"

    def as_line(self) -> str:
        """Render as one transcript line: ``[ts] LEVEL:\\tlocation\\ttext``."""
        loc = f"\t{self.location}" if self.location else ""
        return f"{self.stamp} {self.level.value}:{loc}\t{self.text}"

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["level"] = self.level.value
        return data


def format_timestamp(elapsed: float) -> str:
    """Format elapsed seconds as ``00.04`` / ``12.50``."""
    return f"{elapsed:05.2f}"


def _positive_int(value: Any) -> int | None:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def strip_base(url: str, base_url: str) -> str:
    """Drop ``base_url`` and one leading slash from the front of ``url``."""
    if base_url and url.startswith(base_url):
        url = url[len(base_url):]
        if url.startswith("/"):
            url = url[1:]
    return url


def format_location(url: Any, line: Any = None, column: Any = None, base_url: str = "") -> str:
    """Build a ``file[:line[:column]]`` display string, or ``""`` without a url."""
    if not url or not isinstance(url, str):
        return ""
    file = strip_base(url, base_url)
    line_no = _positive_int(line)
    if line_no is None:
        return file
    col_no = _positive_int(column)
    if col_no is None:
        return f"{file}:{line_no}"
    return f"{file}:{line_no}:{col_no}"


def extract_stack_location(stack: Any, base_url: str = "") -> str:
    """Location of the first recognizable frame in ``stack``, or ``""``."""
    if not stack or not isinstance(stack, str):
        return ""
    match = STACK_FRAME_RE.search(stack)
    if not match:
        return ""
    return format_location(match.group(1), match.group(2), match.group(3), base_url)
