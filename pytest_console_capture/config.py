"""Capture options and their pytest command-line / ini wiring."""

from dataclasses import dataclass, field, replace
from pathlib import Path

import pytest

DEFAULT_OUTPUT_DIR = Path("test-results")
DEFAULT_FILE_PREFIX = "console-capture"


@dataclass(frozen=True)
class CaptureOptions:
    """Configuration for one ConsoleCapture.

    ``base_url`` is stripped from displayed locations; when empty it is learned
    from the first main-frame navigation.
    """

    base_url: str = ""
    auto_log: bool = True
    verbose: bool = False
    save_to_file: bool = False
    file_prefix: str = DEFAULT_FILE_PREFIX
    output_dir: Path = field(default=DEFAULT_OUTPUT_DIR)

    def with_overrides(self, **overrides) -> "CaptureOptions":
        overrides = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **overrides)


def add_options(parser: pytest.Parser):
    """Register the console-capture command-line options and ini keys."""
    group = parser.getgroup("console-capture", "browser console capture")
    group.addoption(
        "--console-capture-save",
        action="store_true",
        default=None,
        help="save each console capture report to a text file",
    )
    group.addoption(
        "--console-capture-dir",
        default=None,
        help=f"directory for saved reports (default: {DEFAULT_OUTPUT_DIR})",
    )
    group.addoption(
        "--console-capture-prefix",
        default=None,
        help=f"file name prefix for saved reports (default: {DEFAULT_FILE_PREFIX})",
    )
    group.addoption(
        "--console-capture-base-url",
        default=None,
        help="prefix stripped from displayed locations (default: learned on navigation)",
    )
    group.addoption(
        "--console-capture-quiet",
        action="store_true",
        default=False,
        help="do not stream console messages as they arrive",
    )

    parser.addini("console_capture_save", "save console capture reports", type="bool", default=False)
    parser.addini("console_capture_dir", "directory for saved reports", default=str(DEFAULT_OUTPUT_DIR))
    parser.addini("console_capture_prefix", "file name prefix for saved reports", default=DEFAULT_FILE_PREFIX)
    parser.addini("console_capture_base_url", "prefix stripped from displayed locations", default="")


def options_from_config(config: pytest.Config) -> CaptureOptions:
    """Resolve CaptureOptions; command-line values take precedence over ini."""
    save = config.getoption("console_capture_save")
    if save is None:
        save = config.getini("console_capture_save")

    output_dir = config.getoption("console_capture_dir") or config.getini("console_capture_dir")
    prefix = config.getoption("console_capture_prefix") or config.getini("console_capture_prefix")
    base_url = config.getoption("console_capture_base_url") or config.getini("console_capture_base_url")

    return CaptureOptions(
        base_url=base_url or "",
        auto_log=not config.getoption("console_capture_quiet"),
        save_to_file=bool(save),
        file_prefix=prefix or DEFAULT_FILE_PREFIX,
        output_dir=Path(output_dir or DEFAULT_OUTPUT_DIR),
    )
