"""
Pytest plugin for browser console capture.

This plugin:
1. Registers the console-capture command-line options and ini keys
2. Provides the ``console_capture`` fixture, attached to the ``page`` fixture
3. Prints (and optionally saves) the capture report when each test finishes
"""

import re

import pytest

from .capture import ConsoleCapture, attach_console_capture
from .config import CaptureOptions, add_options, options_from_config


def pytest_addoption(parser: pytest.Parser):
    """Register console-capture options."""
    add_options(parser)


def pytest_configure(config: pytest.Config):
    """Called after command line options have been parsed."""
    config.addinivalue_line(
        "markers",
        "console_capture(**options): override CaptureOptions fields for one test",
    )


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    """Store test result on the item for the fixture to access."""
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)


@pytest.fixture(scope="session")
def console_capture_options(pytestconfig: pytest.Config) -> CaptureOptions:
    return options_from_config(pytestconfig)


def report_prefix(file_prefix: str, test_name: str) -> str:
    """File name prefix for one test's saved report, e.g. ``console-capture-test_cart_1_``."""
    safe_name = re.sub(r"[^\w.-]+", "_", test_name)
    return f"{file_prefix}-{safe_name}"


def finish_capture(capture: ConsoleCapture, node: pytest.Item):
    """Print the report for ``node`` and detach, even if saving the report fails."""
    title = node.nodeid
    if hasattr(node, "rep_call") and node.rep_call.failed:
        title = f"{title} (FAILED)"

    try:
        capture.print_report(title)
    finally:
        capture.detach()


@pytest.fixture
def console_capture(request: pytest.FixtureRequest, console_capture_options: CaptureOptions) -> ConsoleCapture:
    """Capture the browser console of the test's ``page`` fixture."""
    page = request.getfixturevalue("page")

    overrides = {"file_prefix": report_prefix(console_capture_options.file_prefix, request.node.name)}
    marker = request.node.get_closest_marker("console_capture")
    if marker is not None:
        overrides.update(marker.kwargs)

    capture = attach_console_capture(page, console_capture_options, **overrides)
    yield capture  # type: ignore

    finish_capture(capture, request.node)
