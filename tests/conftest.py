"""Fake Playwright page for driving console capture without a browser."""

from collections import defaultdict
from types import SimpleNamespace

import pytest


class FakeFrame:
    def __init__(self, url: str):
        self.url = url


class FakePage:
    """Implements the ``on`` / ``remove_listener`` surface of a Playwright Page."""

    def __init__(self):
        self.main_frame = FakeFrame("about:blank")
        self.listeners = defaultdict(list)

    def on(self, event, f):
        self.listeners[event].append(f)

    def remove_listener(self, event, f):
        self.listeners[event].remove(f)

    def emit(self, event, *args):
        for f in list(self.listeners[event]):
            f(*args)

    def console(self, type_, text, url="", line=0, column=0):
        self.emit("console", SimpleNamespace(
            type=type_,
            text=text,
            location={"url": url, "lineNumber": line, "columnNumber": column},
        ))

    def page_error(self, message, stack=None):
        self.emit("pageerror", SimpleNamespace(message=message, stack=stack))

    def response(self, url, status, status_text="Not Found"):
        self.emit("response", SimpleNamespace(url=url, status=status, status_text=status_text))

    def navigate(self, url, main=True):
        frame = self.main_frame if main else FakeFrame(url)
        frame.url = url
        self.emit("framenavigated", frame)


@pytest.fixture
def page() -> FakePage:
    return FakePage()
