"""CaptureOptions and their resolution from pytest configuration."""

from pathlib import Path

import pytest

from pytest_console_capture.config import CaptureOptions, options_from_config


class FakeConfig:
    OPTION_DEFAULTS = {
        "console_capture_save": None,
        "console_capture_dir": None,
        "console_capture_prefix": None,
        "console_capture_base_url": None,
        "console_capture_quiet": False,
    }
    INI_DEFAULTS = {
        "console_capture_save": False,
        "console_capture_dir": "test-results",
        "console_capture_prefix": "console-capture",
        "console_capture_base_url": "",
    }

    def __init__(self, options=None, ini=None):
        self.options = {**self.OPTION_DEFAULTS, **(options or {})}
        self.ini = {**self.INI_DEFAULTS, **(ini or {})}

    def getoption(self, name):
        return self.options[name]

    def getini(self, name):
        return self.ini[name]


class TestCaptureOptions:
    def test_defaults(self):
        options = CaptureOptions()
        assert options.base_url == ""
        assert options.auto_log is True
        assert options.verbose is False
        assert options.save_to_file is False
        assert options.file_prefix == "console-capture"
        assert options.output_dir == Path("test-results")

    def test_overrides_skip_none(self):
        options = CaptureOptions(base_url="https://a.test").with_overrides(base_url=None, auto_log=False)
        assert options.base_url == "https://a.test"
        assert options.auto_log is False

    def test_unknown_override_rejected(self):
        with pytest.raises(TypeError):
            CaptureOptions().with_overrides(colour=True)


class TestOptionsFromConfig:
    def test_defaults(self):
        assert options_from_config(FakeConfig()) == CaptureOptions()

    def test_ini_values(self):
        config = FakeConfig(ini={
            "console_capture_save": True,
            "console_capture_dir": "artifacts/console",
            "console_capture_prefix": "e2e",
            "console_capture_base_url": "https://staging.example.com",
        })
        options = options_from_config(config)
        assert options.save_to_file is True
        assert options.output_dir == Path("artifacts/console")
        assert options.file_prefix == "e2e"
        assert options.base_url == "https://staging.example.com"

    def test_command_line_wins(self):
        config = FakeConfig(
            options={
                "console_capture_save": True,
                "console_capture_dir": "cli-dir",
                "console_capture_prefix": "cli",
                "console_capture_quiet": True,
            },
            ini={"console_capture_dir": "ini-dir", "console_capture_prefix": "ini"},
        )
        options = options_from_config(config)
        assert options.save_to_file is True
        assert options.output_dir == Path("cli-dir")
        assert options.file_prefix == "cli"
        assert options.auto_log is False
