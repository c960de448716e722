"""Tests for environment-driven settings (config.py)."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from cmdctl.config import Settings
from cmdctl.core.scheduler import HookFlags
from cmdctl.exceptions import CmdctlError


class TestFromEnv:
    def test_defaults(self) -> None:
        settings = Settings.from_env()
        assert settings.log_level == logging.WARNING
        assert settings.hook_flags == HookFlags.DEFAULT
        assert settings.disable_events is False
        assert settings.verbose is False

    def test_all_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CMDCTL_LOG_LEVEL", "debug")
        monkeypatch.setenv("CMDCTL_HOOK_FLAGS", "SIGINT,SIGHUP")
        monkeypatch.setenv("CMDCTL_DISABLE_EVENTS", "yes")
        monkeypatch.setenv("CMDCTL_VERBOSE", "1")

        settings = Settings.from_env()

        assert settings.log_level == logging.DEBUG
        assert settings.hook_flags == HookFlags.SIGINT | HookFlags.SIGHUP
        assert settings.disable_events is True
        assert settings.verbose is True

    def test_numeric_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CMDCTL_LOG_LEVEL", "15")
        assert Settings.from_env().log_level == 15

    def test_empty_hook_flags_disable_hooks(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CMDCTL_HOOK_FLAGS", "")
        assert Settings.from_env().hook_flags == HookFlags.NONE

    def test_unrelated_variables_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CMDCTL_SOMETHING_ELSE", "x")
        assert Settings.from_env().verbose is False

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("CMDCTL_LOG_LEVEL", "LOUD"),
            ("CMDCTL_HOOK_FLAGS", "SIGINT,SIGWHAT"),
            ("CMDCTL_DISABLE_EVENTS", "maybe"),
            ("CMDCTL_VERBOSE", "2"),
        ],
    )
    def test_invalid_values(self, monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
        monkeypatch.setenv(name, value)
        with pytest.raises(CmdctlError) as exc_info:
            Settings.from_env()
        assert name in str(exc_info.value)
        assert exc_info.value.hint
        assert isinstance(exc_info.value.__cause__, ValidationError)


class TestConstruction:
    def test_explicit_values_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CMDCTL_VERBOSE", "true")
        assert Settings(verbose=False).verbose is False

    def test_flags_accept_enum_values(self) -> None:
        assert Settings(hook_flags=HookFlags.ALL).hook_flags == HookFlags.ALL

    def test_defaults_ignore_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CMDCTL_VERBOSE", "true")
        assert Settings.defaults().verbose is False

    def test_frozen(self) -> None:
        settings = Settings.defaults()
        with pytest.raises(ValidationError):
            settings.verbose = True
