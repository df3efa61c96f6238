"""
Tests for shared configuration helpers.
"""

import logging
from typing import Optional, get_type_hints

from callrisk.config import PRIORITY_TO_ACTION, configure_logging


class TestConfigureLogging:

    def test_level_is_optional(self):
        assert get_type_hints(configure_logging)["level"] == Optional[str]

    def test_env_level_used_when_none(self, monkeypatch):
        calls = {}
        monkeypatch.setenv("CALLRISK_LOG_LEVEL", "debug")
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

        configure_logging()

        assert calls["level"] == "DEBUG"

    def test_explicit_level_wins(self, monkeypatch):
        calls = {}
        monkeypatch.setenv("CALLRISK_LOG_LEVEL", "debug")
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

        configure_logging("warning")

        assert calls["level"] == "WARNING"


def test_every_priority_has_an_action():
    assert set(PRIORITY_TO_ACTION) == {"High", "Medium", "Low"}
