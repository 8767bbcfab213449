"""
Tests for the analytics backends and the process-wide binding.
"""

from __future__ import annotations

import logging
from typing import Protocol

import pytest

from action_tracker.adapters import LoggingAnalytics, RecordingAnalytics
from action_tracker.components.tracker import AnalyticsPort, RulesPort
from action_tracker.core.services.analytics_binding import (
    get_analytics,
    reset_analytics,
    set_analytics,
)


def test_ports_are_protocols():
    """Verify the tracker ports are Protocols."""
    assert issubclass(AnalyticsPort, Protocol)
    assert issubclass(RulesPort, Protocol)


class TestRecordingAnalytics:
    def test_records_calls_in_order(self) -> None:
        backend = RecordingAnalytics()
        backend.page("Home")
        backend.track("Clicked", {"id": 1})
        backend.reset()
        assert backend == [["page", "Home"], ["track", "Clicked", {"id": 1}], ["reset"]]
        assert backend[0][0] == "page"

    def test_custom_event_methods(self) -> None:
        backend = RecordingAnalytics()
        backend.screen("Feed")
        assert backend.calls_to("screen") == [["screen", "Feed"]]

    def test_private_attributes_not_recorded(self) -> None:
        backend = RecordingAnalytics()
        with pytest.raises(AttributeError):
            backend._missing
        assert backend == []


class TestLoggingAnalytics:
    def test_logs_each_call(self, caplog: pytest.LogCaptureFixture) -> None:
        backend = LoggingAnalytics()
        with caplog.at_level(logging.INFO, logger="action_tracker.analytics"):
            backend.page("Landing", "Home", {"title": "Homepage"})
            backend.screen("Feed")
        assert 'analytics.page ["Landing", "Home", {"title": "Homepage"}]' in caplog.text
        assert 'analytics.screen ["Feed"]' in caplog.text

    def test_respects_level(self, caplog: pytest.LogCaptureFixture) -> None:
        backend = LoggingAnalytics(level=logging.DEBUG)
        with caplog.at_level(logging.INFO, logger="action_tracker.analytics"):
            backend.identify("u1")
        assert caplog.text == ""


class TestAnalyticsBinding:
    def test_unbound_by_default(self) -> None:
        reset_analytics()
        assert get_analytics() is None

    def test_set_and_reset(self) -> None:
        backend = RecordingAnalytics()
        assert set_analytics(backend) is backend
        assert get_analytics() is backend
        reset_analytics()
        assert get_analytics() is None

    def test_binding_none_rejected(self) -> None:
        with pytest.raises(ValueError, match="reset_analytics"):
            set_analytics(None)
