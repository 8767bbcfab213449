from pathlib import Path

import pytest

from action_tracker.adapters import RecordingAnalytics
from action_tracker.core.services.analytics_binding import reset_analytics, set_analytics
from action_tracker.rules.loader import load_rules
from action_tracker.rules.models import TrackerRules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules() -> TrackerRules:
    """
    Rules loaded from the REAL tracker_rules.yaml at the project root.
    """
    rules_path = PROJECT_ROOT / "tracker_rules.yaml"
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def analytics():
    """
    Binds a fresh RecordingAnalytics as the process-wide backend.
    """
    backend = set_analytics(RecordingAnalytics())
    yield backend
    reset_analytics()


@pytest.fixture(autouse=True)
def clear_analytics_binding():
    yield
    reset_analytics()
