from .logging_analytics import LoggingAnalytics
from .recording_analytics import RecordingAnalytics

__all__ = ["LoggingAnalytics", "RecordingAnalytics"]
