"""
Recording analytics adapter.

Stores every call in memory as ``[method, *args]`` instead of sending it.
Used for tests and dry runs.

Key behaviors:
- Satisfies AnalyticsPort
- Calls are appended in order, one list entry per call
- ``calls_to(method)`` filters by operation
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class RecordingAnalytics(list):
    """
    In-memory analytics backend.

    Subclasses list so ``backend[0]`` is the first recorded call and
    ``backend[0][0]`` its method name.
    """

    def _record(self, method: str, args: tuple[Any, ...]) -> None:
        logger.debug("RecordingAnalytics.%s%r", method, args)
        self.append([method, *args])

    def page(self, *args: Any) -> None:
        self._record("page", args)

    def track(self, *args: Any) -> None:
        self._record("track", args)

    def identify(self, *args: Any) -> None:
        self._record("identify", args)

    def alias(self, *args: Any) -> None:
        self._record("alias", args)

    def group(self, *args: Any) -> None:
        self._record("group", args)

    def reset(self, *args: Any) -> None:
        self._record("reset", args)

    def __getattr__(self, name: str) -> Any:
        # Project-defined event types (e.g. screen) are recorded the same way
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args: Any) -> None:
            self._record(name, args)

        return record

    def calls_to(self, method: str) -> list[list[Any]]:
        """Recorded calls for one operation."""
        return [call for call in self if call[0] == method]
