"""
Logging analytics adapter.

Logs analytics calls instead of sending them to a provider.
Used for local development and the replay CLI.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("action_tracker.analytics")


@dataclass
class LoggingAnalytics:
    """
    Analytics backend that writes each call to the log.

    Keeps nothing in memory. Satisfies AnalyticsPort.
    """

    level: int = logging.INFO

    def _log(self, method: str, args: tuple[Any, ...]) -> None:
        logger.log(self.level, "analytics.%s %s", method, json.dumps(list(args), default=str))

    def page(self, *args: Any) -> None:
        self._log("page", args)

    def track(self, *args: Any) -> None:
        self._log("track", args)

    def identify(self, *args: Any) -> None:
        self._log("identify", args)

    def alias(self, *args: Any) -> None:
        self._log("alias", args)

    def group(self, *args: Any) -> None:
        self._log("group", args)

    def reset(self, *args: Any) -> None:
        self._log("reset", args)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        def log_call(*args: Any) -> None:
            self._log(name, args)

        return log_call
