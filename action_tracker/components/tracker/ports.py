"""
Tracker component port definitions.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

Action = Any
Dispatch = Callable[[Action], Any]
GetState = Callable[[], Any]

# Mapper value: an event-type tag or a callable deriving a descriptor
MapperEntry = str | Callable[[GetState, Mapping[str, Any]], Any]
Mapper = Mapping[str, MapperEntry]


class AnalyticsPort(Protocol):
    """
    Analytics backend interface (Segment analytics.js shape).

    Arguments are positional and loosely typed; return values are ignored.
    """

    def page(self, *args: Any) -> Any:
        """Record a page view."""
        ...

    def track(self, *args: Any) -> Any:
        """Record a named event."""
        ...

    def identify(self, *args: Any) -> Any:
        """Associate the current user with an id and traits."""
        ...

    def alias(self, *args: Any) -> Any:
        """Merge two user identities."""
        ...

    def group(self, *args: Any) -> Any:
        """Associate the current user with a group."""
        ...

    def reset(self, *args: Any) -> Any:
        """Clear the current user identity."""
        ...


class RulesPort(Protocol):
    """Port for tracker rules configuration."""

    def is_enabled(self) -> bool:
        """Check if analytics forwarding is enabled."""
        ...

    def warn_on_missing_backend(self) -> bool:
        """Check if a missing backend binding should be logged."""
        ...

    def get_mapper(self) -> dict[str, str]:
        """Action type -> event type entries."""
        ...

    def get_custom_events(self) -> dict[str, dict[str, Any]]:
        """
        Project-defined event types.

        Returns dict of event name -> {"fields": [...], "required": [...],
        "requires": {...}}.
        """
        ...


class MiddlewareAPI(Protocol):
    """The slice of a store a middleware sees."""

    def get_state(self) -> Any:
        """Current state."""
        ...

    def dispatch(self, action: Action) -> Any:
        """Dispatch through the full middleware chain."""
        ...
