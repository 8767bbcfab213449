"""
Tracker component models and errors.

Descriptors and backend calls are read-only views derived from an action
at translation time. Nothing here owns resources.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# --- Enums ---


class EventType(str, Enum):
    """Built-in analytics operations."""

    PAGE = "page"
    TRACK = "track"
    IDENTIFY = "identify"
    ALIAS = "alias"
    GROUP = "group"
    RESET = "reset"


# Dispatched by the router integration on every navigation
LOCATION_CHANGE = "@@router/LOCATION_CHANGE"


# --- Errors ---


class ValidationError(ValueError):
    """An action carries an analytics descriptor that cannot be forwarded."""


class MalformedDescriptorError(ValidationError):
    """Descriptor has an unknown shape or an unrecognized event type."""


class MissingRequiredFieldError(ValidationError):
    """A payload omits a field its event type requires."""

    def __init__(self, event_type: str, field_name: str) -> None:
        self.event_type = event_type
        self.field_name = field_name
        super().__init__(f"missing {field_name}")


# --- Descriptor ---


@dataclass(frozen=True)
class AnalyticsDescriptor:
    """Normalized form of ``meta.analytics``."""

    event_type: str
    event_payload: Mapping[str, Any] | None = None


# --- Argument layout ---


_NO_PLACEHOLDER = object()


@dataclass(frozen=True)
class PayloadField:
    """
    One positional slot of a backend call.

    A field with a placeholder is filled with a copy of it when absent but
    followed by a present field, so later arguments keep their position.
    """

    name: str
    aliases: tuple[str, ...] = ()
    placeholder: Any = _NO_PLACEHOLDER

    @property
    def has_placeholder(self) -> bool:
        return self.placeholder is not _NO_PLACEHOLDER


@dataclass(frozen=True)
class EventLayout:
    """Positional layout and required-field rules for one event type."""

    fields: tuple[PayloadField, ...] = ()
    # Fields that must always be present
    required: tuple[str, ...] = ()
    # field -> field it depends on (e.g. category requires name)
    requires: dict[str, str] = field(default_factory=dict)
    # Field filled from the action type when the payload omits it
    default_from_action_type: str | None = None


# --- Configuration ---


@dataclass(frozen=True)
class TrackerConfig:
    """Tracker configuration."""

    enabled: bool = True
    warn_on_missing_backend: bool = True

    # action type -> event-type tag or descriptor factory
    mapper: dict[str, Any] = field(default_factory=dict)

    # Project-defined event types on top of the built-ins
    custom_events: dict[str, EventLayout] = field(default_factory=dict)


# --- Output ---


@dataclass(frozen=True)
class BackendCall:
    """A single call to issue against the analytics backend."""

    method: str
    args: tuple[Any, ...] = ()

    def as_list(self) -> list[Any]:
        """Call in the recorded form ``[method, *args]``."""
        return [self.method, *self.args]
