"""
Event layouts and positional argument assembly.

Key behaviors:
- Each event type declares its positional field order
- Present fields are appended in order, absent ones skipped
- An absent field with a placeholder is filled when a later field is present
- Required and dependent fields are checked before assembly
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import Any

from .models import (
    EventLayout,
    EventType,
    MalformedDescriptorError,
    MissingRequiredFieldError,
    PayloadField,
)

# --- Built-in layouts ---

PAGE_LAYOUT = EventLayout(
    fields=(
        PayloadField("category"),
        PayloadField("name"),
        PayloadField("properties", placeholder={}),
        PayloadField("options"),
    ),
    requires={"category": "name"},
)

TRACK_LAYOUT = EventLayout(
    fields=(
        PayloadField("event"),
        PayloadField("properties", placeholder={}),
        PayloadField("options"),
    ),
    required=("event",),
    default_from_action_type="event",
)

IDENTIFY_LAYOUT = EventLayout(
    fields=(
        PayloadField("userId", aliases=("user_id",)),
        PayloadField("traits", placeholder={}),
        PayloadField("options"),
    ),
)

ALIAS_LAYOUT = EventLayout(
    fields=(
        PayloadField("userId", aliases=("user_id",)),
        PayloadField("previousId", aliases=("previous_id",), placeholder=None),
        PayloadField("options"),
    ),
    required=("userId",),
)

GROUP_LAYOUT = EventLayout(
    fields=(
        PayloadField("groupId", aliases=("group_id",)),
        PayloadField("traits", placeholder={}),
        PayloadField("options"),
    ),
    required=("groupId",),
)

RESET_LAYOUT = EventLayout()

BUILTIN_LAYOUTS: dict[str, EventLayout] = {
    EventType.PAGE.value: PAGE_LAYOUT,
    EventType.TRACK.value: TRACK_LAYOUT,
    EventType.IDENTIFY.value: IDENTIFY_LAYOUT,
    EventType.ALIAS.value: ALIAS_LAYOUT,
    EventType.GROUP.value: GROUP_LAYOUT,
    EventType.RESET.value: RESET_LAYOUT,
}


# --- Registry ---


class EventRegistry:
    """Recognized event types and their layouts."""

    def __init__(self, layouts: Mapping[str, EventLayout] | None = None) -> None:
        self._layouts: dict[str, EventLayout] = dict(
            BUILTIN_LAYOUTS if layouts is None else layouts
        )

    def register(self, name: str, layout: EventLayout) -> None:
        """Add a project-defined event type."""
        if not name:
            raise ValueError("Event type name must be a non-empty string")
        if name in self._layouts:
            raise ValueError(f"Event type already registered: {name}")
        self._layouts[name] = layout

    def get(self, name: str) -> EventLayout:
        """Layout for ``name``; unknown names are malformed descriptors."""
        try:
            return self._layouts[name]
        except KeyError:
            raise MalformedDescriptorError(f"Unknown analytics event type: {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._layouts

    def __iter__(self) -> Iterator[str]:
        return iter(self._layouts)

    def copy(self) -> EventRegistry:
        return EventRegistry(self._layouts)


DEFAULT_REGISTRY = EventRegistry()


# --- Assembly ---


def read_field(payload: Mapping[str, Any], slot: PayloadField) -> Any:
    """Value of a payload field under its name or an alias, or None."""
    for key in (slot.name, *slot.aliases):
        value = payload.get(key)
        if value is not None:
            return value
    return None


def assemble_args(
    event_type: str,
    layout: EventLayout,
    payload: Mapping[str, Any] | None,
    action_type: Any = None,
) -> tuple[Any, ...]:
    """
    Build positional arguments for one backend call.

    Args:
        event_type: Event type name (used in error reporting)
        layout: Field layout for the event type
        payload: Optional event payload
        action_type: Type of the dispatched action, for defaulted fields

    Returns:
        Ordered positional arguments

    Raises:
        MissingRequiredFieldError: If a required or dependent field is absent
    """
    payload = payload or {}
    values = {slot.name: read_field(payload, slot) for slot in layout.fields}

    default_field = layout.default_from_action_type
    if default_field is not None and values.get(default_field) is None:
        if action_type is not None and action_type != "":
            values[default_field] = action_type

    for name in layout.required:
        if values.get(name) is None:
            raise MissingRequiredFieldError(event_type, name)

    for name, dependency in layout.requires.items():
        if values.get(name) is not None and values.get(dependency) is None:
            raise MissingRequiredFieldError(event_type, dependency)

    args: list[Any] = []
    for index, slot in enumerate(layout.fields):
        value = values[slot.name]
        if value is not None:
            args.append(value)
            continue
        if not slot.has_placeholder:
            continue
        later = layout.fields[index + 1 :]
        if any(values[s.name] is not None for s in later):
            args.append(copy.copy(slot.placeholder))

    return tuple(args)
