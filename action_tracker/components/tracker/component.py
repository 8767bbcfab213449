"""
Tracker component - Translates analytics-tagged actions into backend calls.

Sits in the dispatch pipeline as middleware. Each action is inspected once,
in dispatch order; if it carries an analytics descriptor (or its type is
mapped to one) exactly one call is issued to the analytics backend and the
action continues down the pipeline unchanged.

Invariants:
- Actions are never mutated or replaced
- At most one backend call per action
- Invalid descriptors raise before any backend call
- The process-wide backend binding is only read
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from action_tracker.core.services.analytics_binding import get_analytics

from ._fields import DEFAULT_REGISTRY, EventRegistry, assemble_args
from .models import (
    LOCATION_CHANGE,
    AnalyticsDescriptor,
    BackendCall,
    EventLayout,
    EventType,
    MalformedDescriptorError,
    PayloadField,
    TrackerConfig,
)
from .ports import Action, AnalyticsPort, Dispatch, GetState, Mapper, MiddlewareAPI, RulesPort

logger = logging.getLogger(__name__)

DEFAULT_MAPPER: dict[str, Any] = {
    LOCATION_CHANGE: EventType.PAGE.value,
}

_EVENT_TYPE_KEYS = ("eventType", "event_type")
_EVENT_PAYLOAD_KEYS = ("eventPayload", "event_payload")


# --- Pure Functions (Functional Core) ---


def _first_key(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def get_descriptor(action: Action) -> Any:
    """Raw ``meta.analytics`` value of an action, or None."""
    if not isinstance(action, Mapping):
        return None
    meta = action.get("meta")
    if not isinstance(meta, Mapping):
        return None
    return meta.get("analytics")


def normalize_descriptor(raw: Any) -> AnalyticsDescriptor:
    """
    Normalize an implicit or explicit descriptor.

    Args:
        raw: A bare event-type tag, or a mapping with ``eventType`` and an
            optional ``eventPayload``

    Returns:
        AnalyticsDescriptor

    Raises:
        MalformedDescriptorError: For any other shape
    """
    if isinstance(raw, str):
        tag = raw.value if isinstance(raw, EventType) else raw
        return AnalyticsDescriptor(event_type=tag)

    if isinstance(raw, Mapping):
        event_type = _first_key(raw, _EVENT_TYPE_KEYS)
        if not isinstance(event_type, str) or not event_type:
            raise MalformedDescriptorError(
                f"Analytics descriptor is missing a string eventType: {raw!r}"
            )
        if isinstance(event_type, EventType):
            event_type = event_type.value

        payload = _first_key(raw, _EVENT_PAYLOAD_KEYS)
        if payload is not None and not isinstance(payload, Mapping):
            raise MalformedDescriptorError(
                f"eventPayload must be a mapping, got {type(payload).__name__}"
            )
        return AnalyticsDescriptor(event_type=event_type, event_payload=payload)

    raise MalformedDescriptorError(
        f"Analytics descriptor must be an event type or a mapping, got {type(raw).__name__}"
    )


def resolve_descriptor(
    action: Action,
    mapper: Mapper | None = None,
    get_state: GetState | None = None,
) -> Any:
    """
    Raw descriptor for an action: its own metadata first, then the mapper.

    Returns:
        Raw descriptor, or None if the action is not analytics-tagged
    """
    raw = get_descriptor(action)
    if raw is not None or not mapper or not isinstance(action, Mapping):
        return raw

    action_type = action.get("type")
    if not isinstance(action_type, str) or action_type not in mapper:
        return None

    entry = mapper[action_type]
    if callable(entry):
        return entry(get_state if get_state is not None else _no_state, action)
    return entry


def _no_state() -> None:
    return None


def build_call(
    action: Action,
    *,
    mapper: Mapper | None = None,
    get_state: GetState | None = None,
    registry: EventRegistry | None = None,
) -> BackendCall | None:
    """
    Work out the backend call for an action without issuing it.

    Args:
        action: Dispatched action
        mapper: Optional action type -> descriptor mapping
        get_state: Optional state accessor passed to mapper callables
        registry: Event registry (defaults to the built-in event types)

    Returns:
        BackendCall, or None for actions that are not analytics-tagged

    Raises:
        MalformedDescriptorError: Bad descriptor shape or unknown event type
        MissingRequiredFieldError: A required payload field is absent
    """
    raw = resolve_descriptor(action, mapper, get_state)
    if raw is None:
        return None

    descriptor = normalize_descriptor(raw)
    layout = (registry or DEFAULT_REGISTRY).get(descriptor.event_type)
    action_type = action.get("type") if isinstance(action, Mapping) else None

    args = assemble_args(
        descriptor.event_type,
        layout,
        descriptor.event_payload,
        action_type=action_type,
    )
    return BackendCall(method=descriptor.event_type, args=args)


# --- Imperative Shell ---


def translate(
    action: Action,
    *,
    analytics: AnalyticsPort | None = None,
    mapper: Mapper | None = None,
    get_state: GetState | None = None,
    registry: EventRegistry | None = None,
    warn_on_missing_backend: bool = True,
) -> None:
    """
    Forward an action's analytics descriptor to the backend.

    Validation happens before the backend is looked up, so a broken
    descriptor raises even when no backend is bound.

    Args:
        action: Dispatched action (never modified)
        analytics: Backend; defaults to the process-wide binding
        mapper: Optional action type -> descriptor mapping
        get_state: Optional state accessor passed to mapper callables
        registry: Event registry (defaults to the built-in event types)
        warn_on_missing_backend: Log when no backend is bound

    Raises:
        ValidationError: If the descriptor cannot be forwarded
    """
    call = build_call(action, mapper=mapper, get_state=get_state, registry=registry)
    if call is None:
        return

    backend = analytics if analytics is not None else get_analytics()
    if backend is None:
        if warn_on_missing_backend:
            logger.warning("analytics backend is not bound; dropping %s event", call.method)
        return

    logger.debug("Forwarding %s%r", call.method, call.args)
    getattr(backend, call.method)(*call.args)


# --- Configuration ---


def _layout_from_rules(rule: Mapping[str, Any]) -> EventLayout:
    fields = []
    for entry in rule.get("fields", []):
        if "placeholder" in entry:
            fields.append(
                PayloadField(
                    entry["name"],
                    aliases=tuple(entry.get("aliases", ())),
                    placeholder=entry["placeholder"],
                )
            )
        else:
            fields.append(PayloadField(entry["name"], aliases=tuple(entry.get("aliases", ()))))
    return EventLayout(
        fields=tuple(fields),
        required=tuple(rule.get("required", ())),
        requires=dict(rule.get("requires", {})),
    )


def build_config(rules: RulesPort | None) -> TrackerConfig:
    """Build tracker config from rules port."""
    if rules is None:
        return TrackerConfig(mapper=dict(DEFAULT_MAPPER))

    return TrackerConfig(
        enabled=rules.is_enabled(),
        warn_on_missing_backend=rules.warn_on_missing_backend(),
        mapper={**DEFAULT_MAPPER, **rules.get_mapper()},
        custom_events={
            name: _layout_from_rules(rule) for name, rule in rules.get_custom_events().items()
        },
    )


def build_registry(config: TrackerConfig) -> EventRegistry:
    """Registry with the built-ins plus the config's custom events."""
    if not config.custom_events:
        return DEFAULT_REGISTRY
    registry = DEFAULT_REGISTRY.copy()
    for name, layout in config.custom_events.items():
        registry.register(name, layout)
    return registry


# --- Middleware ---


def create_tracker(
    rules: RulesPort | None = None,
    *,
    mapper: Mapper | None = None,
    analytics: AnalyticsPort | None = None,
    registry: EventRegistry | None = None,
) -> Callable[[MiddlewareAPI], Callable[[Dispatch], Dispatch]]:
    """
    Create the tracker middleware.

    Args:
        rules: Optional rules port for configuration
        mapper: Extra mapper entries, merged over the defaults and rules
        analytics: Backend; defaults to the process-wide binding per call
        registry: Event registry; defaults to built-ins plus rules extensions

    Returns:
        Middleware with the ``store -> next -> action`` shape
    """
    config = build_config(rules)
    merged_mapper = {**config.mapper, **(mapper or {})}
    event_registry = registry if registry is not None else build_registry(config)

    def middleware(store: MiddlewareAPI) -> Callable[[Dispatch], Dispatch]:
        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def dispatch(action: Action) -> Any:
                if config.enabled:
                    translate(
                        action,
                        analytics=analytics,
                        mapper=merged_mapper,
                        get_state=store.get_state,
                        registry=event_registry,
                        warn_on_missing_backend=config.warn_on_missing_backend,
                    )
                return next_dispatch(action)

            return dispatch

        return wrap

    return middleware
