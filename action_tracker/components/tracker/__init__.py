"""
Tracker component - Analytics middleware for the dispatch pipeline.
"""

from ._fields import (
    ALIAS_LAYOUT,
    BUILTIN_LAYOUTS,
    DEFAULT_REGISTRY,
    GROUP_LAYOUT,
    IDENTIFY_LAYOUT,
    PAGE_LAYOUT,
    RESET_LAYOUT,
    TRACK_LAYOUT,
    EventRegistry,
    assemble_args,
)
from .component import (
    DEFAULT_MAPPER,
    build_call,
    build_config,
    build_registry,
    create_tracker,
    get_descriptor,
    normalize_descriptor,
    resolve_descriptor,
    translate,
)
from .models import (
    LOCATION_CHANGE,
    AnalyticsDescriptor,
    BackendCall,
    EventLayout,
    EventType,
    MalformedDescriptorError,
    MissingRequiredFieldError,
    PayloadField,
    TrackerConfig,
    ValidationError,
)
from .ports import (
    AnalyticsPort,
    MiddlewareAPI,
    RulesPort,
)

# Plural alias, reads naturally in action creators
EventTypes = EventType

__all__ = [
    # Entry points
    "create_tracker",
    "translate",
    "build_call",
    # Pure functions
    "assemble_args",
    "build_config",
    "build_registry",
    "get_descriptor",
    "normalize_descriptor",
    "resolve_descriptor",
    # Layouts
    "ALIAS_LAYOUT",
    "BUILTIN_LAYOUTS",
    "DEFAULT_REGISTRY",
    "GROUP_LAYOUT",
    "IDENTIFY_LAYOUT",
    "PAGE_LAYOUT",
    "RESET_LAYOUT",
    "TRACK_LAYOUT",
    "EventRegistry",
    # Models
    "DEFAULT_MAPPER",
    "LOCATION_CHANGE",
    "AnalyticsDescriptor",
    "BackendCall",
    "EventLayout",
    "EventType",
    "EventTypes",
    "PayloadField",
    "TrackerConfig",
    # Errors
    "ValidationError",
    "MalformedDescriptorError",
    "MissingRequiredFieldError",
    # Ports
    "AnalyticsPort",
    "MiddlewareAPI",
    "RulesPort",
]
