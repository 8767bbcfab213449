from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from action_tracker.components.tracker import EventType

BUILTIN_EVENTS = frozenset(e.value for e in EventType)


class TrackerSection(BaseModel):
    enabled: bool = True
    warn_on_missing_backend: bool = True

class FieldRule(BaseModel):
    name: str
    aliases: list[str] = Field(default_factory=list)
    placeholder: Any = None

    model_config = ConfigDict(extra="forbid")

class CustomEventRule(BaseModel):
    fields: list[FieldRule] = Field(default_factory=list)
    required: list[str] = Field(default_factory=list)
    requires: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_field_names(self) -> "CustomEventRule":
        known = {f.name for f in self.fields}
        referenced = set(self.required) | set(self.requires) | set(self.requires.values())
        unknown = sorted(referenced - known)
        if unknown:
            raise ValueError(f"unknown fields referenced: {', '.join(unknown)}")
        return self

class LoggingRules(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

class TrackerRules(BaseModel):
    tracker: TrackerSection = Field(default_factory=TrackerSection)
    mapper: dict[str, str] = Field(default_factory=dict)
    custom_events: dict[str, CustomEventRule] = Field(default_factory=dict)
    logging: LoggingRules = Field(default_factory=LoggingRules)

    @model_validator(mode="after")
    def check_event_names(self) -> "TrackerRules":
        clashes = sorted(set(self.custom_events) & BUILTIN_EVENTS)
        if clashes:
            raise ValueError(f"custom_events redefine built-in events: {', '.join(clashes)}")
        known = BUILTIN_EVENTS | set(self.custom_events)
        unknown = sorted({v for v in self.mapper.values() if v not in known})
        if unknown:
            raise ValueError(f"mapper targets unknown events: {', '.join(unknown)}")
        return self

    # RulesPort

    def is_enabled(self) -> bool:
        return self.tracker.enabled

    def warn_on_missing_backend(self) -> bool:
        return self.tracker.warn_on_missing_backend

    def get_mapper(self) -> dict[str, str]:
        return dict(self.mapper)

    def get_custom_events(self) -> dict[str, dict[str, Any]]:
        # Only fields that set a placeholder carry the key
        events = {}
        for name, rule in self.custom_events.items():
            event_rule = rule.model_dump()
            event_rule["fields"] = [
                f.model_dump(exclude_unset=True, exclude={"aliases"}) | {"aliases": f.aliases}
                for f in rule.fields
            ]
            events[name] = event_rule
        return events
