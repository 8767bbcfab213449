"""
Router integration - navigation as actions.

An in-memory history plus the glue that turns navigation into
``LOCATION_CHANGE`` actions, which the tracker maps to page views.

Key behaviors:
- ``push``/``replace`` action creators are applied to history by middleware
- ``connect_router`` dispatches the current location once, then on every change
- ``router_reducer`` keeps the latest location in state
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from action_tracker.components.tracker import LOCATION_CHANGE

logger = logging.getLogger(__name__)

CALL_HISTORY_METHOD = "@@router/CALL_HISTORY_METHOD"
HISTORY_METHODS = frozenset({"push", "replace", "go_back"})

HistoryListener = Callable[["Location", str], None]


@dataclass(frozen=True)
class Location:
    """A navigated-to location."""

    pathname: str
    search: str = ""
    hash: str = ""

    def as_dict(self) -> dict[str, str]:
        return {"pathname": self.pathname, "search": self.search, "hash": self.hash}


def parse_path(path: str) -> Location:
    """Split ``/a?b=1#c`` into a Location."""
    pathname, _, fragment = path.partition("#")
    pathname, _, query = pathname.partition("?")
    return Location(
        pathname=pathname or "/",
        search=f"?{query}" if query else "",
        hash=f"#{fragment}" if fragment else "",
    )


@dataclass
class MemoryHistory:
    """History kept in memory, for tests and non-browser hosts."""

    initial_path: str = "/"
    entries: list[Location] = field(default_factory=list)
    _listeners: list[HistoryListener] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self.entries:
            self.entries.append(parse_path(self.initial_path))

    @property
    def location(self) -> Location:
        return self.entries[-1]

    def push(self, path: str) -> None:
        self.entries.append(parse_path(path))
        self._notify("PUSH")

    def replace(self, path: str) -> None:
        self.entries[-1] = parse_path(path)
        self._notify("REPLACE")

    def go_back(self) -> None:
        if len(self.entries) > 1:
            self.entries.pop()
            self._notify("POP")

    def listen(self, listener: HistoryListener) -> Callable[[], None]:
        """
        Register a navigation listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def _notify(self, history_action: str) -> None:
        for listener in list(self._listeners):
            listener(self.location, history_action)


# --- Action creators ---


def location_change(location: Location, history_action: str = "POP") -> dict[str, Any]:
    return {
        "type": LOCATION_CHANGE,
        "payload": {**location.as_dict(), "action": history_action},
    }


def _history_call(method: str, *args: Any) -> dict[str, Any]:
    return {"type": CALL_HISTORY_METHOD, "payload": {"method": method, "args": list(args)}}


def push(path: str) -> dict[str, Any]:
    return _history_call("push", path)


def replace(path: str) -> dict[str, Any]:
    return _history_call("replace", path)


def go_back() -> dict[str, Any]:
    return _history_call("go_back")


# --- Middleware / reducer ---


def router_middleware(history: MemoryHistory) -> Callable[[Any], Any]:
    """Apply history-call actions to ``history`` instead of reducing them."""

    def middleware(store: Any) -> Callable[[Callable[[Any], Any]], Callable[[Any], Any]]:
        def wrap(next_dispatch: Callable[[Any], Any]) -> Callable[[Any], Any]:
            def dispatch(action: Any) -> Any:
                if not isinstance(action, Mapping) or action.get("type") != CALL_HISTORY_METHOD:
                    return next_dispatch(action)
                payload = action["payload"]
                method = payload["method"]
                if method not in HISTORY_METHODS:
                    raise ValueError(f"Unsupported history method: {method!r}")
                getattr(history, method)(*payload["args"])
                return action

            return dispatch

        return wrap

    return middleware


def router_reducer(state: Any, action: Any) -> dict[str, Any]:
    if state is None:
        state = {"location": None}
    if action.get("type") == LOCATION_CHANGE:
        return {**state, "location": action["payload"]}
    return state


def connect_router(store: Any, history: MemoryHistory) -> Callable[[], None]:
    """
    Dispatch ``LOCATION_CHANGE`` now and on every navigation.

    Returns:
        Function that disconnects the router
    """

    def on_change(location: Location, history_action: str) -> None:
        logger.debug("Location changed to %s (%s)", location.pathname, history_action)
        store.dispatch(location_change(location, history_action))

    unlisten = history.listen(on_change)
    store.dispatch(location_change(history.location))
    return unlisten
