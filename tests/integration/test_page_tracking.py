"""
Integration tests: tracker installed in a store, backend bound process-wide.

Mirrors how an application wires it: router middleware first, tracker
after it, RecordingAnalytics bound as the global backend.
"""

from __future__ import annotations

from typing import Any

import pytest

from action_tracker.adapters import RecordingAnalytics
from action_tracker.components.tracker import (
    EventTypes,
    MissingRequiredFieldError,
    create_tracker,
)
from action_tracker.rules.models import TrackerRules
from action_tracker.shell.router import (
    MemoryHistory,
    connect_router,
    push,
    router_middleware,
    router_reducer,
)
from action_tracker.shell.store import apply_middleware, combine_reducers, compose, create_store

OPTIONS = {"All": False, "Mixpanel": True, "KISSmetrics": True}


def identity(state: Any, action: Any) -> Any:
    return state


def make_store(*middlewares):
    return compose(apply_middleware(*middlewares))(create_store)(identity)


def change_view(payload: dict[str, Any] | None = None) -> dict[str, Any]:
    analytics: dict[str, Any] = {"eventType": EventTypes.PAGE}
    if payload is not None:
        analytics["eventPayload"] = payload
    return {"type": "CHANGE_VIEW", "to": "home", "meta": {"analytics": analytics}}


class TestRouterSupport:
    def test_page_on_load_and_navigation(self, analytics: RecordingAnalytics) -> None:
        history = MemoryHistory()
        store = create_store(
            combine_reducers({"router": router_reducer}),
            None,
            apply_middleware(router_middleware(history), create_tracker()),
        )

        connect_router(store, history)
        assert analytics[0][0] == "page"

        store.dispatch(push("/foo"))
        assert analytics[1][0] == "page"
        assert len(analytics) == 2

    def test_rules_disable_router_page_views(self, analytics: RecordingAnalytics) -> None:
        rules = TrackerRules.model_validate({"tracker": {"enabled": False}})
        history = MemoryHistory()
        store = create_store(
            combine_reducers({"router": router_reducer}),
            None,
            apply_middleware(router_middleware(history), create_tracker(rules)),
        )
        connect_router(store, history)
        store.dispatch(push("/foo"))
        assert analytics == []


class TestPageEvents:
    def test_explicit_and_implicit(self, analytics: RecordingAnalytics) -> None:
        store = make_store(create_tracker())
        store.dispatch(change_view())
        store.dispatch({"type": "CHANGE_VIEW", "meta": {"analytics": EventTypes.PAGE}})
        assert analytics == [["page"], ["page"]]

    def test_name_and_category(self, analytics: RecordingAnalytics) -> None:
        store = make_store(create_tracker())
        store.dispatch(change_view({"name": "Home"}))
        store.dispatch(change_view({"name": "Home", "category": "Landing"}))
        assert analytics == [["page", "Home"], ["page", "Landing", "Home"]]

    def test_missing_name_throws(self, analytics: RecordingAnalytics) -> None:
        store = make_store(create_tracker())
        with pytest.raises(MissingRequiredFieldError, match="missing name"):
            store.dispatch(change_view({"category": "Landing"}))
        assert analytics == []

    def test_options(self, analytics: RecordingAnalytics) -> None:
        props = {"title": "Homepage"}
        store = make_store(create_tracker())
        store.dispatch(
            change_view(
                {"name": "Home", "category": "Landing", "properties": props, "options": OPTIONS}
            )
        )
        store.dispatch(change_view({"name": "Home", "properties": props, "options": OPTIONS}))
        store.dispatch(change_view({"properties": props, "options": OPTIONS}))
        store.dispatch(change_view({"options": OPTIONS}))
        assert analytics == [
            ["page", "Landing", "Home", props, OPTIONS],
            ["page", "Home", props, OPTIONS],
            ["page", props, OPTIONS],
            ["page", {}, OPTIONS],
        ]

    def test_action_reaches_reducer_unchanged(self, analytics: RecordingAnalytics) -> None:
        seen: list[Any] = []

        def reducer(state: Any, action: Any) -> Any:
            seen.append(action)
            return state

        store = create_store(reducer, None, apply_middleware(create_tracker()))
        action = change_view({"name": "Home"})
        store.dispatch(action)
        assert seen[-1] is action
        assert action["meta"]["analytics"] == {
            "eventType": EventTypes.PAGE,
            "eventPayload": {"name": "Home"},
        }

    def test_error_does_not_affect_next_action(self, analytics: RecordingAnalytics) -> None:
        store = make_store(create_tracker())
        with pytest.raises(MissingRequiredFieldError):
            store.dispatch(change_view({"category": "Landing"}))
        store.dispatch(change_view({"name": "Home"}))
        assert analytics == [["page", "Home"]]


class TestCustomEvents:
    def test_screen_event_from_shipped_rules(
        self, rules: TrackerRules, analytics: RecordingAnalytics
    ) -> None:
        store = make_store(create_tracker(rules))
        store.dispatch(
            {
                "type": "OPEN_FEED",
                "meta": {
                    "analytics": {
                        "eventType": "screen",
                        "eventPayload": {"name": "Feed", "options": OPTIONS},
                    }
                },
            }
        )
        assert analytics == [["screen", "Feed", {}, OPTIONS]]
