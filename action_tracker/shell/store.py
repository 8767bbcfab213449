"""
Dispatch pipeline - a minimal synchronous store with middleware.

Actions are delivered one at a time, in order, through the middleware chain
and then to the reducer. Subscribers run after each reduced action.

Key behaviors:
- Middleware has the ``store -> next -> action`` shape
- Dispatching from inside a reducer is rejected
- Reduced actions must be mappings with a ``type`` key
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import reduce
from typing import Any

logger = logging.getLogger(__name__)

Reducer = Callable[[Any, Any], Any]
Listener = Callable[[], None]
Middleware = Callable[[Any], Callable[[Callable[[Any], Any]], Callable[[Any], Any]]]

INIT = "@@store/INIT"


class Store:
    """Holds state and routes actions to the reducer."""

    def __init__(self, reducer: Reducer, preloaded_state: Any = None) -> None:
        self._reducer = reducer
        self._state = preloaded_state
        self._listeners: list[Listener] = []
        self._is_dispatching = False

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, action: Any) -> Any:
        """Reduce one action and notify subscribers."""
        if not isinstance(action, Mapping):
            raise TypeError(
                f"Actions must be mappings, got {type(action).__name__}. "
                "Use middleware for other kinds of actions."
            )
        if "type" not in action:
            raise TypeError("Actions must have a 'type' key")
        if self._is_dispatching:
            raise RuntimeError("Reducers may not dispatch actions")

        self._is_dispatching = True
        try:
            self._state = self._reducer(self._state, action)
        finally:
            self._is_dispatching = False

        for listener in list(self._listeners):
            listener()
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def compose(*funcs: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Right-to-left function composition; identity when empty."""
    if not funcs:
        return lambda arg: arg
    if len(funcs) == 1:
        return funcs[0]
    return reduce(lambda f, g: lambda arg: f(g(arg)), funcs)


def create_store(
    reducer: Reducer,
    preloaded_state: Any = None,
    enhancer: Callable[[Callable[..., Store]], Callable[..., Store]] | None = None,
) -> Store:
    """
    Create a store, optionally through an enhancer such as apply_middleware.

    Dispatches an init action so reducers can produce their initial state.
    """
    if enhancer is not None:
        return enhancer(create_store)(reducer, preloaded_state)

    store = Store(reducer, preloaded_state)
    store.dispatch({"type": INIT})
    return store


class _MiddlewareStore:
    """Store whose dispatch runs through the middleware chain."""

    def __init__(self, store: Store, dispatch: Callable[[Any], Any]) -> None:
        self._store = store
        self.dispatch = dispatch

    def get_state(self) -> Any:
        return self._store.get_state()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._store.subscribe(listener)


class _MiddlewareAPI:
    def __init__(self, store: Store) -> None:
        self._store = store
        self._dispatch: Callable[[Any], Any] | None = None

    def get_state(self) -> Any:
        return self._store.get_state()

    def dispatch(self, action: Any) -> Any:
        if self._dispatch is None:
            raise RuntimeError("Dispatching while constructing middleware is not allowed")
        return self._dispatch(action)


def apply_middleware(*middlewares: Middleware) -> Callable[[Callable[..., Store]], Callable[..., Any]]:
    """
    Store enhancer that runs every dispatch through ``middlewares``.

    The first middleware sees an action first.
    """

    def enhancer(create: Callable[..., Store]) -> Callable[..., Any]:
        def create_enhanced(reducer: Reducer, preloaded_state: Any = None) -> _MiddlewareStore:
            store = create(reducer, preloaded_state)
            api = _MiddlewareAPI(store)
            chain = [middleware(api) for middleware in middlewares]
            dispatch = compose(*chain)(store.dispatch)
            api._dispatch = dispatch
            logger.debug("Store created with %d middleware", len(middlewares))
            return _MiddlewareStore(store, dispatch)

        return create_enhanced

    return enhancer


def combine_reducers(reducers: Mapping[str, Reducer]) -> Reducer:
    """Reducer that delegates each state key to its own reducer."""
    reducers = dict(reducers)

    def combination(state: Any, action: Any) -> dict[str, Any]:
        state = state or {}
        return {key: reducer(state.get(key), action) for key, reducer in reducers.items()}

    return combination
