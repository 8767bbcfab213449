"""
Process-wide analytics backend binding.

Plays the role of ``window.analytics``: the application binds a backend once
at startup and translators read it at call time. Translators never rebind it.
"""

from __future__ import annotations

from typing import Any

_analytics: Any | None = None


def get_analytics() -> Any | None:
    """
    Get the bound analytics backend.

    Returns:
        The backend, or None if nothing is bound
    """
    return _analytics


def set_analytics(backend: Any) -> Any:
    """
    Bind the process-wide analytics backend.

    Returns:
        The backend, for chaining at startup
    """
    global _analytics
    if backend is None:
        raise ValueError("Use reset_analytics() to clear the binding")
    _analytics = backend
    return backend


def reset_analytics() -> None:
    """Clear the binding (for testing)."""
    global _analytics
    _analytics = None
