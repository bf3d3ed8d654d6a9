# -*- coding: utf-8 -*-
"""Qt event safety helpers.

An uncaught exception inside a Qt event handler can terminate the app.
``safe_event`` prints the traceback, ignores the event and keeps running.
"""

from __future__ import annotations

import traceback
from functools import wraps
from typing import Callable, TypeVar, Any

T = TypeVar("T")


def safe_event(fn: Callable[..., T]) -> Callable[..., T | None]:
    """Decorator for Qt event handlers taking ``(self, event)``."""

    @wraps(fn)
    def wrapper(self: Any, e: Any) -> T | None:
        try:
            return fn(self, e)
        except Exception:
            traceback.print_exc()
            ignore = getattr(e, "ignore", None)
            if callable(ignore):
                ignore()
            return None

    return wrapper
