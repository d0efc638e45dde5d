# src/app/ui/lifecycle.py
"""
Lifetime handling shared by the stateful UI units.

Service calls are blocking (supabase-py), so they run in the threadpool while the
unit's coroutine is suspended. A unit can be unmounted while a call is in flight;
every continuation must check `is_mounted` before touching state.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Optional, TypeVar

from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Mountable:
    def __init__(self) -> None:
        self._mounted = True

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def unmount(self) -> None:
        """Stop acting on late responses. Calls already dispatched are not cancelled."""
        self._mounted = False

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        return await run_in_threadpool(func, *args)

    def _discard_if_unmounted(self, action: str) -> bool:
        if self._mounted:
            return False
        logger.debug("Discarding late response after unmount: unit=%s, action=%s", type(self).__name__, action)
        return True


async def invoke_callback(callback: Optional[Callable[..., Any]], *args: Any) -> None:
    """Call a plain or coroutine listener. A failing listener is logged, not raised."""
    if callback is None:
        return
    try:
        outcome = callback(*args)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception:
        logger.exception("Listener failed: %s", getattr(callback, "__qualname__", repr(callback)))
