"""
Async support for fleetdns.

The engine and its AWS collaborators are synchronous. This module lets
independent read-only lookups run side by side on worker threads via
:func:`asyncio.to_thread`, and gives the engine ``a<method>`` coroutine
variants for callers that already run an event loop.

Usage::

    from fleetdns.base.async_support import run_concurrently

    zones = run_concurrently(store.get_zone, zone_ids)
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Coroutine, Iterable, TypeVar

T = TypeVar("T")


def async_wrap(
    fn: Callable[..., T],
) -> Callable[..., Coroutine[Any, Any, T]]:
    """Return an async version of *fn* that runs it in a thread.

    The wrapper preserves the original function's signature and docstring.

    Args:
        fn: A synchronous callable to wrap.

    Returns:
        An async callable with the same parameters and return type.
    """

    @functools.wraps(fn)
    async def _wrapper(*args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _wrapper


async def gather_threads(fn: Callable[[Any], T], items: Iterable[Any]) -> list[T]:
    """Call ``fn(item)`` for every item on worker threads and join the results.

    Results keep the order of ``items``. The first exception raised by any
    call propagates once all calls have been scheduled.
    """
    return list(await asyncio.gather(*(asyncio.to_thread(fn, item) for item in items)))


def run_concurrently(fn: Callable[[Any], T], items: Iterable[Any]) -> list[T]:
    """Synchronous front for :func:`gather_threads`.

    Runs its own event loop, or a worker thread's loop when called from
    inside a running loop.
    """
    items = list(items)
    if not items:
        return []
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(gather_threads(fn, items))
    # Already inside a loop: run the gather on a thread of its own.
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, gather_threads(fn, items)).result()


class AsyncMixin:
    """Mixin that auto-generates ``a<method>`` async variants.

    Subclass it to gain async versions of every public method that is not
    already a coroutine. The async methods are created once at class
    definition time.

    Example::

        class Engine(AsyncMixin):
            def reconcile(self, event): ...
            # => await engine.areconcile(event) is now available
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name in list(vars(cls)):
            if name.startswith("_"):
                continue
            attr = getattr(cls, name)
            if inspect.isfunction(attr) and not inspect.iscoroutinefunction(attr):
                async_name = f"a{name}"
                if not hasattr(cls, async_name):
                    setattr(cls, async_name, async_wrap(attr))
