"""Invoke helpers — call sync or async capability methods uniformly.

Resource handlers can implement their capabilities with ``def`` or
``async def``. The dispatcher calls every capability through this
helper so the sync/async check lives in exactly one place.

Usage::

    from reason._internal.invoke import invoke

    resource = await invoke(handler.get_resource, resource_id)
"""

import inspect
from typing import Any


async def invoke(method: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *method* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        def get_resource(self, resource_id):
            return self.books[resource_id]

        # async: returns a coroutine, awaited here
        async def get_resource(self, resource_id):
            return await self.store.fetch(resource_id)
    """
    result = method(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
