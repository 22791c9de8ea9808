"""
Watch queries: reactive reads over the record store.

A WatchQuery wraps a loader coroutine and the set of tables it reads. Each
subscriber receives the current value immediately and a freshly loaded value
after every store write that touches one of those tables.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    def __init__(self, registry: "WatchRegistry", query: "WatchQuery", callback: Callable[[Any], Any]):
        self._registry = registry
        self.query = query
        self.callback = callback

    @property
    def active(self) -> bool:
        return self in self._registry.subscriptions

    def unsubscribe(self) -> None:
        """Safe to call at any time and more than once."""
        self._registry.subscriptions.discard(self)

    async def deliver(self) -> None:
        value = await self.query.once()
        result = self.callback(value)
        if inspect.isawaitable(result):
            await result


class WatchRegistry:
    """Tracks live subscriptions and re-delivers them when tables change."""

    def __init__(self):
        self.subscriptions: set[Subscription] = set()

    async def notify(self, tables: set[str]) -> None:
        for sub in list(self.subscriptions):
            if not sub.active or not (sub.query.tables & tables):
                continue
            try:
                await sub.deliver()
            except Exception as e:
                logger.exception("Watch delivery failed for %s: %s", sorted(sub.query.tables), e)


class WatchQuery(Generic[T]):
    def __init__(self, registry: WatchRegistry, tables: set[str], loader: Callable[[], Awaitable[T]]):
        self._registry = registry
        self.tables = frozenset(tables)
        self._loader = loader

    async def once(self) -> T:
        return await self._loader()

    async def subscribe(self, callback: Callable[[T], Any]) -> Subscription:
        sub = Subscription(self._registry, self, callback)
        self._registry.subscriptions.add(sub)
        try:
            await sub.deliver()
        except Exception:
            # No handle reaches the caller, so none may stay registered
            sub.unsubscribe()
            raise
        return sub
