"""Live (observable) query results."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Generic, TypeVar

from pyfruitties.exceptions import StorageError

T = TypeVar("T")
U = TypeVar("U")


class LiveQuery(Generic[T]):
    """A cold, re-subscribable stream of full query results.

    Each ``async for`` over a :class:`LiveQuery` is an independent
    subscription: it first yields the current result, then yields the
    re-executed result after every committed write to the tables the
    query reads. The stream never ends on its own; it stops when the
    consumer breaks out or the store is closed.
    """

    def __init__(self, subscribe: Callable[[], AsyncIterator[T]]) -> None:
        self._subscribe = subscribe

    def __aiter__(self) -> AsyncIterator[T]:
        return self._subscribe()

    async def first(self) -> T:
        """Return the current result and unsubscribe."""
        stream = self._subscribe()
        try:
            return await anext(stream)
        except StopAsyncIteration as exc:
            raise StorageError("Live query ended before producing a result (store closed)") from exc
        finally:
            await stream.aclose()  # type: ignore[attr-defined]

    def map(self, fn: Callable[[T], U]) -> LiveQuery[U]:
        """Derive a live query whose results are ``fn(result)``."""

        async def _mapped() -> AsyncIterator[U]:
            stream = self._subscribe()
            try:
                async for value in stream:
                    yield fn(value)
            finally:
                await stream.aclose()  # type: ignore[attr-defined]

        return LiveQuery(_mapped)
