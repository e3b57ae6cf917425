"""Reusable container pools.

Digesting a proteome builds millions of short-lived position -> modification
mappings. Pools hand out cleared containers and take them back so that the
same few objects are reused across digestion products.

Pools are NOT thread-safe. Give every worker its own pool instance.

Examples
--------
>>> pool = DictionaryPool()
>>> with pool.borrow() as scratch:
...     scratch[2] = "Oxidation"
>>> pool.acquire()
{}
"""

from contextlib import contextmanager
from typing import Callable, Dict, Generic, Iterator, List, Optional, Set, TypeVar

from .constants import DEFAULT_MAX_RETAINED

T = TypeVar("T")


class ObjectPool(Generic[T]):
    """Pool of clearable containers created on demand by ``factory``.

    Parameters
    ----------
    factory : callable
        Creates a new empty container
    max_retained : int
        Maximum number of idle containers kept; extra releases are dropped
    """

    def __init__(self, factory: Callable[[], T], max_retained: int = DEFAULT_MAX_RETAINED):
        if max_retained < 0:
            raise ValueError(f"max_retained must be >= 0, got {max_retained}")
        self._factory = factory
        self._idle: List[T] = []
        self.max_retained = max_retained
        self.created = 0

    @property
    def retained(self) -> int:
        """Number of idle containers ready for reuse."""
        return len(self._idle)

    def acquire(self) -> T:
        """Return an empty container, reusing a released one when available."""
        if self._idle:
            return self._idle.pop()
        self.created += 1
        return self._factory()

    def release(self, container: Optional[T]) -> None:
        """Clear ``container`` and return it to the pool.

        Raises
        ------
        ValueError
            If ``container`` is None
        """
        if container is None:
            raise ValueError("Cannot release None to a pool")
        container.clear()
        if len(self._idle) < self.max_retained:
            self._idle.append(container)

    @contextmanager
    def borrow(self) -> Iterator[T]:
        """Acquire a container for the duration of a ``with`` block."""
        container = self.acquire()
        try:
            yield container
        finally:
            self.release(container)


class DictionaryPool(ObjectPool[Dict]):
    """Pool of ``dict`` instances."""

    def __init__(self, max_retained: int = DEFAULT_MAX_RETAINED):
        super().__init__(dict, max_retained)


class ListPool(ObjectPool[List]):
    """Pool of ``list`` instances."""

    def __init__(self, max_retained: int = DEFAULT_MAX_RETAINED):
        super().__init__(list, max_retained)


class SetPool(ObjectPool[Set]):
    """Pool of ``set`` instances."""

    def __init__(self, max_retained: int = DEFAULT_MAX_RETAINED):
        super().__init__(set, max_retained)
