"""Bounded-concurrency scheduler for asyncio work.

``Limiter`` runs at most ``concurrency`` work items at once and keeps the
rest in a FIFO ``Queue``.  Every call to ``schedule()`` returns an
``asyncio.Future`` that carries the work function's own result or
exception, so one failing item never disturbs the others or the dispatch
loop.
"""

import asyncio
import functools
import inspect
import math
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Set, TypeVar, Union

from .exceptions import InvalidConcurrencyError
from .logging import get_logger
from .queue import Queue

logger = get_logger(__name__)

T = TypeVar("T")

UNBOUNDED = math.inf
"""float: Sentinel ceiling that never holds work back."""


def _is_valid_concurrency(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    return isinstance(value, float) and value == UNBOUNDED


async def _invoke(fn: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _forward_outcome(future: asyncio.Future, task: asyncio.Task) -> None:
    # The caller may have cancelled its handle; the work still runs to completion.
    if future.done():
        return
    if task.cancelled():
        future.cancel()
        return
    exc = task.exception()
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(task.result())


class Limiter:
    """Runs queued work with at most ``concurrency`` items in flight.

    Work is started strictly in the order it was scheduled.  A dispatch
    check runs on the next event-loop iteration after every ``schedule()``
    and directly after every completion; those are the only two events that
    add work or free capacity.

    A limiter may outlive the event loop it was used on.  Work whose loop
    has closed can never complete, so it stops counting as active and queued
    entries bound to that loop are dropped when they reach the front.

    Args:
        concurrency: Positive ``int`` ceiling, or ``UNBOUNDED``.
        name: Optional label used in log records and ``repr()``.

    Raises:
        InvalidConcurrencyError: If *concurrency* is not a positive integer
            or ``UNBOUNDED``.

    Example:
        >>> limiter = Limiter(2)
        >>> async def fetch_all(urls):
        ...     return await asyncio.gather(
        ...         *(limiter.schedule(fetch, url) for url in urls)
        ...     )
    """

    def __init__(self, concurrency: Union[int, float], name: Optional[str] = None):
        if not _is_valid_concurrency(concurrency):
            raise InvalidConcurrencyError(concurrency)
        self._concurrency = concurrency
        self._name = name or f"limiter-{id(self):x}"
        self._queue = Queue()
        self._active: Set[asyncio.Task] = set()

    @property
    def concurrency(self) -> Union[int, float]:
        """The fixed ceiling on simultaneously active items."""
        return self._concurrency

    @property
    def name(self) -> str:
        return self._name

    @property
    def active_count(self) -> int:
        """Number of items that have started and not yet completed."""
        self._drop_abandoned()
        return len(self._active)

    @property
    def pending_count(self) -> int:
        """Number of queued items that have not started yet."""
        return self._queue.size

    def schedule(self, fn: Callable[..., Union[Awaitable[T], T]], *args: Any, **kwargs: Any) -> "asyncio.Future[T]":
        """Queue *fn* to be called with *args* and *kwargs*.

        *fn* may be a plain function or return an awaitable; both are
        normalised to one outcome.  Must be called from a running event
        loop, which the returned future is bound to.

        Args:
            fn: The work function.
            *args: Positional arguments passed to *fn*.
            **kwargs: Keyword arguments passed to *fn*.

        Returns:
            A future resolved with *fn*'s return value, or failed with the
            exception *fn* raised, unmodified.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._queue.push(functools.partial(self._run, fn, args, kwargs, future))
        # The check must observe active_count after entries started earlier
        # in this loop iteration, so it runs on the next one.
        loop.call_soon(self._dispatch)
        return future

    def clear_queue(self) -> int:
        """Discard every item that has not started yet.

        Active items are unaffected.  Futures of discarded items are left
        pending; callers that await them must cancel them on their own.

        Returns:
            The number of discarded items.
        """
        discarded = self._queue.size
        self._queue.clear()
        if discarded:
            logger.debug("%s: discarded %d queued item(s)", self._name, discarded)
        return discarded

    def limit_function(self, fn: Callable[..., Union[Awaitable[T], T]]) -> Callable[..., Awaitable[T]]:
        """Wrap *fn* so that every call goes through ``schedule()``."""

        @functools.wraps(fn)
        async def limited(*args: Any, **kwargs: Any) -> T:
            return await self.schedule(fn, *args, **kwargs)

        return limited

    async def map(self, fn: Callable[[Any], Union[Awaitable[T], T]], items: Iterable[Any]) -> List[T]:
        """Schedule ``fn(item)`` for each item and return results in input order.

        The first failure propagates, as with ``asyncio.gather``; the
        remaining items still run to completion.
        """
        futures = [self.schedule(fn, item) for item in items]
        return list(await asyncio.gather(*futures))

    def _run(self, fn: Callable[..., Any], args: tuple, kwargs: dict, future: asyncio.Future) -> None:
        loop = future.get_loop()
        if loop.is_closed():
            logger.debug("%s: dropping entry scheduled on a closed event loop", self._name)
            return
        # fn runs on the task's first step; the slot is held from here on.
        task = loop.create_task(_invoke(fn, args, kwargs))
        self._active.add(task)
        logger.debug(
            "%s: starting %s (active=%d, pending=%d)",
            self._name,
            getattr(fn, "__qualname__", repr(fn)),
            len(self._active),
            self._queue.size,
        )
        task.add_done_callback(functools.partial(_forward_outcome, future))
        task.add_done_callback(self._release)

    def _release(self, task: asyncio.Task) -> None:
        # Retrieving the exception here keeps asyncio from reporting it a
        # second time; the caller already received it through its future.
        if not task.cancelled() and task.exception() is not None:
            logger.debug("%s: work item failed: %r", self._name, task.exception())
        self._active.discard(task)
        self._dispatch()

    def _drop_abandoned(self) -> None:
        abandoned = [task for task in self._active if task.get_loop().is_closed()]
        if abandoned:
            self._active.difference_update(abandoned)
            logger.debug("%s: released %d slot(s) held by a closed event loop", self._name, len(abandoned))

    def _dispatch(self) -> None:
        self._drop_abandoned()
        while len(self._active) < self._concurrency and self._queue.size > 0:
            self._queue.pop()()

    def __repr__(self) -> str:
        return (
            f"<Limiter name={self._name!r} concurrency={self._concurrency} "
            f"active={self.active_count} pending={self._queue.size}>"
        )
