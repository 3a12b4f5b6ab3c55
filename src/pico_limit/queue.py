from collections import deque
from typing import Any, Deque, Iterator


class Queue:
    """FIFO admission queue holding work that has not started yet."""

    def __init__(self):
        self._items: Deque[Any] = deque()

    def push(self, item: Any) -> None:
        self._items.append(item)

    def pop(self) -> Any:
        """Remove and return the oldest item.

        Raises:
            IndexError: If the queue is empty.
        """
        if not self._items:
            raise IndexError("pop from an empty queue")
        return self._items.popleft()

    def clear(self) -> None:
        self._items.clear()

    @property
    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._items))
