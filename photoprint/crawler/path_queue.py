"""
Thread-safe path queue shared by a directory crawler and its consumers.

The queue is unbounded and carries a completion flag. Consumers wait on a
condition variable instead of polling; they are woken by every push and by
mark_complete().
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Optional


class PathQueue:
    """
    Unbounded FIFO of discovered file paths plus a crawl-complete flag.

    All access to the entries and the flag happens under one lock.
    Once the queue is complete no further entries may be pushed, so a
    consumer that sees (None, True) can stop for good.
    """

    def __init__(self):
        self._entries: deque[str] = deque()
        self._complete = False
        self._cond = threading.Condition()

    def push(self, entry: str) -> None:
        """
        Append an entry and wake one waiting consumer.

        Raises:
            RuntimeError: If the queue has already been marked complete
        """
        with self._cond:
            if self._complete:
                raise RuntimeError("Cannot push to a completed PathQueue")
            self._entries.append(entry)
            self._cond.notify()

    def mark_complete(self) -> None:
        """Flag that no more entries will arrive and wake every consumer."""
        with self._cond:
            self._complete = True
            self._cond.notify_all()

    def try_pop(self) -> tuple[Optional[str], bool]:
        """
        Remove the front entry without waiting.

        Returns:
            (entry, complete) when an entry was available, otherwise
            (None, complete). (None, False) means "wait and retry";
            (None, True) means no more work will ever arrive.
        """
        with self._cond:
            return self._pop_locked()

    def pop(self, timeout: Optional[float] = None) -> tuple[Optional[str], bool]:
        """
        Remove the front entry, waiting until one arrives or the queue completes.

        Args:
            timeout: Maximum seconds to wait, or None to wait indefinitely

        Returns:
            Same contract as try_pop(). (None, False) is only returned when
            the timeout lapsed.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._entries or self._complete, timeout)
            return self._pop_locked()

    def _pop_locked(self) -> tuple[Optional[str], bool]:
        if self._entries:
            return self._entries.popleft(), self._complete
        return None, self._complete

    @property
    def complete(self) -> bool:
        """Whether mark_complete() has been called."""
        with self._cond:
            return self._complete

    def __len__(self) -> int:
        with self._cond:
            return len(self._entries)


__all__ = ['PathQueue']
