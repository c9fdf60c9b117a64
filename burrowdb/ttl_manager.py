"""Timers that fire a callback when a key in a bucket expires."""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from burrowdb.options import ExpiredDeleteType

_log = logging.getLogger(__name__)


@dataclass(order=True)
class _TimerNode:
    deadline: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    stopped: bool = field(default=False, compare=False)

    def stop(self) -> None:
        self.stopped = True


class TTLManager:
    """Schedules expiry callbacks per bucket and key.

    :meth:`run` drives the timers and blocks until :meth:`close` is called,
    so it is normally started on its own thread.
    """

    def __init__(self, expired_delete_type: ExpiredDeleteType = ExpiredDeleteType.TIME_WHEEL):
        self.expired_delete_type = expired_delete_type
        self._cond = threading.Condition()
        self._heap: list[_TimerNode] = []
        self._seq = itertools.count()
        self._nodes: Optional[dict[str, dict[str, _TimerNode]]] = {}
        self._closed = False

    def run(self) -> None:
        """Fire due callbacks until the manager is closed."""
        while True:
            with self._cond:
                while True:
                    if self._closed:
                        return
                    while self._heap and self._heap[0].stopped:
                        heapq.heappop(self._heap)
                    now = time.monotonic()
                    if self._heap and self._heap[0].deadline <= now:
                        node = heapq.heappop(self._heap)
                        break
                    timeout = self._heap[0].deadline - now if self._heap else None
                    self._cond.wait(timeout)
            try:
                node.callback()
            except Exception:
                _log.exception("expiry callback failed")

    def exist(self, bucket: str, key: str) -> bool:
        with self._cond:
            if self._nodes is None:
                return False
            return key in self._nodes.get(bucket, {})

    def add(self, bucket: str, key: str, expire: float, callback: Callable[[], None]) -> None:
        """Call ``callback`` after ``expire`` seconds, replacing any timer for the key."""
        with self._cond:
            if self._nodes is None:
                raise RuntimeError("ttl manager is closed")
            keys = self._nodes.setdefault(bucket, {})
            old = keys.get(key)
            if old is not None:
                old.stop()
            node = _TimerNode(time.monotonic() + expire, next(self._seq), callback)
            heapq.heappush(self._heap, node)
            keys[key] = node
            self._cond.notify_all()

    def delete(self, bucket: str, key: str) -> None:
        """Forget the timer of a key; a timer already scheduled still fires."""
        with self._cond:
            if self._nodes is not None and bucket in self._nodes:
                self._nodes[bucket].pop(key, None)

    def close(self) -> None:
        """Stop all timers and make :meth:`run` return."""
        with self._cond:
            self._nodes = None
            self._closed = True
            self._heap.clear()
            self._cond.notify_all()