"""Bound the number of concurrently running workers and collect their errors."""

from __future__ import annotations

import threading
from collections import deque
from typing import Optional


class Throttle:
    """Lets at most ``max_workers`` workers run at once.

    Workers call :meth:`do` before starting and :meth:`done` when finished;
    :meth:`finish` waits for all of them and raises the first reported error.
    """

    def __init__(self, max_workers: int):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._max = max_workers
        self._cond = threading.Condition()
        self._active = 0
        self._errors: deque[BaseException] = deque()
        self._finished = False
        self._finish_err: Optional[BaseException] = None

    def do(self) -> None:
        """Block until a worker slot is free; raise an error left by a finished worker."""
        with self._cond:
            while True:
                if self._finished:
                    raise RuntimeError("throttle already finished")
                if self._errors:
                    raise self._errors.popleft()
                if self._active < self._max:
                    self._active += 1
                    return
                self._cond.wait()

    def done(self, err: Optional[BaseException] = None) -> None:
        """Free the caller's slot, recording ``err`` if the work failed."""
        with self._cond:
            if self._active == 0:
                raise RuntimeError("throttle do/done mismatch")
            if err is not None:
                self._errors.append(err)
            self._active -= 1
            self._cond.notify_all()

    def finish(self) -> None:
        """Wait for all workers once, then raise the first reported error, if any."""
        with self._cond:
            if not self._finished:
                self._cond.wait_for(lambda: self._active == 0 or self._finished)
                if not self._finished:
                    self._finished = True
                    if self._errors:
                        self._finish_err = self._errors.popleft()
                    self._cond.notify_all()
            if self._finish_err is not None:
                raise self._finish_err