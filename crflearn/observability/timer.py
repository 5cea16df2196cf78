#!filepath: crflearn/observability/timer.py
from __future__ import annotations

import time
from typing import Optional


class Timer:
    """
    Wall-clock stopwatch
    - with Timer() as t: ...  -> t.elapsed (seconds)
    - start() / stop() for manual use
    """

    def __init__(self):
        self._start: Optional[float] = None
        self._elapsed = 0.0

    def start(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def stop(self) -> float:
        if self._start is None:
            return self._elapsed
        self._elapsed = time.perf_counter() - self._start
        self._start = None
        return self._elapsed

    @property
    def elapsed(self) -> float:
        if self._start is not None:
            return time.perf_counter() - self._start
        return self._elapsed

    def __enter__(self) -> "Timer":
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()
